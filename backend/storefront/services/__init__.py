"""Service Layer — imperative shell around the pure core.

Invariants:
    - Every mutation runs inside SnapshotAccess.mutate() (load → transform → save)
    - Services never parse HTTP; routes hand them validated payloads
"""
