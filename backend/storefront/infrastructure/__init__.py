"""Infrastructure Layer — persistence backends and cross-cutting concerns.

Invariants:
    - Infrastructure never imports domain transforms, only snapshot shapes and errors
    - Every IO failure is either degraded-and-logged (reads) or mapped to PersistenceError

Design Decisions:
    - Two SnapshotStore implementations (flat JSON files, SQL documents) behind one Protocol
"""
