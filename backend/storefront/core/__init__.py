"""Core Layer — pure domain logic, no IO, no logging, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Transforms operate on the per-request Snapshot working copy; persistence
      is the shell's job

Design Decisions:
    - Functional core separated from imperative shell
    - Randomness and clocks are injected so every rule is deterministic under test
"""
