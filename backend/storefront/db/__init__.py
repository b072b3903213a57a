"""Database Infrastructure — SQLAlchemy Base for the SQL snapshot backend.

Invariants:
    - Only used when STORAGE_BACKEND=sql
    - All sessions are async (AsyncSession)
"""
