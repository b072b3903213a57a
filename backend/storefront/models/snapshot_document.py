"""Snapshot Document ORM — one row per persisted resource (core, orders, users).

Invariants:
    - name is the primary key and one of Resource values
    - body holds the whole JSON document for that resource
    - revision increments on every successful write of that row

Design Decisions:
    - JSON column over normalized tables: the storefront treats each resource as an
      opaque document rewritten wholesale, exactly like the flat-file backend
    - revision kept for observability and future compare-and-swap; writers are
      already serialized in-process by SnapshotAccess
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import String, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db.base import Base


class SnapshotDocument(Base):
    """A whole resource document."""
    __tablename__ = "snapshot_documents"

    name: Mapped[str] = mapped_column(String(20), primary_key=True)
    body: Mapped[Any] = mapped_column(JSON, nullable=False)
    revision: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
