"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions that USE the snapshot are never async themselves
    - save() reports failed resources instead of raising, so one bad write never
      prevents the sibling resources from being attempted
"""

from typing import Protocol

from storefront.core.domain_types import Resource
from storefront.core.snapshot import Snapshot


class SnapshotStore(Protocol):
    """Contract for whole-snapshot persistence across three resources."""
    async def load(self) -> Snapshot: ...
    async def save(self, snapshot: Snapshot) -> list[Resource]: ...
    async def health_check(self) -> bool: ...
