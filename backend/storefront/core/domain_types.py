"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - PublicOrderId is bounded 1000–9999 (4-digit customer-facing code)
    - InternalOrderId is a millisecond timestamp
    - UserKey is always a str (JSON object keys), bot ids are stringified
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (documents are JSON)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

PublicOrderId = NewType("PublicOrderId", int)       # 1000–9999
InternalOrderId = NewType("InternalOrderId", int)   # epoch milliseconds
UserKey = NewType("UserKey", str)                   # bot id or "pseudo_<name>"


# ─── Bounds ──────────────────────────────────────────────────────

PUBLIC_ID_MIN: int = 1000
PUBLIC_ID_MAX: int = 9999
MAX_RETAINED_ORDERS: int = 200
PSEUDONYM_PREFIX: str = "pseudo_"


# ─── Enums ───────────────────────────────────────────────────────

class Resource(str, Enum):
    """The three independently persisted documents. Order = save order."""
    ORDERS = "orders"
    USERS = "users"
    CORE = "core"


class OrderStatus(str, Enum):
    """Single initial status; no transitions exist in this core."""
    PENDING = "pending"


class PointsAction(str, Enum):
    """Admin adjustments on a loyalty balance."""
    SET = "set"
    ADD = "add"
    RESET = "reset"


class StorageBackend(str, Enum):
    """Selectable SnapshotStore implementations."""
    JSON = "json"
    SQL = "sql"
