"""Loyalty Ledger — per-user point balances, reward codes and reward tiers.

Invariants:
    - Balances never go below 0 (every mutation floor-clamps)
    - Redemption costs exactly REDEEM_COST points and appends one RewardCode
    - A denied redemption leaves the ledger untouched
    - Reward codes are append-only: never removed except by an admin "reset"
    - Reward tiers are capped at MAX_REWARD_TIERS; maxPoints is fixed at MAX_POINTS

Design Decisions:
    - MAX_POINTS is advertised to the storefront but NOT enforced on balances:
      accrual and admin adjustments can exceed it (the card simply shows "full")
    - Accounts are created lazily on the first write (accrual); reads return
      zero defaults without creating anything
"""

import math
import random
import string
from datetime import datetime, timezone

from storefront.core.domain_types import PointsAction, UserKey
from storefront.core.errors import (
    InputValidationError, InsufficientPointsError, ResourceNotFoundError,
)

REDEEM_COST: int = 5
MAX_POINTS: int = 10
MAX_REWARD_TIERS: int = 10
POINTS_PER_ORDER: int = 1
REWARD_CODE_PREFIX: str = "REWARD-"
REWARD_CODE_LENGTH: int = 6
_CODE_ALPHABET = string.digits + string.ascii_uppercase


def new_account() -> dict:
    return {"points": 0, "rewards": [], "totalSpent": 0}


def _to_number(value: object) -> float:
    """Finite float or 0: NaN/inf never reach users.json."""
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _points_of(account: dict) -> int:
    return int(_to_number(account.get("points")))


def get_account(users: dict[str, dict], user_key: UserKey) -> dict:
    """Public view of a balance: points and issued rewards."""
    account = users.get(user_key)
    if not isinstance(account, dict):
        account = new_account()
    return {
        "points": _points_of(account),
        "rewards": list(account.get("rewards") or []),
    }


def accrue_order(users: dict[str, dict], user_key: UserKey, order_total: object) -> int:
    """Credit one order to the account (created lazily). Returns the new balance."""
    account = users.setdefault(user_key, new_account())
    account["points"] = _points_of(account) + POINTS_PER_ORDER
    spent = _to_number(account.get("totalSpent")) + _to_number(order_total)
    account["totalSpent"] = int(spent) if spent.is_integer() else round(spent, 2)
    account.setdefault("rewards", [])
    return account["points"]


def generate_reward_code(rng: random.Random | None = None) -> str:
    rng = rng or random
    suffix = "".join(rng.choice(_CODE_ALPHABET) for _ in range(REWARD_CODE_LENGTH))
    return f"{REWARD_CODE_PREFIX}{suffix}"


def redeem_points(
    users: dict[str, dict],
    user_key: UserKey,
    *,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> dict:
    """Debit REDEEM_COST and issue a reward code, or raise without mutating."""
    account = users.get(user_key)
    points = _points_of(account) if isinstance(account, dict) else 0
    if points < REDEEM_COST:
        raise InsufficientPointsError(points, REDEEM_COST)

    issued = now or datetime.now(timezone.utc)
    reward = {
        "code": generate_reward_code(rng),
        "date": issued.isoformat(),
        "used": False,
    }
    account["points"] = points - REDEEM_COST
    account.setdefault("rewards", []).append(reward)
    return reward


def adjust_points(
    users: dict[str, dict], user_key: UserKey, action: str, value: object = 0,
) -> int:
    """Admin adjustment: set / add / reset. Returns the new (floored) balance."""
    account = users.get(user_key)
    if not isinstance(account, dict):
        raise ResourceNotFoundError("User", user_key)
    try:
        action = PointsAction(action)
    except ValueError:
        raise InputValidationError(f"Unknown points action '{action}'", "action")

    if action is PointsAction.RESET:
        account["points"] = 0
        account["rewards"] = []
        return 0

    if isinstance(value, bool):
        raise InputValidationError("Points value must be a number", "value")
    try:
        amount = int(value)
    except (TypeError, ValueError, OverflowError):
        raise InputValidationError("Points value must be a number", "value")

    if action is PointsAction.SET:
        new_balance = amount
    else:
        new_balance = _points_of(account) + amount
    account["points"] = max(0, new_balance)
    return account["points"]


def list_clients(users: dict[str, dict]) -> list[dict]:
    """Every account with its key, for the admin client list."""
    return [
        {
            "id": key,
            "points": _points_of(account),
            "rewards": list(account.get("rewards") or []),
            "totalSpent": account.get("totalSpent", 0),
        }
        for key, account in users.items()
        if isinstance(account, dict)
    ]


def loyalty_config(settings: dict) -> dict:
    """Storefront-facing config: fixed maxPoints plus the configured reward tiers."""
    stored = settings.get("loyaltyConfig")
    rewards = stored.get("rewards") if isinstance(stored, dict) else None
    return {
        "maxPoints": MAX_POINTS,
        "rewards": list(rewards or [])[:MAX_REWARD_TIERS],
    }


def set_loyalty_config(settings: dict, rewards: list) -> dict:
    """Replace reward tiers (first MAX_REWARD_TIERS kept). Returns the stored config."""
    if not isinstance(rewards, list):
        raise InputValidationError("rewards must be a list", "rewards")
    config = {"maxPoints": MAX_POINTS, "rewards": rewards[:MAX_REWARD_TIERS]}
    settings["loyaltyConfig"] = config
    return config
