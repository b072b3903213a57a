"""Loyalty Schemas — reward tiers, point adjustments, redemption.

Invariants:
    - PointsAdjustment.action is one of set / add / reset
    - Reward tier list is truncated (not rejected) past 10 entries by the ledger
"""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from storefront.schemas.numbers import ensure_finite


class LoyaltyConfigUpdate(BaseModel):
    rewards: list[Any] = Field(default_factory=list)

    @field_validator("rewards")
    @classmethod
    def tiers_are_finite(cls, v: list[Any]) -> list[Any]:
        return ensure_finite(v)


class PointsAdjustment(BaseModel):
    action: Literal["set", "add", "reset"]
    value: int = 0


class RedeemRequest(BaseModel):
    initData: str | None = None
