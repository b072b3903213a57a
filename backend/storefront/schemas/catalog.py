"""Catalog Schemas — settings, product upsert and reorder payloads.

Invariants:
    - ProductUpsert requires an id; every other product field passes through untouched
    - ReorderRequest.product_ids is an ordered list (position = new rank)
    - Neither settings nor products may carry NaN/Infinity anywhere

Design Decisions:
    - Free-form models: products carry shop-specific fields (images, prices per
      weight, badges) that the backend stores but never interprets
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

from storefront.schemas.numbers import FreeFormModel, Grams, ensure_finite


class SettingsUpdate(RootModel[dict[str, Any]]):
    """Partial settings object, shallow-merged into the stored settings."""

    @field_validator("root")
    @classmethod
    def values_are_finite(cls, v: dict[str, Any]) -> dict[str, Any]:
        return ensure_finite(v)


class ProductUpsert(FreeFormModel):
    id: str | int
    name: str | None = None
    stockGrams: Grams | None = None

    @field_validator("id")
    @classmethod
    def id_not_blank(cls, v: str | int) -> str:
        v = str(v).strip()
        if not v:
            raise ValueError("id cannot be empty")
        return v

    def to_record(self) -> dict[str, Any]:
        """Product dict as stored: only fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class ReorderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_ids: list[str | int] = Field(alias="productIds")
