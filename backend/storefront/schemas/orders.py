"""Order Schemas — storefront checkout payload.

Invariants:
    - items: at least one entry (an empty cart is a 400, not an order)
    - Unknown fields on the order and on items are preserved verbatim
    - initData (the identity token) is never stored with the order
    - No declared number may be NaN, infinite or (for weights and quantities)
      negative: such orders are a 400 before anything is loaded

Design Decisions:
    - exclude_unset on dump: optional fields the client did not send must not
      appear as nulls in orders.json
"""

from typing import Any

from pydantic import Field

from storefront.schemas.numbers import FreeFormModel, Grams


class OrderItem(FreeFormModel):
    productId: str | int | None = None
    weight: str | Grams | None = None
    quantity: Grams | None = None


class UserInfo(FreeFormModel):
    pseudo: str | None = Field(None, max_length=100)


class OrderCreate(FreeFormModel):
    items: list[OrderItem] = Field(min_length=1)
    total: float | None = None
    userInfo: UserInfo | None = None
    initData: str | None = None

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude={"initData"})
