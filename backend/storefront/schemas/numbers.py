"""Number Guards — keep NaN/Infinity out of every persisted document.

Invariants:
    - Declared gram amounts (stock, weight, quantity) are finite and >= 0
    - Free-form payload parts (extra fields, settings, reward tiers) are walked
      and rejected if any float inside is NaN or infinite

Design Decisions:
    - The request JSON parser accepts the NaN/Infinity literals, but the documents
      and the JSON responses cannot hold them; rejecting at the boundary keeps a
      single bad request from making GET /api/orders unrenderable
"""

import math
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Whole grams stay ints in the documents
Grams = (
    Annotated[int, Field(ge=0)]
    | Annotated[float, Field(ge=0, allow_inf_nan=False)]
)


def has_non_finite(value: Any) -> bool:
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, dict):
        return any(has_non_finite(v) for v in value.values())
    if isinstance(value, (list, tuple)):
        return any(has_non_finite(v) for v in value)
    return False


def ensure_finite(value: Any) -> Any:
    """Pydantic validator body: pass the value through or raise ValueError."""
    if has_non_finite(value):
        raise ValueError("NaN and infinite numbers are not allowed")
    return value


class FreeFormModel(BaseModel):
    """Payload that keeps unknown fields verbatim, minus non-finite numbers."""
    model_config = ConfigDict(extra="allow", allow_inf_nan=False)

    @model_validator(mode="after")
    def extras_are_finite(self):
        ensure_finite(self.model_extra or {})
        return self
