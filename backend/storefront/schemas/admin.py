"""Admin Schemas — login and password change payloads.

Invariants:
    - Field names match the admin panel's JSON (camelCase via alias)
"""

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    password: str = Field(max_length=256)


class ChangePasswordRequest(BaseModel):
    """New admin password; blank/oversized values are rejected by the handler."""
    model_config = ConfigDict(populate_by_name=True)

    new_password: str = Field(alias="newPassword", max_length=256)
