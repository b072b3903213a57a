"""Admin Routes — login and password change.

Invariants:
    - POST /api/login returns the credential as `token` (the password itself)
    - POST /api/change-password requires the current credential
"""

import logging

from fastapi import APIRouter, Depends

from storefront.api.dependencies import get_admin_handlers, require_admin
from storefront.schemas.admin import ChangePasswordRequest, LoginRequest
from storefront.services.handle_admin import AdminHandlers

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["admin"])


@router.post("/login")
async def login(
    body: LoginRequest, admin: AdminHandlers = Depends(get_admin_handlers),
):
    """Exchange the admin password for a credential."""
    token = await admin.authenticate(body.password)
    return {"success": True, "token": token}


@router.post("/change-password")
async def change_password(
    body: ChangePasswordRequest,
    _: str = Depends(require_admin),
    admin: AdminHandlers = Depends(get_admin_handlers),
):
    await admin.change_password(body.new_password)
    return {"success": True}
