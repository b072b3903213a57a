"""API Dependencies — snapshot access, identity verifier and the admin gate.

Invariants:
    - Every privileged route depends on require_admin (Authorization header =
      admin password, re-validated per call)
    - The identity token is read from X-Telegram-Init-Data first, then from the
      payload/query `initData`
"""

from functools import lru_cache

from fastapi import Depends, Header

from storefront.config import get_settings
from storefront.core.identity import IdentityVerifier
from storefront.services.handle_admin import AdminHandlers
from storefront.services.store_access import SnapshotAccess, get_snapshot_access


@lru_cache
def _build_verifier(bot_token: str, max_age_seconds: int) -> IdentityVerifier:
    return IdentityVerifier(bot_token, max_age_seconds)


def get_identity_verifier() -> IdentityVerifier:
    settings = get_settings()
    return _build_verifier(
        settings.bot_token.get_secret_value(), settings.init_data_max_age_seconds,
    )


def get_admin_handlers(
    access: SnapshotAccess = Depends(get_snapshot_access),
) -> AdminHandlers:
    return AdminHandlers(access, bcrypt_rounds=get_settings().bcrypt_rounds)


async def require_admin(
    authorization: str | None = Header(None),
    admin: AdminHandlers = Depends(get_admin_handlers),
) -> str:
    """Privileged-call gate: 401 without a credential, 403 with a wrong one."""
    return await admin.require_admin(authorization)


def init_data_header(
    x_telegram_init_data: str | None = Header(None),
) -> str | None:
    return x_telegram_init_data
