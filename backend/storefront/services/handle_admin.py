"""Admin Handlers — login, privileged-call gate, password change.

Invariants:
    - authenticate() hands back the password itself as the credential
    - require_admin() re-validates the credential against the CURRENT stored hash
      on every privileged call (a password change revokes old credentials)
    - Missing credential → 401, wrong credential → 403, no further detail
    - bcrypt work runs in a worker thread, never on the event loop

Design Decisions:
    - Password-as-bearer preserved for compatibility with the admin panel, which
      stores the password and replays it in the Authorization header
"""

import asyncio
import logging

from storefront.core.admin_gate import check_credential, hash_password
from storefront.core.errors import AuthenticationError, InputValidationError
from storefront.services.store_access import SnapshotAccess

logger = logging.getLogger(__name__)

# bcrypt ignores (or rejects) anything past 72 bytes
MAX_PASSWORD_BYTES: int = 72


class AdminHandlers:
    """Capability checks and admin credential management."""

    def __init__(self, access: SnapshotAccess, bcrypt_rounds: int = 10):
        self.access = access
        self.bcrypt_rounds = bcrypt_rounds

    async def _matches(self, credential: object) -> bool:
        snapshot = await self.access.read()
        return await asyncio.to_thread(
            check_credential, credential, snapshot.admin.get("passwordHash"),
        )

    async def authenticate(self, password: object) -> str:
        """Exchange the admin password for a credential (the password itself)."""
        if not await self._matches(password):
            logger.warning("Admin login rejected", extra={"error_code": "LOGIN_FAILED"})
            raise AuthenticationError("Invalid password", http_status=401)
        logger.info("Admin login accepted")
        return password

    async def require_admin(self, credential: str | None) -> str:
        """Gate for every privileged call."""
        if not credential:
            raise AuthenticationError("No token", http_status=401)
        if not await self._matches(credential):
            raise AuthenticationError("Invalid token", http_status=403)
        return credential

    async def change_password(self, new_password: object) -> None:
        if not isinstance(new_password, str) or not new_password.strip():
            raise InputValidationError("New password is required", "newPassword")
        if len(new_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise InputValidationError(
                f"New password must be at most {MAX_PASSWORD_BYTES} bytes", "newPassword",
            )
        new_hash = await asyncio.to_thread(
            hash_password, new_password, self.bcrypt_rounds,
        )
        async with self.access.mutate() as snapshot:
            snapshot.admin["passwordHash"] = new_hash
        logger.info("Admin password changed")
