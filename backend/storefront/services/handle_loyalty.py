"""Loyalty Handlers — customer balance/redemption and admin client management.

Invariants:
    - Customer endpoints require a VERIFIED identity token; pseudonyms never
      read or redeem points
    - A denied redemption raises inside mutate(), so nothing is saved
    - Admin adjustments return the new floored balance
"""

import logging
import random

from storefront.core.domain_types import UserKey
from storefront.core.errors import AuthenticationError
from storefront.core.identity import IdentityVerifier
from storefront.core.loyalty import (
    adjust_points, get_account, list_clients, loyalty_config,
    redeem_points, set_loyalty_config,
)
from storefront.services.store_access import SnapshotAccess

logger = logging.getLogger(__name__)


class LoyaltyHandlers:
    """Points, reward codes and reward tiers."""

    def __init__(
        self,
        access: SnapshotAccess,
        verifier: IdentityVerifier,
        rng: random.Random | None = None,
    ):
        self.access = access
        self.verifier = verifier
        self.rng = rng

    def _user_key(self, init_data: str | None) -> UserKey:
        user = self.verifier.verify(init_data)
        if not user:
            raise AuthenticationError("Telegram authentication required", http_status=401)
        return UserKey(str(user["id"]))

    async def get_loyalty(self, init_data: str | None) -> dict:
        user_key = self._user_key(init_data)
        snapshot = await self.access.read()
        return get_account(snapshot.users, user_key)

    async def redeem(self, init_data: str | None) -> dict:
        user_key = self._user_key(init_data)
        async with self.access.mutate() as snapshot:
            reward = redeem_points(snapshot.users, user_key, rng=self.rng)
            points = snapshot.users[user_key]["points"]
        logger.info(
            f"Reward {reward['code']} issued",
            extra={"user_key": user_key},
        )
        return {"code": reward["code"], "points": points, "reward": reward}

    async def get_config(self) -> dict:
        snapshot = await self.access.read()
        return loyalty_config(snapshot.settings)

    async def set_config(self, rewards: list) -> dict:
        async with self.access.mutate() as snapshot:
            config = set_loyalty_config(snapshot.settings, rewards)
        logger.info(f"Loyalty config updated ({len(config['rewards'])} rewards)")
        return config

    async def list_clients(self) -> list[dict]:
        snapshot = await self.access.read()
        return list_clients(snapshot.users)

    async def adjust_points(self, user_key: str, action: str, value: object = 0) -> int:
        async with self.access.mutate() as snapshot:
            balance = adjust_points(snapshot.users, UserKey(user_key), action, value)
        logger.info(
            f"Points {action} → {balance}",
            extra={"user_key": user_key},
        )
        return balance
