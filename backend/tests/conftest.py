"""Root conftest — shared test configuration and identity-token helpers."""

import json
import os
from urllib.parse import urlencode

# Settings must resolve before any storefront module is imported
os.environ.setdefault("BOT_TOKEN", "123456:test-bot-token")
os.environ.setdefault("BOOTSTRAP_ADMIN_PASSWORD", "admin-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("STORAGE_BACKEND", "json")

import pytest

from storefront.core.identity import compute_init_data_hash

TEST_BOT_TOKEN = os.environ["BOT_TOKEN"]


def sign_init_data(
    user: dict | None = None,
    bot_token: str = TEST_BOT_TOKEN,
    auth_date: int = 1700000000,
    **extra: str,
) -> str:
    """Build an init-data query string signed the way the chat platform signs it."""
    fields = {"auth_date": str(auth_date), "query_id": "AAH-test", **extra}
    if user is not None:
        fields["user"] = json.dumps(user, separators=(",", ":"))
    fields["hash"] = compute_init_data_hash(fields, bot_token)
    return urlencode(fields)


@pytest.fixture
def signed_init_data():
    return sign_init_data
