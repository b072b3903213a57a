"""Settings tests — environment-driven configuration."""

import pytest
from pydantic import ValidationError

from storefront.config import Settings
from storefront.core.domain_types import StorageBackend


def test_postgres_url_gets_async_driver():
    settings = Settings(bot_token="t", database_url="postgresql://u:p@db/shop")
    assert settings.database_url == "postgresql+asyncpg://u:p@db/shop"


def test_blank_bot_token_is_rejected():
    with pytest.raises(ValidationError):
        Settings(bot_token="   ")


def test_backend_from_environment(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "sql")
    monkeypatch.setenv("SHOP_NAME", "Shop B")
    settings = Settings()
    assert settings.storage_backend is StorageBackend.SQL
    assert settings.shop_name == "Shop B"
    assert settings.bot_token.get_secret_value()
