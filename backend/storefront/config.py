"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - BOT_TOKEN is required: a missing bot secret fails get_settings() at startup
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - One codebase, two shops: everything shop-specific (name, categories, banner,
      bootstrap password, data dir) is a setting
"""

from functools import lru_cache

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from storefront.core.domain_types import StorageBackend


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Shop identity
    shop_name: str = "Storefront"

    # Chat-bot identity (no default, absence is fatal)
    bot_token: SecretStr
    # 0 disables the auth_date freshness check (tokens never expire)
    init_data_max_age_seconds: int = 0

    # Persistence
    storage_backend: StorageBackend = StorageBackend.JSON
    data_dir: str = "."
    database_url: str = "sqlite+aiosqlite:///./storefront.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Admin
    bootstrap_admin_password: SecretStr = SecretStr("changeme")
    bcrypt_rounds: int = 10

    # Snapshot defaults (backfilled on load)
    default_categories: list[str] = ["WEED", "HASH", "VAPE", "AUTRE"]
    default_banner_text: str = (
        "Livraison gratuite dès 100€ d'achat ! Nouveaux arrivages Cali US !"
    )

    @field_validator("bot_token")
    @classmethod
    def bot_token_not_blank(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            raise ValueError("BOT_TOKEN must not be empty")
        return v

    # API
    cors_origins: list[str] = [
        "http://localhost:3000", "http://localhost:4005",
    ]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
