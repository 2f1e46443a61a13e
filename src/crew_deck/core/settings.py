"""Runtime configuration for Crew Deck.

Every option maps to an upper-case environment variable and may also be
read from a local ``.env`` file.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Async drivers and the blocking driver used in their place for tooling.
_SYNC_DRIVERS = {
    "postgresql+asyncpg": "postgresql",
    "sqlite+aiosqlite": "sqlite",
}


class Settings(BaseSettings):
    """Crew Deck settings."""

    app_name: str = Field(default="Crew Deck", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")

    # Signing key shared with the identity provider that issues bearer tokens.
    secret_key: str = Field(alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60 * 24, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    database_url: str = Field(default="sqlite:///./crew_deck.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Page sizes for station, crew, post and leaderboard listings.
    default_page_limit: int = Field(default=50, ge=1, alias="DEFAULT_PAGE_LIMIT")
    max_page_limit: int = Field(default=100, ge=1, alias="MAX_PAGE_LIMIT")

    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Database URL, switched to the test database when requested."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def database_url_sync(self) -> str:
        """Database URL with any async driver swapped for a blocking one.

        Alembic and the maintenance scripts run synchronously.
        """
        url = self.effective_database_url
        for async_prefix, sync_prefix in _SYNC_DRIVERS.items():
            if url.startswith(async_prefix):
                return sync_prefix + url[len(async_prefix):]
        return url


settings = Settings()  # type: ignore[call-arg]
