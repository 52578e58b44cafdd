"""Application configuration using Pydantic Settings with YAML support.

This module provides centralized configuration management with:
- YAML-based configuration files organized by domain
- Environment-specific overrides (development, test, production)
- Environment variable loading for secrets
- Type validation and coercion
- Computed properties for derived values
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


# Session cookies are signed with the first half of a 64 byte master key
MIN_SESSION_SECRET_LENGTH = 64


# =============================================================================
# Nested Configuration Models (from YAML)
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "Recipes API"
    version: str = "0.1.0"
    debug: bool = False


class ServerSettings(BaseModel):
    """Server configuration settings."""

    host: str = "127.0.0.1"
    port: int = 3000


class ApiSettings(BaseModel):
    """API configuration settings."""

    prefix: str = ""
    cors_origins: list[str] = ["http://localhost:3001"]
    frontend_url: str = "http://localhost:3001"


class DatabaseSettings(BaseModel):
    """PostgreSQL database configuration settings."""

    host: str = "localhost"
    port: int = 5432
    name: str = "recipes"
    user: str | None = "postgres"
    min_pool_size: int = 2
    max_pool_size: int = 10
    command_timeout: float = 30.0
    ssl: bool = False


class RedisSettings(BaseModel):
    """Redis configuration settings."""

    host: str = "localhost"
    port: int = 6379
    user: str | None = None  # Redis ACL username (Redis 6.0+)
    session_db: int = 0
    queue_db: int = 1
    rate_limit_db: int = 2


class SessionSettings(BaseModel):
    """Session cookie configuration."""

    cookie_name: str = "sid"
    cookie_path: str = "/"
    cookie_domain: str | None = None
    same_site: Literal["strict", "lax", "none"] = "strict"
    ttl_seconds: int | None = 24 * 60 * 60
    save_unchanged: bool = True
    # None means "secure when the request came in over https"
    secure: bool | None = None
    key_prefix: str = "session:"


class SearchSettings(BaseModel):
    """Search service (Meilisearch compatible) configuration."""

    url: str = "http://localhost:7700"
    timeout: float = 5.0
    ingredients_index: str = "ingredients"
    recipes_index: str = "recipes"
    default_limit: int = 20


class EmailSettings(BaseModel):
    """Transactional email API configuration."""

    base_url: str = "https://api.postmarkapp.com"
    sender: str = "noreply@recipes.local"
    timeout: float = 10.0
    confirmation_base_url: str = "http://localhost:3000/confirm"


class OAuthSettings(BaseModel):
    """OAuth2 identity provider configuration."""

    enabled: bool = False
    provider: str = "discord"
    client_id: str | None = None
    authorize_url: str = "https://discord.com/api/oauth2/authorize"
    token_url: str = "https://discord.com/api/oauth2/token"  # noqa: S105
    userinfo_url: str = "https://discord.com/api/users/@me"
    redirect_url: str = "http://localhost:3000/auth/oauth/callback"
    scopes: list[str] = ["identify", "email"]
    timeout: float = 10.0


class TokenSettings(BaseModel):
    """Signed token settings (email confirmation)."""

    algorithm: str = "HS256"
    confirmation_expire_hours: int = 48


class RateLimitingSettings(BaseModel):
    """Rate limiting configuration."""

    enabled: bool = True
    default: str = "100/minute"
    auth: str = "5/minute"


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"


class TracingSettings(BaseModel):
    """Tracing configuration settings."""

    enabled: bool = False
    otlp_endpoint: str | None = None


class MetricsSettings(BaseModel):
    """Metrics configuration settings."""

    enabled: bool = True


class ErrorTrackingSettings(BaseModel):
    """Error tracking (Sentry) configuration."""

    traces_sample_rate: float = 0.0


class ObservabilitySettings(BaseModel):
    """Observability configuration settings."""

    tracing: TracingSettings = TracingSettings()
    metrics: MetricsSettings = MetricsSettings()
    error_tracking: ErrorTrackingSettings = ErrorTrackingSettings()


class ArqJobIdsSettings(BaseModel):
    """Fixed job IDs so repeated enqueues collapse into one job."""

    reindex_ingredients: str = "reindex_ingredients"
    reindex_recipes: str = "reindex_recipes"


class ArqSettings(BaseModel):
    """ARQ background worker configuration."""

    job_ids: ArqJobIdsSettings = ArqJobIdsSettings()
    queue_name: str = "recipes:queue:jobs"
    health_check_key: str = "recipes:queue:health-check"
    max_tries: int = 5


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Application settings with YAML + environment variable support.

    Configuration is loaded from multiple sources with the following priority
    (highest to lowest):
    1. Environment variables
    2. .env file (secrets only)
    3. Environment-specific YAML files (config/environments/{APP_ENV}/)
    4. Base YAML files (config/base/)
    5. Default values in code

    Environment variables can override any setting using the nested delimiter '__'.
    For example: REDIS__HOST=prod-redis overrides redis.host.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    # =========================================================================
    # Environment Selection (from .env)
    # =========================================================================
    APP_ENV: str = "development"

    # =========================================================================
    # Nested Configuration Sections (from YAML)
    # =========================================================================
    app: AppSettings = AppSettings()
    server: ServerSettings = ServerSettings()
    api: ApiSettings = ApiSettings()
    database: DatabaseSettings = DatabaseSettings()
    redis: RedisSettings = RedisSettings()
    session: SessionSettings = SessionSettings()
    search: SearchSettings = SearchSettings()
    email: EmailSettings = EmailSettings()
    oauth: OAuthSettings = OAuthSettings()
    tokens: TokenSettings = TokenSettings()
    rate_limiting: RateLimitingSettings = RateLimitingSettings()
    logging: LoggingSettings = LoggingSettings()
    observability: ObservabilitySettings = ObservabilitySettings()
    arq: ArqSettings = ArqSettings()

    # =========================================================================
    # Secrets (from .env only - never in YAML)
    # =========================================================================
    SESSION_SECRET: str = ""
    TOKEN_SECRET_KEY: str = ""
    DATABASE_PASSWORD: str = ""
    REDIS_PASSWORD: str = ""
    MEILI_MASTER_KEY: str = ""
    EMAIL_AUTHORIZATION_TOKEN: str = ""
    OAUTH_CLIENT_SECRET: str | None = None
    SENTRY_DSN: str | None = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings loading order.

        Priority (highest to lowest):
        1. init_settings - Values passed to Settings()
        2. env_settings - Environment variables
        3. dotenv_settings - .env file (secrets)
        4. yaml_settings - YAML files (base + environment)
        5. file_secret_settings - Docker secrets
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    # =========================================================================
    # Computed Fields
    # =========================================================================

    @property
    def session_signing_key(self) -> bytes:
        """Key used to sign session cookies.

        Raises:
            ValueError: If SESSION_SECRET is shorter than 64 bytes.
        """
        secret = self.SESSION_SECRET.encode()
        if len(secret) < MIN_SESSION_SECRET_LENGTH:
            msg = (
                f"SESSION_SECRET must be at least {MIN_SESSION_SECRET_LENGTH} "
                f"bytes long, got {len(secret)}"
            )
            raise ValueError(msg)
        return secret[:32]

    def _build_redis_url(self, db: int) -> str:
        """Build Redis connection URL with optional authentication.

        URL format: redis://[user:password@]host:port/db
        """
        auth_part = ""
        if self.redis.user and self.REDIS_PASSWORD:
            auth_part = f"{self.redis.user}:{self.REDIS_PASSWORD}@"
        elif self.REDIS_PASSWORD:
            auth_part = f":{self.REDIS_PASSWORD}@"
        elif self.redis.user:
            auth_part = f"{self.redis.user}@"

        return f"redis://{auth_part}{self.redis.host}:{self.redis.port}/{db}"

    @property
    def redis_session_url(self) -> str:
        """Build Redis session store connection URL."""
        return self._build_redis_url(self.redis.session_db)

    @property
    def redis_queue_url(self) -> str:
        """Build Redis queue connection URL for ARQ."""
        return self._build_redis_url(self.redis.queue_db)

    @property
    def redis_rate_limit_url(self) -> str:
        """Build Redis rate limit connection URL."""
        return self._build_redis_url(self.redis.rate_limit_db)

    @property
    def database_url(self) -> str:
        """Build PostgreSQL connection URL.

        URL format: postgresql://[user:password@]host:port/database
        """
        auth_part = ""
        if self.database.user and self.DATABASE_PASSWORD:
            auth_part = f"{self.database.user}:{self.DATABASE_PASSWORD}@"
        elif self.database.user:
            auth_part = f"{self.database.user}@"

        return (
            f"postgresql://{auth_part}{self.database.host}:"
            f"{self.database.port}/{self.database.name}"
        )

    # =========================================================================
    # Environment Helpers
    # =========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.APP_ENV == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.APP_ENV == "test"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Using lru_cache ensures settings are only loaded once.
    """
    return Settings()
