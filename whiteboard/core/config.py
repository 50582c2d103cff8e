"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Backend-specific requirements (e.g. DATABASE_URL for
the sql storage backend) are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_STORAGE_BACKENDS = ("memory", "sql", "redis")
_REPLAY_POLICIES = ("strict", "best_effort")


class Settings(BaseSettings):
    """Sync client settings loaded from environment and .env.

    All settings have defaults; validate_backends checks the combinations
    that cannot work (unknown storage backend, sql backend without a URL,
    unknown replay policy).
    """

    # App
    app_name: str = "whiteboard-sync"
    app_version: str = "1.0.0"
    debug: bool = False

    # Backend resource API
    server_url: str = "http://localhost:4050"
    health_path: str = "health"
    request_timeout_seconds: float = 30.0
    # Bearer token used when no token has been stored by the sign-in flow.
    access_token: SecretStr | None = None

    # Local cache: one global TTL for every cache slot.
    cache_ttl_seconds: int = 24 * 60 * 60

    # Storage for cache entries and the pending action queue: memory, sql or redis.
    storage_backend: str = "sql"
    database_url: str = "sqlite+aiosqlite:///./whiteboard_offline.db"
    database_echo: bool = False

    # Redis storage
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    redis_key_prefix: str = "whiteboard"

    # Replay of queued mutations
    replay_policy: str = "strict"
    replay_max_attempts: int = 5
    replay_backoff_base_seconds: float = 2.0
    replay_backoff_max_seconds: float = 300.0

    # Connectivity
    start_online: bool = True
    connectivity_probe_enabled: bool = False
    connectivity_probe_interval_seconds: float = 15.0
    connectivity_probe_timeout_seconds: float = 5.0

    # Sync agent API
    allowed_origins: str = "http://localhost:3000"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_backends(self) -> "Settings":
        """Validate storage backend and replay policy.

        - storage_backend must be one of memory, sql, redis.
        - sql: DATABASE_URL required.
        - replay_policy must be strict or best_effort; max attempts at least 1.
        """
        if self.storage_backend not in _STORAGE_BACKENDS:
            raise ValueError(
                f"Invalid storage_backend '{self.storage_backend}'. "
                f"Must be one of: {', '.join(repr(b) for b in _STORAGE_BACKENDS)}"
            )
        if self.storage_backend == "sql" and not self.database_url:
            raise ValueError(
                "DATABASE_URL is required when storage_backend is 'sql' "
                "(e.g. sqlite+aiosqlite:///./whiteboard_offline.db)."
            )
        if self.replay_policy not in _REPLAY_POLICIES:
            raise ValueError(
                f"replay_policy must be 'strict' or 'best_effort', got: {self.replay_policy!r}"
            )
        if self.replay_max_attempts < 1:
            raise ValueError("replay_max_attempts must be at least 1")
        if self.cache_ttl_seconds <= 0:
            raise ValueError("cache_ttl_seconds must be positive")
        return self

    @property
    def cache_ttl_ms(self) -> int:
        """Cache TTL in milliseconds (cache timestamps are epoch ms)."""
        return self.cache_ttl_seconds * 1000


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
