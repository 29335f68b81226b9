"""
Configuration helpers for the tagwallet backends.

Routers/services receive a Settings instance instead of reading os.environ
directly, so both apps resolve their configuration once at startup.
"""

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_JWT_SECRET = "change-me"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    jwt_secret: str
    jwt_ttl_seconds: int
    port: int
    rewards_port: int
    uploads_dir: str
    auth_rate_limit: int
    trust_proxy: bool
    cors_origins: tuple[str, ...]
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _list(value: str | None) -> tuple[str, ...]:
        items = [item.strip() for item in (value or "").split(",")]
        return tuple(item for item in items if item)

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./tagwallet.db"),
        jwt_secret=os.getenv("JWT_SECRET") or DEFAULT_JWT_SECRET,
        jwt_ttl_seconds=_int(os.getenv("JWT_TTL_SECONDS", "3600"), 3600),
        port=_int(os.getenv("PORT", "3000"), 3000),
        rewards_port=_int(os.getenv("REWARDS_PORT", "3001"), 3001),
        uploads_dir=os.path.abspath(os.getenv("UPLOADS_DIR", "uploads")),
        auth_rate_limit=_int(os.getenv("AUTH_RATE_LIMIT", "20"), 20),
        trust_proxy=(os.getenv("TRUST_PROXY") or "").lower() in ("1", "true", "yes"),
        cors_origins=_list(os.getenv("CORS_ORIGINS", "*")) or ("*",),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
