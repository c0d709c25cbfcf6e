"""Application configuration management."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings


# Fallback session secret (generated once per process)
_process_session_secret: Optional[str] = None


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    public_url: str = "http://localhost:3000"
    log_level: str = "info"

    # Session
    session_strategy: Literal["cookie", "token", "signed"] = "cookie"
    session_secret_key: Optional[str] = None  # Random per process if not set
    session_ttl_hours: int = 24
    session_sweep_minutes: int = 60
    cookie_secure: bool = False  # Set true when served over HTTPS

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def get_session_secret(settings: Optional[Settings] = None) -> str:
    """Get the secret used to sign session tokens."""
    settings = settings or get_settings()
    if settings.session_secret_key:
        return settings.session_secret_key

    # Tokens signed with this secret won't survive a restart
    global _process_session_secret
    if _process_session_secret is None:
        import secrets
        _process_session_secret = secrets.token_urlsafe(32)
    return _process_session_secret
