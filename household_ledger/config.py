"""Configuration management using Pydantic Settings"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./household_ledger.db"

    # Identity provider (Google ID token verification)
    identity_tokeninfo_url: str = "https://oauth2.googleapis.com/tokeninfo"
    identity_audience: str | None = None  # OAuth client id; unchecked when unset
    allowed_emails: List[str] = []  # JSON list in env, e.g. ALLOWED_EMAILS='["a@x.com"]'
    default_display_name: str = "Usuario Actual"

    # Service
    service_name: str = "household-ledger"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0


settings = Settings()
