from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, Field

NEXMO_INSIGHT_URL = "https://api.nexmo.com/ni/advanced/async/json"


class ConfigurationError(RuntimeError):
    """Raised when a component is used without the settings it needs."""


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    # --- Nexmo Number Insight credentials ---
    nexmo_api_key: str | None = Field(default_factory=lambda: os.getenv("NEXMO_API_KEY"))
    nexmo_api_secret: str | None = Field(default_factory=lambda: os.getenv("NEXMO_API_SECRET"))
    nexmo_insight_url: str = Field(
        default_factory=lambda: os.getenv("NEXMO_INSIGHT_URL", NEXMO_INSIGHT_URL)
    )

    # Base URL Nexmo should call back on. When unset, the base URL of the
    # incoming /lookup request is used (fine locally, wrong behind a proxy).
    public_base_url: str | None = Field(default_factory=lambda: os.getenv("PUBLIC_BASE_URL"))

    # --- Outbound mail ---
    sender_email: str | None = Field(default_factory=lambda: os.getenv("SENDER_EMAIL"))
    smtp_host: str = Field(default_factory=lambda: os.getenv("SMTP_HOST", "localhost"))
    # Parsed by the mailer at send time.
    smtp_port: str = Field(default_factory=lambda: os.getenv("SMTP_PORT", "25"))
    smtp_username: str | None = Field(default_factory=lambda: os.getenv("SMTP_USERNAME"))
    smtp_password: str | None = Field(default_factory=lambda: os.getenv("SMTP_PASSWORD"))
    smtp_starttls: bool = Field(default_factory=lambda: _env_flag("SMTP_STARTTLS"))

    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))


@lru_cache
def get_settings() -> Settings:
    return Settings()
