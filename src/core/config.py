"""Configuration helpers for API keys and environment variables."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_GEOLOCATION_URL = "http://ip-api.com/json"

MIN_RADIUS_KM = 5
MAX_RADIUS_KM = 100
DEFAULT_RADIUS_KM = 30
DEFAULT_TRIP_DAYS = 7


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off", ""}


@dataclass(slots=True)
class ApiSettings:
    """Centralised container for the external service credentials."""

    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    geolocation_enabled: bool = True
    geolocation_url: str = DEFAULT_GEOLOCATION_URL
    geolocation_timeout_s: float = 10.0
    cors_origins: List[str] = field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"]
    )

    @classmethod
    def from_env(cls) -> "ApiSettings":
        """Load settings from environment variables."""

        origins = os.getenv("CORS_ORIGINS")
        settings = cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            geolocation_enabled=_env_flag("GEOLOCATION_ENABLED", True),
            geolocation_url=os.getenv("GEOLOCATION_URL", DEFAULT_GEOLOCATION_URL),
            geolocation_timeout_s=float(os.getenv("GEOLOCATION_TIMEOUT_S", "10")),
        )
        if origins:
            settings.cors_origins = [item.strip() for item in origins.split(",") if item.strip()]
        return settings

    def ensure(self, field: str) -> str:
        """Return the requested field and fail fast if it is missing."""

        value = getattr(self, field)
        if not value:
            raise RuntimeError(f"Missing configuration value: {field}")
        return value
