"""Environment-based configuration for the API service."""

import logging
import os
from pathlib import Path

from ..intake.collaborators import DEFAULT_MIN_PASSWORD_LENGTH

logger = logging.getLogger(__name__)


class Settings:
    """API configuration loaded from environment variables."""

    def __init__(self):
        # Only admin routes need it; public sign-up and contact work without
        self.api_secret = os.getenv("WA_API_SECRET", "")
        if not self.api_secret:
            logger.warning(
                "WA_API_SECRET is not set; admin routes are disabled. "
                "Generate one with: openssl rand -hex 32"
            )
        self.host = os.getenv("WA_API_HOST", "0.0.0.0")
        self.port = int(os.getenv("WA_API_PORT", "8000"))
        self.db_path = os.getenv(
            "WA_DATABASE_PATH",
            str(Path.home() / ".wa-lead-engine" / "leads.db"),
        )
        self.debug = os.getenv("WA_ENGINE_ENV", "production") != "production"

        # Contact form leads are forwarded here when set
        self.crm_webhook_url = os.getenv("WA_CRM_WEBHOOK_URL") or None

        self.min_password_length = int(
            os.getenv("WA_MIN_PASSWORD_LENGTH", str(DEFAULT_MIN_PASSWORD_LENGTH))
        )


_settings = None


def _get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings():
    """Drop cached settings so the next access re-reads the environment."""
    global _settings
    _settings = None


class _SettingsProxy:
    """Lazy proxy so settings aren't loaded until first access."""

    def __getattr__(self, name):
        return getattr(_get_settings(), name)


settings = _SettingsProxy()
