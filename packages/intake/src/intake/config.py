"""Contact intake configuration.

Build-time configuration (application id, store credentials, optional
pre-issued auth token, inference API key) is loaded from environment
variables and passed explicitly into the components that need it.
"""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("contact-intake-config")

DEFAULT_APP_ID = "default-app-id"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-preview-05-20"
DEFAULT_GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./contacts.db"


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""

    pass


def _optional_float(key: str) -> float | None:
    """Read an optional float env var, failing fast on garbage."""
    value = os.getenv(key)
    if not value:
        return None
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid value for {key}: {value!r}\n"
            f"Expected a number of seconds.\n"
            f'Example: {key}="30"'
        ) from e


@dataclass
class IntakeConfig:
    """Configuration for one contact intake deployment."""

    app_id: str = DEFAULT_APP_ID
    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_api_base_url: str = DEFAULT_GEMINI_API_BASE_URL
    initial_auth_token: str | None = None
    prediction_timeout_seconds: float | None = None
    database_url: str = DEFAULT_DATABASE_URL

    def __post_init__(self):
        if not self.app_id or "/" in self.app_id:
            raise ConfigurationError(
                f"Invalid application id: {self.app_id!r}\n"
                "The application id is a single collection path segment "
                "and must be non-empty without '/'."
            )

    @classmethod
    def from_env(cls) -> "IntakeConfig":
        """Load intake config from environment variables."""
        gemini_api_key = os.getenv("GEMINI_API_KEY", "")
        if not gemini_api_key:
            logger.warning("GEMINI_API_KEY not set - predictions will fail")

        return cls(
            app_id=os.getenv("INTAKE_APP_ID", DEFAULT_APP_ID),
            gemini_api_key=gemini_api_key,
            gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            gemini_api_base_url=os.getenv(
                "GEMINI_API_BASE_URL", DEFAULT_GEMINI_API_BASE_URL
            ),
            initial_auth_token=os.getenv("INTAKE_INITIAL_AUTH_TOKEN") or None,
            prediction_timeout_seconds=_optional_float("PREDICTION_TIMEOUT_SECONDS"),
            database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        )

    @property
    def collection_path(self) -> str:
        """Fixed public contacts collection for this application."""
        return f"artifacts/{self.app_id}/public/data/contacts"


def load_config() -> IntakeConfig:
    """Load and validate configuration. Fails fast with clear errors."""
    return IntakeConfig.from_env()
