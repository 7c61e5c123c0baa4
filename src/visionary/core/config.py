"""
Configuration management for visionary.

Holds the Gemini API key, endpoint, default image model and request timeout.
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from visionary.logging_config import get_logger
from visionary.utils.exceptions import ConfigurationError

logger = get_logger(__name__)

# Load environment variables from .env file
load_dotenv()

DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_GENERATION_TIMEOUT = 180


@dataclass
class Config:
    """Configuration for the visionary studio."""

    # API Configuration (gemini_api_key excluded from repr to avoid leaking secrets)
    gemini_api_key: str = field(default="", repr=False)
    gemini_base_url: str = DEFAULT_GEMINI_BASE_URL

    default_image_model: str = DEFAULT_IMAGE_MODEL

    # Seconds; the request is never cancelled, so this is the only upper bound
    generation_timeout: int = DEFAULT_GENERATION_TIMEOUT

    # Debug: log raw API payload/response with image data truncated
    debug_api: bool = False

    _validated: bool = field(default=False, repr=False)

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create a Config instance from environment variables.

        Environment variables:
            GEMINI_API_KEY: API key for image generation (GOOGLE_API_KEY is accepted too)
            VISIONARY_BASE_URL: Optional API base URL
            VISIONARY_DEFAULT_MODEL: Optional default image model
            VISIONARY_GENERATION_TIMEOUT: Optional request timeout in seconds
            VISIONARY_DEBUG_API: "1"/"true"/"yes" to log request and response bodies

        Returns:
            Config instance populated from environment

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed
        """
        api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or ""

        raw_timeout = os.getenv("VISIONARY_GENERATION_TIMEOUT", "").strip()
        try:
            timeout = int(raw_timeout) if raw_timeout else DEFAULT_GENERATION_TIMEOUT
        except ValueError as e:
            raise ConfigurationError(
                f"VISIONARY_GENERATION_TIMEOUT must be an integer, got {raw_timeout!r}."
            ) from e

        debug_api = os.getenv("VISIONARY_DEBUG_API", "").strip().lower() in ("1", "true", "yes")

        return cls(
            gemini_api_key=api_key,
            gemini_base_url=os.getenv("VISIONARY_BASE_URL") or DEFAULT_GEMINI_BASE_URL,
            default_image_model=os.getenv("VISIONARY_DEFAULT_MODEL") or DEFAULT_IMAGE_MODEL,
            generation_timeout=timeout,
            debug_api=debug_api,
        )

    def validate(self) -> None:
        """
        Validate the configuration.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        logger.debug("Validating config")

        if not self.gemini_api_key:
            raise ConfigurationError(
                "Gemini API key is required. "
                "Set GEMINI_API_KEY environment variable or provide it explicitly."
            )
        if not self.default_image_model:
            raise ConfigurationError("default_image_model cannot be empty.")
        if self.generation_timeout <= 0:
            raise ConfigurationError(
                f"generation_timeout must be positive, got {self.generation_timeout}."
            )
        if not self.gemini_base_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"gemini_base_url must be an http(s) URL, got {self.gemini_base_url!r}."
            )

        self._validated = True

    def is_valid(self) -> bool:
        """Return True if validate() has been called successfully."""
        return self._validated

    def set_api_key(self, api_key: str) -> None:
        """
        Set the Gemini API key.

        Raises:
            ConfigurationError: If API key is empty
        """
        if not api_key or not api_key.strip():
            raise ConfigurationError("API key cannot be empty")

        self.gemini_api_key = api_key.strip()
        self._validated = False  # Need to revalidate

    def set_image_model(self, model: str) -> None:
        """
        Set the default image generation model.

        Raises:
            ConfigurationError: If model is empty
        """
        if not model:
            raise ConfigurationError("Model ID cannot be empty")

        self.default_image_model = model


# Global configuration instance
_global_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance, creating it from the environment on first use."""
    global _global_config
    if _global_config is None:
        _global_config = Config.from_env()
    return _global_config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _global_config
    _global_config = config
