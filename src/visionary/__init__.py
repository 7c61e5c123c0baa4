"""
visionary - visual DNA prompt studio

Compose image prompts from a library of reusable "visual DNA" fragments
(reference image + prompt snippet), enhancer controls and free text, and
generate images with Gemini image models.

Library usage:
- Configuration can be passed per client (GeminiImageClient(config)) or via the
  shared config: use get_config() / set_config().
- Studio state is an immutable StudioState updated through the reducers in
  visionary.core.state; StudioController keeps one and runs generations.
- Logging: control verbosity with set_verbosity(0|1|2) or configure_logging(verbose_level, quiet).
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("visionary")
except PackageNotFoundError:
    # Package is not installed (e.g., running from source in development)
    __version__ = "0.0.0.dev"

from visionary.core.composer import (
    ComposedRequest,
    can_generate,
    compose_prompt,
    compose_request,
    reference_images_for,
)
from visionary.core.config import (
    DEFAULT_GEMINI_BASE_URL,
    DEFAULT_IMAGE_MODEL,
    Config,
    get_config,
    set_config,
)
from visionary.core.controller import StudioController
from visionary.core.image_gen import (
    GeminiImageClient,
    GenerationOutcome,
    GenerationStatus,
    generate_image,
    generate_image_data_uri,
)
from visionary.core.models import AUTO, CONTROL_DIMENSIONS, Asset, Category, GenerationRecord
from visionary.core.reference import read_image_as_data_url
from visionary.core.state import RequestState, Settings, StudioState, initial_state
from visionary.logging_config import configure_logging, set_verbosity
from visionary.utils.exceptions import (
    APIError,
    ConfigurationError,
    DuplicateCategoryError,
    GenerationInProgressError,
    ImageProcessingError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
    VisionaryError,
)

__all__ = [
    "APIError",
    "AUTO",
    "Asset",
    "CONTROL_DIMENSIONS",
    "Category",
    "ComposedRequest",
    "Config",
    "ConfigurationError",
    "DEFAULT_GEMINI_BASE_URL",
    "DEFAULT_IMAGE_MODEL",
    "DuplicateCategoryError",
    "GeminiImageClient",
    "GenerationInProgressError",
    "GenerationOutcome",
    "GenerationRecord",
    "GenerationStatus",
    "ImageProcessingError",
    "NetworkError",
    "RequestState",
    "RequestTimeoutError",
    "Settings",
    "StudioController",
    "StudioState",
    "ValidationError",
    "VisionaryError",
    "can_generate",
    "compose_prompt",
    "compose_request",
    "configure_logging",
    "generate_image",
    "generate_image_data_uri",
    "get_config",
    "initial_state",
    "read_image_as_data_url",
    "reference_images_for",
    "set_config",
    "set_verbosity",
]
