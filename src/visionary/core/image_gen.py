"""
Image generation via the Gemini generateContent API.

The client builds one request from a prompt and optional reference images,
posts it, and picks the first inline image out of the response. It never
raises for transport or API failures: those are logged and reported as a
FAILED outcome, and a response without an image is reported as EMPTY.
"""

import json
import time
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

import requests

from visionary.core.config import Config, get_config
from visionary.core.models import ReferenceImage
from visionary.core.reference import (
    create_image_data_url,
    data_url_payload,
    is_inline_image_data_url,
)
from visionary.logging_config import get_logger, log_prompts, prompt_for_log
from visionary.utils.exceptions import (
    APIError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
    VisionaryError,
)

logger = get_logger(__name__)

# Models that accept imageConfig and seed; matched as substrings of the model id
IMAGE_MODELS = (
    "gemini-2.5-flash-image",
    "gemini-3-pro-image-preview",
)

# Aspect ratios the API accepts; anything else is left out of the request
SUPPORTED_ASPECT_RATIOS = ("1:1", "3:4", "4:3", "9:16", "16:9")

_DEBUG_TRUNCATE_THRESHOLD = 200
_DEBUG_NEVER_TRUNCATE_KEYS = frozenset({"text", "message"})


def _truncate_image_data_for_log(obj: Any, parent_key: str | None = None) -> Any:
    """Recursively replace long base64 strings with placeholders for safe logging."""
    if isinstance(obj, dict):
        return {k: _truncate_image_data_for_log(v, k) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_truncate_image_data_for_log(v, None) for v in obj]
    if isinstance(obj, str) and len(obj) >= _DEBUG_TRUNCATE_THRESHOLD:
        if parent_key in _DEBUG_NEVER_TRUNCATE_KEYS:
            return obj
        return f"<string, {len(obj)} chars>"
    return obj


def is_image_model(model: str) -> bool:
    """Return True if model is one of the image-capable models (substring match)."""
    return any(m in model for m in IMAGE_MODELS)


class GenerationStatus(Enum):
    """How a generation request ended."""

    SUCCEEDED = "succeeded"
    EMPTY = "empty"  # call succeeded but the model produced no image
    FAILED = "failed"  # transport or API error


@dataclass(frozen=True)
class GenerationOutcome:
    """Result of one generation request.

    ``data_uri`` is set only when ``status`` is SUCCEEDED; ``error`` only when FAILED.
    """

    status: GenerationStatus
    model_used: str
    prompt_used: str
    had_reference: bool
    generation_time: float = 0.0
    data_uri: str | None = None
    error: VisionaryError | None = None

    @property
    def ok(self) -> bool:
        return self.status is GenerationStatus.SUCCEEDED


def build_parts(prompt: str, reference_images: Sequence[ReferenceImage]) -> list[dict[str, Any]]:
    """Reference images first (malformed ones dropped), then the text prompt."""
    parts: list[dict[str, Any]] = [
        {"inlineData": {"mimeType": img.mime_type, "data": data_url_payload(img.data)}}
        for img in reference_images
        if is_inline_image_data_url(img.data)
    ]
    parts.append({"text": prompt})
    return parts


def build_generation_config(model: str, aspect_ratio: str | None, seed: int | None) -> dict[str, Any]:
    """
    Return the generationConfig for the request; empty for non-image models.

    Aspect ratio is included only when supported; seed only when set and non-zero.
    """
    if not is_image_model(model):
        return {}
    gen_config: dict[str, Any] = {}
    if aspect_ratio in SUPPORTED_ASPECT_RATIOS:
        gen_config["imageConfig"] = {"aspectRatio": aspect_ratio}
    if seed:
        gen_config["seed"] = int(seed)
    return gen_config


def build_payload(
    prompt: str,
    reference_images: Sequence[ReferenceImage],
    model: str,
    aspect_ratio: str | None = None,
    seed: int | None = None,
) -> dict[str, Any]:
    """Build the generateContent request body."""
    payload: dict[str, Any] = {
        "contents": [{"role": "user", "parts": build_parts(prompt, reference_images)}],
    }
    gen_config = build_generation_config(model, aspect_ratio, seed)
    if gen_config:
        payload["generationConfig"] = gen_config
    return payload


def extract_image_data_uri(result: dict[str, Any]) -> str | None:
    """Return the first inline image of the first candidate as a data URI, or None."""
    candidates = result.get("candidates") or []
    if not candidates:
        return None
    content = candidates[0].get("content") or {}
    for part in content.get("parts") or []:
        inline = part.get("inlineData") or part.get("inline_data")
        if inline and inline.get("data"):
            mime = inline.get("mimeType") or inline.get("mime_type") or "image/png"
            return create_image_data_url(inline["data"], mime)
    return None


class GeminiImageClient:
    """Stateless client for Gemini image generation; safe to share between sessions."""

    def __init__(self, config: Config | None = None) -> None:
        self._config = config

    @property
    def config(self) -> Config:
        return self._config or get_config()

    def _endpoint(self, model: str) -> str:
        return f"{self.config.gemini_base_url.rstrip('/')}/models/{model}:generateContent"

    def _do_request(self, payload: dict[str, Any], model: str) -> tuple[dict[str, Any], float]:
        """POST the payload; map HTTP failures to APIError. Returns (json body, elapsed)."""
        config = self.config
        if not config.gemini_api_key:
            raise ValidationError(
                "Gemini API key is required. Set it via config or environment variable.",
                field="api_key",
            )
        url = self._endpoint(model)
        headers = {
            "x-goog-api-key": config.gemini_api_key,
            "Content-Type": "application/json",
        }
        timeout = config.generation_timeout
        logger.debug("API request url=%s model=%s timeout=%s", url, model, timeout)
        if config.debug_api:
            logger.info(
                "API request payload (image data truncated): %s",
                json.dumps(_truncate_image_data_for_log(payload), indent=2),
            )

        start_time = time.time()
        response = requests.post(url, headers=headers, json=payload, timeout=timeout)
        elapsed = time.time() - start_time
        logger.debug("API response status=%s time=%.2fs", response.status_code, elapsed)

        if response.status_code in (401, 403):
            raise APIError(
                "Authentication failed. Please check your Gemini API key.",
                status_code=response.status_code,
                response=response.text,
            )
        if response.status_code == 404:
            raise APIError(
                f"Model not found or endpoint unavailable: {model}",
                status_code=404,
                response=response.text,
            )
        if response.status_code == 429:
            raise APIError(
                "Rate limit exceeded. Please wait before making more requests.",
                status_code=429,
                response=response.text,
            )
        if response.status_code >= 500:
            raise APIError(
                f"Gemini service error: {response.status_code}",
                status_code=response.status_code,
                response=response.text,
            )
        if response.status_code != 200:
            raise APIError(
                f"API request failed with status {response.status_code}: {response.text}",
                status_code=response.status_code,
                response=response.text,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise APIError(
                f"Failed to parse API response as JSON: {e}", response=response.text
            ) from e
        if not isinstance(result, dict):
            raise APIError("Unexpected API response shape", response=str(result))
        if config.debug_api:
            logger.info(
                "API response (image data truncated): %s",
                json.dumps(_truncate_image_data_for_log(result), indent=2, default=str),
            )
        return result, elapsed

    def generate(
        self,
        prompt: str,
        reference_images: Sequence[ReferenceImage] = (),
        aspect_ratio: str | None = None,
        model: str | None = None,
        seed: int | None = None,
    ) -> GenerationOutcome:
        """
        Generate an image. Never raises for request failures.

        Args:
            prompt: Composed prompt text
            reference_images: Images to attach; malformed data URIs are dropped
            aspect_ratio: Aspect ratio hint, forwarded only when supported
            model: Model id (defaults to config value)
            seed: Seed, forwarded only when non-zero and the model is image-capable

        Returns:
            GenerationOutcome with status SUCCEEDED, EMPTY or FAILED
        """
        model = model or self.config.default_image_model
        payload = build_payload(prompt, reference_images, model, aspect_ratio, seed)
        has_ref = len(payload["contents"][0]["parts"]) > 1

        logger.info("Generating image model=%s has_reference=%s", model, has_ref)
        if log_prompts():
            logger.info("Prompt (used): %s", prompt_for_log(prompt))

        def _failed(err: VisionaryError) -> GenerationOutcome:
            logger.error("Image generation failed: %s", err)
            return GenerationOutcome(
                status=GenerationStatus.FAILED,
                model_used=model,
                prompt_used=prompt,
                had_reference=has_ref,
                error=err,
            )

        try:
            result, elapsed = self._do_request(payload, model)
        except requests.exceptions.Timeout as e:
            err: VisionaryError = RequestTimeoutError(
                f"Request timed out after {self.config.generation_timeout} seconds."
            )
            err.__cause__ = e
            return _failed(err)
        except requests.exceptions.ConnectionError as e:
            return _failed(
                NetworkError(
                    "Failed to connect to the Gemini API. Please check your internet connection.",
                    original_error=e,
                )
            )
        except requests.exceptions.RequestException as e:
            return _failed(NetworkError(f"Network error during API request: {e}", original_error=e))
        except VisionaryError as e:
            return _failed(e)

        try:
            data_uri = extract_image_data_uri(result)
        except (AttributeError, KeyError, TypeError) as e:
            return _failed(APIError(f"Malformed API response: {e}", response=str(result)))

        if data_uri is None:
            logger.warning("Model returned no image model=%s time=%.1fs", model, elapsed)
            return GenerationOutcome(
                status=GenerationStatus.EMPTY,
                model_used=model,
                prompt_used=prompt,
                had_reference=has_ref,
                generation_time=elapsed,
            )

        logger.info("Generated in %.1fs model=%s", elapsed, model)
        return GenerationOutcome(
            status=GenerationStatus.SUCCEEDED,
            model_used=model,
            prompt_used=prompt,
            had_reference=has_ref,
            generation_time=elapsed,
            data_uri=data_uri,
        )


def generate_image(
    prompt: str,
    reference_images: Sequence[ReferenceImage] = (),
    aspect_ratio: str | None = None,
    model: str | None = None,
    seed: int | None = None,
    config: Config | None = None,
) -> GenerationOutcome:
    """Generate an image with a one-off client; see GeminiImageClient.generate."""
    return GeminiImageClient(config).generate(
        prompt,
        reference_images=reference_images,
        aspect_ratio=aspect_ratio,
        model=model,
        seed=seed,
    )


def generate_image_data_uri(
    prompt: str,
    reference_images: Sequence[ReferenceImage] = (),
    aspect_ratio: str | None = None,
    model: str | None = None,
    seed: int | None = None,
    config: Config | None = None,
) -> str | None:
    """Generate an image and return it as a data URI, or None on empty result or failure."""
    return generate_image(prompt, reference_images, aspect_ratio, model, seed, config).data_uri
