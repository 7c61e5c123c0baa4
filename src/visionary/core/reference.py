"""
Reference image handling for visionary.

Images live in memory as data URIs (``data:<mime>;base64,<payload>``): asset
images, the global reference image and generated results alike. This module
imports local files into that form and converts data URIs back to bytes or PIL
images for display and saving.
"""

import base64
import binascii
import io
from datetime import datetime
from pathlib import Path

from PIL import Image

from visionary.core.models import DEFAULT_REFERENCE_MIME
from visionary.logging_config import get_logger
from visionary.utils.exceptions import ImageProcessingError, ValidationError

logger = get_logger(__name__)

_BASE64_MARKER = ";base64,"

_SUFFIX_MIME = {
    "PNG": "image/png",
    "JPG": "image/jpeg",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
    "GIF": "image/gif",
    "HEIC": "image/heic",
    "HEIF": "image/heif",
}

_MIME_EXTENSION = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}


def _infer_mime_from_magic(data: bytes) -> str | None:
    """Infer image MIME type from magic bytes. Returns None when unknown."""
    if len(data) < 12:
        return None
    if data[:8] == b"\x89PNG\r\n\x1a\n":
        return "image/png"
    if data[:2] == b"\xff\xd8":
        return "image/jpeg"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    if data[4:12] in (b"ftypheic", b"ftypheix", b"ftypmif1"):
        return "image/heic"
    return None


def create_image_data_url(encoded_image: str, mime_type: str = DEFAULT_REFERENCE_MIME) -> str:
    """
    Create a data URL from a base64 encoded image.

    Args:
        encoded_image: Base64 encoded image string
        mime_type: MIME type of the image

    Returns:
        Data URL string
    """
    return f"data:{mime_type};base64,{encoded_image}"


def is_inline_image_data_url(value: str | None) -> bool:
    """Return True if value is a data URL carrying a non-empty base64 payload."""
    if not value or not value.startswith("data:"):
        return False
    idx = value.find(_BASE64_MARKER)
    return idx != -1 and bool(value[idx + len(_BASE64_MARKER) :].strip())


def data_url_payload(data_url: str) -> str:
    """Return the base64 payload of a data URL (the text after ";base64,")."""
    idx = data_url.find(_BASE64_MARKER)
    return data_url[idx + len(_BASE64_MARKER) :] if idx != -1 else ""


def parse_data_url(data_url: str) -> tuple[bytes, str]:
    """
    Parse a data URL (data:image/xxx;base64,yyy) into raw bytes and MIME type.

    Raises:
        ValidationError: If the string is not a base64 data URL
    """
    data_url = data_url.strip()
    if not data_url.startswith("data:"):
        raise ValidationError("Not a data URL", field="image")
    idx = data_url.find(_BASE64_MARKER)
    if idx == -1:
        raise ValidationError("Data URL missing ;base64, part", field="image")
    try:
        payload = base64.b64decode(data_url[idx + len(_BASE64_MARKER) :], validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"Invalid base64 in data URL: {e}", field="image") from e
    mime = data_url[5:idx].strip().lower() or DEFAULT_REFERENCE_MIME
    return payload, mime


def encode_bytes_as_data_url(data: bytes, mime_type: str | None = None) -> str:
    """Encode raw image bytes as a data URL, inferring the MIME type when not given."""
    if not data:
        raise ValidationError("Image data is empty", field="image")
    mime = mime_type or _infer_mime_from_magic(data) or DEFAULT_REFERENCE_MIME
    return create_image_data_url(base64.b64encode(data).decode("ascii"), mime)


def read_image_as_data_url(image_path: str | Path) -> str:
    """
    Read a local image file fully into memory and return it as a data URL.

    No format validation is performed beyond choosing a MIME type from the file's
    magic bytes (falling back to its suffix, then image/jpeg).

    Raises:
        FileNotFoundError: If the file doesn't exist
        ImageProcessingError: If the file cannot be read
    """
    path = Path(image_path)
    if not path.is_file():
        raise FileNotFoundError(f"Image file not found: {path}")
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ImageProcessingError(f"Failed to read image: {e}", image_path=str(path)) from e
    if not data:
        raise ImageProcessingError("Image file is empty", image_path=str(path))

    mime = _infer_mime_from_magic(data) or _SUFFIX_MIME.get(path.suffix.upper().lstrip("."))
    logger.debug("Imported image path=%s bytes=%d mime=%s", path, len(data), mime)
    return encode_bytes_as_data_url(data, mime)


def decode_data_url_to_image(data_url: str) -> Image.Image:
    """
    Decode a data URL into a PIL image (for display, preview or re-encoding).

    Raises:
        ValidationError: If the string is not a base64 data URL
        ImageProcessingError: If the payload is not a decodable image
    """
    payload, _mime = parse_data_url(data_url)
    try:
        image = Image.open(io.BytesIO(payload))
        image.load()
        return image
    except Exception as e:
        raise ImageProcessingError(f"Failed to decode image: {e}") from e


def extension_for_mime(mime_type: str) -> str:
    """Return a file extension for an image MIME type (png when unknown)."""
    return _MIME_EXTENSION.get(mime_type.lower(), "png")


def default_output_path(ext: str = "png") -> str:
    """Return default output path: visionary_<YYYYMMDD>_<HHMMSS>.<ext> in current directory."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"visionary_{timestamp}.{ext or 'png'}"


def save_data_url(data_url: str, out_path: str | Path) -> Path:
    """Write the decoded bytes of a data URL to out_path and return the path."""
    payload, _mime = parse_data_url(data_url)
    path = Path(out_path)
    path.write_bytes(payload)
    return path
