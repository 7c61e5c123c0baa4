"""
Data types shared by the composer, generation client and studio state.

All records are frozen; edits produce new values via dataclasses.replace so that
history entries keep the exact prompt and asset ids they were generated from.
"""

import time
import uuid
from dataclasses import dataclass, field

# Sentinel meaning "no influence" for an enhancer control
AUTO = "Auto"

# Canonical order in which active controls are appended to the prompt
CONTROL_DIMENSIONS: tuple[str, ...] = (
    "Style",
    "Lighting",
    "CameraAngle",
    "Mood",
    "ColorPalette",
    "TextureMaterial",
    "ArtistInfluence",
    "Motion",
    "AspectRatio",
)

# MIME type assumed for the global reference image
DEFAULT_REFERENCE_MIME = "image/jpeg"


def new_id() -> str:
    """Return a fresh unique id for assets and history records."""
    return uuid.uuid4().hex


def default_controls() -> dict[str, str]:
    """Return a control set with every dimension at AUTO."""
    return {dim: AUTO for dim in CONTROL_DIMENSIONS}


def active_controls(controls: dict[str, str]) -> list[tuple[str, str]]:
    """Return (dimension, value) pairs that are not AUTO, in canonical order."""
    return [
        (dim, controls[dim])
        for dim in CONTROL_DIMENSIONS
        if controls.get(dim, AUTO) not in ("", AUTO)
    ]


@dataclass(frozen=True)
class Category:
    """A named grouping of assets (e.g. Character, Place)."""

    name: str
    description: str = ""


@dataclass(frozen=True)
class Asset:
    """A visual DNA fragment: prompt snippet plus optional reference image."""

    id: str
    name: str
    category: str
    prompt_snippet: str
    image: str | None = None  # data URI
    description: str = ""
    created_at: float = field(default_factory=time.time)


@dataclass(frozen=True)
class ReferenceImage:
    """An image attached to a generation request, carried as a data URI."""

    data: str
    mime_type: str = DEFAULT_REFERENCE_MIME


@dataclass(frozen=True)
class GenerationRecord:
    """One entry of the generation history (newest first)."""

    id: str
    image: str  # data URI
    prompt: str
    timestamp: float
    assets_used: tuple[str, ...] = ()
    seed: int | None = None
    model: str = ""
