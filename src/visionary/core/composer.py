"""
Prompt composition.

Turns the selected assets, the enhancer controls and the free-text prompt into
the single comma-joined prompt sent to the generation call, and collects the
reference images to attach.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from visionary.core.models import (
    AUTO,
    DEFAULT_REFERENCE_MIME,
    Asset,
    ReferenceImage,
    active_controls,
)
from visionary.core.state import StudioState, selected_assets
from visionary.utils.exceptions import ValidationError

FRAGMENT_SEPARATOR = ", "


def prompt_fragments(
    assets: Iterable[Asset], controls: Mapping[str, str], free_text: str = ""
) -> list[str]:
    """Asset snippets (selection order), then active controls (canonical order), then free text."""
    fragments = [a.prompt_snippet for a in assets]
    fragments.extend(f"{value} {dim}" for dim, value in active_controls(dict(controls)))
    if free_text:
        fragments.append(free_text)
    return fragments


def compose_prompt(
    assets: Iterable[Asset], controls: Mapping[str, str], free_text: str = ""
) -> str:
    """
    Build the composed prompt.

    >>> compose_prompt([], {"Style": "Cyberpunk"}, "at sunset")
    'Cyberpunk Style, at sunset'
    """
    return FRAGMENT_SEPARATOR.join(prompt_fragments(assets, controls, free_text))


def reference_images_for(external_reference: str | None) -> list[ReferenceImage]:
    """Return the global reference image, if any, tagged with the assumed MIME type."""
    if not external_reference:
        return []
    return [ReferenceImage(data=external_reference, mime_type=DEFAULT_REFERENCE_MIME)]


def can_generate(state: StudioState) -> bool:
    """Generation needs free text or at least one selected asset."""
    return bool(state.user_prompt) or bool(state.selection)


@dataclass(frozen=True)
class ComposedRequest:
    """Everything the generation client needs, snapshotted from one state."""

    prompt: str
    reference_images: tuple[ReferenceImage, ...]
    aspect_ratio: str
    model: str
    seed: int | None
    asset_ids: tuple[str, ...]


def compose_request(state: StudioState) -> ComposedRequest:
    """
    Snapshot a generation request from state.

    Raises:
        ValidationError: If there is nothing to generate from
    """
    if not can_generate(state):
        raise ValidationError("Enter a prompt or select DNA fragments to generate.", field="prompt")
    assets = selected_assets(state)
    prompt = compose_prompt(assets, state.controls, state.user_prompt)
    if not prompt.strip():
        raise ValidationError("Composed prompt is empty.", field="prompt")
    seed = state.settings.seed if state.settings.seed > 0 else None
    return ComposedRequest(
        prompt=prompt,
        reference_images=tuple(reference_images_for(state.external_reference)),
        aspect_ratio=state.controls.get("AspectRatio", AUTO),
        model=state.settings.model,
        seed=seed,
        asset_ids=tuple(a.id for a in assets),
    )
