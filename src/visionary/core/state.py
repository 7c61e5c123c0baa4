"""
Studio state and reducer-style update functions.

StudioState is the single application-state value owned by whoever drives the
studio (the controller or a Gradio session). Every function here takes a state
and returns a new one; prior states are never modified. Validation failures
raise before anything is built, so a failed operation leaves the caller's state
as it was.
"""

import time
from dataclasses import dataclass, field, replace
from enum import Enum

from visionary.core import catalog
from visionary.core.config import DEFAULT_IMAGE_MODEL, get_config
from visionary.core.image_gen import GenerationOutcome
from visionary.core.models import (
    AUTO,
    CONTROL_DIMENSIONS,
    Asset,
    Category,
    GenerationRecord,
    default_controls,
    new_id,
)
from visionary.logging_config import get_logger, transitions_logger
from visionary.utils.exceptions import (
    DuplicateCategoryError,
    GenerationInProgressError,
    ValidationError,
)

logger = get_logger(__name__)


class RequestState(Enum):
    """Single-slot generation request state."""

    IDLE = "idle"
    REQUESTING = "requesting"
    DONE = "done"


@dataclass(frozen=True)
class Settings:
    """Studio settings; seed 0 means unset (random)."""

    model: str = DEFAULT_IMAGE_MODEL
    seed: int = 0


@dataclass(frozen=True)
class StudioState:
    categories: tuple[Category, ...] = ()
    assets: tuple[Asset, ...] = ()
    selection: tuple[str, ...] = ()
    history: tuple[GenerationRecord, ...] = ()
    controls: dict[str, str] = field(default_factory=default_controls)
    settings: Settings = field(default_factory=Settings)
    user_prompt: str = ""
    external_reference: str | None = None
    current_result: str | None = None
    active_category: str = ""
    request_state: RequestState = RequestState.IDLE
    last_error: str | None = None


def initial_state(settings: Settings | None = None) -> StudioState:
    """
    Return a fresh state seeded from the bundled catalog.

    Without settings the model comes from config (VISIONARY_DEFAULT_MODEL).
    """
    categories = catalog.initial_categories()
    return StudioState(
        categories=categories,
        assets=catalog.starter_assets(),
        settings=settings or Settings(model=get_config().default_image_model),
        active_category=categories[0].name if categories else "",
    )


# --- views ---


def find_asset(state: StudioState, asset_id: str) -> Asset | None:
    return next((a for a in state.assets if a.id == asset_id), None)


def selected_assets(state: StudioState) -> list[Asset]:
    """Return selected assets in selection order."""
    by_id = {a.id: a for a in state.assets}
    return [by_id[i] for i in state.selection if i in by_id]


def assets_in_category(state: StudioState, name: str) -> list[Asset]:
    return [a for a in state.assets if a.category == name]


def has_category(state: StudioState, name: str) -> bool:
    return any(c.name == name for c in state.categories)


# --- categories ---


def add_category(state: StudioState, name: str, description: str = "") -> StudioState:
    """
    Add a category and make it the active one.

    Raises:
        ValidationError: If name is empty
        DuplicateCategoryError: If a category with the same name (any case) exists
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("Category name is required.", field="name")
    if any(c.name.lower() == name.lower() for c in state.categories):
        raise DuplicateCategoryError(name)
    logger.debug("Adding category name=%s", name)
    return replace(
        state,
        categories=state.categories + (Category(name=name, description=(description or "").strip()),),
        active_category=name,
    )


def delete_category(state: StudioState, name: str) -> StudioState:
    """Remove a category, every asset in it, and those assets from the selection."""
    categories = tuple(c for c in state.categories if c.name != name)
    assets = tuple(a for a in state.assets if a.category != name)
    remaining = {a.id for a in assets}
    selection = tuple(i for i in state.selection if i in remaining)
    active = state.active_category
    if active == name:
        active = categories[0].name if categories else ""
    logger.debug(
        "Deleted category name=%s assets_removed=%d",
        name,
        len(state.assets) - len(assets),
    )
    return replace(
        state,
        categories=categories,
        assets=assets,
        selection=selection,
        active_category=active,
    )


def set_active_category(state: StudioState, name: str) -> StudioState:
    if not has_category(state, name):
        raise ValidationError(f"Unknown category: {name}", field="category")
    return replace(state, active_category=name)


# --- assets ---


def save_asset(
    state: StudioState,
    name: str,
    category: str,
    prompt_snippet: str,
    image: str | None,
    asset_id: str | None = None,
    now: float | None = None,
) -> StudioState:
    """
    Create a new asset, or replace the fields of asset_id in place when given.

    Raises:
        ValidationError: If a required field is missing, the category does not
            exist, or asset_id is unknown
    """
    name = (name or "").strip()
    prompt_snippet = (prompt_snippet or "").strip()
    if not name or not prompt_snippet or not category:
        missing = "name" if not name else "category" if not category else "prompt"
        raise ValidationError("Name, Category, and Prompt Signature are required.", field=missing)
    if not image:
        raise ValidationError("Visual DNA image is required.", field="image")
    if not has_category(state, category):
        raise ValidationError(f"Unknown category: {category}", field="category")

    if asset_id is not None:
        existing = find_asset(state, asset_id)
        if existing is None:
            raise ValidationError(f"Unknown asset: {asset_id}", field="id")
        updated = replace(
            existing, name=name, category=category, prompt_snippet=prompt_snippet, image=image
        )
        logger.debug("Updated asset id=%s", asset_id)
        return replace(
            state, assets=tuple(updated if a.id == asset_id else a for a in state.assets)
        )

    asset = Asset(
        id=new_id(),
        name=name,
        category=category,
        prompt_snippet=prompt_snippet,
        image=image,
        created_at=time.time() if now is None else now,
    )
    logger.debug("Created asset id=%s category=%s", asset.id, category)
    return replace(state, assets=state.assets + (asset,))


def delete_asset(state: StudioState, asset_id: str) -> StudioState:
    return replace(
        state,
        assets=tuple(a for a in state.assets if a.id != asset_id),
        selection=tuple(i for i in state.selection if i != asset_id),
    )


# --- selection ---


def toggle_selection(state: StudioState, asset_id: str) -> StudioState:
    """Select asset_id (appended last) or deselect it if already selected."""
    if asset_id in state.selection:
        return replace(state, selection=tuple(i for i in state.selection if i != asset_id))
    if find_asset(state, asset_id) is None:
        raise ValidationError(f"Unknown asset: {asset_id}", field="id")
    return replace(state, selection=state.selection + (asset_id,))


def clear_selection(state: StudioState) -> StudioState:
    return replace(state, selection=())


# --- prompt inputs ---


def set_control(state: StudioState, dimension: str, value: str) -> StudioState:
    if dimension not in CONTROL_DIMENSIONS:
        raise ValidationError(f"Unknown enhancer control: {dimension}", field="controls")
    return replace(state, controls={**state.controls, dimension: value or AUTO})


def reset_controls(state: StudioState) -> StudioState:
    return replace(state, controls=default_controls())


def set_user_prompt(state: StudioState, text: str) -> StudioState:
    return replace(state, user_prompt=text or "")


def set_external_reference(state: StudioState, data_uri: str | None) -> StudioState:
    return replace(state, external_reference=data_uri or None)


def update_settings(
    state: StudioState, model: str | None = None, seed: int | None = None
) -> StudioState:
    """
    Replace the given settings fields.

    Raises:
        ValidationError: If model is blank or seed is negative
    """
    settings = state.settings
    if model is not None:
        if not model.strip():
            raise ValidationError("Model ID cannot be empty", field="model")
        settings = replace(settings, model=model.strip())
    if seed is not None:
        if seed < 0:
            raise ValidationError("Seed must be zero (random) or positive.", field="seed")
        settings = replace(settings, seed=int(seed))
    return replace(state, settings=settings)


# --- history ---


def select_history_entry(state: StudioState, record_id: str) -> StudioState:
    """Show a past result as the current result."""
    record = next((r for r in state.history if r.id == record_id), None)
    if record is None:
        raise ValidationError(f"Unknown history entry: {record_id}", field="history")
    return replace(state, current_result=record.image)


# --- generation request state ---


def begin_generation(state: StudioState) -> StudioState:
    """
    Move to REQUESTING.

    Raises:
        GenerationInProgressError: If a request is already outstanding
    """
    if state.request_state is RequestState.REQUESTING:
        raise GenerationInProgressError("A generation is already in progress.")
    transitions_logger().info("Request state %s -> requesting", state.request_state.value)
    return replace(state, request_state=RequestState.REQUESTING, last_error=None)


def complete_generation(
    state: StudioState,
    outcome: GenerationOutcome,
    assets_used: tuple[str, ...] = (),
    seed: int | None = None,
    now: float | None = None,
) -> StudioState:
    """
    Record the outcome and move to DONE.

    On success the image becomes the current result and a history record is
    prepended; empty and failed outcomes leave result and history untouched.
    """
    if outcome.ok and outcome.data_uri:
        record = GenerationRecord(
            id=new_id(),
            image=outcome.data_uri,
            prompt=outcome.prompt_used,
            timestamp=time.time() if now is None else now,
            assets_used=tuple(assets_used),
            seed=seed,
            model=outcome.model_used,
        )
        transitions_logger().info(
            "Request state requesting -> done (history %d)", len(state.history) + 1
        )
        return replace(
            state,
            request_state=RequestState.DONE,
            current_result=outcome.data_uri,
            history=(record,) + state.history,
            last_error=None,
        )
    error = str(outcome.error) if outcome.error is not None else None
    transitions_logger().info("Request state requesting -> done (%s)", outcome.status.value)
    return replace(state, request_state=RequestState.DONE, last_error=error)


def abort_generation(state: StudioState) -> StudioState:
    """Return to IDLE without recording anything."""
    transitions_logger().info("Request state %s -> idle", state.request_state.value)
    return replace(state, request_state=RequestState.IDLE)
