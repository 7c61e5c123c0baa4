"""
Gradio web UI for visionary.

Single-page studio: DNA library (categories and assets), category and asset
forms, enhancer controls, global reference image, prompt box, result view,
chronology (history) and settings. Each browser session keeps its own
StudioState in a gr.State; handlers apply reducers and return the new state,
then _render_views refreshes every view from it.
"""

import argparse
import atexit
import contextlib
import hashlib
import io
import os
import tempfile
from pathlib import Path
from typing import Any, cast

import gradio as gr
from PIL import Image

from visionary import (
    APIError,
    ConfigurationError,
    GenerationInProgressError,
    ImageProcessingError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
    VisionaryError,
    __version__,
)
from visionary.core import catalog
from visionary.core import state as st
from visionary.core.composer import can_generate, compose_request
from visionary.core.config import Config
from visionary.core.controller import execute_request
from visionary.core.image_gen import GeminiImageClient, GenerationOutcome, GenerationStatus
from visionary.core.models import AUTO, CONTROL_DIMENSIONS, active_controls
from visionary.core.reference import (
    decode_data_url_to_image,
    encode_bytes_as_data_url,
    extension_for_mime,
    parse_data_url,
    read_image_as_data_url,
)
from visionary.logging_config import get_logger, log_prompts, prompt_for_log

logger = get_logger(__name__)

DEFAULT_UI_PORT = 7860
DEFAULT_UI_HOST = "127.0.0.1"
BASE_PAGE_TITLE = "visionary – visual DNA studio"

ENHANCER_IDLE_LABEL = "STUDIO ENHANCER (IDLE)"

# Temp paths we create (result images, asset previews); cleaned on process exit
_temp_paths: set[str] = set()


def _register_temp_path(path: str) -> None:
    _temp_paths.add(path)


def _cleanup_temp_paths() -> None:
    for path in _temp_paths:
        with contextlib.suppress(OSError):
            Path(path).unlink(missing_ok=True)


atexit.register(_cleanup_temp_paths)


def _exception_to_message(exc: BaseException) -> str:
    """Map library and known exceptions to a short user-facing message."""
    if isinstance(exc, ValidationError):
        return exc.args[0] if exc.args else "Validation failed."
    if isinstance(exc, ConfigurationError):
        return exc.args[0] if exc.args else "Invalid configuration."
    if isinstance(exc, ImageProcessingError):
        return exc.args[0] if exc.args else "Image processing failed."
    if isinstance(exc, GenerationInProgressError):
        return "A generation is already in progress."
    if isinstance(exc, (APIError, NetworkError, RequestTimeoutError)):
        return exc.args[0] if exc.args else "API or network error."
    if isinstance(exc, VisionaryError):
        return exc.args[0] if exc.args else "An error occurred."
    if isinstance(exc, FileNotFoundError):
        return str(exc)
    return str(exc) if exc.args else "An unexpected error occurred."


def _format_status(message: str, status_type: str = "info") -> str:
    """
    Format a status message with color and icon.

    Args:
        message: The status message text.
        status_type: One of "info", "success", "error", "warning", "idle".
    """
    if status_type == "success":
        icon, color, bg_color = "✅", "#10b981", "#d1fae5"
    elif status_type == "error":
        icon, color, bg_color = "❌", "#ef4444", "#fee2e2"
    elif status_type == "warning":
        icon, color, bg_color = "⚠️", "#f59e0b", "#fef3c7"
    elif status_type == "info":
        icon, color, bg_color = "ℹ️", "#3b82f6", "#dbeafe"
    else:  # idle
        return ""

    return f"""<div style="padding: 12px 16px; border-radius: 8px; background-color: {bg_color}; border-left: 4px solid {color}; margin: 8px 0;">
    <span style="font-size: 16px; margin-right: 8px;">{icon}</span>
    <span style="color: {color}; font-weight: 500;">{message}</span>
</div>"""


def _image_value_to_data_url(value: Any) -> str | None:
    """
    Convert a Gradio Image value into a data URL.

    Gradio can return a path str, a dict with 'path' or 'url', or a PIL Image.
    """
    if value is None:
        return None
    if hasattr(value, "size") and hasattr(value, "save"):
        buf = io.BytesIO()
        value.save(buf, format="PNG")
        return encode_bytes_as_data_url(buf.getvalue(), "image/png")
    if isinstance(value, dict):
        value = value.get("path") or value.get("url")
    if not value or not isinstance(value, (str, Path)) or not str(value).strip():
        return None
    text = str(value).strip()
    if text.startswith("data:"):
        return text
    return read_image_as_data_url(text)


def _data_url_to_temp_path(data_url: str | None, prefix: str = "visionary-") -> str | None:
    """Write a data URL to a temp file (named by content hash) and return its path."""
    if not data_url:
        return None
    try:
        payload, mime = parse_data_url(data_url)
    except ValidationError:
        return None
    digest = hashlib.sha256(payload).hexdigest()[:16]
    path = Path(tempfile.gettempdir()) / f"{prefix}{digest}.{extension_for_mime(mime)}"
    if not path.exists():
        path.write_bytes(payload)
        _register_temp_path(str(path))
    return str(path)


def _preview(data_url: str | None) -> Image.Image | None:
    """Decode a data URL for gallery display; None when missing or undecodable."""
    if not data_url:
        return None
    try:
        return decode_data_url_to_image(data_url)
    except (ValidationError, ImageProcessingError):
        return None


# --- view rendering ---


def _asset_choices(state: st.StudioState) -> list[tuple[str, str]]:
    """Dropdown choices for the active category; selected assets are ticked."""
    return [
        (f"{'✓ ' if a.id in state.selection else ''}{a.name}", a.id)
        for a in st.assets_in_category(state, state.active_category)
    ]


def _selected_markdown(state: st.StudioState) -> str:
    names = [a.name for a in st.selected_assets(state)]
    if not names:
        return "*No DNA fragments selected.*"
    return "**Active DNA:** " + " · ".join(names)


def _enhancer_summary(state: st.StudioState) -> str:
    values = [value for _dim, value in active_controls(state.controls)]
    return " • ".join(values) if values else ENHANCER_IDLE_LABEL


def _render_views(state: st.StudioState) -> tuple[Any, ...]:
    """Return updates for every state-derived view, in the order of _build_blocks' view list."""
    category_names = [c.name for c in state.categories]
    library = [
        (img, a.name)
        for a in st.assets_in_category(state, state.active_category)
        if (img := _preview(a.image)) is not None
    ]
    history = [
        (img, r.prompt) for r in state.history if (img := _preview(r.image)) is not None
    ]
    busy = state.request_state is st.RequestState.REQUESTING
    return (
        gr.update(choices=category_names, value=state.active_category or None),
        library,
        gr.update(choices=_asset_choices(state), value=None),
        gr.update(choices=category_names),
        _selected_markdown(state),
        _enhancer_summary(state),
        history,
        _data_url_to_temp_path(state.current_result),
        gr.update(interactive=can_generate(state) and not busy),
    )


# --- handlers: each returns (new_state, status_html, ...) ---


def _select_category_handler(state: st.StudioState, name: str | None) -> tuple[Any, str]:
    if not name or name == state.active_category:
        return state, ""
    try:
        return st.set_active_category(state, name), ""
    except ValidationError as e:
        return state, _format_status(_exception_to_message(e), "error")


def _add_category_handler(
    state: st.StudioState, name: str, description: str
) -> tuple[Any, str, str, str]:
    try:
        new_state = st.add_category(state, name, description)
    except ValidationError as e:
        return state, _format_status(_exception_to_message(e), "error"), name, description
    return new_state, _format_status(f"Category '{new_state.active_category}' created.", "success"), "", ""


def _delete_category_handler(state: st.StudioState, name: str | None) -> tuple[Any, str]:
    if not name or not st.has_category(state, name):
        return state, _format_status("Choose a category to delete.", "warning")
    removed = len(st.assets_in_category(state, name))
    return (
        st.delete_category(state, name),
        _format_status(f"Deleted category '{name}' and {removed} asset(s).", "info"),
    )


def _toggle_asset_handler(state: st.StudioState, asset_id: str | None) -> tuple[Any, str]:
    if not asset_id:
        return state, _format_status("Choose a DNA fragment first.", "warning")
    try:
        return st.toggle_selection(state, asset_id), ""
    except ValidationError as e:
        return state, _format_status(_exception_to_message(e), "error")


def _delete_asset_handler(state: st.StudioState, asset_id: str | None) -> tuple[Any, str]:
    asset = st.find_asset(state, asset_id) if asset_id else None
    if asset is None:
        return state, _format_status("Choose a DNA fragment first.", "warning")
    return st.delete_asset(state, asset.id), _format_status(f"Removed '{asset.name}'.", "info")


def _edit_asset_handler(
    state: st.StudioState, asset_id: str | None
) -> tuple[str | None, str, Any, str, str | None, str]:
    """Load an asset into the form. Returns (editing_id, name, category, prompt, image, status)."""
    asset = st.find_asset(state, asset_id) if asset_id else None
    if asset is None:
        return None, "", gr.update(), "", None, _format_status("Choose a DNA fragment first.", "warning")
    return (
        asset.id,
        asset.name,
        gr.update(value=asset.category),
        asset.prompt_snippet,
        _data_url_to_temp_path(asset.image, prefix="visionary-asset-"),
        _format_status(f"Editing '{asset.name}'.", "info"),
    )


def _new_asset_handler(state: st.StudioState) -> tuple[None, str, Any, str, None, str]:
    """Reset the form for a new asset in the active category."""
    default_category = state.active_category or (
        state.categories[0].name if state.categories else None
    )
    return None, "", gr.update(value=default_category), "", None, ""


def _save_asset_handler(
    state: st.StudioState,
    editing_id: str | None,
    name: str,
    category: str | None,
    prompt: str,
    image_value: Any,
) -> tuple[Any, str, str | None, str, str, Any]:
    """Returns (state, status, editing_id, name, prompt, image)."""
    try:
        image = _image_value_to_data_url(image_value)
        new_state = st.save_asset(
            state, name, category or "", prompt, image, asset_id=editing_id or None
        )
    except (VisionaryError, FileNotFoundError) as e:
        return (
            state,
            _format_status(_exception_to_message(e), "error"),
            editing_id,
            name,
            prompt,
            image_value,
        )
    verb = "Updated" if editing_id else "Saved"
    return new_state, _format_status(f"{verb} '{name.strip()}'.", "success"), None, "", "", None


def _control_handler(state: st.StudioState, dimension: str, value: str | None) -> st.StudioState:
    return st.set_control(state, dimension, value or AUTO)


def _reset_controls_handler(state: st.StudioState) -> tuple[Any, ...]:
    new_state = st.reset_controls(state)
    return (new_state, *[AUTO for _ in CONTROL_DIMENSIONS])


def _prompt_change_handler(state: st.StudioState, text: str) -> tuple[Any, Any]:
    """Store the prompt and enable Generate when there is text or a selection."""
    new_state = st.set_user_prompt(state, text)
    busy = new_state.request_state is st.RequestState.REQUESTING
    return new_state, gr.update(interactive=can_generate(new_state) and not busy)


def _reference_change_handler(state: st.StudioState, value: Any) -> tuple[Any, str]:
    try:
        return st.set_external_reference(state, _image_value_to_data_url(value)), ""
    except (VisionaryError, FileNotFoundError) as e:
        return (
            st.set_external_reference(state, None),
            _format_status(_exception_to_message(e), "error"),
        )


def _settings_handler(state: st.StudioState, model: str | None, seed: Any) -> tuple[Any, str]:
    try:
        seed_val = int(seed or 0)
        return st.update_settings(state, model=model or None, seed=seed_val), ""
    except (ValidationError, ValueError, TypeError) as e:
        return state, _format_status(_exception_to_message(e), "error")


def _history_select_handler(state: st.StudioState, evt: gr.SelectData) -> tuple[Any, str]:
    index = evt.index if isinstance(evt.index, int) else evt.index[0]
    shown = [r for r in state.history if _preview(r.image) is not None]
    if not 0 <= index < len(shown):
        return state, ""
    return st.select_history_entry(state, shown[index].id), ""


def _start_generation_handler(state: st.StudioState) -> tuple[Any, str, Any, Any]:
    """
    First step of Generate: compose the request and claim the request slot.

    Returns (state, status, button, pending). pending is (request, config), or
    None when nothing was started; the later steps do nothing for None.
    """
    logger.debug("Generate clicked")
    if state.request_state is st.RequestState.REQUESTING:
        message = _format_status("A generation is already in progress.", "warning")
        return state, message, gr.update(), None
    try:
        request = compose_request(state)
        config = Config.from_env()
        config.set_image_model(request.model)
        config.validate()
        new_state = st.begin_generation(state)
    except VisionaryError as e:
        return state, _format_status(_exception_to_message(e), "error"), gr.update(), None

    if log_prompts():
        logger.info("Composed prompt: %s", prompt_for_log(request.prompt))
    return new_state, _format_status("Manifesting…", "info"), gr.update(interactive=False), (request, config)


def _execute_generation_handler(pending: Any) -> GenerationOutcome | str | None:
    """
    Second step: call the API. Takes no studio state, so nothing here can
    overwrite edits the user makes while the request is outstanding.

    Returns the outcome, or an error message if the call raised.
    """
    if pending is None:
        return None
    request, config = pending
    try:
        return execute_request(GeminiImageClient(config), request)
    except Exception as e:
        logger.error("Generation raised: %s", e, exc_info=True)
        return _exception_to_message(e)


def _finish_generation_handler(
    state: st.StudioState, pending: Any, result: GenerationOutcome | str | None
) -> tuple[Any, Any, Any, None, None]:
    """Last step: record the result on the session's current state and clear the step states."""
    if pending is None:
        return state, gr.update(), gr.update(), None, None
    request, _ = pending
    if not isinstance(result, GenerationOutcome):
        state = st.abort_generation(state)
        message = _format_status(result or "Generation did not complete.", "error")
        return state, message, gr.update(interactive=True), None, None

    state = st.complete_generation(state, result, assets_used=request.asset_ids, seed=request.seed)
    if result.status is GenerationStatus.SUCCEEDED:
        msg = _format_status(f"Done in {result.generation_time:.1f}s", "success")
    elif result.status is GenerationStatus.EMPTY:
        msg = _format_status("The model returned no image. Try adjusting the prompt.", "warning")
    else:
        msg = _format_status(f"Generation failed: {state.last_error}", "error")
    return state, msg, gr.update(interactive=True), None, None


def _header_html() -> str:
    return """
<div style="display: flex; align-items: center; gap: 24px; margin: 16px 0 24px 0; flex-wrap: wrap;">
    <h1 style="
        font-size: 2.5em;
        font-weight: 700;
        margin: 0;
        background: linear-gradient(135deg, #6366f1 0%, #a855f7 100%);
        -webkit-background-clip: text;
        -webkit-text-fill-color: transparent;
        background-clip: text;
        letter-spacing: -0.02em;
    ">visionary</h1>
    <p style="font-size: 1.1em; color: #6b7280; margin: 0;">Compose images from reusable visual DNA</p>
</div>
"""


def _build_blocks() -> gr.Blocks:
    """Build the Gradio Blocks UI."""
    initial = st.initial_state()
    options = catalog.enhancer_options()
    models = catalog.image_models(initial.settings.model)
    category_names = [c.name for c in initial.categories]

    with gr.Blocks(title=BASE_PAGE_TITLE) as app:
        gr.HTML(_header_html())
        studio_state = gr.State(value=initial)
        editing_id = gr.State(value=None)
        pending_generation = gr.State(value=None)
        generation_result = gr.State(value=None)
        status_html = gr.HTML(value="", visible=True)

        with gr.Row():
            with gr.Column(scale=2):
                with gr.Tabs():
                    with gr.Tab("DNA Library"):
                        with gr.Row():
                            category_dd = gr.Dropdown(
                                label="Category",
                                choices=category_names,
                                value=initial.active_category or None,
                                scale=3,
                            )
                            delete_category_btn = gr.Button("Delete category", scale=1)
                        library_gallery = gr.Gallery(
                            label="Fragments", columns=3, height=260, allow_preview=False
                        )
                        asset_dd = gr.Dropdown(
                            label="DNA fragment",
                            choices=_asset_choices(initial),
                            value=None,
                        )
                        with gr.Row():
                            toggle_btn = gr.Button("Select / deselect", variant="secondary")
                            edit_btn = gr.Button("Edit")
                            delete_asset_btn = gr.Button("Delete")
                    with gr.Tab("New Category"):
                        new_cat_name = gr.Textbox(label="Name", placeholder="e.g. Vehicle")
                        new_cat_desc = gr.Textbox(label="Description", lines=2)
                        add_category_btn = gr.Button("Create category", variant="primary")
                    with gr.Tab("DNA Form"):
                        asset_name_tb = gr.Textbox(label="Name")
                        asset_category_dd = gr.Dropdown(
                            label="Category",
                            choices=category_names,
                            value=initial.active_category or None,
                        )
                        asset_prompt_tb = gr.Textbox(label="Prompt signature", lines=3)
                        asset_image = gr.Image(
                            label="Visual DNA image",
                            type="filepath",
                            sources=["upload", "clipboard"],
                        )
                        with gr.Row():
                            save_asset_btn = gr.Button("Save fragment", variant="primary")
                            new_asset_btn = gr.Button("New fragment")
                    with gr.Tab("Chronology"):
                        history_gallery = gr.Gallery(
                            label="History", columns=2, height=420, allow_preview=False
                        )
                    with gr.Tab("Settings"):
                        model_dd = gr.Dropdown(
                            label="Image model",
                            choices=models,
                            value=initial.settings.model,
                            allow_custom_value=True,
                        )
                        seed_nb = gr.Number(
                            label="Seed", value=initial.settings.seed, precision=0, info="0 for random"
                        )

            with gr.Column(scale=3):
                out_image = gr.Image(
                    label="Result",
                    type="filepath",
                    height="55vh",
                    interactive=False,
                    elem_id="visionary-output-image",
                )
                selected_md = gr.Markdown(_selected_markdown(initial))
                with gr.Row():
                    reference_image = gr.Image(
                        label="Global reference",
                        type="filepath",
                        sources=["upload", "clipboard"],
                        height=160,
                        scale=1,
                    )
                    with gr.Column(scale=3):
                        enhancer_md = gr.Markdown(_enhancer_summary(initial))
                        with gr.Accordion("Studio enhancer", open=False):
                            control_dds = []
                            for dim in CONTROL_DIMENSIONS:
                                control_dds.append(
                                    gr.Dropdown(
                                        label=catalog.enhancer_label(dim),
                                        choices=options[dim],
                                        value=initial.controls.get(dim, AUTO),
                                        allow_custom_value=True,
                                    )
                                )
                            reset_controls_btn = gr.Button("Reset controls", size="sm")
                prompt_tb = gr.Textbox(
                    label="Prompt",
                    placeholder="Describe context manifestation…",
                    lines=3,
                    max_lines=6,
                )
                generate_btn = gr.Button("Generate", variant="primary", interactive=False)

        views = [
            category_dd,
            library_gallery,
            asset_dd,
            asset_category_dd,
            selected_md,
            enhancer_md,
            history_gallery,
            out_image,
            generate_btn,
        ]

        def _refresh(event: Any) -> None:
            event.then(fn=_render_views, inputs=[studio_state], outputs=views)

        _refresh(
            category_dd.select(
                fn=_select_category_handler,
                inputs=[studio_state, category_dd],
                outputs=[studio_state, status_html],
            )
        )
        _refresh(
            delete_category_btn.click(
                fn=_delete_category_handler,
                inputs=[studio_state, category_dd],
                outputs=[studio_state, status_html],
            )
        )
        _refresh(
            add_category_btn.click(
                fn=_add_category_handler,
                inputs=[studio_state, new_cat_name, new_cat_desc],
                outputs=[studio_state, status_html, new_cat_name, new_cat_desc],
            )
        )
        _refresh(
            toggle_btn.click(
                fn=_toggle_asset_handler,
                inputs=[studio_state, asset_dd],
                outputs=[studio_state, status_html],
            )
        )
        _refresh(
            delete_asset_btn.click(
                fn=_delete_asset_handler,
                inputs=[studio_state, asset_dd],
                outputs=[studio_state, status_html],
            )
        )
        form_outputs = [
            editing_id,
            asset_name_tb,
            asset_category_dd,
            asset_prompt_tb,
            asset_image,
            status_html,
        ]
        edit_btn.click(fn=_edit_asset_handler, inputs=[studio_state, asset_dd], outputs=form_outputs)
        new_asset_btn.click(fn=_new_asset_handler, inputs=[studio_state], outputs=form_outputs)
        _refresh(
            save_asset_btn.click(
                fn=_save_asset_handler,
                inputs=[
                    studio_state,
                    editing_id,
                    asset_name_tb,
                    asset_category_dd,
                    asset_prompt_tb,
                    asset_image,
                ],
                outputs=[
                    studio_state,
                    status_html,
                    editing_id,
                    asset_name_tb,
                    asset_prompt_tb,
                    asset_image,
                ],
            )
        )

        for dim, dd in zip(CONTROL_DIMENSIONS, control_dds):
            _refresh(
                dd.change(
                    fn=lambda s, v, d=dim: _control_handler(s, d, v),
                    inputs=[studio_state, dd],
                    outputs=[studio_state],
                )
            )
        _refresh(
            reset_controls_btn.click(
                fn=_reset_controls_handler,
                inputs=[studio_state],
                outputs=[studio_state, *control_dds],
            )
        )

        prompt_tb.change(
            fn=_prompt_change_handler,
            inputs=[studio_state, prompt_tb],
            outputs=[studio_state, generate_btn],
        )
        reference_image.change(
            fn=_reference_change_handler,
            inputs=[studio_state, reference_image],
            outputs=[studio_state, status_html],
        )
        for settings_input in (model_dd, seed_nb):
            settings_input.change(
                fn=_settings_handler,
                inputs=[studio_state, model_dd, seed_nb],
                outputs=[studio_state, status_html],
            )
        _refresh(
            history_gallery.select(
                fn=_history_select_handler,
                inputs=[studio_state],
                outputs=[studio_state, status_html],
            )
        )
        # The finish step reads studio_state after the API call returns
        _refresh(
            generate_btn.click(
                fn=_start_generation_handler,
                inputs=[studio_state],
                outputs=[studio_state, status_html, generate_btn, pending_generation],
            )
            .then(
                fn=_execute_generation_handler,
                inputs=[pending_generation],
                outputs=[generation_result],
                concurrency_limit=1,
            )
            .then(
                fn=_finish_generation_handler,
                inputs=[studio_state, pending_generation, generation_result],
                outputs=[
                    studio_state,
                    status_html,
                    generate_btn,
                    pending_generation,
                    generation_result,
                ],
            )
        )

        gr.HTML(f"""
<div style="text-align: center; margin: 40px 0 20px 0; padding-top: 20px; border-top: 1px solid #e5e7eb;">
    <p style="font-size: 0.9em; color: #9ca3af; margin: 0;">visionary v{__version__}</p>
</div>
""")

    return cast(gr.Blocks, app)


def launch(
    server_name: str | None = None,
    server_port: int | None = None,
    share: bool = False,
) -> None:
    """
    Build the Gradio app and launch the server.

    Args:
        server_name: Host to bind (default: VISIONARY_UI_HOST or 127.0.0.1).
        server_port: Port (default: VISIONARY_UI_PORT or 7860).
        share: If True, create a public share link (e.g. gradio.live).
    """
    host = server_name or os.getenv("VISIONARY_UI_HOST", DEFAULT_UI_HOST)
    port = server_port
    if port is None:
        try:
            port = int(os.getenv("VISIONARY_UI_PORT", str(DEFAULT_UI_PORT)))
        except ValueError:
            port = DEFAULT_UI_PORT
    print(f"visionary ui is starting (v{__version__}) on http://{host}:{port}...")
    app = _build_blocks()
    app.launch(server_name=host, server_port=port, share=share, inbrowser=True)


def main() -> None:
    """Entry point for the visionary-ui console script. Parses --port, --host, --share."""
    parser = argparse.ArgumentParser(
        description="Launch the visionary Gradio studio.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        metavar="PORT",
        help=f"Port to bind (default: VISIONARY_UI_PORT or {DEFAULT_UI_PORT}).",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        metavar="HOST",
        help=f"Host to bind (default: VISIONARY_UI_HOST or {DEFAULT_UI_HOST}).",
    )
    parser.add_argument(
        "--share",
        action="store_true",
        default=None,
        help="Create a public share link (e.g. gradio.live). Overrides VISIONARY_UI_SHARE.",
    )
    args = parser.parse_args()
    share_val = args.share
    if share_val is None:
        env_share = os.environ.get("VISIONARY_UI_SHARE", "").lower()
        share_val = env_share in ("1", "true", "yes")
    launch(server_name=args.host, server_port=args.port, share=share_val)
