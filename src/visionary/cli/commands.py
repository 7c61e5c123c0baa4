"""
Click command definitions for the visionary CLI.

Commands:
- ``visionary ui``: launch the Gradio studio.
- ``visionary generate``: compose a prompt from starter DNA, enhancer controls
  and free text, generate once, and save the image.
"""

import os
from pathlib import Path

import click

from visionary import (
    APIError,
    CONTROL_DIMENSIONS,
    Config,
    GenerationStatus,
    Settings,
    StudioController,
    ValidationError,
    __version__,
    initial_state,
    read_image_as_data_url,
)
from visionary.cli import progress
from visionary.cli.handlers import run_with_error_handling
from visionary.core import state as st
from visionary.core.reference import (
    default_output_path,
    extension_for_mime,
    parse_data_url,
    save_data_url,
)
from visionary.logging_config import configure_logging, get_verbosity_from_env


def parse_control(value: str) -> tuple[str, str]:
    """
    Parse a DIMENSION=VALUE control option; dimension matched case-insensitively.

    Raises:
        click.BadParameter: If the format or dimension is invalid
    """
    if "=" not in value:
        raise click.BadParameter(
            f"expected DIMENSION=VALUE, got {value!r}", param_hint="--control"
        )
    dim_raw, val = value.split("=", 1)
    lookup = {d.lower(): d for d in CONTROL_DIMENSIONS}
    dim = lookup.get(dim_raw.strip().lower())
    if dim is None:
        raise click.BadParameter(
            f"unknown dimension {dim_raw!r}; choose from {', '.join(CONTROL_DIMENSIONS)}",
            param_hint="--control",
        )
    return dim, val.strip()


@click.group(
    help=f"""Visual DNA prompt studio for Gemini image models.

\b
Version: {__version__}
"""
)
@click.version_option(version=__version__, package_name="visionary")
@click.pass_context
def cli(ctx: click.Context) -> None:
    ctx.color = True


@cli.command()
@click.option("--prompt", "-p", default="", help="Free text appended after DNA and controls.")
@click.option(
    "--asset",
    "-a",
    "assets",
    multiple=True,
    help="Name of a library DNA fragment to include (repeatable, in order).",
)
@click.option(
    "--control",
    "-c",
    "controls",
    multiple=True,
    help="Enhancer control as DIMENSION=VALUE, e.g. Style=Cyberpunk (repeatable).",
)
@click.option(
    "--reference",
    "-r",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a global reference image.",
)
@click.option("--model", "-m", help="Gemini image model ID (default from config).")
@click.option("--seed", type=click.IntRange(min=0), default=0, help="Seed; 0 means random.")
@click.option("--out", "-o", type=click.Path(path_type=Path), help="Output file path.")
@click.option(
    "--api-key",
    envvar="GEMINI_API_KEY",
    help="Gemini API key (overrides GEMINI_API_KEY environment variable).",
)
@click.option(
    "--debug-api",
    is_flag=True,
    help="Log raw API request payload and response (image data truncated).",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Minimize progress messages; only print result path or errors.",
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help="Increase verbosity: -v also show prompts, -vv show API detail.",
)
def generate(
    prompt: str,
    assets: tuple[str, ...],
    controls: tuple[str, ...],
    reference: Path | None,
    model: str | None,
    seed: int,
    out: Path | None,
    api_key: str | None,
    debug_api: bool,
    quiet: bool,
    verbose_count: int,
) -> None:
    """Compose a prompt and generate one image."""
    verbose_level = min(verbose_count, 2) if verbose_count > 0 else get_verbosity_from_env()
    configure_logging(verbose_level=verbose_level, quiet=quiet)

    parsed_controls = [parse_control(c) for c in controls]

    def do_generate() -> None:
        # 1. Load and validate config
        config = Config.from_env()
        if api_key is not None:
            config.set_api_key(api_key)
        if debug_api:
            config.debug_api = True
        config.validate()

        # 2. Build studio state through the reducers
        controller = StudioController(
            initial_state(Settings(model=model or config.default_image_model, seed=seed)),
            config=config,
        )
        controller.dispatch(st.set_user_prompt, prompt)
        for dim, val in parsed_controls:
            controller.dispatch(st.set_control, dim, val)
        by_name = {a.name.lower(): a for a in controller.state.assets}
        for name in assets:
            asset = by_name.get(name.strip().lower())
            if asset is None:
                raise ValidationError(f"Unknown DNA fragment: {name}", field="asset")
            if asset.id not in controller.state.selection:
                controller.dispatch(st.toggle_selection, asset.id)
        if reference is not None:
            controller.dispatch(st.set_external_reference, read_image_as_data_url(reference))

        # 3. Generate
        if not quiet:
            with progress.generation_progress(
                model=controller.state.settings.model,
                reference_used=reference is not None,
                fragments=len(controller.state.selection),
            ):
                outcome = controller.generate()
        else:
            outcome = controller.generate()

        if outcome.status is GenerationStatus.FAILED:
            raise outcome.error or APIError("Image generation failed.")
        if outcome.status is GenerationStatus.EMPTY or outcome.data_uri is None:
            raise APIError("The model returned no image. Try adjusting the prompt.")

        # 4. Save
        _payload, mime = parse_data_url(outcome.data_uri)
        out_path = out or Path(default_output_path(extension_for_mime(mime)))
        save_data_url(outcome.data_uri, out_path)

        # 5. Print result
        if not quiet:
            record = controller.state.history[0]
            progress.print_success_result(
                output_path=out_path,
                generation_time=outcome.generation_time,
                model_used=outcome.model_used,
                prompt_used=outcome.prompt_used,
                had_reference=outcome.had_reference,
                assets_used=[a.name for a in st.selected_assets(controller.state)],
                seed=record.seed,
            )
        # Path on stdout for scriptability
        click.echo(str(out_path))

    run_with_error_handling(do_generate, quiet=quiet)


@cli.command()
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    envvar="VISIONARY_UI_PORT",
    help="Port for the Gradio server (default: 7860 or VISIONARY_UI_PORT).",
)
@click.option(
    "--host",
    "host",
    type=str,
    default=None,
    envvar="VISIONARY_UI_HOST",
    help="Host to bind (default: 127.0.0.1 or VISIONARY_UI_HOST). Use 0.0.0.0 for LAN.",
)
@click.option(
    "--share",
    is_flag=True,
    default=None,
    envvar="VISIONARY_UI_SHARE",
    help="Create a public share link (e.g. gradio.live).",
)
@click.option(
    "--api-key",
    envvar="GEMINI_API_KEY",
    help="Gemini API key (overrides GEMINI_API_KEY environment variable).",
)
@click.option(
    "--debug-api",
    is_flag=True,
    help="Log raw API request/response (image data truncated) when generating from the UI.",
)
def ui(
    port: int | None,
    host: str | None,
    share: bool | None,
    api_key: str | None,
    debug_api: bool,
) -> None:
    """Launch the Gradio studio."""
    from visionary.ui.gradio_app import launch as launch_ui

    configure_logging(verbose_level=get_verbosity_from_env(), quiet=False)

    # The UI reads its config from the environment
    if api_key is not None:
        os.environ["GEMINI_API_KEY"] = api_key
    if debug_api:
        os.environ["VISIONARY_DEBUG_API"] = "1"

    share_val = share
    if share_val is None:
        env_share = os.environ.get("VISIONARY_UI_SHARE", "").lower()
        share_val = env_share in ("1", "true", "yes")
    launch_ui(server_name=host, server_port=port, share=share_val)


def main() -> None:
    """Entry point for the visionary console script."""
    cli()


__all__ = ["cli", "main", "generate", "ui"]
