"""
Rich progress displays for CLI operations.

All output goes to stderr to preserve stdout for machine-readable output.
"""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

# Console for stderr output (preserves stdout for machine output)
console = Console(stderr=True)


@contextmanager
def generation_progress(
    model: str | None = None,
    reference_used: bool = False,
    fragments: int = 0,
) -> Iterator[None]:
    """
    Display a spinner during image generation.

    Args:
        model: The image generation model being used
        reference_used: Whether a reference image is attached
        fragments: Number of DNA fragments in the composed prompt
    """
    progress = Progress(
        SpinnerColumn(spinner_name="dots"),
        TextColumn("[green]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )

    desc_parts = ["Generating image"]
    if model:
        model_display = model if len(model) <= 40 else f"{model[:37]}..."
        desc_parts.append(f"[dim]({model_display})[/dim]")

    features = []
    if fragments:
        features.append(f"[dim magenta]{fragments} DNA[/dim magenta]")
    if reference_used:
        features.append("[dim cyan]with reference[/dim cyan]")
    if features:
        desc_parts.append("• " + " + ".join(features))

    with progress:
        task = progress.add_task(" ".join(desc_parts), total=None)
        yield
        progress.update(task, completed=True)


def print_success_result(
    output_path: Path,
    generation_time: float,
    model_used: str,
    prompt_used: str,
    had_reference: bool,
    assets_used: Sequence[str] = (),
    seed: int | None = None,
) -> None:
    """Print a rich formatted success message with generation details."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="cyan", justify="right", vertical="top")
    table.add_column(style="white")

    table.add_row("Saved to", f"[bold green]{output_path}[/bold green]")
    table.add_row("Model", model_used)
    table.add_row("Time", f"{generation_time:.1f}s")
    if seed:
        table.add_row("Seed", str(seed))

    features = []
    if assets_used:
        features.append(f"[magenta]✓[/magenta] DNA: {', '.join(assets_used)}")
    if had_reference:
        features.append("[cyan]✓[/cyan] Reference image")
    if features:
        table.add_row("Features", " • ".join(features))

    table.add_row("Prompt", f"[dim]{prompt_used}[/dim]")

    panel = Panel(
        table,
        title="[bold green]✓ Image Generated[/bold green]",
        border_style="green",
        padding=(1, 2),
    )

    console.print()
    console.print(panel)


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]✗[/red] {message}")
