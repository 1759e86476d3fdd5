"""
Command-line interface for vision-ocr.

Prints the extracted text (or pretty JSON) to stdout. Progress messages,
logs and errors go to stderr so the result can be piped.
"""

import asyncio
import logging
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .config import settings
from .errors import OcrError
from .models import OutputFormat
from .ocr import extract_from_image
from .provider_client import AnthropicClient

app = typer.Typer(
    name="vision-ocr",
    help="Extract text from an image (file path or URL) with a hosted vision model.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

EXAMPLES = """Examples:

  vision-ocr image.png

  vision-ocr /path/to/scan.jpg --type markdown

  vision-ocr https://example.com/receipt.png -t json"""


def _version_callback(value: bool):
    if value:
        typer.echo(f"vision-ocr: v{__version__}")
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.LOG_LEVEL,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


async def _run(image: str, fmt: OutputFormat) -> Any | None:
    # Constructing the client checks credentials before the image is touched
    client = AnthropicClient()
    try:
        return await extract_from_image(image, fmt, client)
    finally:
        await client.aclose()


def _print_result(result: Any, fmt: OutputFormat) -> None:
    if fmt is OutputFormat.JSON:
        console.print_json(data=result)
    else:
        typer.echo(result)


@app.command(epilog=EXAMPLES)
def run(
    image: Optional[str] = typer.Argument(
        None,
        help="Path or URL of the image to process",
        show_default=False,
    ),
    fmt: OutputFormat = typer.Option(
        OutputFormat.TEXT,
        "--type",
        "-t",
        help="Output format",
        case_sensitive=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version number",
    ),
):
    """Extract all text from IMAGE."""
    _setup_logging(verbose)
    err_console.print("[green]Welcome to vision-ocr![/green]")

    if not image:
        err_console.print("Usage: vision-ocr <image-path-or-url> [-t text|json|markdown]")
        err_console.print("[red]Error: Please provide an image path or URL![/red]")
        raise typer.Exit(1)

    err_console.print(f"[green]Processing image:[/green] {escape(image)}")

    try:
        result = asyncio.run(_run(image, fmt))
    except OcrError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if result is None:
        err_console.print("[red]Error: Failed to extract text from image. Please try again.[/red]")
        raise typer.Exit(1)

    _print_result(result, fmt)


def main():
    app()


if __name__ == "__main__":
    main()
