"""CLI interface for Maidy.

Command-line tool for rendering Mermaid diagrams and converting Markdown
documents with embedded Mermaid blocks to HTML.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from maidy.config import Config
from maidy.core.markup import MistuneConverter
from maidy.core.pipeline import DocumentOptions, MarkdownPipeline, render_ascii, render_diagram
from maidy.core.renderer import KrokiRenderer, MermaidAsciiRenderer
from maidy.errors import EmptyInputError, MaidyError
from maidy.modes import RenderPath, validate_mode
from maidy.themes import ThemeRegistry

logger = logging.getLogger(__name__)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--input",
    "-i",
    "input_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Input file containing Mermaid code or Markdown (default: stdin)",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Output file (default: stdout)",
)
@click.option(
    "--format",
    "-f",
    "fmt",
    default="svg",
    help="Output format: svg, ascii, or html (default: svg)",
)
@click.option(
    "--markdown",
    "-m",
    is_flag=True,
    help="Markdown mode: convert markdown with mermaid blocks to HTML",
)
@click.option(
    "--theme",
    "-t",
    default=None,
    help="Theme name (default: github-dark, or render.theme from config)",
)
@click.option(
    "--list-themes",
    "-l",
    is_flag=True,
    help="List available themes",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path, dir_okay=False),
    default=None,
    help="Path to configuration file (default: auto-discover maidy.toml)",
)
@click.option(
    "--kroki-url",
    default=None,
    help="Kroki server URL for SVG rendering (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def cli(
    input_path: Path | None,
    output_path: Path | None,
    fmt: str,
    markdown: bool,
    theme: str | None,
    list_themes: bool,
    config_path: Path | None,
    kroki_url: str | None,
    verbose: bool,
) -> None:
    """Maidy - Render Mermaid diagrams to SVG, ASCII, or convert Markdown to HTML.

    \b
    Examples:
      maidy -i diagram.mmd -o output.svg
      cat diagram.mmd | maidy -f ascii
      maidy -i diagram.mmd -f svg -t dracula
      maidy -i document.md -m -o output.html
      cat document.md | maidy -m > output.html
      maidy --list-themes
    """
    _configure_logging(verbose)

    try:
        config = Config.load(config_path).with_overrides(theme=theme, kroki_url=kroki_url)
    except (FileNotFoundError, ValueError) as e:
        if not list_themes:
            _fail(f"Error: {e}")
        # Built-in themes can still be listed
        logger.warning(f"Ignoring configuration: {e}")
        config = Config()

    registry = ThemeRegistry(config.themes)

    if list_themes:
        _print_themes(registry)
        return

    try:
        render_path = validate_mode(fmt, markdown)
    except ValueError as e:
        _fail(f"Error: {e}")

    try:
        text = _read_input(input_path)
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Error: Cannot read input: {e}")
    except EmptyInputError as e:
        _fail(f"Error: {e}")

    logger.debug(f"Rendering {fmt} output via the {render_path.value} path")
    try:
        output = _render(text, render_path, fmt, config, registry)
    except MaidyError as e:
        _fail(f"Error rendering diagram: {e}")

    _write_output(output, output_path)


def _render(
    text: str,
    render_path: RenderPath,
    fmt: str,
    config: Config,
    registry: ThemeRegistry,
) -> str:
    """Run the pipeline path selected by validate_mode().

    Args:
        text: Input text
        render_path: Selected pipeline path
        fmt: Output format
        config: Application config
        registry: Theme registry

    Returns:
        Rendered output
    """
    if render_path is RenderPath.RAW and fmt == "ascii":
        return render_ascii(text, MermaidAsciiRenderer(config.ascii.command))

    renderer = KrokiRenderer(config.kroki.url, timeout=config.render.timeout)
    theme = registry.resolve(config.render.theme)

    if render_path is RenderPath.RAW:
        return asyncio.run(render_diagram(text, renderer, theme))

    pipeline = MarkdownPipeline(
        renderer,
        MistuneConverter(),
        render_timeout=config.render.timeout,
    )
    options = DocumentOptions(
        title=config.document.title,
        include_styles=config.document.include_styles,
    )
    return asyncio.run(pipeline.convert(text, theme, options))


def _read_input(input_path: Path | None) -> str:
    """Read input from a file or stdin.

    Args:
        input_path: Input file, or None for stdin

    Returns:
        Input text

    Raises:
        EmptyInputError: If the input is blank
    """
    if input_path is not None:
        text = input_path.read_text(encoding="utf-8")
    else:
        text = sys.stdin.read()

    if not text.strip():
        raise EmptyInputError("No input provided")
    return text


def _write_output(content: str, output_path: Path | None) -> None:
    """Write output to a file or stdout.

    Args:
        content: Rendered output
        output_path: Output file, or None for stdout
    """
    if output_path is None:
        click.echo(content)
        return

    try:
        output_path.write_text(content, encoding="utf-8")
    except OSError as e:
        _fail(f"Error: Cannot write output: {e}")
    click.echo(f"Output written to: {output_path}", err=True)


def _print_themes(registry: ThemeRegistry) -> None:
    click.echo("Available themes:")
    for name in registry:
        click.echo(f"  - {name}")


def _configure_logging(verbose: bool) -> None:
    """Send package log records to stderr.

    Args:
        verbose: If True, log at DEBUG level instead of WARNING
    """
    package_logger = logging.getLogger("maidy")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _fail(message: str) -> NoReturn:
    click.echo(click.style(message, fg="red"), err=True)
    sys.exit(1)


if __name__ == "__main__":
    cli()
