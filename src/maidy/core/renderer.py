"""Diagram renderers.

Defines the interfaces the pipeline needs from a diagram renderer, plus the
default adapters: Kroki for SVG and the ``mermaid-ascii`` tool for text.
"""

import base64
import json
import logging
import shlex
import subprocess
import tempfile
import zlib
from pathlib import Path
from typing import Protocol

import httpx

from maidy.errors import RenderError
from maidy.themes import ThemeSpec

logger = logging.getLogger(__name__)

INIT_DIRECTIVE_PREFIX = "%%{init"


class DiagramRenderer(Protocol):
    """Renders Mermaid source to SVG markup."""

    async def render(self, source: str, theme: ThemeSpec | None = None) -> str:
        """Render a diagram.

        Raises:
            RenderError: If the source is malformed or the backend fails
        """
        ...


class AsciiRenderer(Protocol):
    """Renders Mermaid source to character-grid art."""

    def render(self, source: str) -> str: ...


def apply_theme(source: str, theme: ThemeSpec | None) -> str:
    """Prepend a Mermaid init directive carrying the theme colours.

    Sources that already start with their own init directive are returned
    unchanged.

    Args:
        source: Mermaid diagram source
        theme: Theme to apply, or None for the Mermaid default

    Returns:
        Diagram source with the theme directive
    """
    if theme is None or source.lstrip().startswith(INIT_DIRECTIVE_PREFIX):
        return source

    init = {"theme": "base", "themeVariables": theme.to_theme_variables()}
    return f"%%{{init: {json.dumps(init)}}}%%\n{source}"


def _encode_source(source: str) -> str:
    """Encode diagram source for Kroki URL.

    Uses deflate compression + base64 URL-safe encoding.

    Args:
        source: Diagram source code

    Returns:
        Encoded string for URL
    """
    compressed = zlib.compress(source.encode("utf-8"), level=9)
    return base64.urlsafe_b64encode(compressed).decode("ascii")


class KrokiRenderer:
    """Renders Mermaid diagrams to SVG via a Kroki server.

    A new HTTP client is opened for every call, so one instance can serve
    any number of concurrent renders.
    """

    def __init__(
        self,
        server_url: str = "https://kroki.io",
        *,
        timeout: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Kroki renderer.

        Args:
            server_url: Kroki server URL
            timeout: HTTP timeout in seconds, None for no limit
            transport: Optional httpx transport (used by tests)
        """
        self.server_url = server_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def render(self, source: str, theme: ThemeSpec | None = None) -> str:
        """Render a Mermaid diagram to SVG.

        Args:
            source: Mermaid diagram source
            theme: Optional colour theme

        Returns:
            SVG markup

        Raises:
            RenderError: If Kroki rejects the diagram or cannot be reached
        """
        encoded = _encode_source(apply_theme(source, theme))
        url = f"{self.server_url}/mermaid/svg/{encoded}"
        logger.debug(f"Kroki URL: {url}")

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(url, timeout=self._timeout)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RenderError(f"Kroki request failed: {e}") from e

        if response.status_code >= 400:
            message = response.text.strip() or response.reason_phrase
            raise RenderError(f"Kroki returned {response.status_code}: {message}")

        logger.debug(f"Rendered diagram: {len(response.content)} bytes")
        return response.text


class MermaidAsciiRenderer:
    """Renders Mermaid diagrams to text with the ``mermaid-ascii`` tool."""

    def __init__(self, command: str = "mermaid-ascii") -> None:
        """Initialize ASCII renderer.

        Args:
            command: Executable to run, optionally with extra arguments
        """
        self.command = command

    def render(self, source: str) -> str:
        """Render a Mermaid diagram to ASCII art.

        Args:
            source: Mermaid diagram source

        Returns:
            Rendered text without trailing newlines

        Raises:
            RenderError: If the tool is missing or exits with an error
        """
        args = shlex.split(self.command)

        with tempfile.TemporaryDirectory() as tmpdir:
            input_file = Path(tmpdir) / "diagram.mmd"
            input_file.write_text(source, encoding="utf-8")
            logger.debug(f"Running {args[0]} on {input_file}")
            try:
                proc = subprocess.run(
                    [*args, "-f", str(input_file)],
                    capture_output=True,
                    text=True,
                    check=False,
                )
            except FileNotFoundError as e:
                raise RenderError(f"ASCII renderer not found: {args[0]}") from e

        if proc.returncode != 0:
            detail = proc.stderr.strip() or f"exit status {proc.returncode}"
            raise RenderError(f"{args[0]} failed: {detail}")

        return proc.stdout.rstrip("\n")
