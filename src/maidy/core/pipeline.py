"""Rendering pipelines.

Two paths exist: a raw diagram rendered straight to SVG or ASCII, and a
Markdown document whose mermaid blocks are rendered and embedded in HTML.
"""

import asyncio
import logging
from dataclasses import dataclass

from maidy.core.coordinator import render_mermaid_blocks
from maidy.core.document import assemble_document
from maidy.core.extractor import count_placeholders, extract_mermaid_blocks
from maidy.core.markup import MarkupConverter
from maidy.core.renderer import AsciiRenderer, DiagramRenderer
from maidy.core.substitution import replace_placeholders
from maidy.errors import ConversionError
from maidy.themes import ThemeSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentOptions:
    """Options for the HTML output of the document path."""

    title: str = "Document"
    include_styles: bool = True


async def render_diagram(
    source: str,
    renderer: DiagramRenderer,
    theme: ThemeSpec | None = None,
) -> str:
    """Render a single diagram to SVG.

    There is no partial result for a lone diagram, so a RenderError from
    the renderer propagates to the caller.
    """
    return await renderer.render(source, theme)


def render_ascii(source: str, renderer: AsciiRenderer) -> str:
    """Render a single diagram to ASCII art."""
    return renderer.render(source)


class MarkdownPipeline:
    """Converts Markdown with embedded mermaid blocks to HTML.

    Diagrams are rendered concurrently while the Markdown conversion runs
    in a worker thread. A diagram that fails to render is replaced by an
    error marker; the rest of the document is unaffected.
    """

    def __init__(
        self,
        renderer: DiagramRenderer,
        converter: MarkupConverter,
        *,
        render_timeout: float | None = 30.0,
    ) -> None:
        """Initialize pipeline.

        Args:
            renderer: Renderer used for every mermaid block
            converter: Markdown to HTML converter
            render_timeout: Per-diagram time limit in seconds, None for no limit
        """
        self._renderer = renderer
        self._converter = converter
        self._render_timeout = render_timeout

    async def convert(
        self,
        markdown: str,
        theme: ThemeSpec | None = None,
        options: DocumentOptions | None = None,
    ) -> str:
        """Convert markdown to HTML with embedded mermaid diagrams.

        Args:
            markdown: Markdown source text
            theme: Optional colour theme for the diagrams
            options: Output options (defaults to a standalone document)

        Returns:
            HTML document or fragment

        Raises:
            ConversionError: If conversion fails or drops a placeholder
        """
        options = options or DocumentOptions()

        processed, blocks = extract_mermaid_blocks(markdown)
        logger.debug(f"Extracted {len(blocks)} mermaid blocks")

        html, rendered = await asyncio.gather(
            self._convert_markup(processed),
            render_mermaid_blocks(
                blocks, self._renderer, theme, timeout=self._render_timeout
            ),
        )

        preserved = count_placeholders(html, rendered)
        if preserved != len(rendered):
            raise ConversionError(
                f"Markdown conversion lost {len(rendered) - preserved} of "
                f"{len(rendered)} diagram placeholders"
            )

        body = replace_placeholders(html, rendered)
        return assemble_document(
            body, title=options.title, include_styles=options.include_styles
        )

    async def _convert_markup(self, markdown: str) -> str:
        try:
            return await asyncio.to_thread(self._converter.convert, markdown)
        except Exception as e:
            raise ConversionError(f"Markdown conversion failed: {e}") from e
