"""Markdown to HTML conversion."""

import logging
from typing import Protocol

import mistune

logger = logging.getLogger(__name__)

MISTUNE_PLUGINS = ["strikethrough", "table", "url", "task_lists"]


class MarkupConverter(Protocol):
    """Converts a Markdown document to HTML.

    Implementations must pass raw HTML comments through verbatim.
    """

    def convert(self, markdown_text: str) -> str: ...


class MistuneConverter:
    """Convert Markdown to HTML with mistune."""

    def __init__(self) -> None:
        """Initialize the converter with raw HTML passthrough enabled."""
        self.markdown = mistune.create_markdown(escape=False, plugins=MISTUNE_PLUGINS)

    def convert(self, markdown_text: str) -> str:
        """Convert Markdown text to HTML.

        Args:
            markdown_text: Markdown source text

        Returns:
            HTML fragment
        """
        logger.debug(f"Converting {len(markdown_text)} characters of markdown")
        html = self.markdown(markdown_text)
        logger.debug(f"Converted to {len(html)} characters of HTML")
        return html
