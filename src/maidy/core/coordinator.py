"""Concurrent rendering of extracted mermaid blocks.

Every block gets its own task and the batch is joined before returning.
A block that fails to render keeps ``result=None``; the failure never
reaches its siblings or the caller.
"""

import asyncio
import logging
from dataclasses import replace

from maidy.core.extractor import DiagramBlock
from maidy.core.renderer import DiagramRenderer
from maidy.errors import RenderError
from maidy.themes import ThemeSpec

logger = logging.getLogger(__name__)


async def render_mermaid_blocks(
    blocks: list[DiagramBlock],
    renderer: DiagramRenderer,
    theme: ThemeSpec | None = None,
    *,
    timeout: float | None = None,
) -> list[DiagramBlock]:
    """Render mermaid blocks to SVG concurrently.

    Args:
        blocks: Blocks from extract_mermaid_blocks()
        renderer: Diagram renderer shared by all tasks
        theme: Optional colour theme
        timeout: Per-block time limit in seconds, None for no limit

    Returns:
        Blocks in input order, with ``result`` set where rendering succeeded
    """

    async def _render_one(index: int, block: DiagramBlock) -> DiagramBlock:
        try:
            svg = await asyncio.wait_for(renderer.render(block.code, theme), timeout)
        except RenderError as e:
            logger.error(f"Error rendering mermaid block {index}: {e}")
            return replace(block, result=None)
        except TimeoutError:
            logger.error(f"Error rendering mermaid block {index}: timed out after {timeout}s")
            return replace(block, result=None)
        return replace(block, result=svg)

    rendered = await asyncio.gather(
        *(_render_one(index, block) for index, block in enumerate(blocks))
    )
    return list(rendered)
