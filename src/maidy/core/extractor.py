"""Mermaid block extraction.

Replaces fenced mermaid blocks with HTML comment placeholders so the rest of
the document can go through the Markdown converter untouched.
"""

import re
import secrets
from dataclasses import dataclass

MERMAID_FENCE_RE = re.compile(r"```mermaid\r?\n([\s\S]*?)```")

PLACEHOLDER_PREFIX = "MERMAID_DIAGRAM"


@dataclass(frozen=True)
class DiagramBlock:
    """A mermaid block lifted out of a document."""

    code: str
    placeholder: str
    result: str | None = None


def make_placeholder(index: int, salt: str = "") -> str:
    """Return the placeholder token for the diagram at ``index``.

    Args:
        index: Position of the diagram in the document
        salt: Per-run tag, empty unless the plain token is already in use

    Returns:
        HTML comment placeholder
    """
    tag = f"{PLACEHOLDER_PREFIX}_{salt}" if salt else PLACEHOLDER_PREFIX
    return f"<!--{tag}_{index}-->"


def _choose_salt(markdown: str) -> str:
    """Pick a salt whose placeholders cannot occur in ``markdown``."""
    if f"<!--{PLACEHOLDER_PREFIX}_" not in markdown:
        return ""
    while True:
        salt = secrets.token_hex(4)
        if f"<!--{PLACEHOLDER_PREFIX}_{salt}_" not in markdown:
            return salt


def extract_mermaid_blocks(markdown: str) -> tuple[str, list[DiagramBlock]]:
    """Extract mermaid code blocks from markdown.

    Blocks are numbered in source order starting at 0. Each fenced block is
    replaced by its placeholder; everything else is left as is. When the
    document already contains text shaped like a placeholder, the tokens
    get a random salt so they stay unique.

    Args:
        markdown: Markdown source text

    Returns:
        Tuple of (markdown with placeholders, extracted blocks)
    """
    salt = _choose_salt(markdown)
    blocks: list[DiagramBlock] = []

    def _replace(match: re.Match[str]) -> str:
        placeholder = make_placeholder(len(blocks), salt)
        blocks.append(DiagramBlock(code=match.group(1).strip(), placeholder=placeholder))
        return placeholder

    processed = MERMAID_FENCE_RE.sub(_replace, markdown)
    return processed, blocks


def count_placeholders(text: str, blocks: list[DiagramBlock]) -> int:
    """Count the blocks whose placeholder appears exactly once in ``text``.

    Args:
        text: Text to search (typically converted HTML)
        blocks: Extracted blocks

    Returns:
        Number of blocks with exactly one placeholder occurrence
    """
    return sum(1 for block in blocks if text.count(block.placeholder) == 1)
