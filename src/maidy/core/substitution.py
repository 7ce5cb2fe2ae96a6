"""Placeholder substitution.

Puts rendered diagrams back into converted HTML in place of the comment
placeholders left by the extractor.
"""

from maidy.core.extractor import DiagramBlock

DIAGRAM_TEMPLATE = '<div class="mermaid-diagram">{svg}</div>'
ERROR_MARKER = '<div class="mermaid-error">Error rendering diagram</div>'


def replace_placeholders(html: str, blocks: list[DiagramBlock]) -> str:
    """Replace diagram placeholders with rendered content.

    Each placeholder is replaced once, literally, in block order. Blocks
    without a result get the error marker instead of a diagram.

    Args:
        html: HTML with <!--MERMAID_DIAGRAM_N--> placeholders
        blocks: Rendered blocks

    Returns:
        HTML with diagrams inserted
    """
    for block in blocks:
        if block.result is not None:
            fragment = DIAGRAM_TEMPLATE.format(svg=block.result)
        else:
            fragment = ERROR_MARKER
        html = html.replace(block.placeholder, fragment, 1)

    return html
