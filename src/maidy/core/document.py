"""Standalone HTML document assembly.

The stylesheet ships inside the package as ``static/document.css`` and is
inlined so the output opens without any external files.
"""

import html
from functools import cache
from importlib.resources import files

DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <style>
{styles}
  </style>
</head>
<body>
{body}
</body>
</html>"""


@cache
def get_document_styles() -> str:
    """Return the bundled document stylesheet."""
    return files("maidy").joinpath("static", "document.css").read_text(encoding="utf-8")


def assemble_document(body: str, title: str = "Document", include_styles: bool = True) -> str:
    """Wrap an HTML fragment in a complete document.

    Args:
        body: HTML fragment
        title: Document title (escaped)
        include_styles: If False, return ``body`` unchanged for embedding

    Returns:
        Complete HTML document, or the fragment itself
    """
    if not include_styles:
        return body

    return DOCUMENT_TEMPLATE.format(
        title=html.escape(title),
        styles=get_document_styles().rstrip("\n"),
        body=body,
    )
