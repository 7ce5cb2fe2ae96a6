"""Output format and input mode compatibility.

Decides which pipeline path runs for a (format, markdown mode) pair before
any input is read.
"""

from enum import Enum

from maidy.errors import IncompatibleModeFormatError, InvalidFormatError

VALID_FORMATS = ("svg", "ascii", "html")


class RenderPath(Enum):
    """Pipeline branch selected by validate_mode()."""

    RAW = "raw"
    DOCUMENT = "document"


def validate_mode(fmt: str, markdown: bool) -> RenderPath:
    """Check a format against the input mode and pick the pipeline path.

    Args:
        fmt: Requested output format
        markdown: Whether the input is a Markdown document

    Returns:
        RenderPath.RAW for a bare diagram, RenderPath.DOCUMENT for Markdown

    Raises:
        InvalidFormatError: If fmt is not a supported format
        IncompatibleModeFormatError: If fmt cannot be produced in this mode
    """
    if fmt not in VALID_FORMATS:
        raise InvalidFormatError(f'Invalid format "{fmt}". Use: {", ".join(VALID_FORMATS)}')

    if not markdown and fmt == "html":
        raise IncompatibleModeFormatError("HTML format requires markdown mode (-m flag).")

    if markdown and fmt == "ascii":
        raise IncompatibleModeFormatError("Markdown mode does not support ASCII format.")

    return RenderPath.DOCUMENT if markdown else RenderPath.RAW
