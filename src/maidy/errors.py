"""Error types raised by Maidy.

Validation errors subclass ValueError so callers that only care about bad
input can catch them the usual way.
"""


class MaidyError(Exception):
    """Base class for all Maidy errors."""


class InvalidFormatError(MaidyError, ValueError):
    """Requested output format is not one of the supported formats."""


class IncompatibleModeFormatError(MaidyError, ValueError):
    """Output format cannot be produced in the requested mode."""


class EmptyInputError(MaidyError, ValueError):
    """Input contains nothing but whitespace."""


class RenderError(MaidyError):
    """A diagram renderer rejected its source or could not be reached."""


class ConversionError(MaidyError):
    """Markdown conversion failed or lost diagram placeholders."""
