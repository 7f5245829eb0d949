"""
Typed errors for tessvg.

Library code raises these; the example runner decides whether a failure
aborts the whole run or only skips one shape.
"""


class TessvgError(Exception):
    """Base error for the package."""


class PathError(TessvgError, ValueError):
    """Invalid path construction (bad radius, unbalanced begin/end, ...)."""


class TessellationError(TessvgError):
    """Tessellation failed for a path."""

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path


class OutputError(TessvgError):
    """Output directory or SVG file could not be written."""

    def __init__(self, message, filename=None):
        super().__init__(message)
        self.filename = filename
