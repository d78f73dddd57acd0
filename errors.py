"""
Error types raised by the style guide pipeline.

None of these are fatal: callers catch them at the user action that
triggered them and turn them into a notice or an error response.
"""


class StyleGuideError(Exception):
    """Base class for all recoverable pipeline errors."""


class DecodeError(StyleGuideError):
    """Image bytes could not be turned into pixel data."""


class RejectionError(StyleGuideError):
    """A file type, file size or color selection violated a constraint."""


class ServiceError(StyleGuideError):
    """The text extraction service failed or returned an unusable payload."""
