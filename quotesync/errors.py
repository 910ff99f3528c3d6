"""
Error Types

Every error raised by the package derives from QuoteSyncError so callers at
the operation boundary can catch them in one place.
"""


class QuoteSyncError(Exception):
    """Base class for quotesync errors."""


class ValidationError(QuoteSyncError):
    """A quote was submitted with empty text or category."""


class FormatError(QuoteSyncError):
    """An import payload is not a JSON array."""


class RemoteError(QuoteSyncError):
    """The remote quote source could not be reached or returned garbage."""
