from __future__ import annotations


class BookmarkServiceError(Exception):
    """Base class for errors raised by the bookmark service."""


# PUBLIC_INTERFACE
class ValidationError(BookmarkServiceError):
    """
    Raised when request input is missing, malformed, or violates a write-time
    invariant (e.g. an empty title). Detected before any storage call.
    """


# PUBLIC_INTERFACE
class StorageError(BookmarkServiceError):
    """
    Raised for any failure coming from the storage connector: connectivity
    loss, constraint violations, or rows that cannot be decoded.
    """


# PUBLIC_INTERFACE
class StartupError(BookmarkServiceError):
    """Fatal configuration or connectivity error raised before serving traffic."""
