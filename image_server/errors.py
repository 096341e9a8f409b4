"""Error taxonomy for variant resolution.

Every failure the core can report is one of the classes below. None of
them is retried; the HTTP layer maps ``status_code`` straight onto the
response.
"""


class ImageServerError(Exception):
    """Base exception for image resolution errors."""

    status_code = 500


class InvalidPathError(ImageServerError):
    """Malformed request path or variant name (traversal, drive marker, NUL)."""

    status_code = 400


class AccessDeniedError(ImageServerError):
    """Resolved path falls outside the configured root."""

    status_code = 403


class ImageNotFoundError(ImageServerError):
    """No source file exists for the requested image."""

    status_code = 404


class UnsupportedFormatError(ImageServerError):
    """Requested decode or encode format is not supported."""

    status_code = 400


class CorruptDataError(ImageServerError):
    """Source bytes exist but cannot be decoded."""


class EncodeFailureError(ImageServerError):
    """Encoder rejected the raster."""


class StorageError(ImageServerError):
    """Filesystem read, create or write failure."""
