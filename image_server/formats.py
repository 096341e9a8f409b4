"""Image format tables and helpers."""

import mimetypes
from typing import Optional

from .errors import UnsupportedFormatError

# Formats a caller may ask for.
ACCEPTED_FORMATS = frozenset({"png", "jpg", "jpeg", "webp", "gif", "svg"})

# Formats the codec can write; anything else is passed through untouched.
CONVERTIBLE_FORMATS = frozenset({"png", "jpg", "jpeg"})

# Pillow format names, keyed by extension.
DECODE_FORMATS = {
    "png": "PNG",
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "webp": "WEBP",
}

CONTENT_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
    "gif": "image/gif",
    "svg": "image/svg+xml",
}


def normalize_format(value: Optional[str]) -> Optional[str]:
    """Lower-case a caller-supplied format and check it is accepted.

    Returns None when no format was given.
    """
    if value is None or value == "":
        return None
    fmt = value.strip().lower().lstrip(".")
    if fmt not in ACCEPTED_FORMATS:
        raise UnsupportedFormatError(f"Unsupported format: {value}")
    return fmt


def extension_of(name: str) -> str:
    """Lower-cased extension of a file name, without the dot."""
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem or "/" in ext:
        return ""
    return ext.lower()


def same_format(a: str, b: str) -> bool:
    """True when two extensions name the same encoding (jpg == jpeg)."""
    return DECODE_FORMATS.get(a, a) == DECODE_FORMATS.get(b, b)


def content_type_for(fmt: str) -> str:
    if fmt in CONTENT_TYPES:
        return CONTENT_TYPES[fmt]
    guessed, _ = mimetypes.guess_type(f"file.{fmt}")
    return guessed or "application/octet-stream"
