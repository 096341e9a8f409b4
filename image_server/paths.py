"""Confine logical image paths to the configured root directory."""

import logging
import os
import posixpath
import re
from pathlib import Path, PureWindowsPath

from .errors import AccessDeniedError, InvalidPathError

logger = logging.getLogger(__name__)

_DRIVE_RE = re.compile(r"^[A-Za-z]:")


def normalize_request_path(request_path: str) -> str:
    """Normalize a logical image path to a relative POSIX form.

    Collapses ``.`` segments and repeated slashes and strips leading
    separators. The root itself normalizes to an empty string.

    Raises:
        InvalidPathError: If the path contains a NUL byte, a ``..``
            segment (before or after normalization), a drive or volume
            marker, or is still absolute after normalization.
    """
    if "\x00" in request_path:
        raise InvalidPathError("Path contains a NUL byte")

    if ".." in request_path.split("/"):
        raise InvalidPathError(f"Path traversal is not allowed: {request_path}")

    stripped = request_path.lstrip("/")
    if _DRIVE_RE.match(stripped) or PureWindowsPath(stripped).drive:
        raise InvalidPathError(f"Drive or volume markers are not allowed: {request_path}")

    normalized = posixpath.normpath(stripped) if stripped else ""
    if normalized == ".":
        normalized = ""

    if posixpath.isabs(normalized) or ".." in normalized.split("/"):
        raise InvalidPathError(f"Invalid path: {request_path}")

    return normalized


def resolve_path(root: str | Path, request_path: str) -> Path:
    """Map a request path to an absolute path inside ``root``.

    This is pure path arithmetic; the filesystem is never touched, so
    symlinks inside the tree are not followed.

    Args:
        root: Configured image root (relative roots are made absolute
            against the working directory).
        request_path: Logical, percent-decoded path from the router.

    Returns:
        Path: Absolute path equal to or below the root.

    Raises:
        InvalidPathError: See :func:`normalize_request_path`.
        AccessDeniedError: If the joined path escapes the root.
    """
    relative = normalize_request_path(request_path)

    root_abs = os.path.abspath(os.fspath(root))
    candidate = os.path.normpath(os.path.join(root_abs, relative)) if relative else root_abs

    prefix = root_abs if root_abs.endswith(os.sep) else root_abs + os.sep
    if candidate != root_abs and not candidate.startswith(prefix):
        logger.warning(f"Rejected path outside root: {request_path!r} -> {candidate}")
        raise AccessDeniedError(f"Access denied: {request_path}")

    return Path(candidate)


_VARIANT_RE = re.compile(r"[A-Za-z0-9_-]{1,64}")


def validate_variant_name(variant: str | None) -> str:
    """Return ``variant`` (empty when None) if it is safe to put in a file name.

    Raises:
        InvalidPathError: If the name contains anything outside
            ``[A-Za-z0-9_-]`` or is longer than 64 characters.
    """
    if not variant:
        return ""
    if not _VARIANT_RE.fullmatch(variant):
        raise InvalidPathError(f"Invalid variant name: {variant!r}")
    return variant
