"""Locate the on-disk source file for a logical image."""

import logging
import os
from pathlib import Path
from typing import Callable, Iterable, Optional

from .formats import ACCEPTED_FORMATS, extension_of
from .schemas import LocatedSource

logger = logging.getLogger(__name__)

# Candidate suffixes tried after the base path, in this exact order.
SOURCE_EXTENSION_ORDER: tuple[str, ...] = ("", ".png", ".jpg", ".webp", ".jpeg")


def contains_dot_file(relative: str | Path) -> bool:
    """True when any component of ``relative`` starts with a dot."""
    return any(part.startswith(".") for part in Path(relative).parts)


class SourceLocator:
    """Finds the canonical source file for a logical image path.

    The existence check is injectable so the search order can be tested
    without a filesystem.
    """

    def __init__(
        self,
        root: str | Path,
        is_file: Optional[Callable[[Path], bool]] = None,
        extension_order: Iterable[str] = SOURCE_EXTENSION_ORDER,
    ):
        self.root = Path(os.path.abspath(os.fspath(root)))
        self._is_file = is_file or (lambda p: p.is_file())
        self.extension_order = tuple(extension_order)

    def is_servable(self, path: Path) -> bool:
        """True for a regular file below the root with no hidden component."""
        try:
            relative = path.relative_to(self.root)
        except ValueError:
            return False
        if contains_dot_file(relative):
            return False
        try:
            return self._is_file(path)
        except OSError as e:
            logger.warning(f"Cannot stat {path}: {e}")
            return False

    def candidates(self, base: Path, requested: Optional[Path] = None) -> list[Path]:
        """Paths tried by :meth:`locate`, in order."""
        paths = []
        if requested is not None and requested != base:
            paths.append(requested)
        paths.extend(Path(f"{base}{ext}") for ext in self.extension_order)
        return paths

    def locate(self, base: Path, requested: Optional[Path] = None) -> Optional[LocatedSource]:
        """Find the first servable candidate for ``base``.

        Args:
            base: Absolute path of the image without its extension.
            requested: The exact path the caller asked for, tried first
                when it differs from ``base``.

        Returns:
            Optional[LocatedSource]: The winning file, or None when no
            candidate exists.
        """
        for candidate in self.candidates(base, requested):
            if self.is_servable(candidate):
                logger.debug(f"Located source for {base}: {candidate}")
                return LocatedSource(path=candidate, extension=extension_of(candidate.name))
        logger.debug(f"No source found for {base}")
        return None


def source_base(path: Path) -> Path:
    """Strip a known image extension from ``path``.

    Unknown suffixes are part of the name: ``photo.2024`` is its own base.
    """
    ext = extension_of(path.name)
    if ext in ACCEPTED_FORMATS:
        return path.with_name(path.name[: -(len(ext) + 1)])
    return path
