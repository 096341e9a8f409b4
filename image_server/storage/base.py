"""Variant store interface for derived artifact persistence."""

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class VariantStore(Protocol):
    """Interface for derived artifact storage.

    A derived artifact caches the result of applying a variant and an
    output format to a source image. Artifacts are addressed purely by
    name: ``<source-without-ext>.<variant>.<format>``. They are never
    invalidated or deleted by the store.
    """

    def derived_path(self, source_path: Path, variant: str, fmt: str) -> Path:
        """Compute the artifact path for a (source, variant, format) triple.

        Args:
            source_path: Absolute path of the requested image.
            variant: Variant name, empty for a plain format conversion.
            fmt: Output format extension.

        Returns:
            Path: Deterministic artifact path next to the source.

        Raises:
            InvalidPathError: If the variant or format cannot be part of
                a file name.
        """
        ...

    def exists(self, path: Path) -> bool:
        """Check whether an artifact has already been generated.

        Args:
            path: Artifact path from :meth:`derived_path`.

        Returns:
            bool: True if a regular file exists at ``path``.
        """
        ...

    def read(self, path: Path) -> bytes:
        """Read a file's content.

        Raises:
            StorageError: If the file cannot be read.
            FileNotFoundError: If the file does not exist.
        """
        ...

    def persist(self, path: Path, content: bytes) -> None:
        """Write an artifact, replacing any previous one.

        Args:
            path: Artifact path from :meth:`derived_path`.
            content: Encoded image bytes.

        Raises:
            StorageError: If the artifact cannot be written.
        """
        ...
