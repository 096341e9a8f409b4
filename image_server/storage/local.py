"""Local filesystem implementation of VariantStore."""
import logging
import os
import tempfile
from pathlib import Path

from image_server.errors import InvalidPathError, StorageError
from image_server.formats import ACCEPTED_FORMATS
from image_server.paths import validate_variant_name

from .base import VariantStore

logger = logging.getLogger(__name__)


class LocalVariantStore(VariantStore):
    """Local filesystem variant store.

    Artifacts are written next to their source image. Writes go to a
    hidden temporary file in the target directory which is then renamed
    over the artifact path, so a concurrent reader sees either the old
    file, no file, or the complete new file.
    """

    def derived_path(self, source_path: Path, variant: str, fmt: str) -> Path:
        """Compute ``<source-name>.<variant>.<format>``.

        The requested name is kept whole: ``avatars/u1`` gives
        ``u1.preview.png`` while ``avatars/u1.webp`` gives
        ``u1.webp.preview.png``, so ``u1.png`` and ``u1.webp`` never share
        an artifact. Variant and format contain no dots, which makes the
        name reversible. An empty variant yields ``<name>..<format>``,
        which cannot clash with a named variant or with any source
        candidate name.
        """
        variant = validate_variant_name(variant)
        fmt = fmt.lower()
        if fmt not in ACCEPTED_FORMATS:
            raise InvalidPathError(f"Invalid artifact format: {fmt!r}")
        if not source_path.name:
            raise InvalidPathError(f"Cannot derive an artifact for {source_path}")

        return source_path.with_name(f"{source_path.name}.{variant}.{fmt}")

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def read(self, path: Path) -> bytes:
        """Read file content from local filesystem.

        Args:
            path: Absolute path of the file.

        Returns:
            bytes: Raw file content.

        Raises:
            StorageError: If the file cannot be read.
            FileNotFoundError: If the file does not exist.
        """
        if not path.exists():
            logger.warning(f"File not found: {path}")
            raise FileNotFoundError(f"File not found: {path}")

        try:
            content = path.read_bytes()
            logger.debug(f"Read {len(content)} bytes from: {path}")
            return content
        except OSError as e:
            logger.error(f"Failed to read {path}: {e}")
            raise StorageError(f"Failed to read image: {e}")

    def persist(self, path: Path, content: bytes) -> None:
        """Atomically write an artifact, creating parent directories.

        Raises:
            ValueError: If ``content`` is empty.
            StorageError: If the artifact cannot be written.
        """
        if not content:
            raise ValueError("Artifact content cannot be empty")

        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "wb") as fh:
                fh.write(content)
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, path)
            logger.debug(f"Saved artifact to: {path}")
        except OSError as e:
            logger.error(f"Failed to save artifact {path}: {e}")
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Failed to save image: {e}")
