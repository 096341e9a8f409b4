"""Variant resolution: decide what file answers an image request."""

import logging
import os
import threading
from pathlib import Path
from typing import Optional

from . import codec
from .errors import ImageNotFoundError, UnsupportedFormatError
from .formats import (
    CONVERTIBLE_FORMATS,
    content_type_for,
    extension_of,
    normalize_format,
    same_format,
)
from .paths import resolve_path, validate_variant_name
from .schemas import ResolvedImage, ResolverConfig
from .source import SourceLocator, source_base
from .storage import LocalVariantStore, VariantStore
from .transform import apply_variant

logger = logging.getLogger(__name__)

LOCK_STRIPES = 64


class VariantResolver:
    """Core entry point of the image server.

    Given a logical path, an optional variant name and an optional output
    format, the resolver either points at an existing file, points at a
    previously generated artifact, or generates the artifact from the
    source image and points at it.

    Generation of one artifact is serialized within the process through a
    fixed pool of striped locks; the existence check is repeated once the
    lock is held so concurrent requests decode the source only once.
    """

    def __init__(
        self,
        config: ResolverConfig,
        locator: Optional[SourceLocator] = None,
        store: Optional[VariantStore] = None,
        lock_stripes: int = LOCK_STRIPES,
    ):
        """Initialize the resolver.

        Args:
            config: Immutable resolver configuration.
            locator: Source locator; defaults to one over ``config.root``.
            store: Artifact store; defaults to :class:`LocalVariantStore`.
            lock_stripes: Number of generation locks.
        """
        self.config = config
        self.root = Path(os.path.abspath(os.fspath(config.root)))
        self.locator = locator or SourceLocator(self.root)
        self.store = store or LocalVariantStore()
        self._locks = tuple(threading.Lock() for _ in range(max(1, lock_stripes)))
        logger.info(f"Initialized VariantResolver with root: {self.root}")

    def _lock_for(self, path: Path) -> threading.Lock:
        return self._locks[hash(str(path)) % len(self._locks)]

    def resolve(
        self,
        request_path: str,
        variant: Optional[str] = None,
        fmt: Optional[str] = None,
    ) -> ResolvedImage:
        """Resolve an image request to a file on disk.

        Args:
            request_path: Logical image path, already percent-decoded.
            variant: Optional variant name; unknown names are identity.
            fmt: Optional output format; defaults to the extension of
                ``request_path``, or ``png`` when it has none.

        Returns:
            ResolvedImage: The file to stream and its content type.

        Raises:
            InvalidPathError: Malformed path or variant name.
            AccessDeniedError: Path escapes the root.
            UnsupportedFormatError: Requested format is not accepted,
                would need an encoder that does not exist (webp, gif,
                svg), or the source cannot be decoded in its format.
            ImageNotFoundError: No source file exists.
            CorruptDataError: Source bytes cannot be decoded.
            EncodeFailureError: Output cannot be encoded.
            StorageError: Reading the source or writing the artifact failed.
        """
        path = resolve_path(self.root, request_path)
        variant = validate_variant_name(variant)
        requested_fmt = normalize_format(fmt)

        if path == self.root:
            raise ImageNotFoundError("File not found")

        own_ext = extension_of(path.name)
        target = requested_fmt or own_ext or "png"
        content_type = content_type_for(target)

        if target not in CONVERTIBLE_FORMATS:
            # Non-convertible formats are only ever served as the file itself.
            if requested_fmt is not None and not same_format(requested_fmt, own_ext):
                raise UnsupportedFormatError(
                    f"Cannot convert {own_ext or 'image'} to {requested_fmt}"
                )
            if not self.locator.is_servable(path):
                raise ImageNotFoundError(f"File not found: {request_path}")
            logger.debug(f"Passing through {path} as {target}")
            return ResolvedImage(kind="direct", path=path, content_type=content_type)

        if (
            not variant
            and (requested_fmt is None or same_format(requested_fmt, own_ext))
            and self.locator.is_servable(path)
        ):
            return ResolvedImage(kind="direct", path=path, content_type=content_type)

        derived = self.store.derived_path(path, variant, target)
        if self.store.exists(derived):
            logger.debug(f"Serving cached artifact {derived}")
            return ResolvedImage(kind="generated", path=derived, content_type=content_type)

        with self._lock_for(derived):
            if self.store.exists(derived):
                return ResolvedImage(kind="generated", path=derived, content_type=content_type)
            self._generate(path, variant, target, derived)

        return ResolvedImage(
            kind="generated", path=derived, content_type=content_type, created=True
        )

    def _generate(self, path: Path, variant: str, target: str, derived: Path) -> None:
        source = self.locator.locate(source_base(path), requested=path)
        if source is None:
            raise ImageNotFoundError(f"File not found: {path.relative_to(self.root)}")

        try:
            data = self.store.read(source.path)
        except FileNotFoundError:
            raise ImageNotFoundError(f"File not found: {source.path.relative_to(self.root)}")

        img = codec.decode(data, source.extension)
        img = apply_variant(img, variant, self.config.preview_size)
        self.store.persist(derived, codec.encode(img, target))

        logger.info(
            f"Generated {derived.relative_to(self.root)} from "
            f"{source.path.relative_to(self.root)} ({img.size[0]}x{img.size[1]})"
        )
