"""Named variant transforms."""

import logging
from typing import Callable, Optional

from PIL import Image

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_SIZE = 256

# Bicubic in Pillow is the Catmull-Rom kernel.
RESAMPLE = Image.Resampling.BICUBIC


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def scaled_size(width: int, height: int, target: int) -> tuple[int, int]:
    """Fit ``width`` x ``height`` to a long edge of ``target``, keeping aspect.

    Both returned dimensions are at least 1.
    """
    if width <= 0 or height <= 0:
        return 1, 1
    if width >= height:
        return target, max(1, _round_half_up(height * target / width))
    return max(1, _round_half_up(width * target / height)), target


def preview(img: Image.Image, size: int = DEFAULT_PREVIEW_SIZE) -> Image.Image:
    """Resize so the long edge equals ``size``."""
    width, height = img.size
    new_size = scaled_size(width, height, size)
    if width <= 0 or height <= 0:
        return Image.new(img.mode, new_size)
    if new_size == img.size:
        return img
    # Pillow silently falls back to nearest-neighbour for these modes
    if img.mode in ("1", "P"):
        img = img.convert("RGBA" if "transparency" in img.info else "RGB")
    return img.resize(new_size, resample=RESAMPLE)


def identity(img: Image.Image, size: int = DEFAULT_PREVIEW_SIZE) -> Image.Image:
    return img


VARIANT_TRANSFORMS: dict[str, Callable[..., Image.Image]] = {
    "preview": preview,
}


def apply_variant(
    img: Image.Image,
    variant: Optional[str],
    preview_size: int = DEFAULT_PREVIEW_SIZE,
) -> Image.Image:
    """Apply the transform named ``variant`` to ``img``.

    Empty and unknown variant names leave the raster unchanged.
    """
    transform = VARIANT_TRANSFORMS.get(variant or "", identity)
    if transform is identity and variant:
        logger.debug(f"Unknown variant {variant!r}, serving source pixels")
    return transform(img, preview_size)
