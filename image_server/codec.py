"""Decode and encode rasters with Pillow."""

import io
import logging

from PIL import Image, UnidentifiedImageError

from .errors import CorruptDataError, EncodeFailureError, UnsupportedFormatError
from .formats import DECODE_FORMATS

logger = logging.getLogger(__name__)

ENCODE_FORMATS = {
    "png": "PNG",
    "jpg": "JPEG",
    "jpeg": "JPEG",
}

JPEG_QUALITY = 100


def decode(data: bytes, source_ext: str = "") -> Image.Image:
    """Decode image bytes into a fully loaded raster.

    Args:
        data: Raw file content.
        source_ext: Extension of the source file without the dot. An
            empty extension means the format is sniffed from the content,
            restricted to the decodable formats.

    Returns:
        Image.Image: The decoded raster.

    Raises:
        UnsupportedFormatError: If ``source_ext`` is not decodable.
        CorruptDataError: If the bytes cannot be decoded.
    """
    ext = source_ext.lower().lstrip(".")
    if ext:
        if ext not in DECODE_FORMATS:
            raise UnsupportedFormatError(f"Cannot decode format: {source_ext}")
        formats = [DECODE_FORMATS[ext]]
    else:
        formats = sorted(set(DECODE_FORMATS.values()))

    if not data:
        raise CorruptDataError("Image data is empty")

    try:
        img = Image.open(io.BytesIO(data), formats=formats)
        img.load()
    except Image.DecompressionBombError as e:
        logger.error(f"Refused oversized {ext or 'sniffed'} image: {e}")
        raise CorruptDataError(f"Error decoding image: {e}")
    except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as e:
        logger.error(f"Failed to decode {ext or 'sniffed'} image: {e}")
        raise CorruptDataError(f"Error decoding image: {e}")

    logger.debug(f"Decoded {img.format} image {img.size[0]}x{img.size[1]} mode={img.mode}")
    return img


def encode(img: Image.Image, target_format: str) -> bytes:
    """Encode a raster to ``target_format``.

    JPEG output is written at maximum quality and flattened to RGB when
    the raster carries transparency or a palette.

    Raises:
        UnsupportedFormatError: If the format cannot be encoded (webp
            is decode-only).
        EncodeFailureError: If Pillow fails to write the raster.
    """
    fmt = target_format.lower().lstrip(".")
    if fmt not in ENCODE_FORMATS:
        raise UnsupportedFormatError(f"Cannot encode format: {target_format}")

    pil_format = ENCODE_FORMATS[fmt]
    save_kwargs: dict = {}
    if pil_format == "JPEG":
        save_kwargs["quality"] = JPEG_QUALITY
        if img.mode not in ("RGB", "L", "CMYK"):
            img = img.convert("RGB")

    buffer = io.BytesIO()
    try:
        img.save(buffer, format=pil_format, **save_kwargs)
    except (OSError, ValueError, KeyError) as e:
        logger.error(f"Failed to encode image as {fmt}: {e}")
        raise EncodeFailureError(f"Error encoding {fmt.upper()}: {e}")

    return buffer.getvalue()
