"""Image loading helpers for command-line parsing."""

from __future__ import annotations

import io
import logging
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

DEFAULT_MAX_WIDTH = 800
JPEG_QUALITY = 85


class UnsupportedImageError(RuntimeError):
    """Raised when a file cannot be decoded as an image."""


def load_receipt_image(path: Path, *, max_width: int = DEFAULT_MAX_WIDTH) -> bytes:
    """Read ``path``, shrink it to ``max_width`` pixels wide and re-encode as JPEG.

    Phone photos of receipts are far larger than a vision model needs; keeping
    them small shortens inference and keeps uploads under the size limit.
    """

    try:
        with Image.open(path) as opened:
            image = ImageOps.exif_transpose(opened)
            image.load()
    except UnidentifiedImageError as exc:
        raise UnsupportedImageError(f"{path.name} is not a supported image") from exc

    if image.width > max_width:
        height = int(image.height * max_width / image.width)
        logger.debug(
            "Resizing %s from %sx%s to %sx%s",
            path.name,
            image.width,
            image.height,
            max_width,
            height,
        )
        image = image.resize((max_width, height), Image.Resampling.BICUBIC)

    if image.mode != "RGB":
        image = image.convert("RGB")

    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=JPEG_QUALITY)
    return buffer.getvalue()


__all__ = ["DEFAULT_MAX_WIDTH", "UnsupportedImageError", "load_receipt_image"]
