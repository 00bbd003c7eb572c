"""Login background optimization."""
from __future__ import annotations

import io
import logging
import tempfile

from PIL import Image as PILImage, ImageOps, UnidentifiedImageError

from theming.errors import UnsupportedImageError

logger = logging.getLogger("theming.images")

MAX_BACKGROUND_WIDTH = 1920
BACKGROUND_JPEG_QUALITY = 75
BACKGROUND_PROGRESSIVE = True
BACKGROUND_MIME = "image/jpeg"


def process_background_image(data: bytes) -> bytes:
    """
    Re-encode an uploaded background as a progressive JPEG.

    Images wider than MAX_BACKGROUND_WIDTH are scaled down proportionally.
    Raises UnsupportedImageError when the bytes are not a decodable image.
    """
    try:
        with PILImage.open(io.BytesIO(data)) as img:
            img.load()
            img = ImageOps.exif_transpose(img)
    except (UnidentifiedImageError, PILImage.DecompressionBombError, OSError, EOFError, ValueError) as e:
        raise UnsupportedImageError("Unsupported image type") from e

    width, height = img.size
    if width > MAX_BACKGROUND_WIDTH:
        new_height = max(1, round(height * MAX_BACKGROUND_WIDTH / width))
        img = img.resize((MAX_BACKGROUND_WIDTH, new_height), PILImage.Resampling.LANCZOS)
        logger.debug("Scaled background from %dx%d to %dx%d", width, height, MAX_BACKGROUND_WIDTH, new_height)
    if img.mode not in ("RGB", "L"):
        img = img.convert("RGB")

    with tempfile.TemporaryFile(suffix=".jpg") as tmp:
        img.save(
            tmp,
            format="JPEG",
            quality=BACKGROUND_JPEG_QUALITY,
            progressive=BACKGROUND_PROGRESSIVE,
            optimize=True,
        )
        tmp.seek(0)
        return tmp.read()
