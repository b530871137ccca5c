"""Cover image normalisation: fixed 1200x630 JPEG, cropped to fill."""

import io
from typing import Tuple

from PIL import Image, ImageOps

TARGET_SIZE: Tuple[int, int] = (1200, 630)
JPEG_QUALITY = 80


class ImageProcessingError(Exception):
    pass


def resize_to_cover(data: bytes, size: Tuple[int, int] = TARGET_SIZE, quality: int = JPEG_QUALITY) -> bytes:
    """
    Scale and centre-crop ``data`` so it exactly fills ``size``, then
    re-encode as JPEG. Raises ImageProcessingError for unreadable input.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img = ImageOps.exif_transpose(img)
            fitted = ImageOps.fit(img.convert("RGB"), size, Image.Resampling.LANCZOS)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageProcessingError(f"Cannot read source image: {e}") from e

    out = io.BytesIO()
    fitted.save(out, "JPEG", quality=quality, optimize=True)
    return out.getvalue()
