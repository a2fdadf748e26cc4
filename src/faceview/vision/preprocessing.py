"""Image decoding and encoding.

Images travel through FaceView as HxWx3 RGB uint8 numpy arrays. OpenCV works
in BGR, so conversion happens here and nowhere else.
"""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)


def read_image_size(image_bytes: bytes) -> tuple[int, int]:
    """Return (width, height) from the image header without decoding pixels.

    Raises:
        ValueError: If the data is not a recognised image format.
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            return image.size
    except Image.DecompressionBombError as exc:
        raise ValueError(f"Image too large: {exc}") from None
    except UnidentifiedImageError:
        raise ValueError("Failed to decode image data") from None


def decode_image(image_bytes: bytes, max_pixels: int) -> NDArray[np.uint8]:
    """Decode raw image bytes into an RGB uint8 numpy array.

    The dimensions are read from the file header first, so oversized images
    are refused before any pixel buffer is allocated. EXIF orientation is
    applied by the decoder.

    Args:
        image_bytes: Raw file bytes (a format both Pillow and OpenCV read).
        max_pixels: Upper bound on width * height.

    Returns:
        HxWx3 RGB uint8 numpy array.

    Raises:
        ValueError: If the image cannot be decoded or exceeds size limits.
    """
    if not image_bytes:
        raise ValueError("Empty image data")

    width, height = read_image_size(image_bytes)
    if width * height > max_pixels:
        raise ValueError(f"Image too large: {width}x{height} exceeds {max_pixels} pixels")

    buffer = np.frombuffer(image_bytes, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError("Failed to decode image data")

    height, width = image.shape[:2]
    logger.debug("Decoded %dx%d image", width, height)
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def encode_png(pixels: NDArray[np.uint8]) -> bytes:
    """Encode an HxWx3 RGB uint8 array as PNG bytes."""
    ok, encoded = cv2.imencode(".png", cv2.cvtColor(pixels, cv2.COLOR_RGB2BGR))
    if not ok:
        raise ValueError("Failed to encode image as PNG")
    return encoded.tobytes()
