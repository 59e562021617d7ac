"""
Image validation, normalization and cropping.

All uploads are decoded with OpenCV, downscaled to a maximum width and
re-encoded as JPEG before they leave the process.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

from wardrobe.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

JPEG_SIGNATURE = b"\xff\xd8\xff"
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

SIGNATURES = {
    "image/jpeg": JPEG_SIGNATURE,
    "image/png": PNG_SIGNATURE,
}


@dataclass
class NormalizedImage:
    """Decoded upload ready for analysis."""
    pixels: np.ndarray  # BGR (H x W x 3)
    content: bytes      # JPEG encoding of ``pixels``
    width: int
    height: int
    content_type: str = "image/jpeg"


def validate_upload(
    data: bytes,
    content_type: Optional[str],
    max_size_bytes: int,
    allowed_types=("image/jpeg", "image/png"),
) -> None:
    """
    Reject anything that is not a JPEG/PNG payload within the size limit.

    Args:
        data: Raw upload bytes
        content_type: MIME type declared by the client
        max_size_bytes: Largest accepted payload
        allowed_types: Accepted MIME types

    Raises:
        ValidationError: If the payload is empty, too large, or not an allowed image
    """
    if not data:
        raise ValidationError("No photo uploaded or file validation failed.")

    if len(data) > max_size_bytes:
        raise ValidationError(
            f"File too large. Maximum size is {max_size_bytes // (1024 * 1024)} MB."
        )

    if content_type not in allowed_types:
        raise ValidationError("Invalid file type. Only JPEG and PNG are allowed.")

    if not data.startswith(SIGNATURES.get(content_type, b"\x00")):
        raise ValidationError("File content does not match its declared image type.")


def normalize_image(data: bytes, max_width: int = 800, jpeg_quality: int = 90) -> NormalizedImage:
    """
    Decode, downscale and re-encode an image as JPEG.

    Width is capped at ``max_width`` with the aspect ratio preserved.
    Smaller images are never upscaled.

    Args:
        data: Encoded JPEG/PNG bytes
        max_width: Maximum output width in pixels
        jpeg_quality: JPEG quality (0-100)

    Returns:
        NormalizedImage

    Raises:
        ValidationError: If the bytes cannot be decoded as an image
    """
    pixels = cv2.imdecode(np.frombuffer(data, np.uint8), cv2.IMREAD_COLOR)
    if pixels is None:
        raise ValidationError("Uploaded file could not be decoded as an image.")

    h, w = pixels.shape[:2]
    if w > max_width:
        new_h = max(1, round(h * max_width / w))
        pixels = cv2.resize(pixels, (max_width, new_h), interpolation=cv2.INTER_AREA)
        logger.debug(f"Resized image {w}x{h} -> {max_width}x{new_h}")

    content = encode_jpeg(pixels, jpeg_quality)
    h, w = pixels.shape[:2]

    return NormalizedImage(pixels=pixels, content=content, width=w, height=h)


def encode_jpeg(pixels: np.ndarray, jpeg_quality: int = 90) -> bytes:
    """Encode a BGR array as JPEG bytes."""
    ok, buffer = cv2.imencode(".jpg", pixels, [cv2.IMWRITE_JPEG_QUALITY, jpeg_quality])
    if not ok:
        raise ValueError("JPEG encoding failed")
    return buffer.tobytes()


def crop_normalized(pixels: np.ndarray, x_min: float, y_min: float, x_max: float, y_max: float) -> np.ndarray:
    """
    Crop a region given in normalized [0, 1] coordinates.

    Raises:
        ValueError: If the clipped region is empty
    """
    h, w = pixels.shape[:2]

    left = int(np.clip(x_min, 0.0, 1.0) * w)
    top = int(np.clip(y_min, 0.0, 1.0) * h)
    right = int(np.ceil(np.clip(x_max, 0.0, 1.0) * w))
    bottom = int(np.ceil(np.clip(y_max, 0.0, 1.0) * h))

    if right <= left or bottom <= top:
        raise ValueError(f"Empty crop region: ({x_min}, {y_min}, {x_max}, {y_max})")

    return pixels[top:bottom, left:right]
