"""
Image handling for the ingestion pipeline.

- Upload validation and normalization (OpenCV)
- Dominant color assignment for detected garments
"""

from wardrobe.cv.image_processing import NormalizedImage, normalize_image, validate_upload
from wardrobe.cv.color_extractor import ColorExtractor, UNKNOWN_COLOR, format_rgb

__all__ = [
    "NormalizedImage",
    "normalize_image",
    "validate_upload",
    "ColorExtractor",
    "UNKNOWN_COLOR",
    "format_rgb",
]
