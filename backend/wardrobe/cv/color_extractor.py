"""
Color Extraction Module

Assigns a dominant color to each detected garment using the analysis
provider's color-properties capability.

Two modes:
- ``whole_image`` (default): one provider call for the whole normalized
  image; every garment of the upload gets the same color.
- ``per_item``: each garment's bounding box is cropped and analysed on its own.

Extraction never fails the upload. Any error degrades to ``"unknown"``.
"""
import logging
from typing import Callable, List, Optional, Sequence, Tuple

from wardrobe.core.exceptions import AnalysisError
from wardrobe.cv.image_processing import NormalizedImage, crop_normalized, encode_jpeg
from wardrobe.services.vision_service import DetectedObject, VisionAnalyzer

logger = logging.getLogger(__name__)

UNKNOWN_COLOR = "unknown"

WHOLE_IMAGE = "whole_image"
PER_ITEM = "per_item"
COLOR_MODES = (WHOLE_IMAGE, PER_ITEM)


def format_rgb(rgb: Tuple[int, int, int]) -> str:
    """Render an RGB triple as ``rgb(R, G, B)``."""
    red, green, blue = rgb
    return f"rgb({red}, {green}, {blue})"


class ColorExtractor:
    """Dominant color lookup with graceful degradation."""

    def __init__(
        self,
        analyzer: VisionAnalyzer,
        mode: str = WHOLE_IMAGE,
        timeout: Optional[Callable[[], float]] = None,
    ):
        """
        Args:
            analyzer: Provider exposing ``dominant_colors``
            mode: ``whole_image`` or ``per_item``
            timeout: Callable returning the timeout for the next provider call
        """
        if mode not in COLOR_MODES:
            raise ValueError(f"Unknown color mode: {mode!r} (expected one of {COLOR_MODES})")

        self.analyzer = analyzer
        self.mode = mode
        self._timeout = timeout

    def extract(self, image: NormalizedImage, detections: Sequence[DetectedObject]) -> List[str]:
        """
        Return one color string per detection, in detection order.

        Args:
            image: Normalized upload
            detections: Garments to color

        Returns:
            List of ``rgb(...)`` strings or ``"unknown"``
        """
        if self.mode == WHOLE_IMAGE:
            color = self._dominant_color(image.content)
            return [color] * len(detections)

        return [self._item_color(image, detection) for detection in detections]

    def _item_color(self, image: NormalizedImage, detection: DetectedObject) -> str:
        box = detection.bounding_box
        if box is None:
            logger.warning(f"No bounding box for '{detection.label}', using whole image")
            return self._dominant_color(image.content)

        try:
            region = crop_normalized(image.pixels, box.x_min, box.y_min, box.x_max, box.y_max)
            content = encode_jpeg(region)
        except ValueError as e:
            logger.warning(f"Could not crop '{detection.label}': {e}")
            return UNKNOWN_COLOR

        return self._dominant_color(content)

    def _dominant_color(self, content: bytes) -> str:
        timeout = self._current_timeout()
        if timeout is not None and timeout <= 0:
            logger.warning("Skipping color detection: request deadline exhausted")
            return UNKNOWN_COLOR

        try:
            colors = self.analyzer.dominant_colors(content, timeout=timeout)
        except AnalysisError as e:
            # Color is best-effort
            logger.warning(f"Color detection failed, using '{UNKNOWN_COLOR}': {e}")
            return UNKNOWN_COLOR

        if not colors:
            return UNKNOWN_COLOR

        return format_rgb(colors[0].rgb)

    def _current_timeout(self) -> Optional[float]:
        return self._timeout() if self._timeout else None
