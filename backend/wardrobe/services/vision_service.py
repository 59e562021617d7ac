"""
Google Cloud Vision client wrapper.

Exposes the two capabilities the ingestion pipeline consumes:
- Object localization (label, confidence, normalized bounding box)
- Dominant colors (RGB, score), strongest first
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import vision

from wardrobe.core.config import settings
from wardrobe.core.exceptions import AnalysisError

logger = logging.getLogger(__name__)

VISION_ERRORS = (GoogleAPIError, GoogleAuthError)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box in normalized [0, 1] image coordinates."""
    x_min: float
    y_min: float
    x_max: float
    y_max: float


@dataclass(frozen=True)
class DetectedObject:
    """Single object found by the provider."""
    label: str
    confidence: float
    bounding_box: Optional[BoundingBox] = None


@dataclass(frozen=True)
class DominantColor:
    """Dominant color swatch reported by the provider."""
    rgb: Tuple[int, int, int]
    score: float
    pixel_fraction: float = 0.0


def _bounding_box(annotation) -> Optional[BoundingBox]:
    vertices = list(annotation.bounding_poly.normalized_vertices)
    if not vertices:
        return None

    xs = [v.x for v in vertices]
    ys = [v.y for v in vertices]
    return BoundingBox(min(xs), min(ys), max(xs), max(ys))


class VisionAnalyzer:
    """Analysis provider backed by the Cloud Vision ImageAnnotator API."""

    def __init__(self, client: Optional[vision.ImageAnnotatorClient] = None):
        self._client = client

    @property
    def client(self) -> vision.ImageAnnotatorClient:
        """Create the API client on first use (credentials are resolved here)."""
        if self._client is None:
            try:
                self._client = vision.ImageAnnotatorClient()
            except VISION_ERRORS as e:
                logger.error(f"❌ Failed to create Vision client: {e}")
                raise AnalysisError(f"Vision client initialization failed: {e}")
        return self._client

    def detect_objects(self, content: bytes, timeout: Optional[float] = None) -> List[DetectedObject]:
        """
        Run object localization on an encoded image.

        Args:
            content: Encoded image bytes
            timeout: Seconds to wait for the provider (default from settings)

        Returns:
            Detected objects in provider order

        Raises:
            AnalysisError: If the call fails or the provider reports an error
        """
        timeout = settings.VISION_TIMEOUT_SECONDS if timeout is None else timeout

        try:
            response = self.client.object_localization(
                image=vision.Image(content=content),
                retry=None,
                timeout=timeout,
            )
        except VISION_ERRORS as e:
            logger.error(f"Vision API (Object Localization) Error: {e}")
            raise AnalysisError(f"Object detection failed: {e}")

        if response.error.message:
            logger.error(f"Vision API (Object Localization) Error: {response.error.message}")
            raise AnalysisError(f"Object detection failed: {response.error.message}")

        objects = [
            DetectedObject(
                label=annotation.name,
                confidence=annotation.score,
                bounding_box=_bounding_box(annotation),
            )
            for annotation in response.localized_object_annotations
        ]

        logger.debug(f"Object localization returned {len(objects)} objects")
        return objects

    def dominant_colors(self, content: bytes, timeout: Optional[float] = None) -> List[DominantColor]:
        """
        Run image properties analysis on an encoded image.

        Args:
            content: Encoded image bytes
            timeout: Seconds to wait for the provider (default from settings)

        Returns:
            Dominant colors ordered by descending score

        Raises:
            AnalysisError: If the call fails or the provider reports an error
        """
        timeout = settings.VISION_TIMEOUT_SECONDS if timeout is None else timeout

        try:
            response = self.client.image_properties(
                image=vision.Image(content=content),
                retry=None,
                timeout=timeout,
            )
        except VISION_ERRORS as e:
            logger.error(f"Vision API (Color Detection) Error: {e}")
            raise AnalysisError(f"Color detection failed: {e}")

        if response.error.message:
            logger.error(f"Vision API (Color Detection) Error: {response.error.message}")
            raise AnalysisError(f"Color detection failed: {response.error.message}")

        colors = [
            DominantColor(
                rgb=(int(c.color.red), int(c.color.green), int(c.color.blue)),
                score=c.score,
                pixel_fraction=c.pixel_fraction,
            )
            for c in response.image_properties_annotation.dominant_colors.colors
        ]
        colors.sort(key=lambda c: c.score, reverse=True)
        return colors


_vision_analyzer: Optional[VisionAnalyzer] = None


def get_vision_analyzer() -> VisionAnalyzer:
    """Get singleton Vision analyzer instance."""
    global _vision_analyzer

    if _vision_analyzer is None:
        _vision_analyzer = VisionAnalyzer()

    return _vision_analyzer
