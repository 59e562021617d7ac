"""
Photo ingestion workflow.

Runs one upload through:
1. Validation and normalization (no external calls)
2. Staging the normalized JPEG in object storage
3. Object detection and clothing filtering
4. Dominant color extraction (best-effort)
5. Batch insert of wardrobe items
6. Removal of the staged image

Steps that allocate an external resource register a compensating action on
an ``ExitStack``. The stack unwinds once the outcome is known, whether the
request succeeded, found nothing, or failed, and a failing compensation is
logged without replacing the outcome.
"""
import logging
import uuid
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import List, Optional, Sequence
from uuid import UUID

from wardrobe.core.config import settings
from wardrobe.core.deadline import Deadline
from wardrobe.core.exceptions import AnalysisError, PersistenceError, StorageError
from wardrobe.cv.color_extractor import ColorExtractor
from wardrobe.cv.image_processing import NormalizedImage, normalize_image, validate_upload
from wardrobe.models import WardrobeItem
from wardrobe.services.storage_service import StorageService
from wardrobe.services.vision_service import DetectedObject, VisionAnalyzer
from wardrobe.services.wardrobe_repository import WardrobeItemDraft, WardrobeRepository

logger = logging.getLogger(__name__)

NO_OBJECTS_MESSAGE = "Analysis complete: No objects detected in the photo."
NO_CLOTHING_MESSAGE = "Analysis complete: No clothing items detected in the photo."
SUCCESS_MESSAGE = "Photo processed, clothing saved, and photo deleted successfully."


@dataclass
class SubmitResult:
    """Outcome of a successful submission (``items`` may be empty)."""
    message: str
    items: List[WardrobeItem] = field(default_factory=list)


def staging_key(owner_id: UUID) -> str:
    """Object key for a transient image, unique per request."""
    return f"{owner_id}/{uuid.uuid4()}.jpg"


def filter_clothing(objects: Sequence[DetectedObject], keywords: Sequence[str]) -> List[DetectedObject]:
    """Keep detections whose label contains a clothing keyword (case-insensitive)."""
    keywords = [kw.lower() for kw in keywords]
    return [
        obj for obj in objects
        if any(kw in obj.label.lower() for kw in keywords)
    ]


class IngestionService:
    """Orchestrates storage, analysis and persistence for one photo upload."""

    def __init__(
        self,
        storage: StorageService,
        analyzer: VisionAnalyzer,
        repository: WardrobeRepository,
        clothing_keywords: Optional[Sequence[str]] = None,
        color_mode: Optional[str] = None,
        deadline_seconds: Optional[float] = None,
    ):
        """
        Args:
            storage: Transient image store
            analyzer: Object detection and color provider
            repository: Wardrobe item persistence
            clothing_keywords: Label substrings that denote a garment
            color_mode: ``whole_image`` or ``per_item``
            deadline_seconds: Budget for all remote calls of one submission
        """
        self.storage = storage
        self.analyzer = analyzer
        self.repository = repository
        self.clothing_keywords = list(
            settings.CLOTHING_KEYWORDS if clothing_keywords is None else clothing_keywords
        )
        self.color_mode = settings.COLOR_MODE if color_mode is None else color_mode
        self.deadline_seconds = (
            settings.REQUEST_DEADLINE_SECONDS if deadline_seconds is None else deadline_seconds
        )

    def submit(self, data: bytes, content_type: Optional[str], owner_id: UUID) -> SubmitResult:
        """
        Analyze a photo and store the garments found in it.

        Args:
            data: Raw upload bytes
            content_type: MIME type declared by the client
            owner_id: Authenticated owner of the new items

        Returns:
            SubmitResult with the inserted items, or an empty list when
            nothing (or nothing wearable) was detected

        Raises:
            ValidationError: Bad upload, no external call was made
            StorageError: Staging failed, no analysis was attempted
            AnalysisError: Object detection failed
            PersistenceError: Saving the items failed
        """
        validate_upload(
            data,
            content_type,
            max_size_bytes=settings.MAX_UPLOAD_SIZE_BYTES,
            allowed_types=settings.ALLOWED_IMAGE_TYPES,
        )
        image = normalize_image(
            data,
            max_width=settings.MAX_IMAGE_WIDTH,
            jpeg_quality=settings.JPEG_QUALITY,
        )

        deadline = Deadline(self.deadline_seconds)

        with ExitStack() as compensations:
            object_key = self._stage(image, owner_id, deadline)
            compensations.callback(self._remove_staged, object_key, deadline)

            deadline.check("object detection", AnalysisError)
            objects = self.analyzer.detect_objects(
                image.content,
                timeout=deadline.timeout_for(settings.VISION_TIMEOUT_SECONDS),
            )
            if not objects:
                logger.info(f"No objects detected in {object_key}")
                return SubmitResult(message=NO_OBJECTS_MESSAGE)

            clothing = filter_clothing(objects, self.clothing_keywords)
            if not clothing:
                labels = ", ".join(obj.label for obj in objects)
                logger.info(f"No clothing among {len(objects)} detections in {object_key} ({labels})")
                return SubmitResult(message=NO_CLOTHING_MESSAGE)

            extractor = ColorExtractor(
                self.analyzer,
                mode=self.color_mode,
                timeout=lambda: deadline.timeout_for(settings.VISION_TIMEOUT_SECONDS),
            )
            colors = extractor.extract(image, clothing)

            deadline.check("saving wardrobe items", PersistenceError)
            items = self.repository.insert_items(
                owner_id,
                [
                    WardrobeItemDraft(category=obj.label, color=color)
                    for obj, color in zip(clothing, colors)
                ],
                timeout=deadline.timeout_for(settings.DB_STATEMENT_TIMEOUT_MS / 1000),
            )

            logger.info(f"Stored {len(items)} clothing items for owner {owner_id}")
            return SubmitResult(message=SUCCESS_MESSAGE, items=items)

    def _stage(self, image: NormalizedImage, owner_id: UUID, deadline: Deadline) -> str:
        deadline.check("staging the photo", StorageError)

        object_key = staging_key(owner_id)
        self.storage.put_object(
            object_key,
            image.content,
            content_type=image.content_type,
            timeout=deadline.timeout_for(settings.STORAGE_TIMEOUT_SECONDS),
        )
        return object_key

    def _remove_staged(self, object_key: str, deadline: Deadline) -> None:
        timeout = min(
            settings.STORAGE_TIMEOUT_SECONDS,
            max(deadline.remaining(), settings.STORAGE_CLEANUP_GRACE_SECONDS),
        )
        try:
            self.storage.delete_file(object_key, timeout=timeout)
        except StorageError as e:
            # Never replaces the request outcome
            logger.error(f"Storage deletion error for {object_key}: {e}")
