"""
Wardrobe API endpoints.

- POST /upload-photo - Analyze a clothing photo and store detected garments
- GET /wardrobe - List the caller's garments with optional filters
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from wardrobe.api.deps import get_current_user, get_ingestion_service, get_wardrobe_repository
from wardrobe.core.config import settings
from wardrobe.core.exceptions import ValidationError
from wardrobe.models.user import User
from wardrobe.schemas import ErrorResponse, UploadPhotoResponse, WardrobeItem
from wardrobe.services.ingestion_service import IngestionService
from wardrobe.services.wardrobe_repository import WardrobeRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["wardrobe"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post(
    "/upload-photo",
    response_model=UploadPhotoResponse,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
    summary="Upload and analyze a clothing photo",
    description="""
    Accepts a JPEG or PNG photo (max 5 MB) in the multipart field `photo`.

    The photo is resized to a maximum width of 800px, staged in object
    storage, analyzed for clothing and dominant color, and removed again.
    Detected garments are saved to the caller's wardrobe.

    An empty `items` list means no objects, or no clothing, was detected.
    """,
)
def upload_photo(
    photo: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    ingestion: IngestionService = Depends(get_ingestion_service),
) -> UploadPhotoResponse:
    """Analyze an uploaded photo and store the clothing found in it."""
    if photo is None:
        raise ValidationError("No photo uploaded or file validation failed.")

    # One byte past the limit is enough to reject oversized uploads
    data = photo.file.read(settings.MAX_UPLOAD_SIZE_BYTES + 1)

    result = ingestion.submit(data, photo.content_type, current_user.id)

    return UploadPhotoResponse(
        message=result.message,
        items=[WardrobeItem.model_validate(item) for item in result.items],
    )


@router.get(
    "/wardrobe",
    response_model=List[WardrobeItem],
    responses=ERROR_RESPONSES,
    summary="List wardrobe items",
)
def list_wardrobe(
    item_type: Optional[str] = Query(None, alias="type", description="Case-insensitive category substring"),
    color: Optional[str] = Query(None, description="Exact color, e.g. rgb(48, 79, 122)"),
    current_user: User = Depends(get_current_user),
    repository: WardrobeRepository = Depends(get_wardrobe_repository),
) -> List[WardrobeItem]:
    """Return the caller's items, optionally filtered by type and color."""
    items = repository.query(current_user.id, category=item_type, color=color)
    return [WardrobeItem.model_validate(item) for item in items]
