"""
Shared FastAPI dependencies.
"""
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wardrobe.core.database import get_db
from wardrobe.core.exceptions import UnexpectedError
from wardrobe.models.user import User
from wardrobe.services.auth_service import resolve_token
from wardrobe.services.ingestion_service import IngestionService
from wardrobe.services.session_service import SessionStore, get_session_store
from wardrobe.services.storage_service import StorageService, get_storage_service
from wardrobe.services.vision_service import VisionAnalyzer, get_vision_analyzer
from wardrobe.services.wardrobe_repository import WardrobeRepository

logger = logging.getLogger(__name__)

# Missing or non-bearer headers are reported by get_current_user, not here
bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """Extract the raw bearer token, if any."""
    return credentials.credentials if credentials else None


def get_current_user(
    token: Optional[str] = Depends(get_bearer_token),
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store),
) -> User:
    """
    Resolve the bearer token to an active user.

    Raises:
        AuthError: 401 for missing/invalid tokens and unknown users
        UnexpectedError: 500 when the session store or database fails
    """
    try:
        return resolve_token(token, db, sessions)
    except (RedisError, SQLAlchemyError) as e:
        logger.error(f"Unexpected Authentication Error: {e}")
        raise UnexpectedError("An unexpected error occurred during authentication.")


def get_wardrobe_repository(db: Session = Depends(get_db)) -> WardrobeRepository:
    """Repository bound to the request's database session."""
    return WardrobeRepository(db)


def get_ingestion_service(
    storage: StorageService = Depends(get_storage_service),
    analyzer: VisionAnalyzer = Depends(get_vision_analyzer),
    repository: WardrobeRepository = Depends(get_wardrobe_repository),
) -> IngestionService:
    """Ingestion workflow wired to the configured collaborators."""
    return IngestionService(storage, analyzer, repository)
