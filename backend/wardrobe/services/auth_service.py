"""
Authentication service: password hashing and bearer token resolution.
"""
import logging
from typing import Optional
from uuid import UUID

from passlib.context import CryptContext
from sqlalchemy.orm import Session

from wardrobe.core.exceptions import AuthError
from wardrobe.models.user import User
from wardrobe.services.session_service import SessionStore

logger = logging.getLogger(__name__)

# Argon2id for new hashes; bcrypt hashes still verify and are upgraded on login
pwd_context = CryptContext(
    schemes=["argon2", "bcrypt"],
    deprecated="auto",
    argon2__memory_cost=64 * 1024,
    argon2__time_cost=3,
    argon2__parallelism=4,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def needs_rehash(hashed_password: str) -> bool:
    """True when the hash uses a deprecated scheme or outdated parameters."""
    return pwd_context.needs_update(hashed_password)


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    """
    Look up a user by username or email and check the password.

    Outdated hashes are replaced in the same session; the caller commits.

    Returns:
        The user, or None if the user does not exist or the password is wrong
    """
    user = db.query(User).filter(
        (User.username == username) | (User.email == username)
    ).first()

    if not user or not verify_password(password, user.password_hash):
        return None

    if needs_rehash(user.password_hash):
        logger.info(f"Upgrading password hash for {user.username}")
        user.password_hash = hash_password(password)

    return user


def resolve_token(token: Optional[str], db: Session, sessions: SessionStore) -> User:
    """
    Resolve a bearer token to the user it was issued for.

    Args:
        token: Raw bearer token (None when the header is missing)
        db: Database session
        sessions: Session store that issued the token

    Returns:
        Active user owning the token

    Raises:
        AuthError: missing_token, invalid_token or user_not_found
    """
    if not token:
        raise AuthError(
            "Authentication required: No token provided.",
            error_code="missing_token",
        )

    session_data = sessions.get_session(token)
    if not session_data:
        logger.info("Rejected unknown or expired bearer token")
        raise AuthError(
            "Authentication failed: Invalid token.",
            error_code="invalid_token",
        )

    user = db.query(User).filter(User.id == UUID(session_data["user_id"])).first()
    if not user or not user.is_active:
        # Token outlived its user
        sessions.delete_session(token)
        raise AuthError(
            "Authentication failed: User not found.",
            error_code="user_not_found",
        )

    return user
