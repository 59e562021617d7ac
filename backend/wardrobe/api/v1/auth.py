"""
Authentication API endpoints.

Login issues an opaque bearer token backed by a Redis session.
"""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from wardrobe.api.deps import get_bearer_token, get_current_user
from wardrobe.core.database import get_db
from wardrobe.models.user import User as UserModel
from wardrobe.schemas.user import User, UserCreate, UserLogin, UserLoginResponse
from wardrobe.services.auth_service import authenticate_user, hash_password
from wardrobe.services.session_service import SessionStore, get_session_store

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
def register(user_in: UserCreate, db: Session = Depends(get_db)):
    """
    Create a user account.

    - **email**: Unique email address
    - **username**: Unique username
    - **password**: At least 8 characters with upper, lower, digit and special
    """
    existing = db.query(UserModel).filter(
        (UserModel.username == user_in.username) |
        (UserModel.email == user_in.email)
    ).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username or email already registered"
        )

    user = UserModel(
        email=user_in.email,
        username=user_in.username,
        password_hash=hash_password(user_in.password),
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    return User.model_validate(user)


@router.post("/login", response_model=UserLoginResponse, status_code=status.HTTP_200_OK)
def login(
    credentials: UserLogin,
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store),
):
    """
    Authenticate user and issue a bearer token.

    - **username**: Username or email
    - **password**: User's password
    """
    user = authenticate_user(db, credentials.username, credentials.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive. Please contact administrator."
        )

    token = sessions.create_session(
        user.id,
        {"email": user.email, "username": user.username},
    )

    user.last_login = datetime.utcnow()
    db.commit()

    return UserLoginResponse(
        access_token=token,
        user=User.model_validate(user),
    )


@router.post("/logout", status_code=status.HTTP_200_OK)
def logout(
    current_user: UserModel = Depends(get_current_user),
    token: Optional[str] = Depends(get_bearer_token),
    sessions: SessionStore = Depends(get_session_store),
):
    """Revoke the bearer token used for this request."""
    sessions.delete_session(token)
    return {"message": "Logout successful"}


@router.get("/me", response_model=User)
def read_current_user(current_user: UserModel = Depends(get_current_user)):
    """Return the user the bearer token belongs to."""
    return User.model_validate(current_user)
