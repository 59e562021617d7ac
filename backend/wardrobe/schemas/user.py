"""
Account schemas: registration, login and the public user view.
"""
import re
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

# (pattern, requirement) pairs checked in order at registration
PASSWORD_RULES = [
    (r"[A-Z]", "an uppercase letter"),
    (r"[a-z]", "a lowercase letter"),
    (r"\d", "a digit"),
    (r"[!@#$%^&*(),.?\":{}|<>]", "a special character"),
]


class UserBase(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=100)


class UserCreate(UserBase):
    """Registration payload."""
    password: str = Field(..., min_length=8, max_length=128, description="At least 8 characters")

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, value: str) -> str:
        missing = [label for pattern, label in PASSWORD_RULES if not re.search(pattern, value)]
        if missing:
            raise ValueError(f"Password must contain {', '.join(missing)}")
        return value


class User(UserBase):
    """Account as shown to its owner. Never includes the password hash."""
    id: UUID
    is_active: bool
    created_at: datetime
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserLogin(BaseModel):
    """Login payload. ``username`` also accepts the account email."""
    username: str
    password: str


class UserLoginResponse(BaseModel):
    """Bearer token issued at login."""
    access_token: str
    token_type: str = "bearer"
    user: User
    message: str = "Login successful"
