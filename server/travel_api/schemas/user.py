"""User and authentication schemas."""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from ..models.user import UserRole
from .common import CamelModel, Pagination


class SignupRequest(CamelModel):
    """Request schema for password signup."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class User(CamelModel):
    """User response schema; never includes the password hash."""

    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: UserRole
    is_email_verified: bool
    preferred_language: str
    created_at: datetime


class AuthResponse(CamelModel):
    """Signed-in user plus a bearer token for API clients."""

    user: User
    token: str


class TokenResponse(CamelModel):
    token: str
    expires_in: int = Field(..., description="Token lifetime in seconds")


class VerifyTokenResponse(CamelModel):
    valid: bool
    user: Optional[User] = None


class UpdateRoleRequest(CamelModel):
    role: UserRole


class UserQuery(Pagination):
    role: Optional[UserRole] = None
    search: Optional[str] = Field(None, min_length=1, description="Matches email or name")
