"""Authentication schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserRegister(BaseModel):
    """User signup request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=128)


class UserLogin(BaseModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class DevLogin(BaseModel):
    """Development login: find or create a user without a password."""

    email: EmailStr = Field(..., max_length=255)
    name: str | None = Field(None, max_length=255)
    is_admin: bool = False
    is_nutritionist: bool = False


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str | None
    is_admin: bool
    is_nutritionist: bool
    created_at: datetime


class AuthResponse(BaseModel):
    """Authentication response with session token and user info."""

    token: str
    token_type: str = "bearer"  # noqa: S105
    user: UserResponse


class UserRoleUpdate(BaseModel):
    """Admin role-flag update; omitted flags are left unchanged."""

    is_admin: bool | None = None
    is_nutritionist: bool | None = None
