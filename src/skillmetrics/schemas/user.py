"""User, authentication and profile Pydantic schemas."""

from datetime import datetime
from typing import ClassVar

from pydantic import EmailStr, Field, StrictBool

from skillmetrics.schemas.base import CamelModel, UpdateModel


class RegisterRequest(CamelModel):
    """Schema for email-only registration; the password is generated server-side."""

    email: EmailStr


class LoginRequest(CamelModel):
    """Schema for login credentials."""

    email: EmailStr
    password: str = Field(min_length=1)


class ChangePasswordRequest(CamelModel):
    """Schema for changing the current user's password."""

    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)


class User(CamelModel):
    """Complete user schema (without the password hash)."""

    id: int
    email: str
    username: str
    is_admin: bool
    first_name: str | None = None
    last_name: str | None = None
    project: str | None = None
    role: str | None = None
    location: str | None = None
    created_at: datetime


class ProfileUpdate(UpdateModel):
    """Fields a user may change on their own profile."""

    non_nullable_fields: ClassVar[tuple[str, ...]] = ("username",)

    username: str | None = Field(default=None, min_length=1)
    first_name: str | None = None
    last_name: str | None = None
    project: str | None = None
    role: str | None = None
    location: str | None = None


class AdminFlagUpdate(CamelModel):
    """Schema for granting or revoking admin rights."""

    is_admin: StrictBool


class ProfileHistory(CamelModel):
    """One recorded profile field change."""

    id: int
    user_id: int
    changed_field: str
    previous_value: str | None
    new_value: str
    created_at: datetime
