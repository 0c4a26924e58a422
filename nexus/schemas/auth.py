from __future__ import annotations

from typing import Optional

from pydantic import Field

from nexus.models.enums import UserRole
from nexus.schemas.common import CamelModel

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$"
MIN_PASSWORD_LENGTH = 8


class LoginRequest(CamelModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1)


class RegisterRequest(CamelModel):
    full_name: str = Field(..., min_length=1, max_length=256)
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=320)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    role: Optional[UserRole] = None


class UpdateProfileRequest(CamelModel):
    full_name: str = Field(..., min_length=1, max_length=256)


class UpdatePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
