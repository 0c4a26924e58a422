from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import Field

from nexus.models.enums import UserRole
from nexus.models.user import User
from nexus.schemas.common import CamelModel, _iso


class UserUpdateRequest(CamelModel):
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=256)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


def user_summary(u: Optional[User]) -> Optional[Dict[str, Any]]:
    if u is None:
        return None
    return {"id": str(u.id), "fullName": u.full_name, "email": u.email, "role": u.role}


def user_resp(u: User) -> Dict[str, Any]:
    return {
        "id": str(u.id),
        "fullName": u.full_name,
        "email": u.email,
        "role": u.role,
        "isActive": bool(u.is_active),
        "mfaEnabled": bool(u.mfa_enabled),
        "createdAt": _iso(u.created_at),
        "updatedAt": _iso(u.updated_at),
    }
