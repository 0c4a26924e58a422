#nexus/core/auth_deps.py
from __future__ import annotations

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from nexus.core.errors import AuthenticationError
from nexus.core.security import read_access_token
from nexus.db.session import get_db
from nexus.models.enums import UserRole
from nexus.models.user import User
from nexus.policies.rbac import DenyReason, Principal

bearer = HTTPBearer(auto_error=False)


def principal_from_user(user: User) -> Principal:
    return Principal(
        id=user.id,
        role=UserRole(user.role),
        is_active=bool(user.is_active),
        full_name=user.full_name,
        email=user.email,
    )


def get_current_principal(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    db: Session = Depends(get_db),
) -> Principal:
    """
    Canonical authentication dependency.

    Guarantees:
    - bearer JWT is present, valid and unexpired
    - the subject still exists and is active
    - role/active flag come from the database, not from token claims
    """
    if creds is None or not creds.credentials:
        raise AuthenticationError("Not authorized to access this route")

    claims = read_access_token(creds.credentials)

    user = db.get(User, claims.user_id)
    if user is None:
        raise AuthenticationError("User not found or account is inactive")
    if not user.is_active:
        raise AuthenticationError(
            "User account is inactive", code=DenyReason.INACTIVE_ACCOUNT.value
        )

    return principal_from_user(user)
