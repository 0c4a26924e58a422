# nexus/services/auth_service.py
from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from nexus.core.errors import AuthenticationError, NotFoundError, ValidationError
from nexus.core.security import create_access_token, hash_password, verify_password
from nexus.models.enums import UserRole
from nexus.models.user import User
from nexus.policies.rbac import DenyReason

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_by_email(db: Session, email: str) -> User | None:
    return db.execute(
        select(User).where(User.email == normalize_email(email))
    ).scalar_one_or_none()


def authenticate(db: Session, email: str, password: str) -> User:
    user = find_by_email(db, email)

    # same answer for unknown email and wrong password
    if not user or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid credentials.", code="invalid-credentials")

    if not user.is_active:
        raise AuthenticationError(
            "User account is inactive", code=DenyReason.INACTIVE_ACCOUNT.value
        )

    return user


def issue_token(user: User) -> str:
    return create_access_token(subject=str(user.id), claims={"role": user.role})


def register_user(
    db: Session,
    *,
    full_name: str,
    email: str,
    password: str,
    role: UserRole = UserRole.DEVELOPER,
) -> User:
    if find_by_email(db, email):
        raise ValidationError("User with this email already exists", code="email-taken")

    user = User(
        full_name=full_name.strip(),
        email=normalize_email(email),
        password_hash=hash_password(password),
        role=role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("user registered", extra={"user_id": str(user.id), "role": user.role})
    return user


def update_profile(db: Session, *, user_id: uuid.UUID, full_name: str) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User", str(user_id))

    user.full_name = full_name.strip()
    db.commit()
    db.refresh(user)
    return user


def change_password(
    db: Session, *, user_id: uuid.UUID, current_password: str, new_password: str
) -> None:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User", str(user_id))

    if not verify_password(current_password, user.password_hash):
        raise ValidationError("Current password is incorrect", code="invalid-current-password")

    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info("password changed", extra={"user_id": str(user.id)})
