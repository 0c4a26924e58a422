# nexus/services/users_service.py
from __future__ import annotations

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from nexus.core.errors import NotFoundError
from nexus.models.enums import UserRole
from nexus.models.user import User

logger = logging.getLogger(__name__)


class UsersService:
    def get(self, db: Session, *, user_id: uuid.UUID) -> User:
        user = db.get(User, user_id)
        if not user:
            raise NotFoundError("User", str(user_id))
        return user

    def list_active(self, db: Session) -> List[User]:
        stmt = select(User).where(User.is_active.is_(True)).order_by(User.created_at)
        return list(db.execute(stmt).scalars().all())

    def update(
        self,
        db: Session,
        *,
        user_id: uuid.UUID,
        full_name: Optional[str],
        role: Optional[UserRole],
        is_active: Optional[bool],
    ) -> User:
        user = self.get(db, user_id=user_id)

        if full_name:
            user.full_name = full_name.strip()
        if role is not None:
            user.role = role.value
        if is_active is not None:
            user.is_active = is_active

        db.commit()
        db.refresh(user)

        logger.info(
            "user updated",
            extra={"user_id": str(user.id), "role": user.role, "is_active": user.is_active},
        )
        return user

    def deactivate(self, db: Session, *, user_id: uuid.UUID) -> User:
        user = self.get(db, user_id=user_id)
        user.is_active = False
        db.commit()
        db.refresh(user)

        logger.info("user deactivated", extra={"user_id": str(user.id)})
        return user
