# nexus/policies/resources.py
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Optional, Tuple

from nexus.models.document import Document
from nexus.models.project import Project
from nexus.models.user import User


@dataclass(frozen=True)
class UserRecord:
    id: Optional[uuid.UUID]

    @classmethod
    def from_model(cls, user: User) -> "UserRecord":
        return cls(id=user.id)


@dataclass(frozen=True)
class ProjectSnapshot:
    """
    Membership view of a project as read inside the current request.
    Never cache one across requests: membership can change underneath it.
    """
    id: Optional[uuid.UUID]
    project_lead_id: Optional[uuid.UUID]
    team_member_ids: Tuple[uuid.UUID, ...] = ()
    created_by_id: Optional[uuid.UUID] = None

    @classmethod
    def from_model(cls, project: Project) -> "ProjectSnapshot":
        return cls(
            id=project.id,
            project_lead_id=project.project_lead_id,
            team_member_ids=tuple(m.user_id for m in project.team_members),
            created_by_id=project.created_by_id,
        )

    def is_lead(self, user_id: uuid.UUID) -> bool:
        return self.project_lead_id == user_id

    def is_member(self, user_id: uuid.UUID) -> bool:
        return user_id in self.team_member_ids


@dataclass(frozen=True)
class DocumentSnapshot:
    id: Optional[uuid.UUID]
    project_id: Optional[uuid.UUID]
    uploaded_by_id: Optional[uuid.UUID]

    @classmethod
    def from_model(cls, document: Document) -> "DocumentSnapshot":
        return cls(
            id=document.id,
            project_id=document.project_id,
            uploaded_by_id=document.uploaded_by_id,
        )
