from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field

from nexus.models.enums import ProjectStatus
from nexus.models.project import Project
from nexus.schemas.common import CamelModel, _iso
from nexus.schemas.users import user_summary


class ProjectCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=256)
    description: str = Field(..., min_length=1)
    deadline: datetime
    project_lead_id: uuid.UUID


class ProjectUpdateRequest(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=256)
    description: Optional[str] = Field(default=None, min_length=1)
    deadline: Optional[datetime] = None
    status: Optional[ProjectStatus] = None
    # the only way to move the lead role
    project_lead_id: Optional[uuid.UUID] = None


class AssignMemberRequest(CamelModel):
    user_id: uuid.UUID


def project_resp(p: Project) -> Dict[str, Any]:
    return {
        "id": str(p.id),
        "name": p.name,
        "description": p.description,
        "deadline": _iso(p.deadline),
        "status": p.status,
        "createdBy": user_summary(p.created_by),
        "projectLead": user_summary(p.project_lead),
        "teamMembers": [
            {
                "userId": str(m.user_id),
                "user": user_summary(m.user),
                "role": m.role,
                "assignedAt": _iso(m.assigned_at),
            }
            for m in p.team_members
        ],
        "createdAt": _iso(p.created_at),
        "updatedAt": _iso(p.updated_at),
    }
