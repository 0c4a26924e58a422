# nexus/services/projects_service.py
from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import exc as sa_exc
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from nexus.core.errors import NotFoundError, ValidationError
from nexus.models.enums import ProjectStatus, TeamRole
from nexus.models.project import Project, ProjectMember
from nexus.models.user import User

logger = logging.getLogger(__name__)


def _find_member(project: Project, user_id: uuid.UUID) -> Optional[ProjectMember]:
    for m in project.team_members:
        if m.user_id == user_id:
            return m
    return None


class ProjectsService:
    def create(
        self,
        db: Session,
        *,
        created_by_id: uuid.UUID,
        name: str,
        description: str,
        deadline: datetime,
        project_lead_id: uuid.UUID,
    ) -> Project:
        lead = db.get(User, project_lead_id)
        if not lead:
            raise NotFoundError("User", str(project_lead_id), message="Project lead not found")

        p = Project(
            name=name.strip(),
            description=description,
            deadline=deadline,
            status=ProjectStatus.ACTIVE.value,
            created_by_id=created_by_id,
            project_lead_id=lead.id,
            # the lead is always seeded as a team member
            team_members=[ProjectMember(user_id=lead.id, role=TeamRole.LEAD.value)],
        )
        db.add(p)
        db.commit()
        db.refresh(p)

        logger.info(
            "project created",
            extra={"project_id": str(p.id), "created_by": str(created_by_id), "lead": str(lead.id)},
        )
        return p

    def get(self, db: Session, *, project_id: uuid.UUID) -> Project:
        p = db.get(Project, project_id)
        if not p:
            raise NotFoundError("Project", str(project_id))
        return p

    def list_active(self, db: Session) -> List[Project]:
        stmt = (
            select(Project)
            .where(Project.status == ProjectStatus.ACTIVE.value)
            .order_by(Project.created_at.desc())
        )
        return list(db.execute(stmt).scalars().all())

    def list_for_user(self, db: Session, *, user_id: uuid.UUID) -> List[Project]:
        stmt = (
            select(Project)
            .where(
                or_(
                    Project.team_members.any(ProjectMember.user_id == user_id),
                    Project.project_lead_id == user_id,
                    Project.created_by_id == user_id,
                )
            )
            .order_by(Project.created_at.desc())
        )
        return list(db.execute(stmt).scalars().all())

    def patch(
        self,
        db: Session,
        *,
        project: Project,
        name: Optional[str],
        description: Optional[str],
        deadline: Optional[datetime],
        status: Optional[ProjectStatus],
        project_lead_id: Optional[uuid.UUID],
    ) -> Project:
        if name:
            project.name = name.strip()
        if description:
            project.description = description
        if deadline is not None:
            project.deadline = deadline
        if status is not None:
            project.status = status.value

        if project_lead_id is not None and project_lead_id != project.project_lead_id:
            self._reassign_lead(db, project=project, new_lead_id=project_lead_id)

        db.commit()
        db.refresh(project)

        logger.info("project updated", extra={"project_id": str(project.id)})
        return project

    def _reassign_lead(self, db: Session, *, project: Project, new_lead_id: uuid.UUID) -> None:
        new_lead = db.get(User, new_lead_id)
        if not new_lead:
            raise NotFoundError("User", str(new_lead_id), message="Project lead not found")

        previous = _find_member(project, project.project_lead_id)
        if previous is not None:
            previous.role = TeamRole.DEVELOPER.value

        member = _find_member(project, new_lead.id)
        if member is None:
            project.team_members.append(
                ProjectMember(user_id=new_lead.id, role=TeamRole.LEAD.value)
            )
        else:
            member.role = TeamRole.LEAD.value

        logger.info(
            "project lead reassigned",
            extra={
                "project_id": str(project.id),
                "previous_lead": str(project.project_lead_id),
                "lead": str(new_lead.id),
            },
        )
        project.project_lead_id = new_lead.id

    def assign_member(self, db: Session, *, project: Project, user_id: uuid.UUID) -> Project:
        user = db.get(User, user_id)
        if not user:
            raise NotFoundError("User", str(user_id))

        if _find_member(project, user.id) is not None:
            raise ValidationError(
                "User is already assigned to this project", code="already-assigned"
            )

        project.team_members.append(
            ProjectMember(user_id=user.id, role=TeamRole.DEVELOPER.value)
        )
        try:
            db.commit()
        except sa_exc.IntegrityError:
            # concurrent assignment hit uq_project_member_user
            db.rollback()
            raise ValidationError(
                "User is already assigned to this project", code="already-assigned"
            )
        db.refresh(project)

        logger.info(
            "team member assigned",
            extra={"project_id": str(project.id), "user_id": str(user.id)},
        )
        return project

    def remove_member(self, db: Session, *, project: Project, user_id: uuid.UUID) -> Project:
        member = _find_member(project, user_id)

        if user_id == project.project_lead_id or (
            member is not None and member.role == TeamRole.LEAD.value
        ):
            raise ValidationError(
                "The project lead cannot be removed; reassign the lead instead",
                code="cannot-remove-lead",
            )

        if member is None:
            raise NotFoundError(
                "Member", str(user_id), message="User is not a member of this project"
            )

        project.team_members.remove(member)
        db.commit()
        db.refresh(project)

        logger.info(
            "team member removed",
            extra={"project_id": str(project.id), "user_id": str(user_id)},
        )
        return project
