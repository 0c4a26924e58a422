# nexus/api/v1/projects.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from nexus.core.auth_deps import get_current_principal
from nexus.core.deps import parse_uuid
from nexus.db.session import get_db
from nexus.policies.rbac import Action, Principal, decide, require
from nexus.policies.resources import ProjectSnapshot
from nexus.schemas.common import ok, ok_list
from nexus.schemas.projects import (
    AssignMemberRequest,
    ProjectCreateRequest,
    ProjectUpdateRequest,
    project_resp,
)
from nexus.services.projects_service import ProjectsService

router = APIRouter(prefix="/projects")


def _load(db: Session, raw_id: str):
    return ProjectsService().get(db, project_id=parse_uuid(raw_id, "projectId"))


@router.post("", status_code=201)
def create_project(
    body: ProjectCreateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    require(principal, Action.PROJECT_CREATE)

    p = ProjectsService().create(
        db,
        created_by_id=principal.id,
        name=body.name,
        description=body.description,
        deadline=body.deadline,
        project_lead_id=body.project_lead_id,
    )
    return ok(data=project_resp(p), message="Project created successfully")


@router.get("")
def list_projects(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    rows = [
        p
        for p in ProjectsService().list_active(db)
        if decide(principal, Action.PROJECT_READ, ProjectSnapshot.from_model(p))
    ]
    return ok_list([project_resp(p) for p in rows])


@router.get("/my-projects/list")
def my_projects(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    rows = ProjectsService().list_for_user(db, user_id=principal.id)
    return ok_list([project_resp(p) for p in rows])


@router.get("/{projectId}")
def get_project(
    projectId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    p = _load(db, projectId)
    require(principal, Action.PROJECT_READ, ProjectSnapshot.from_model(p))
    return ok(data=project_resp(p))


@router.put("/{projectId}")
def update_project(
    projectId: str,
    body: ProjectUpdateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    p = _load(db, projectId)
    require(principal, Action.PROJECT_UPDATE, ProjectSnapshot.from_model(p))

    p = ProjectsService().patch(
        db,
        project=p,
        name=body.name,
        description=body.description,
        deadline=body.deadline,
        status=body.status,
        project_lead_id=body.project_lead_id,
    )
    return ok(data=project_resp(p), message="Project updated successfully")


@router.post("/{projectId}/assign-member")
def assign_member(
    projectId: str,
    body: AssignMemberRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    p = _load(db, projectId)
    require(principal, Action.PROJECT_ASSIGN_MEMBER, ProjectSnapshot.from_model(p))

    p = ProjectsService().assign_member(db, project=p, user_id=body.user_id)
    return ok(data=project_resp(p), message="Team member assigned successfully")


@router.delete("/{projectId}/remove-member/{userId}")
def remove_member(
    projectId: str,
    userId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    p = _load(db, projectId)
    require(principal, Action.PROJECT_REMOVE_MEMBER, ProjectSnapshot.from_model(p))

    p = ProjectsService().remove_member(
        db, project=p, user_id=parse_uuid(userId, "userId")
    )
    return ok(data=project_resp(p), message="Team member removed successfully")
