#nexus/api/v1/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from nexus.core.auth_deps import get_current_principal
from nexus.db.session import get_db
from nexus.models.enums import UserRole
from nexus.policies.rbac import Action, Principal, require
from nexus.policies.resources import UserRecord
from nexus.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    UpdatePasswordRequest,
    UpdateProfileRequest,
)
from nexus.schemas.common import ok
from nexus.schemas.users import user_resp
from nexus.services import auth_service
from nexus.services.users_service import UsersService

router = APIRouter(prefix="/auth")


def _session_user(u) -> dict:
    return {
        "id": str(u.id),
        "fullName": u.full_name,
        "email": u.email,
        "role": u.role,
        "mfaEnabled": bool(u.mfa_enabled),
    }


@router.post("/login")
def login(req: LoginRequest, db: Session = Depends(get_db)):
    user = auth_service.authenticate(db, req.email, req.password)
    token = auth_service.issue_token(user)
    return ok(message="Login successful", token=token, user=_session_user(user))


@router.post("/register", status_code=201)
def register(
    req: RegisterRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    require(principal, Action.USER_CREATE)

    user = auth_service.register_user(
        db,
        full_name=req.full_name,
        email=req.email,
        password=req.password,
        role=req.role or UserRole.DEVELOPER,
    )
    token = auth_service.issue_token(user)
    return ok(message="User registered successfully", token=token, user=_session_user(user))


@router.get("/userDetails")
def user_details(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    user = UsersService().get(db, user_id=principal.id)
    return ok(data=_session_user(user))


@router.put("/updateProfile")
def update_profile(
    req: UpdateProfileRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    require(principal, Action.USER_UPDATE_SELF, UserRecord(id=principal.id))

    user = auth_service.update_profile(db, user_id=principal.id, full_name=req.full_name)
    return ok(data=user_resp(user), message="Profile updated successfully")


@router.put("/updatePassword")
def update_password(
    req: UpdatePasswordRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    require(principal, Action.USER_UPDATE_SELF, UserRecord(id=principal.id))

    auth_service.change_password(
        db,
        user_id=principal.id,
        current_password=req.current_password,
        new_password=req.new_password,
    )
    return ok(message="Password updated successfully")
