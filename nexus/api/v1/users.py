# nexus/api/v1/users.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from nexus.core.auth_deps import get_current_principal
from nexus.core.deps import parse_uuid
from nexus.db.session import get_db
from nexus.policies.rbac import Action, Principal, require
from nexus.policies.resources import UserRecord
from nexus.schemas.common import ok, ok_list
from nexus.schemas.users import UserUpdateRequest, user_resp
from nexus.services.users_service import UsersService

router = APIRouter(prefix="/users")


@router.get("")
def list_users(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    # project leads need the directory for team assignment
    require(principal, Action.USER_LIST)
    return ok_list([user_resp(u) for u in UsersService().list_active(db)])


@router.get("/{userId}")
def get_user(
    userId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    uid = parse_uuid(userId, "userId")
    require(principal, Action.USER_READ, UserRecord(id=uid))

    return ok(data=user_resp(UsersService().get(db, user_id=uid)))


@router.put("/{userId}")
def update_user(
    userId: str,
    body: UserUpdateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    uid = parse_uuid(userId, "userId")
    require(principal, Action.USER_UPDATE, UserRecord(id=uid))

    user = UsersService().update(
        db,
        user_id=uid,
        full_name=body.full_name,
        role=body.role,
        is_active=body.is_active,
    )
    return ok(data=user_resp(user), message="User updated successfully")


@router.delete("/{userId}")
def deactivate_user(
    userId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    uid = parse_uuid(userId, "userId")
    require(principal, Action.USER_UPDATE, UserRecord(id=uid))

    UsersService().deactivate(db, user_id=uid)
    return ok(message="User deactivated successfully")
