# nexus/policies/rbac.py
"""
Access decisions for every user, project and document action.

All route handlers go through ``decide`` (or ``require``) with an explicit
principal, an action and a resource snapshot. The table below is the only
place where role, ownership and membership rules live.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Optional, Tuple, Type

from nexus.core.errors import AuthorizationError, IntegrityError
from nexus.models.enums import UserRole
from nexus.policies.resources import DocumentSnapshot, ProjectSnapshot, UserRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    id: uuid.UUID
    role: UserRole
    is_active: bool = True
    full_name: str = ""
    email: str = ""


class Action(str, Enum):
    USER_LIST = "user:list"
    USER_READ = "user:read"
    USER_CREATE = "user:create"
    USER_UPDATE = "user:update"
    USER_UPDATE_SELF = "user:update-self"

    PROJECT_CREATE = "project:create"
    PROJECT_READ = "project:read"
    PROJECT_UPDATE = "project:update"
    PROJECT_ASSIGN_MEMBER = "project:assign-member"
    PROJECT_REMOVE_MEMBER = "project:remove-member"

    DOCUMENT_UPLOAD = "document:upload"
    DOCUMENT_READ = "document:read"
    DOCUMENT_DELETE = "document:delete"


class DenyReason(str, Enum):
    NOT_PROJECT_MEMBER = "not-project-member"
    NOT_LEAD_OR_ADMIN = "not-lead-or-admin"
    NOT_OWNER_OR_ADMIN = "not-owner-or-admin"
    INACTIVE_ACCOUNT = "inactive-account"
    INSUFFICIENT_ROLE = "insufficient-role"


DENY_MESSAGES: Dict[DenyReason, str] = {
    DenyReason.NOT_PROJECT_MEMBER: "Not authorized to access this project",
    DenyReason.NOT_LEAD_OR_ADMIN: "Only the project lead or an admin may perform this action",
    DenyReason.NOT_OWNER_OR_ADMIN: "Only the owner or an admin may perform this action",
    DenyReason.INACTIVE_ACCOUNT: "User account is inactive",
    DenyReason.INSUFFICIENT_ROLE: "User role is not authorized to perform this action",
}


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[DenyReason] = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(allowed=True)


def deny(reason: DenyReason) -> Decision:
    return Decision(allowed=False, reason=reason)


# --- predicates ---

STAFF_ROLES: FrozenSet[UserRole] = frozenset({UserRole.ADMIN, UserRole.PROJECT_LEAD})


def _is_admin(p: Principal) -> bool:
    return p.role == UserRole.ADMIN


def _role_in(roles: FrozenSet[UserRole]) -> Callable[[Principal, Any], bool]:
    return lambda p, _r: p.role in roles


def _self_or_staff(p: Principal, u: UserRecord) -> bool:
    return p.id == u.id or p.role in STAFF_ROLES


def _self_only(p: Principal, u: UserRecord) -> bool:
    return p.id == u.id


def _lead_member_or_admin(p: Principal, j: ProjectSnapshot) -> bool:
    return j.is_lead(p.id) or j.is_member(p.id) or _is_admin(p)


def _lead_or_admin(p: Principal, j: ProjectSnapshot) -> bool:
    return j.is_lead(p.id) or _is_admin(p)


def _uploader_or_admin(p: Principal, d: DocumentSnapshot) -> bool:
    return d.uploaded_by_id == p.id or _is_admin(p)


@dataclass(frozen=True)
class Rule:
    action: Action
    resource_type: Optional[Type]
    allow: Callable[[Principal, Any], bool]
    deny_reason: DenyReason


DECISION_TABLE: Tuple[Rule, ...] = (
    Rule(Action.USER_LIST, None, _role_in(STAFF_ROLES), DenyReason.INSUFFICIENT_ROLE),
    Rule(Action.USER_READ, UserRecord, _self_or_staff, DenyReason.INSUFFICIENT_ROLE),
    Rule(Action.USER_CREATE, None, _role_in(frozenset({UserRole.ADMIN})), DenyReason.INSUFFICIENT_ROLE),
    Rule(Action.USER_UPDATE, UserRecord, lambda p, _u: _is_admin(p), DenyReason.INSUFFICIENT_ROLE),
    Rule(Action.USER_UPDATE_SELF, UserRecord, _self_only, DenyReason.NOT_OWNER_OR_ADMIN),
    Rule(Action.PROJECT_CREATE, None, _role_in(STAFF_ROLES), DenyReason.INSUFFICIENT_ROLE),
    Rule(Action.PROJECT_READ, ProjectSnapshot, _lead_member_or_admin, DenyReason.NOT_PROJECT_MEMBER),
    Rule(Action.PROJECT_UPDATE, ProjectSnapshot, _lead_or_admin, DenyReason.NOT_LEAD_OR_ADMIN),
    Rule(Action.PROJECT_ASSIGN_MEMBER, ProjectSnapshot, _lead_or_admin, DenyReason.NOT_LEAD_OR_ADMIN),
    Rule(Action.PROJECT_REMOVE_MEMBER, ProjectSnapshot, _lead_or_admin, DenyReason.NOT_LEAD_OR_ADMIN),
    Rule(Action.DOCUMENT_UPLOAD, ProjectSnapshot, _lead_or_admin, DenyReason.NOT_LEAD_OR_ADMIN),
    Rule(Action.DOCUMENT_READ, ProjectSnapshot, _lead_member_or_admin, DenyReason.NOT_PROJECT_MEMBER),
    Rule(Action.DOCUMENT_DELETE, DocumentSnapshot, _uploader_or_admin, DenyReason.NOT_OWNER_OR_ADMIN),
)


def _rule_for(action: Action) -> Rule:
    for rule in DECISION_TABLE:
        if rule.action == action:
            return rule
    raise ValueError(f"No access rule for action {action!r}.")


def _check_resource(rule: Rule, resource: Any) -> None:
    """
    Malformed resources are data-integrity defects, never denials.
    """
    if rule.resource_type is None:
        return

    if not isinstance(resource, rule.resource_type):
        raise IntegrityError(
            f"Action {rule.action.value} expects a {rule.resource_type.__name__} resource.",
            details={"action": rule.action.value, "resource": type(resource).__name__},
        )

    if isinstance(resource, ProjectSnapshot) and resource.project_lead_id is None:
        raise IntegrityError(
            "Project has no project lead.",
            details={"project_id": str(resource.id)},
        )
    if isinstance(resource, DocumentSnapshot) and resource.uploaded_by_id is None:
        raise IntegrityError(
            "Document has no uploader.",
            details={"document_id": str(resource.id)},
        )
    if isinstance(resource, UserRecord) and resource.id is None:
        raise IntegrityError("User record has no id.")


def decide(principal: Principal, action: Action, resource: Any = None) -> Decision:
    """
    Pure: the result depends only on the three arguments.
    """
    rule = _rule_for(action)
    _check_resource(rule, resource)

    if not principal.is_active:
        return deny(DenyReason.INACTIVE_ACCOUNT)

    if rule.allow(principal, resource):
        return ALLOW
    return deny(rule.deny_reason)


def require(principal: Principal, action: Action, resource: Any = None) -> None:
    decision = decide(principal, action, resource)
    if decision.allowed:
        return

    logger.info(
        "access denied",
        extra={
            "principal_id": str(principal.id),
            "role": principal.role.value,
            "action": action.value,
            "reason": decision.reason.value,
        },
    )
    raise AuthorizationError(DENY_MESSAGES[decision.reason], code=decision.reason.value)
