import itertools
import uuid

import pytest

from nexus.core.errors import AuthorizationError, IntegrityError
from nexus.models.enums import UserRole
from nexus.policies.rbac import (
    ALLOW,
    DECISION_TABLE,
    Action,
    DenyReason,
    Principal,
    decide,
    require,
)
from nexus.policies.resources import DocumentSnapshot, ProjectSnapshot, UserRecord

U1, U2, U3, U4, U5 = (uuid.uuid4() for _ in range(5))

PROJECT_ACTIONS = [
    Action.PROJECT_READ,
    Action.PROJECT_UPDATE,
    Action.PROJECT_ASSIGN_MEMBER,
    Action.PROJECT_REMOVE_MEMBER,
    Action.DOCUMENT_UPLOAD,
    Action.DOCUMENT_READ,
]


def principal(uid, role, is_active=True):
    return Principal(id=uid, role=UserRole(role), is_active=is_active)


def project(lead=U2, members=(U1, U2)):
    return ProjectSnapshot(id=uuid.uuid4(), project_lead_id=lead, team_member_ids=tuple(members))


def test_every_action_has_exactly_one_rule():
    actions = [r.action for r in DECISION_TABLE]
    assert sorted(actions) == sorted(Action)


def test_developer_member_can_read_but_not_remove_members():
    p = principal(U1, "developer")
    j = project()

    assert decide(p, Action.PROJECT_READ, j) == ALLOW
    d = decide(p, Action.PROJECT_REMOVE_MEMBER, j)
    assert d.allowed is False
    assert d.reason == DenyReason.NOT_LEAD_OR_ADMIN


def test_admin_is_allowed_every_project_and_document_action():
    admin = principal(U3, "admin")
    j = project(lead=U2, members=(U2,))
    doc = DocumentSnapshot(id=uuid.uuid4(), project_id=j.id, uploaded_by_id=U4)

    for action in PROJECT_ACTIONS:
        assert decide(admin, action, j).allowed, action
    assert decide(admin, Action.DOCUMENT_DELETE, doc).allowed
    assert decide(admin, Action.PROJECT_CREATE).allowed


def test_non_uploader_developer_cannot_delete_document():
    doc = DocumentSnapshot(id=uuid.uuid4(), project_id=uuid.uuid4(), uploaded_by_id=U4)

    d = decide(principal(U5, "developer"), Action.DOCUMENT_DELETE, doc)
    assert not d
    assert d.reason == DenyReason.NOT_OWNER_OR_ADMIN

    assert decide(principal(U4, "developer"), Action.DOCUMENT_DELETE, doc).allowed


@pytest.mark.parametrize("role", ["admin", "project-lead", "developer"])
def test_inactive_principal_is_denied_everything(role):
    p = principal(U2, role, is_active=False)
    j = project(lead=U2, members=(U2,))
    doc = DocumentSnapshot(id=uuid.uuid4(), project_id=j.id, uploaded_by_id=U2)

    cases = [(a, j) for a in PROJECT_ACTIONS] + [
        (Action.DOCUMENT_DELETE, doc),
        (Action.PROJECT_CREATE, None),
        (Action.USER_LIST, None),
        (Action.USER_CREATE, None),
        (Action.USER_READ, UserRecord(id=U2)),
        (Action.USER_UPDATE_SELF, UserRecord(id=U2)),
    ]
    for action, resource in cases:
        d = decide(p, action, resource)
        assert d.allowed is False
        assert d.reason == DenyReason.INACTIVE_ACCOUNT


@pytest.mark.parametrize(
    "role,is_lead,is_member",
    list(itertools.product(["admin", "project-lead", "developer"], [True, False], [True, False])),
)
def test_read_allowed_iff_lead_member_or_admin(role, is_lead, is_member):
    me = uuid.uuid4()
    other_lead = uuid.uuid4()
    lead = me if is_lead else other_lead
    members = (lead, me) if is_member else (lead,)
    if is_lead and not is_member:
        # lead recorded without a membership row still reads
        members = ()

    j = ProjectSnapshot(id=uuid.uuid4(), project_lead_id=lead, team_member_ids=members)
    d = decide(principal(me, role), Action.PROJECT_READ, j)

    expected = is_lead or is_member or role == "admin"
    assert d.allowed is expected
    if not expected:
        assert d.reason == DenyReason.NOT_PROJECT_MEMBER


def test_project_lead_role_alone_does_not_grant_project_writes():
    # a project-lead account that does not lead this project
    outsider = principal(U4, "project-lead")
    j = project(lead=U2, members=(U1, U2))

    for action in (Action.PROJECT_UPDATE, Action.PROJECT_ASSIGN_MEMBER,
                   Action.PROJECT_REMOVE_MEMBER, Action.DOCUMENT_UPLOAD):
        d = decide(outsider, action, j)
        assert d.reason == DenyReason.NOT_LEAD_OR_ADMIN


def test_member_developer_cannot_upload():
    d = decide(principal(U1, "developer"), Action.DOCUMENT_UPLOAD, project())
    assert d.reason == DenyReason.NOT_LEAD_OR_ADMIN


@pytest.mark.parametrize(
    "role,allowed",
    [("admin", True), ("project-lead", True), ("developer", False)],
)
def test_role_gated_actions(role, allowed):
    p = principal(U1, role)
    assert decide(p, Action.PROJECT_CREATE).allowed is allowed
    assert decide(p, Action.USER_LIST).allowed is allowed
    assert decide(p, Action.USER_READ, UserRecord(id=U5)).allowed is allowed
    if not allowed:
        assert decide(p, Action.USER_LIST).reason == DenyReason.INSUFFICIENT_ROLE


def test_only_admin_creates_and_updates_users():
    lead = principal(U1, "project-lead")
    admin = principal(U3, "admin")

    assert decide(lead, Action.USER_CREATE).reason == DenyReason.INSUFFICIENT_ROLE
    assert decide(lead, Action.USER_UPDATE, UserRecord(id=U5)).reason == DenyReason.INSUFFICIENT_ROLE
    assert decide(admin, Action.USER_CREATE).allowed
    assert decide(admin, Action.USER_UPDATE, UserRecord(id=U5)).allowed


def test_self_service_is_identity_based():
    dev = principal(U1, "developer")
    admin = principal(U3, "admin")

    assert decide(dev, Action.USER_READ, UserRecord(id=U1)).allowed
    assert decide(dev, Action.USER_UPDATE_SELF, UserRecord(id=U1)).allowed
    assert decide(dev, Action.USER_UPDATE_SELF, UserRecord(id=U2)).reason == DenyReason.NOT_OWNER_OR_ADMIN
    # admins change other accounts through user:update, not self-service
    assert not decide(admin, Action.USER_UPDATE_SELF, UserRecord(id=U2)).allowed


def test_project_without_lead_is_an_integrity_error_not_a_denial():
    broken = ProjectSnapshot(id=uuid.uuid4(), project_lead_id=None, team_member_ids=(U1,))
    with pytest.raises(IntegrityError):
        decide(principal(U3, "admin"), Action.PROJECT_READ, broken)


def test_document_without_uploader_is_an_integrity_error():
    broken = DocumentSnapshot(id=uuid.uuid4(), project_id=uuid.uuid4(), uploaded_by_id=None)
    with pytest.raises(IntegrityError):
        decide(principal(U3, "admin"), Action.DOCUMENT_DELETE, broken)


def test_wrong_resource_kind_is_an_integrity_error():
    doc = DocumentSnapshot(id=uuid.uuid4(), project_id=uuid.uuid4(), uploaded_by_id=U1)
    with pytest.raises(IntegrityError):
        decide(principal(U1, "developer"), Action.PROJECT_READ, doc)
    with pytest.raises(IntegrityError):
        decide(principal(U1, "developer"), Action.PROJECT_READ, None)


def test_require_raises_authorization_error_with_reason_code():
    with pytest.raises(AuthorizationError) as ei:
        require(principal(U1, "developer"), Action.PROJECT_UPDATE, project())

    assert ei.value.code == "not-lead-or-admin"
    assert ei.value.status_code == 403


def test_require_passes_silently_on_allow():
    assert require(principal(U2, "developer"), Action.PROJECT_UPDATE, project()) is None
