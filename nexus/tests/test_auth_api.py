import pytest

from conftest import DEFAULT_PASSWORD, auth

from nexus.core.errors import AuthenticationError
from nexus.core.security import create_access_token, read_access_token, verify_password


def login(client, email, password=DEFAULT_PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_login_returns_token_usable_for_user_details(client, make_user):
    dev = make_user("developer", email="dev@pixelforge.com")

    r = login(client, "DEV@pixelforge.com")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["success"] is True
    assert body["user"]["id"] == str(dev.id)
    assert body["user"]["role"] == "developer"

    me = client.get("/api/auth/userDetails", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "dev@pixelforge.com"


def test_login_rejects_bad_credentials_without_revealing_which(client, make_user):
    make_user("developer", email="dev@pixelforge.com")

    wrong_pw = login(client, "dev@pixelforge.com", "not-the-password")
    unknown = login(client, "nobody@pixelforge.com")

    assert wrong_pw.status_code == unknown.status_code == 401
    assert wrong_pw.json() == unknown.json()
    assert wrong_pw.json()["code"] == "invalid-credentials"


def test_login_inactive_account(client, make_user):
    make_user("developer", email="gone@pixelforge.com", is_active=False)

    r = login(client, "gone@pixelforge.com")
    assert r.status_code == 401
    assert r.json()["code"] == "inactive-account"


def test_missing_and_invalid_tokens_are_401(client):
    r = client.get("/api/auth/userDetails")
    assert r.status_code == 401
    assert r.json()["success"] is False

    r = client.get("/api/auth/userDetails", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 401
    assert r.json()["code"] == "invalid-token"


def test_token_of_deactivated_user_is_rejected(client, make_user, db):
    dev = make_user("developer")
    headers = auth(dev)

    dev.is_active = False
    db.commit()

    r = client.get("/api/auth/userDetails", headers=headers)
    assert r.status_code == 401
    assert r.json()["code"] == "inactive-account"


def test_role_comes_from_database_not_token(client, make_user):
    dev = make_user("developer")
    forged = create_access_token(subject=str(dev.id), claims={"role": "admin"})

    r = client.post(
        "/api/auth/register",
        json={"fullName": "X", "email": "x@pixelforge.com", "password": "longenough"},
        headers={"Authorization": f"Bearer {forged}"},
    )
    assert r.status_code == 403
    assert r.json()["code"] == "insufficient-role"


def test_admin_registers_user_with_default_role(client, make_user):
    admin = make_user("admin")

    r = client.post(
        "/api/auth/register",
        json={"fullName": "New Dev", "email": "New@PixelForge.com", "password": "longenough"},
        headers=auth(admin),
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["user"]["role"] == "developer"
    assert body["user"]["email"] == "new@pixelforge.com"
    assert body["token"]


def test_register_rejects_duplicates_and_short_passwords(client, make_user):
    admin = make_user("admin")
    make_user("developer", email="taken@pixelforge.com")

    dup = client.post(
        "/api/auth/register",
        json={"fullName": "Dup", "email": "TAKEN@pixelforge.com", "password": "longenough"},
        headers=auth(admin),
    )
    assert dup.status_code == 400
    assert dup.json()["code"] == "email-taken"

    short = client.post(
        "/api/auth/register",
        json={"fullName": "Short", "email": "short@pixelforge.com", "password": "abc"},
        headers=auth(admin),
    )
    assert short.status_code == 400
    assert short.json()["code"] == "validation-error"


def test_project_lead_cannot_register_users(client, make_user):
    lead = make_user("project-lead")
    r = client.post(
        "/api/auth/register",
        json={"fullName": "X", "email": "x@pixelforge.com", "password": "longenough"},
        headers=auth(lead),
    )
    assert r.status_code == 403


def test_update_profile(client, make_user):
    dev = make_user("developer", full_name="Old Name")

    r = client.put("/api/auth/updateProfile", json={"fullName": "New Name"}, headers=auth(dev))
    assert r.status_code == 200, r.text
    assert r.json()["data"]["fullName"] == "New Name"


def test_update_password(client, make_user, db):
    dev = make_user("developer")

    bad = client.put(
        "/api/auth/updatePassword",
        json={"currentPassword": "wrong-password", "newPassword": "another-secret"},
        headers=auth(dev),
    )
    assert bad.status_code == 400
    assert bad.json()["code"] == "invalid-current-password"

    ok = client.put(
        "/api/auth/updatePassword",
        json={"currentPassword": DEFAULT_PASSWORD, "newPassword": "another-secret"},
        headers=auth(dev),
    )
    assert ok.status_code == 200

    db.refresh(dev)
    assert verify_password("another-secret", dev.password_hash)


def test_read_access_token_rejects_missing_subject():
    token = create_access_token(subject="not-a-uuid", claims={})
    with pytest.raises(AuthenticationError) as ei:
        read_access_token(token)
    assert ei.value.code == "invalid-token"


def test_read_access_token_returns_claims(make_user):
    dev = make_user("developer")
    claims = read_access_token(create_access_token(subject=str(dev.id), claims={"role": "developer"}))
    assert claims.user_id == dev.id
    assert claims.role == "developer"
