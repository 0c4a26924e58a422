import os

# settings are read at import time; configure before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import uuid  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

# FORCE model registration
import nexus.models  # noqa: E402,F401

from nexus.core.security import hash_password  # noqa: E402
from nexus.db.base import Base  # noqa: E402
from nexus.db.session import build_engine, get_db  # noqa: E402
from nexus.main import create_app  # noqa: E402
from nexus.models.user import User  # noqa: E402
from nexus.services.auth_service import issue_token  # noqa: E402
from nexus.services.blob_store import LocalBlobStore, get_blob_store  # noqa: E402
from nexus.services.projects_service import ProjectsService  # noqa: E402

DEFAULT_PASSWORD = "password123"

engine = build_engine("sqlite://", poolclass=StaticPool)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(tmp_path):
    return LocalBlobStore(tmp_path / "uploads", max_bytes=10 * 1024 * 1024)


@pytest.fixture
def client(db, store):
    app = create_app()

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: store

    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(db):
    def _make(role="developer", email=None, full_name=None, is_active=True, password=DEFAULT_PASSWORD):
        u = User(
            full_name=full_name or f"{role.title()} {uuid.uuid4().hex[:6]}",
            email=email or f"{role}-{uuid.uuid4().hex[:8]}@pixelforge.com",
            password_hash=hash_password(password),
            role=role,
            is_active=is_active,
        )
        db.add(u)
        db.commit()
        db.refresh(u)
        return u

    return _make


@pytest.fixture
def make_project(db):
    def _make(lead, created_by=None, members=(), name="Nexus Alpha Build"):
        svc = ProjectsService()
        p = svc.create(
            db,
            created_by_id=(created_by or lead).id,
            name=name,
            description="Prototype build",
            deadline=datetime.now(timezone.utc) + timedelta(days=30),
            project_lead_id=lead.id,
        )
        for m in members:
            p = svc.assign_member(db, project=p, user_id=m.id)
        return p

    return _make


def auth(user) -> dict:
    return {"Authorization": f"Bearer {issue_token(user)}"}
