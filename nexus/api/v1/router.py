from fastapi import APIRouter

from nexus.api.v1.health import router as health_router
from nexus.api.v1.auth import router as auth_router
from nexus.api.v1.users import router as users_router
from nexus.api.v1.projects import router as projects_router
from nexus.api.v1.documents import router as documents_router


v1_router = APIRouter()

# ------------------------------------------------------------------
# SYSTEM / CORE
# ------------------------------------------------------------------
v1_router.include_router(health_router, tags=["health"])
v1_router.include_router(auth_router, tags=["auth"])

# ------------------------------------------------------------------
# ADMIN
# ------------------------------------------------------------------
v1_router.include_router(users_router, tags=["users"])

# ------------------------------------------------------------------
# PROJECTS / DOCUMENTS
# ------------------------------------------------------------------
v1_router.include_router(projects_router, tags=["projects"])
v1_router.include_router(documents_router, tags=["documents"])
