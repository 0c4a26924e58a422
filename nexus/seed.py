from datetime import datetime, timedelta, timezone

import nexus.models  # noqa: F401
from nexus.db.base import Base
from nexus.db.session import engine, session_scope
from nexus.models.enums import UserRole
from nexus.services import auth_service
from nexus.services.projects_service import ProjectsService

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    ("Admin User", "admin@pixelforge.com", UserRole.ADMIN),
    ("Project Lead User", "lead@pixelforge.com", UserRole.PROJECT_LEAD),
    ("Developer User", "dev@pixelforge.com", UserRole.DEVELOPER),
]


def seed():
    Base.metadata.create_all(bind=engine)

    with session_scope() as db:
        users = {}
        for full_name, email, role in DEMO_USERS:
            user = auth_service.find_by_email(db, email)
            if user is None:
                user = auth_service.register_user(
                    db, full_name=full_name, email=email, password=DEMO_PASSWORD, role=role
                )
            users[role] = user

        svc = ProjectsService()
        admin = users[UserRole.ADMIN]
        if not svc.list_for_user(db, user_id=admin.id):
            project = svc.create(
                db,
                created_by_id=admin.id,
                name="Nexus Alpha Build",
                description="The primary development phase for the PixelForge Nexus prototype.",
                deadline=datetime.now(timezone.utc) + timedelta(days=90),
                project_lead_id=users[UserRole.PROJECT_LEAD].id,
            )
            svc.assign_member(db, project=project, user_id=users[UserRole.DEVELOPER].id)

    print("Database seeded")
    for _, email, role in DEMO_USERS:
        print(f"  {role.value:<13} {email} / {DEMO_PASSWORD}")


if __name__ == "__main__":
    seed()
