from nexus.models.user import User
from nexus.models.project import Project, ProjectMember
from nexus.models.document import Document

__all__ = ["User", "Project", "ProjectMember", "Document"]
