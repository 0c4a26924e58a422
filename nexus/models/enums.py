# nexus/models/enums.py
from __future__ import annotations
from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    PROJECT_LEAD = "project-lead"
    DEVELOPER = "developer"


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    ON_HOLD = "on-hold"
    COMPLETED = "completed"


class TeamRole(str, Enum):
    # role inside one project's team, independent of the account role
    LEAD = "lead"
    DEVELOPER = "developer"
