from nexus.schemas.common import ok, ok_list
from nexus.schemas.auth import LoginRequest, RegisterRequest, UpdatePasswordRequest, UpdateProfileRequest
from nexus.schemas.users import UserUpdateRequest
from nexus.schemas.projects import AssignMemberRequest, ProjectCreateRequest, ProjectUpdateRequest
