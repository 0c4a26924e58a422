"""
Error taxonomy for the Nexus API.

Services and policies raise these; the handlers registered in
``nexus.main.create_app`` turn them into the JSON envelope
``{"success": false, "message": ..., "code": ...}`` with the matching status.

Usage:
    from nexus.core.errors import NotFoundError, ValidationError

    if not project:
        raise NotFoundError("Project", project_id)

    if already_member:
        raise ValidationError("User is already assigned to this project", code="already-assigned")
"""

from typing import Any, Dict, Optional


class NexusError(Exception):
    """Base exception for all application errors"""

    status_code: int = 500
    default_code: str = "internal-error"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "message": self.message,
            "code": self.code,
        }


class ValidationError(NexusError):
    """Missing or malformed input, or a rejected business rule"""

    status_code = 400
    default_code = "validation-error"


class AuthenticationError(NexusError):
    """Missing, invalid or expired credential, or an inactive account"""

    status_code = 401
    default_code = "unauthenticated"

    def __init__(self, message: str = "Not authorized to access this route", code: Optional[str] = None):
        super().__init__(message, code=code)


class AuthorizationError(NexusError):
    """Authenticated, but the access decision was a denial"""

    status_code = 403
    default_code = "forbidden"


class NotFoundError(NexusError):
    """Referenced entity does not exist"""

    status_code = 404
    default_code = "not-found"

    def __init__(self, resource_type: str, resource_id: Optional[str] = None, message: Optional[str] = None):
        super().__init__(
            message or f"{resource_type} not found",
            code=f"{resource_type.lower()}-not-found",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class IntegrityError(NexusError):
    """
    Stored data violates a model invariant (e.g. a project without a lead).

    Never user-actionable: logged with details, reported as a generic failure.
    """

    status_code = 500
    default_code = "integrity-error"


class UnexpectedError(NexusError):
    status_code = 500
    default_code = "unexpected-error"

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


# Messages for 5xx errors are never sent to the client.
GENERIC_FAILURE_MESSAGE = "Internal server error"
