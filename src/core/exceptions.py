"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    LOGIN_REQUIRED = "LOGIN_REQUIRED"

    # Workspace context errors (428)
    WORKSPACE_CONTEXT_REQUIRED = "WORKSPACE_CONTEXT_REQUIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    NOT_A_MEMBER = "NOT_A_MEMBER"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    INVITATION_EMAIL_MISMATCH = "INVITATION_EMAIL_MISMATCH"

    # Not found errors (404)
    TASK_NOT_FOUND = "TASK_NOT_FOUND"
    TAG_NOT_FOUND = "TAG_NOT_FOUND"
    SUBTASK_NOT_FOUND = "SUBTASK_NOT_FOUND"
    COMMENT_NOT_FOUND = "COMMENT_NOT_FOUND"
    WORKSPACE_NOT_FOUND = "WORKSPACE_NOT_FOUND"
    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"
    INVITATION_NOT_FOUND = "INVITATION_NOT_FOUND"

    # Validation errors (400/422)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    TASK_RULE_VIOLATION = "TASK_RULE_VIOLATION"
    INVALID_ROLE = "INVALID_ROLE"
    LAST_OWNER = "LAST_OWNER"

    # Gone (410)
    INVITATION_EXPIRED = "INVITATION_EXPIRED"

    # Conflict errors (409)
    DUPLICATE_TAG = "DUPLICATE_TAG"
    DUPLICATE_INVITATION = "DUPLICATE_INVITATION"
    ALREADY_A_MEMBER = "ALREADY_A_MEMBER"
    INVITATION_ALREADY_ACCEPTED = "INVITATION_ALREADY_ACCEPTED"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class RedirectRequiredError(AppException):
    """A failure that page requests should resolve by redirecting.

    API clients receive the JSON error body instead, with the redirect
    target in ``details.redirect_to``.
    """

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int,
        location: str,
    ) -> None:
        self.location = location
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=status_code,
            details={"redirect_to": location},
        )


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class LoginRequiredError(RedirectRequiredError):
    """No valid session; the caller must sign in."""

    def __init__(self, location: str = "/login") -> None:
        super().__init__(
            error_code=ErrorCode.LOGIN_REQUIRED,
            message="Authentication required",
            status_code=401,
            location=location,
        )


class WorkspaceContextRequiredError(RedirectRequiredError):
    """No valid current workspace; the caller must pick or create one."""

    def __init__(self, location: str = "/onboarding") -> None:
        super().__init__(
            error_code=ErrorCode.WORKSPACE_CONTEXT_REQUIRED,
            message="Select or create a workspace first",
            status_code=428,
            location=location,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class NotAMemberError(AppException):
    """User is not a member of the workspace."""

    def __init__(self, workspace_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_A_MEMBER,
            message="You are not a member of this workspace",
            status_code=403,
            details={"workspace_id": workspace_id},
        )


class InsufficientPermissionsError(AppException):
    """The caller's role is not allowed to perform the operation."""

    def __init__(self, operation: str, allowed_roles: list[str] | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.INSUFFICIENT_PERMISSIONS,
            message=f"Insufficient permissions for {operation}",
            status_code=403,
            details={"operation": operation, "allowed_roles": allowed_roles or []},
        )


class TaskRuleViolationError(AppException):
    """Input is well-formed but breaks a task business rule."""

    def __init__(self, field: str, constraint: str) -> None:
        super().__init__(
            error_code=ErrorCode.TASK_RULE_VIOLATION,
            message=constraint,
            status_code=400,
            details={"field": field, "constraint": constraint},
        )


class TaskNotFoundError(AppException):
    """Task not found."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.TASK_NOT_FOUND,
            message=f"Task not found: {task_id}",
            status_code=404,
            details={"task_id": task_id},
        )


class TagNotFoundError(AppException):
    """Tag not found."""

    def __init__(self, tag_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.TAG_NOT_FOUND,
            message=f"Tag not found: {tag_id}",
            status_code=404,
            details={"tag_id": tag_id},
        )


class SubtaskNotFoundError(AppException):
    """Subtask not found."""

    def __init__(self, subtask_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.SUBTASK_NOT_FOUND,
            message=f"Subtask not found: {subtask_id}",
            status_code=404,
            details={"subtask_id": subtask_id},
        )


class CommentNotFoundError(AppException):
    """Comment not found."""

    def __init__(self, comment_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.COMMENT_NOT_FOUND,
            message=f"Comment not found: {comment_id}",
            status_code=404,
            details={"comment_id": comment_id},
        )


class WorkspaceNotFoundError(AppException):
    """Workspace not found."""

    def __init__(self, workspace_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.WORKSPACE_NOT_FOUND,
            message=f"Workspace not found: {workspace_id}",
            status_code=404,
            details={"workspace_id": workspace_id},
        )


class MemberNotFoundError(AppException):
    """Target user has no membership in the workspace."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.MEMBER_NOT_FOUND,
            message="User is not a member of this workspace",
            status_code=404,
            details={"user_id": user_id},
        )


class InvalidRoleError(AppException):
    """The role cannot be granted this way."""

    def __init__(self, role: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_ROLE,
            message=f"Role '{role}' cannot be assigned",
            status_code=400,
            details={"field": "role", "constraint": "one of admin, member, viewer"},
        )


class LastOwnerError(AppException):
    """Cannot remove or demote the last owner of a workspace."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.LAST_OWNER,
            message="Cannot remove or demote the last owner of a workspace",
            status_code=400,
        )


class AlreadyAMemberError(AppException):
    """User is already a member of the workspace."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.ALREADY_A_MEMBER,
            message="User is already a member of this workspace",
            status_code=409,
            details={"user_id": user_id},
        )


class DuplicateTagError(AppException):
    """A tag with this name already exists in the workspace."""

    def __init__(self, name: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_TAG,
            message=f"Tag '{name}' already exists",
            status_code=409,
            details={"name": name},
        )


class InvitationNotFoundError(AppException):
    """Invitation not found."""

    def __init__(self, invitation_id: str = "") -> None:
        super().__init__(
            error_code=ErrorCode.INVITATION_NOT_FOUND,
            message="Invitation not found",
            status_code=404,
            details={"invitation_id": invitation_id} if invitation_id else None,
        )


class InvitationExpiredError(AppException):
    """Invitation has expired."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVITATION_EXPIRED,
            message="This invitation has expired",
            status_code=410,
        )


class InvitationAlreadyAcceptedError(AppException):
    """Invitation has already been accepted."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVITATION_ALREADY_ACCEPTED,
            message="This invitation has already been accepted",
            status_code=409,
        )


class DuplicateInvitationError(AppException):
    """A pending invitation already exists for this email and workspace."""

    def __init__(self, email: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_INVITATION,
            message="An invitation has already been sent to this email",
            status_code=409,
            details={"email": email},
        )


class InvitationEmailMismatchError(AppException):
    """The user's email does not match the invitation email."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVITATION_EMAIL_MISMATCH,
            message="Your email does not match the invitation email",
            status_code=403,
        )
