"""Workspace domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class WorkspaceRole(StrEnum):
    """Role of a user within one workspace.

    Roles are not ordered. Permission checks go through the explicit
    allow-lists in ``domain.authorization``.
    """

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"


# Roles an invitation or a role change may grant
ASSIGNABLE_ROLES = frozenset({WorkspaceRole.ADMIN, WorkspaceRole.MEMBER, WorkspaceRole.VIEWER})


@dataclass
class Workspace:
    """Domain entity for a Workspace."""

    name: str
    created_by: UUID
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


@dataclass
class WorkspaceMember:
    """Domain entity for a workspace membership."""

    workspace_id: UUID
    user_id: UUID
    role: WorkspaceRole = WorkspaceRole.MEMBER
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True, slots=True)
class WorkspaceContext:
    """The caller's validated current workspace and role in it."""

    workspace: Workspace
    member: WorkspaceMember

    @property
    def workspace_id(self) -> UUID:
        return self.workspace.id

    @property
    def user_id(self) -> UUID:
        return self.member.user_id

    @property
    def role(self) -> WorkspaceRole:
        return self.member.role


@dataclass(frozen=True, slots=True)
class WorkspaceWithRole:
    """Read-only value object: a Workspace with the caller's role in it."""

    workspace: Workspace
    role: WorkspaceRole


@dataclass(frozen=True, slots=True)
class MemberWithProfile:
    """Read-only value object: a membership joined with the member's profile."""

    member: WorkspaceMember
    email: str
    display_name: str | None = None
    avatar_url: str | None = None
