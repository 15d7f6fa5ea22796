"""Invitation domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from domain.entities.workspace import WorkspaceRole


class InvitationStatus(StrEnum):
    """Status of a workspace invitation."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    EXPIRED = "expired"
    REVOKED = "revoked"


@dataclass
class Invitation:
    """Domain entity for a workspace invitation."""

    workspace_id: UUID
    email: str
    role: WorkspaceRole
    token_hash: str
    invited_by: UUID
    expires_at: datetime
    id: UUID = field(default_factory=uuid4)
    status: InvitationStatus = InvitationStatus.PENDING
    created_at: datetime = field(default_factory=datetime.utcnow)
    accepted_at: datetime | None = None

    @property
    def is_expired(self) -> bool:
        """Check if the invitation has expired."""
        return datetime.utcnow() > self.expires_at

    @property
    def is_pending(self) -> bool:
        """Check if the invitation is still pending and not expired."""
        return self.status == InvitationStatus.PENDING and not self.is_expired


@dataclass(frozen=True, slots=True)
class InvitationLookup:
    """Read-only result of looking up an invitation by token.

    ``expired`` is derived at read time and never written back.
    """

    invitation: Invitation
    workspace_name: str
    expired: bool
