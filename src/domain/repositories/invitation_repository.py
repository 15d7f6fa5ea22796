"""Invitation repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.invitation import Invitation, InvitationStatus


class IInvitationRepository(Protocol):
    """Repository interface for Invitation entities."""

    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation.

        Raises DuplicateInvitationError when another pending invitation for
        the same (workspace, email) already exists.
        """
        ...

    async def get_by_id(self, workspace_id: UUID, id: UUID) -> Invitation | None:
        """Get an invitation by ID within a workspace."""
        ...

    async def get_by_token_hash(self, token_hash: str) -> Invitation | None:
        """Get an invitation by its hashed token."""
        ...

    async def get_for_workspace(self, workspace_id: UUID) -> list[Invitation]:
        """Get all invitations for a workspace, newest first."""
        ...

    async def get_pending_for_workspace_email(
        self, workspace_id: UUID, email: str
    ) -> Invitation | None:
        """Get the pending invitation for a workspace and email, if any."""
        ...

    async def update_status(
        self,
        id: UUID,
        status: InvitationStatus,
        accepted_at: datetime | None = None,
    ) -> Invitation:
        """Update the status of an invitation."""
        ...
