"""Invitation service layer with business logic."""

import hashlib
import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from core.config import settings
from core.exceptions import (
    AlreadyAMemberError,
    InvalidRoleError,
    InvitationAlreadyAcceptedError,
    InvitationEmailMismatchError,
    InvitationExpiredError,
    InvitationNotFoundError,
)
from domain.authorization import Operation, authorize
from domain.entities.activity import ActivityAction
from domain.entities.invitation import Invitation, InvitationLookup, InvitationStatus
from domain.entities.profile import Identity
from domain.entities.workspace import (
    ASSIGNABLE_ROLES,
    WorkspaceContext,
    WorkspaceMember,
    WorkspaceRole,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService
from infrastructure.cache.provider import IPathRevalidator, Views

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CreatedInvitation:
    """A freshly created invitation with its one-time raw token and link."""

    invitation: Invitation
    token: str
    url: str


class InvitationService:
    """Service layer for workspace invitation business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        activity_service: Optional["ActivityService"] = None,
        revalidator: Optional["IPathRevalidator"] = None,
        expiry_days: int = settings.invite_expiry_days,
        require_email_match: bool = settings.invite_require_email_match,
        app_base_url: str = settings.app_base_url,
    ) -> None:
        self._uow_factory = uow_factory
        self._activity = activity_service
        self._revalidator = revalidator
        self._expiry_days = expiry_days
        self._require_email_match = require_email_match
        self._app_base_url = app_base_url.rstrip("/")

    async def create_invitation(
        self,
        ctx: WorkspaceContext,
        email: str,
        role: WorkspaceRole = WorkspaceRole.MEMBER,
    ) -> CreatedInvitation:
        """Invite an email address to the context workspace.

        Args:
            ctx: The inviter's workspace context (must be Owner or Admin).
            email: The email address to invite.
            role: The role granted on acceptance.

        Returns:
            The invitation with its raw token and shareable URL. The raw token
            is only available here; the store keeps its hash.

        Raises:
            InsufficientPermissionsError: If the inviter is not Owner or Admin.
            AlreadyAMemberError: If the email belongs to an existing member.
            DuplicateInvitationError: If an open invitation already exists,
                including one inserted concurrently.
        """
        authorize(ctx.role, Operation.CREATE_INVITE)
        if role not in ASSIGNABLE_ROLES:
            raise InvalidRoleError(str(role))

        email = self._normalize_email(email)

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get_by_email(email)
            if profile:
                existing_member = await uow.workspaces.get_member(ctx.workspace_id, profile.id)
                if existing_member:
                    raise AlreadyAMemberError(str(profile.id))

            # A lapsed pending invite no longer blocks a new one
            existing = await uow.invitations.get_pending_for_workspace_email(
                ctx.workspace_id, email
            )
            if existing and existing.is_expired:
                await uow.invitations.update_status(existing.id, InvitationStatus.EXPIRED)

            raw_token = secrets.token_urlsafe(32)
            invitation = Invitation(
                workspace_id=ctx.workspace_id,
                email=email,
                role=role,
                token_hash=self._hash_token(raw_token),
                invited_by=ctx.user_id,
                expires_at=datetime.utcnow() + timedelta(days=self._expiry_days),
            )

            # The store rejects a second pending invite for the same email
            created = await uow.invitations.create(invitation)
            await uow.commit()

        url = f"{self._app_base_url}/invite/{raw_token}"
        if not settings.is_production:
            logger.info(
                "Invite link for %s to workspace %s (%s): %s",
                email,
                ctx.workspace.name,
                role.value,
                url,
            )

        await self._revalidate(Views.INVITES)
        return CreatedInvitation(invitation=created, token=raw_token, url=url)

    async def get_invitation(self, token: str) -> InvitationLookup:
        """Look up an invitation by its raw token.

        Expiry is derived at read time and returned alongside the invitation;
        the stored row is never modified here.

        Raises:
            InvitationNotFoundError: If no invitation has this token or it
                was revoked.
        """
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get_by_token_hash(self._hash_token(token))
            if not invitation or invitation.status == InvitationStatus.REVOKED:
                raise InvitationNotFoundError()

            workspace = await uow.workspaces.get(invitation.workspace_id)
            if not workspace:
                raise InvitationNotFoundError()

            return InvitationLookup(
                invitation=invitation,
                workspace_name=workspace.name,
                expired=invitation.is_expired,
            )

    async def accept_invitation(self, token: str, identity: Identity) -> WorkspaceMember:
        """Accept an invitation as the authenticated caller.

        The membership, the invitation's accepted state and the activity
        entry are written in one transaction.

        Returns:
            The new WorkspaceMember created from the invitation.

        Raises:
            InvitationNotFoundError: If the token matches nothing, or the
                invitation was revoked.
            InvitationAlreadyAcceptedError: If already accepted.
            InvitationExpiredError: If the invitation has expired.
            InvitationEmailMismatchError: If the caller's email differs and
                email matching is enforced.
            AlreadyAMemberError: If the caller is already a workspace member.
        """
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get_by_token_hash(self._hash_token(token))
            if not invitation:
                raise InvitationNotFoundError()

            if invitation.status == InvitationStatus.ACCEPTED:
                raise InvitationAlreadyAcceptedError()
            if invitation.status == InvitationStatus.EXPIRED:
                raise InvitationExpiredError()
            if invitation.status != InvitationStatus.PENDING:
                raise InvitationNotFoundError()

            if invitation.is_expired:
                await uow.invitations.update_status(invitation.id, InvitationStatus.EXPIRED)
                await uow.commit()
                raise InvitationExpiredError()

            if self._require_email_match and (
                self._normalize_email(identity.email) != invitation.email
            ):
                raise InvitationEmailMismatchError()

            existing_member = await uow.workspaces.get_member(invitation.workspace_id, identity.id)
            if existing_member:
                raise AlreadyAMemberError(str(identity.id))

            member = WorkspaceMember(
                workspace_id=invitation.workspace_id,
                user_id=identity.id,
                role=invitation.role,
            )
            added = await uow.workspaces.add_member(member)

            await uow.invitations.update_status(
                invitation.id, InvitationStatus.ACCEPTED, accepted_at=datetime.utcnow()
            )

            if self._activity:
                await self._activity.log(
                    uow=uow,
                    workspace_id=invitation.workspace_id,
                    actor_id=identity.id,
                    action=ActivityAction.MEMBER_ADDED,
                    meta={
                        "user_id": str(identity.id),
                        "role": invitation.role.value,
                        "invitation_id": str(invitation.id),
                    },
                )

            await uow.commit()

        logger.info("User %s joined workspace %s", identity.id, invitation.workspace_id)
        await self._revalidate(Views.HOME)
        return added  # type: ignore[no-any-return]

    async def revoke_invitation(self, ctx: WorkspaceContext, invitation_id: UUID) -> bool:
        """Revoke a pending invitation of the context workspace.

        Raises:
            InsufficientPermissionsError: If the caller is not Owner or Admin.
            InvitationNotFoundError: If the invitation is not pending in this
                workspace.
        """
        authorize(ctx.role, Operation.REVOKE_INVITE)
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get_by_id(ctx.workspace_id, invitation_id)
            if not invitation or invitation.status != InvitationStatus.PENDING:
                raise InvitationNotFoundError(str(invitation_id))

            await uow.invitations.update_status(invitation_id, InvitationStatus.REVOKED)
            await uow.commit()

        await self._revalidate(Views.INVITES)
        return True

    async def list_invitations(self, ctx: WorkspaceContext) -> list[Invitation]:
        """List all invitations of the context workspace, newest first."""
        authorize(ctx.role, Operation.LIST_INVITES)
        async with self._uow_factory() as uow:
            return await uow.invitations.get_for_workspace(  # type: ignore[no-any-return]
                ctx.workspace_id
            )

    # --- Internal helpers ---

    async def _revalidate(self, *paths: str) -> None:
        if self._revalidator:
            await self._revalidator.revalidate(paths)

    @staticmethod
    def _normalize_email(email: str) -> str:
        return email.lower().strip()

    @staticmethod
    def _hash_token(token: str) -> str:
        """Hash a raw invitation token using SHA-256."""
        return hashlib.sha256(token.encode()).hexdigest()
