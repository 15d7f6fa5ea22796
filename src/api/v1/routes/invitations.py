"""Invitation API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status

from api.dependencies.auth import CurrentIdentity, PathWorkspace, set_workspace_cookie
from api.dependencies.services import get_invitation_service
from api.v1.schemas.invitation import (
    AcceptInvitationResponse,
    CreatedInvitationResponse,
    CreateInvitationRequest,
    InvitationListResponse,
    InvitationLookupResponse,
    InvitationResponse,
)
from core.rate_limit import limiter
from domain.entities.workspace import WorkspaceRole
from domain.services.invitation_service import InvitationService

# Workspace-scoped invitation routes
workspace_invitations_router = APIRouter(
    prefix="/workspaces/{workspace_id}/invitations",
    tags=["invitations"],
)

# Token-scoped invitation routes (lookup, accept)
invitations_router = APIRouter(
    prefix="/invitations",
    tags=["invitations"],
)


@workspace_invitations_router.post(
    "",
    response_model=CreatedInvitationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create workspace invitation",
    responses={
        201: {"description": "Invitation created; the token is shown only here"},
        403: {"description": "Insufficient permissions (Owner or Admin only)"},
        409: {"description": "Duplicate invitation or already a member"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_invitation(
    request: Request,
    body: CreateInvitationRequest,
    ctx: PathWorkspace,
    service: InvitationService = Depends(get_invitation_service),
) -> CreatedInvitationResponse:
    """Invite an email address to join the workspace."""
    created = await service.create_invitation(ctx, email=body.email, role=WorkspaceRole(body.role))
    return CreatedInvitationResponse(
        data=InvitationResponse.from_entity(created.invitation),
        token=created.token,
        invite_url=created.url,
    )


@workspace_invitations_router.get(
    "",
    response_model=InvitationListResponse,
    summary="List workspace invitations",
    responses={403: {"description": "Insufficient permissions (Owner or Admin only)"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_invitations(
    request: Request,
    ctx: PathWorkspace,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationListResponse:
    """List all invitations of the workspace, newest first."""
    invitations = await service.list_invitations(ctx)
    data = [InvitationResponse.from_entity(i) for i in invitations]
    return InvitationListResponse(data=data, meta={"total": len(data)})


@workspace_invitations_router.delete(
    "/{invitation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Revoke invitation",
    responses={
        204: {"description": "Invitation revoked"},
        403: {"description": "Insufficient permissions (Owner or Admin only)"},
        404: {"description": "No pending invitation with this id"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def revoke_invitation(
    request: Request,
    invitation_id: UUID,
    ctx: PathWorkspace,
    service: InvitationService = Depends(get_invitation_service),
) -> None:
    """Revoke a pending invitation."""
    await service.revoke_invitation(ctx, invitation_id)
    return None


# --- Token-scoped routes ---


@invitations_router.get(
    "/{token}",
    response_model=InvitationLookupResponse,
    summary="Look up invitation",
    responses={404: {"description": "Invitation not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_invitation(
    request: Request,
    token: str,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationLookupResponse:
    """Show an invitation before signing in. Expiry is computed, never stored here."""
    lookup = await service.get_invitation(token)
    return InvitationLookupResponse(
        data=InvitationResponse.from_entity(lookup.invitation),
        workspace_name=lookup.workspace_name,
        expired=lookup.expired,
    )


@invitations_router.post(
    "/{token}/accept",
    response_model=AcceptInvitationResponse,
    summary="Accept invitation",
    responses={
        401: {"description": "Not signed in"},
        403: {"description": "Signed-in email does not match the invitation"},
        404: {"description": "Invitation not found or revoked"},
        409: {"description": "Already accepted or already a member"},
        410: {"description": "Invitation expired"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def accept_invitation(
    request: Request,
    response: Response,
    token: str,
    identity: CurrentIdentity,
    service: InvitationService = Depends(get_invitation_service),
) -> AcceptInvitationResponse:
    """Join the invited workspace and make it current."""
    member = await service.accept_invitation(token, identity)
    set_workspace_cookie(response, member.workspace_id)
    return AcceptInvitationResponse(
        workspace_id=member.workspace_id,
        user_id=member.user_id,
        role=member.role.value,
    )
