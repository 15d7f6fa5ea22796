"""Workspace API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status

from api.dependencies.auth import (
    CurrentIdentity,
    CurrentWorkspace,
    PathWorkspace,
    clear_workspace_cookie,
    require_role,
    set_workspace_cookie,
)
from api.dependencies.services import get_workspace_service
from api.v1.schemas.workspace import (
    SeedResponse,
    UpdateMemberRoleRequest,
    WorkspaceCreate,
    WorkspaceDetailResponse,
    WorkspaceListResponse,
    WorkspaceMemberListResponse,
    WorkspaceMemberResponse,
    WorkspaceResponse,
    WorkspaceUpdate,
)
from core.rate_limit import limiter
from domain.entities.workspace import WorkspaceRole
from domain.services.workspace_service import WorkspaceService

router = APIRouter(prefix="/workspaces", tags=["workspaces"])


@router.get(
    "",
    response_model=WorkspaceListResponse,
    summary="List user's workspaces",
    responses={200: {"description": "Workspaces the user belongs to, with their role"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_workspaces(
    request: Request,
    identity: CurrentIdentity,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceListResponse:
    """Get all workspaces the authenticated user is a member of."""
    memberships = await service.get_all_for_user(identity.id)
    data = [WorkspaceResponse.from_entity(m.workspace, role=m.role.value) for m in memberships]
    return WorkspaceListResponse(data=data, meta={"total": len(data)})


@router.post(
    "",
    response_model=WorkspaceDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a workspace",
    responses={201: {"description": "Workspace created and selected"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_workspace(
    request: Request,
    response: Response,
    body: WorkspaceCreate,
    identity: CurrentIdentity,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceDetailResponse:
    """Create a new workspace. The creator becomes its Owner and it becomes current."""
    workspace = await service.create(
        user_id=identity.id,
        name=body.name,
        description=body.description,
    )
    set_workspace_cookie(response, workspace.id)
    return WorkspaceDetailResponse(
        data=WorkspaceResponse.from_entity(workspace, role=WorkspaceRole.OWNER.value)
    )


@router.get(
    "/current",
    response_model=WorkspaceDetailResponse,
    summary="Get the current workspace",
    responses={428: {"description": "No valid workspace selected"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_current_workspace(
    request: Request,
    ctx: CurrentWorkspace,
) -> WorkspaceDetailResponse:
    """Return the resolved workspace context with the caller's role."""
    return WorkspaceDetailResponse(data=WorkspaceResponse.from_context(ctx))


@router.post(
    "/{workspace_id}/select",
    response_model=WorkspaceDetailResponse,
    summary="Select the current workspace",
    responses={
        403: {"description": "Not a member"},
        404: {"description": "Workspace not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def select_workspace(
    request: Request,
    response: Response,
    workspace_id: UUID,
    identity: CurrentIdentity,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceDetailResponse:
    """Make a workspace current after checking membership."""
    ctx = await service.select(workspace_id, identity.id)
    set_workspace_cookie(response, ctx.workspace_id)
    return WorkspaceDetailResponse(data=WorkspaceResponse.from_context(ctx))


@router.patch(
    "/{workspace_id}",
    response_model=WorkspaceDetailResponse,
    summary="Update workspace",
    responses={403: {"description": "Owner only"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_workspace(
    request: Request,
    body: WorkspaceUpdate,
    ctx: PathWorkspace,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceDetailResponse:
    """Update workspace name or description. Requires Owner role."""
    workspace = await service.update(ctx, name=body.name, description=body.description)
    return WorkspaceDetailResponse(data=WorkspaceResponse.from_entity(workspace, ctx.role.value))


@router.delete(
    "/{workspace_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete workspace",
    responses={
        204: {"description": "Workspace and all its data deleted"},
        403: {"description": "Owner only"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_workspace(
    request: Request,
    response: Response,
    ctx: PathWorkspace,
    service: WorkspaceService = Depends(get_workspace_service),
) -> None:
    """Delete a workspace and everything in it. Requires Owner role."""
    await service.delete(ctx)
    clear_workspace_cookie(response)
    return None


# --- Member management ---


@router.get(
    "/{workspace_id}/members",
    response_model=WorkspaceMemberListResponse,
    summary="List workspace members",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_members(
    request: Request,
    ctx: PathWorkspace,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceMemberListResponse:
    """List all members of the workspace with their profiles."""
    members = await service.get_members(ctx)
    data = [WorkspaceMemberResponse.from_entity(m) for m in members]
    return WorkspaceMemberListResponse(data=data, meta={"total": len(data)})


@router.patch(
    "/{workspace_id}/members/{user_id}",
    response_model=WorkspaceMemberResponse,
    summary="Change a member's role",
    responses={
        400: {"description": "Invalid role or last owner"},
        403: {"description": "Owner only, or own role"},
        404: {"description": "Member not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_member_role(
    request: Request,
    user_id: UUID,
    body: UpdateMemberRoleRequest,
    ctx: PathWorkspace,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceMemberResponse:
    """Change a member's role. Requires Owner role."""
    await service.update_member_role(ctx, user_id, WorkspaceRole(body.role))
    members = await service.get_members(ctx)
    member = next(m for m in members if m.member.user_id == user_id)
    return WorkspaceMemberResponse.from_entity(member)


@router.delete(
    "/{workspace_id}/members/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a member",
    responses={
        400: {"description": "Cannot remove the last owner"},
        403: {"description": "Owner only"},
        404: {"description": "Member not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def remove_member(
    request: Request,
    user_id: UUID,
    ctx: PathWorkspace,
    service: WorkspaceService = Depends(get_workspace_service),
) -> None:
    """Remove a member from the workspace. Requires Owner role."""
    await service.remove_member(ctx, user_id)
    return None


@router.post(
    "/{workspace_id}/seed",
    response_model=SeedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Seed demo data",
    dependencies=[Depends(require_role(WorkspaceRole.OWNER, WorkspaceRole.ADMIN))],
    responses={403: {"description": "Owner or Admin only"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def seed_demo_data(
    request: Request,
    ctx: PathWorkspace,
    service: WorkspaceService = Depends(get_workspace_service),
) -> SeedResponse:
    """Fill the workspace with demo tags, tasks, subtasks and comments."""
    created = await service.seed_demo_data(ctx)
    return SeedResponse(tasks_created=created)
