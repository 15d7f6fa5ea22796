"""Tag API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentWorkspace
from api.dependencies.services import get_tag_service
from api.v1.schemas.tag import TagCreate, TagDetailResponse, TagListResponse, TagResponse
from core.rate_limit import limiter
from domain.services.tag_service import TagService

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get(
    "",
    response_model=TagListResponse,
    summary="List tags",
    responses={200: {"description": "Tags of the current workspace with usage counts"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_tags(
    request: Request,
    ctx: CurrentWorkspace,
    service: TagService = Depends(get_tag_service),
) -> TagListResponse:
    """Get all tags of the current workspace."""
    tags = await service.list_tags(ctx)
    data = [TagResponse.from_entity(t.tag, t.usage_count) for t in tags]
    return TagListResponse(data=data, meta={"total": len(data)})


@router.post(
    "",
    response_model=TagDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a tag",
    responses={
        201: {"description": "Tag created"},
        409: {"description": "Tag name already exists in this workspace"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_tag(
    request: Request,
    body: TagCreate,
    ctx: CurrentWorkspace,
    service: TagService = Depends(get_tag_service),
) -> TagDetailResponse:
    """Create a tag in the current workspace."""
    tag = await service.create(ctx, name=body.name, color=body.color)
    return TagDetailResponse(data=TagResponse.from_entity(tag))


@router.delete(
    "/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a tag",
    responses={
        204: {"description": "Tag deleted and unlinked from tasks"},
        404: {"description": "Tag not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_tag(
    request: Request,
    tag_id: UUID,
    ctx: CurrentWorkspace,
    service: TagService = Depends(get_tag_service),
) -> None:
    """Delete a tag. Requires Owner or Admin role."""
    await service.delete(ctx, tag_id)
    return None
