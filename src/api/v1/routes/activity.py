"""Activity log API routes."""

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies.auth import CurrentWorkspace
from api.dependencies.services import get_activity_service
from api.v1.schemas.activity import ActivityListResponse, ActivityLogResponse
from core.rate_limit import limiter
from domain.services.activity_service import ActivityService

router = APIRouter(prefix="/activity", tags=["activity"])


@router.get(
    "",
    response_model=ActivityListResponse,
    summary="Get workspace activity",
    responses={200: {"description": "Activity entries, newest first"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_workspace_activity(
    request: Request,
    ctx: CurrentWorkspace,
    limit: int = Query(50, ge=1, le=100, description="Max entries to return"),
    offset: int = Query(0, ge=0, description="Number of entries to skip"),
    service: ActivityService = Depends(get_activity_service),
) -> ActivityListResponse:
    """Get the activity log of the current workspace."""
    entries = await service.get_workspace_activity(ctx, limit=limit, offset=offset)
    return ActivityListResponse(
        data=[ActivityLogResponse.from_entity(e) for e in entries],
        meta={"limit": limit, "offset": offset, "count": len(entries)},
    )
