"""Task API routes."""

from datetime import date
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentWorkspace
from api.dependencies.services import get_activity_service, get_task_service
from api.v1.schemas.activity import ActivityListResponse, ActivityLogResponse
from api.v1.schemas.task import (
    AttachmentCreate,
    AttachmentDetailResponse,
    AttachmentResponse,
    CommentCreate,
    CommentDetailResponse,
    CommentResponse,
    SubtaskCreate,
    SubtaskDetailResponse,
    SubtaskResponse,
    SubtaskUpdate,
    TaskCreate,
    TaskDetailData,
    TaskDetailResponse,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
    TaskWithRelationsResponse,
)
from core.rate_limit import limiter
from domain.entities.task import TaskFilters, TaskPriority, TaskStatus
from domain.services.activity_service import ActivityService
from domain.services.task_service import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get(
    "",
    response_model=TaskListResponse,
    summary="List tasks",
    responses={200: {"description": "Tasks of the current workspace"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_tasks(
    request: Request,
    ctx: CurrentWorkspace,
    service: TaskService = Depends(get_task_service),
    status_filter: TaskStatus | None = Query(None, alias="status"),
    priority: TaskPriority | None = Query(None),
    assignee_id: UUID | None = Query(None),
    tag_id: UUID | None = Query(None),
    due_date_from: date | None = Query(None),
    due_date_to: date | None = Query(None),
    search: str | None = Query(None, max_length=255, description="Matches title or description"),
    sort_by: Literal["created_at", "due_date", "priority", "title"] = Query("created_at"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
) -> TaskListResponse:
    """List, filter and sort the tasks of the current workspace."""
    filters = TaskFilters(
        status=status_filter,
        priority=priority,
        assignee_id=assignee_id,
        tag_id=tag_id,
        due_date_from=due_date_from,
        due_date_to=due_date_to,
        search=search or None,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    tasks = await service.list_tasks(ctx, filters)
    data = [TaskResponse.from_entity(t) for t in tasks]
    return TaskListResponse(data=data, meta={"total": len(data)})


@router.post(
    "",
    response_model=TaskDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
    responses={
        201: {"description": "Task created"},
        400: {"description": "Business rule violated (assignee, tags)"},
        403: {"description": "Viewers cannot create tasks"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_task(
    request: Request,
    body: TaskCreate,
    ctx: CurrentWorkspace,
    service: TaskService = Depends(get_task_service),
) -> TaskDetailResponse:
    """Create a task in the current workspace."""
    task = await service.create_task(
        ctx,
        title=body.title,
        status=body.status,
        priority=body.priority,
        description=body.description,
        due_date=body.due_date,
        assignee_id=body.assignee_id,
        tag_ids=body.tag_ids,
    )
    return TaskDetailResponse(data=TaskResponse.from_entity(task))


@router.get(
    "/{task_id}",
    response_model=TaskWithRelationsResponse,
    summary="Get a task",
    responses={404: {"description": "Task not found in the current workspace"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_task(
    request: Request,
    task_id: UUID,
    ctx: CurrentWorkspace,
    service: TaskService = Depends(get_task_service),
) -> TaskWithRelationsResponse:
    """Get a task with its tags, subtasks, comments and attachments."""
    detail = await service.get_task(ctx, task_id)
    return TaskWithRelationsResponse(data=TaskDetailData.from_detail(detail))


@router.patch(
    "/{task_id}",
    response_model=TaskDetailResponse,
    summary="Update a task",
    responses={
        400: {"description": "Business rule violated"},
        403: {"description": "Not allowed to update this task"},
        404: {"description": "Task not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_task(
    request: Request,
    task_id: UUID,
    body: TaskUpdate,
    ctx: CurrentWorkspace,
    service: TaskService = Depends(get_task_service),
) -> TaskDetailResponse:
    """Update any subset of a task's fields."""
    task = await service.update_task(ctx, task_id, body.model_dump(exclude_unset=True))
    return TaskDetailResponse(data=TaskResponse.from_entity(task))


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a task",
    responses={
        204: {"description": "Task and everything attached deleted"},
        403: {"description": "Owner or Admin only"},
        404: {"description": "Task not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_task(
    request: Request,
    task_id: UUID,
    ctx: CurrentWorkspace,
    service: TaskService = Depends(get_task_service),
) -> None:
    await service.delete_task(ctx, task_id)
    return None


@router.get(
    "/{task_id}/activity",
    response_model=ActivityListResponse,
    summary="Get task history",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_task_activity(
    request: Request,
    task_id: UUID,
    ctx: CurrentWorkspace,
    limit: int = Query(50, ge=1, le=100),
    service: ActivityService = Depends(get_activity_service),
) -> ActivityListResponse:
    """Get the activity entries linked to a task, newest first."""
    entries = await service.get_task_history(ctx, task_id, limit=limit)
    return ActivityListResponse(
        data=[ActivityLogResponse.from_entity(e) for e in entries],
        meta={"limit": limit, "count": len(entries)},
    )


# --- Subtasks ---


@router.post(
    "/{task_id}/subtasks",
    response_model=SubtaskDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a subtask",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def add_subtask(
    request: Request,
    task_id: UUID,
    body: SubtaskCreate,
    ctx: CurrentWorkspace,
    service: TaskService = Depends(get_task_service),
) -> SubtaskDetailResponse:
    subtask = await service.add_subtask(
        ctx, task_id, title=body.title, is_done=body.is_done, position=body.position
    )
    return SubtaskDetailResponse(data=SubtaskResponse.from_entity(subtask))


@router.patch(
    "/{task_id}/subtasks/{subtask_id}",
    response_model=SubtaskDetailResponse,
    summary="Update or toggle a subtask",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_subtask(
    request: Request,
    task_id: UUID,
    subtask_id: UUID,
    body: SubtaskUpdate,
    ctx: CurrentWorkspace,
    service: TaskService = Depends(get_task_service),
) -> SubtaskDetailResponse:
    subtask = await service.update_subtask(
        ctx,
        task_id,
        subtask_id,
        title=body.title,
        is_done=body.is_done,
        position=body.position,
    )
    return SubtaskDetailResponse(data=SubtaskResponse.from_entity(subtask))


@router.delete(
    "/{task_id}/subtasks/{subtask_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a subtask",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_subtask(
    request: Request,
    task_id: UUID,
    subtask_id: UUID,
    ctx: CurrentWorkspace,
    service: TaskService = Depends(get_task_service),
) -> None:
    await service.delete_subtask(ctx, task_id, subtask_id)
    return None


# --- Comments ---


@router.post(
    "/{task_id}/comments",
    response_model=CommentDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a comment",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def add_comment(
    request: Request,
    task_id: UUID,
    body: CommentCreate,
    ctx: CurrentWorkspace,
    service: TaskService = Depends(get_task_service),
) -> CommentDetailResponse:
    comment = await service.add_comment(ctx, task_id, body.content)
    return CommentDetailResponse(data=CommentResponse.from_entity(comment))


@router.delete(
    "/{task_id}/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a comment",
    responses={403: {"description": "Only the author, an Owner or an Admin may delete"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_comment(
    request: Request,
    task_id: UUID,
    comment_id: UUID,
    ctx: CurrentWorkspace,
    service: TaskService = Depends(get_task_service),
) -> None:
    await service.delete_comment(ctx, task_id, comment_id)
    return None


# --- Attachments ---


@router.post(
    "/{task_id}/attachments",
    response_model=AttachmentDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register an attachment",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def add_attachment(
    request: Request,
    task_id: UUID,
    body: AttachmentCreate,
    ctx: CurrentWorkspace,
    service: TaskService = Depends(get_task_service),
) -> AttachmentDetailResponse:
    """Record metadata for a file already uploaded to storage."""
    attachment = await service.add_attachment(
        ctx,
        task_id,
        file_path=body.file_path,
        file_name=body.file_name,
        file_type=body.file_type,
        file_size=body.file_size,
    )
    return AttachmentDetailResponse(data=AttachmentResponse.from_entity(attachment))
