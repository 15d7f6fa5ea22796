"""Pydantic schemas for Task API."""

from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.entities.tag import Tag
from domain.entities.task import (
    Attachment,
    Comment,
    Subtask,
    Task,
    TaskDetail,
    TaskPriority,
    TaskStatus,
)


class TaskCreate(BaseModel):
    """Schema for creating a Task."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    due_date: date | None = None
    assignee_id: UUID | None = None
    tag_ids: list[UUID] = Field(default_factory=list)


class TaskUpdate(BaseModel):
    """Schema for updating a Task.

    Only supplied fields are applied. An explicit null clears description,
    due_date, assignee_id or tag_ids; title, status and priority cannot be
    cleared.
    """

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: date | None = None
    assignee_id: UUID | None = None
    tag_ids: list[UUID] | None = None

    @field_validator("title", "status", "priority")
    @classmethod
    def not_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class TagSummary(BaseModel):
    """Minimal tag representation for embedding in Task response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    color: str

    @classmethod
    def from_entity(cls, tag: Tag) -> "TagSummary":
        return cls(id=tag.id, name=tag.name, color=tag.color)


class TaskResponse(BaseModel):
    """Schema for Task response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "workspace_id": "456e4567-e89b-12d3-a456-426614174000",
                "title": "Design new landing page",
                "description": "Create wireframes and mockups",
                "status": "in_progress",
                "priority": "high",
                "due_date": "2026-03-01",
                "assignee_id": None,
                "created_by": "789e4567-e89b-12d3-a456-426614174000",
                "tag_ids": [],
                "created_at": "2026-02-01T10:00:00",
                "updated_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: UUID
    workspace_id: UUID
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    due_date: date | None
    assignee_id: UUID | None
    created_by: UUID
    tag_ids: list[UUID] = []
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            workspace_id=task.workspace_id,
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
            due_date=task.due_date,
            assignee_id=task.assignee_id,
            created_by=task.created_by,
            tag_ids=list(task.tag_ids),
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class SubtaskCreate(BaseModel):
    """Schema for adding a Subtask. Position defaults to the end of the list."""

    title: str = Field(..., min_length=1, max_length=255)
    is_done: bool = False
    position: int | None = Field(None, ge=0)


class SubtaskUpdate(BaseModel):
    """Schema for updating a Subtask (all fields optional)."""

    title: str | None = Field(None, min_length=1, max_length=255)
    is_done: bool | None = None
    position: int | None = Field(None, ge=0)


class SubtaskResponse(BaseModel):
    """Schema for Subtask response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    task_id: UUID
    title: str
    is_done: bool
    position: int
    created_at: datetime

    @classmethod
    def from_entity(cls, subtask: Subtask) -> "SubtaskResponse":
        return cls(
            id=subtask.id,
            task_id=subtask.task_id,
            title=subtask.title,
            is_done=subtask.is_done,
            position=subtask.position,
            created_at=subtask.created_at,
        )


class CommentCreate(BaseModel):
    """Schema for adding a Comment."""

    content: str = Field(..., min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    """Schema for Comment response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    task_id: UUID
    user_id: UUID
    content: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, comment: Comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            task_id=comment.task_id,
            user_id=comment.user_id,
            content=comment.content,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


class AttachmentCreate(BaseModel):
    """Schema for registering an uploaded file's metadata."""

    file_path: str = Field(..., min_length=1, max_length=1024)
    file_name: str = Field(..., min_length=1, max_length=255)
    file_type: str | None = Field(None, max_length=255)
    file_size: int | None = Field(None, ge=0)


class AttachmentResponse(BaseModel):
    """Schema for Attachment response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    task_id: UUID
    user_id: UUID
    file_path: str
    file_name: str
    file_type: str | None
    file_size: int | None
    created_at: datetime

    @classmethod
    def from_entity(cls, attachment: Attachment) -> "AttachmentResponse":
        return cls(
            id=attachment.id,
            task_id=attachment.task_id,
            user_id=attachment.user_id,
            file_path=attachment.file_path,
            file_name=attachment.file_name,
            file_type=attachment.file_type,
            file_size=attachment.file_size,
            created_at=attachment.created_at,
        )


class TaskDetailData(TaskResponse):
    """A Task with its tags, subtasks, comments and attachments."""

    tags: list[TagSummary] = []
    subtasks: list[SubtaskResponse] = []
    comments: list[CommentResponse] = []
    attachments: list[AttachmentResponse] = []

    @classmethod
    def from_detail(cls, detail: TaskDetail) -> "TaskDetailData":
        base = TaskResponse.from_entity(detail.task)
        return cls(
            **base.model_dump(),
            tags=[TagSummary.from_entity(t) for t in detail.tags],
            subtasks=[SubtaskResponse.from_entity(s) for s in detail.subtasks],
            comments=[CommentResponse.from_entity(c) for c in detail.comments],
            attachments=[AttachmentResponse.from_entity(a) for a in detail.attachments],
        )


class TaskListResponse(BaseModel):
    """Schema for list of Tasks response."""

    data: list[TaskResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class TaskDetailResponse(BaseModel):
    """Schema for single Task response."""

    data: TaskResponse


class TaskWithRelationsResponse(BaseModel):
    """Schema for a Task with everything hanging off it."""

    data: TaskDetailData


class SubtaskDetailResponse(BaseModel):
    data: SubtaskResponse


class CommentDetailResponse(BaseModel):
    data: CommentResponse


class AttachmentDetailResponse(BaseModel):
    data: AttachmentResponse
