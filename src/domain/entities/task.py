"""Task domain entities."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID, uuid4

from domain.entities.tag import Tag


class TaskStatus(StrEnum):
    """Board column a task sits in."""

    BACKLOG = "backlog"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class TaskPriority(StrEnum):
    """Task priority, lowest first."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


PRIORITY_RANK = {
    TaskPriority.LOW: 0,
    TaskPriority.MEDIUM: 1,
    TaskPriority.HIGH: 2,
    TaskPriority.URGENT: 3,
}


@dataclass
class Task:
    """Domain entity for a workspace Task."""

    workspace_id: UUID
    title: str
    created_by: UUID
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    status: TaskStatus = TaskStatus.BACKLOG
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: date | None = None
    assignee_id: UUID | None = None
    tag_ids: list[UUID] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def is_owned_or_assigned(self, user_id: UUID) -> bool:
        """True when the user created the task or is its assignee."""
        return self.created_by == user_id or self.assignee_id == user_id


@dataclass
class Subtask:
    """A checklist item on a task, ordered by position."""

    task_id: UUID
    title: str
    id: UUID = field(default_factory=uuid4)
    is_done: bool = False
    position: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Comment:
    """A comment left on a task."""

    task_id: UUID
    user_id: UUID
    content: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Attachment:
    """Metadata for a file attached to a task. Bytes live in external storage."""

    task_id: UUID
    user_id: UUID
    file_path: str
    file_name: str
    id: UUID = field(default_factory=uuid4)
    file_type: str | None = None
    file_size: int | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True, slots=True)
class TaskDetail:
    """Read-only value object: a Task with everything hanging off it."""

    task: Task
    tags: list[Tag]
    subtasks: list[Subtask]
    comments: list[Comment]
    attachments: list[Attachment]


@dataclass(frozen=True, slots=True)
class TaskFilters:
    """Filtering and ordering options for listing tasks."""

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assignee_id: UUID | None = None
    tag_id: UUID | None = None
    due_date_from: date | None = None
    due_date_to: date | None = None
    search: str | None = None
    sort_by: str = "created_at"
    sort_order: str = "desc"
