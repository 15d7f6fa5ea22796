"""Activity log domain entity and action constants."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID, uuid4


class ActivityAction(StrEnum):
    """Kinds of workspace activity recorded in the log."""

    TASK_CREATED = "task_created"
    TASK_UPDATED = "task_updated"
    TASK_DELETED = "task_deleted"
    STATUS_CHANGED = "status_changed"
    COMMENT_ADDED = "comment_added"
    SUBTASK_ADDED = "subtask_added"
    ATTACHMENT_ADDED = "attachment_added"
    MEMBER_ADDED = "member_added"
    MEMBER_REMOVED = "member_removed"
    ROLE_CHANGED = "role_changed"
    WORKSPACE_CREATED = "workspace_created"


@dataclass
class ActivityLog:
    """Domain entity for an activity log entry. Entries are append-only."""

    workspace_id: UUID
    actor_id: UUID
    action: ActivityAction
    id: UUID = field(default_factory=uuid4)
    task_id: UUID | None = None
    meta: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.utcnow)
