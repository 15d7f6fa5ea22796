"""Pydantic schemas for Activity API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.activity import ActivityLog


class ActivityLogResponse(BaseModel):
    """Schema for an activity log entry response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    workspace_id: UUID
    actor_id: UUID
    action: str
    task_id: UUID | None = None
    meta: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime

    @classmethod
    def from_entity(cls, entry: ActivityLog) -> "ActivityLogResponse":
        return cls(
            id=entry.id,
            workspace_id=entry.workspace_id,
            actor_id=entry.actor_id,
            action=entry.action.value,
            task_id=entry.task_id,
            meta=entry.meta,
            created_at=entry.created_at,
        )


class ActivityListResponse(BaseModel):
    """Schema for paginated activity log response."""

    data: list[ActivityLogResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
