"""Pydantic schemas for Tag API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.tag import Tag


class TagCreate(BaseModel):
    """Schema for creating a Tag."""

    name: str = Field(..., min_length=1, max_length=50)
    color: str = Field("#6366F1", pattern=r"^#[0-9A-Fa-f]{6}$")


class TagResponse(BaseModel):
    """Schema for Tag response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    workspace_id: UUID
    name: str
    color: str
    created_at: datetime
    usage_count: int = 0

    @classmethod
    def from_entity(cls, tag: Tag, usage_count: int = 0) -> "TagResponse":
        return cls(
            id=tag.id,
            workspace_id=tag.workspace_id,
            name=tag.name,
            color=tag.color,
            created_at=tag.created_at,
            usage_count=usage_count,
        )


class TagListResponse(BaseModel):
    """Schema for list of Tags response."""

    data: list[TagResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class TagDetailResponse(BaseModel):
    """Schema for single Tag response."""

    data: TagResponse
