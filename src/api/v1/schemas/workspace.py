"""Pydantic schemas for Workspace API."""

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.workspace import MemberWithProfile, Workspace, WorkspaceContext


class WorkspaceCreate(BaseModel):
    """Schema for creating a Workspace."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)


class WorkspaceUpdate(BaseModel):
    """Schema for updating a Workspace (all fields optional)."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)


class WorkspaceResponse(BaseModel):
    """Schema for Workspace response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "Acme",
                "description": "Team workspace for project management",
                "created_by": "456e4567-e89b-12d3-a456-426614174000",
                "role": "owner",
                "created_at": "2026-02-01T10:00:00",
                "updated_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: UUID
    name: str
    description: Optional[str]
    created_by: UUID
    role: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, workspace: Workspace, role: Optional[str] = None) -> "WorkspaceResponse":
        return cls(
            id=workspace.id,
            name=workspace.name,
            description=workspace.description,
            created_by=workspace.created_by,
            role=role,
            created_at=workspace.created_at,
            updated_at=workspace.updated_at,
        )

    @classmethod
    def from_context(cls, ctx: WorkspaceContext) -> "WorkspaceResponse":
        return cls.from_entity(ctx.workspace, role=ctx.role.value)


class WorkspaceMemberResponse(BaseModel):
    """Schema for Workspace Member response."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    email: str = ""
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: str
    created_at: datetime

    @classmethod
    def from_entity(cls, member: MemberWithProfile) -> "WorkspaceMemberResponse":
        return cls(
            user_id=member.member.user_id,
            email=member.email,
            display_name=member.display_name,
            avatar_url=member.avatar_url,
            role=member.member.role.value,
            created_at=member.member.created_at,
        )


class WorkspaceListResponse(BaseModel):
    """Schema for list of Workspaces response."""

    data: List[WorkspaceResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class WorkspaceDetailResponse(BaseModel):
    """Schema for single Workspace response."""

    data: WorkspaceResponse


class WorkspaceMemberListResponse(BaseModel):
    """Schema for list of Workspace Members response."""

    data: List[WorkspaceMemberResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class UpdateMemberRoleRequest(BaseModel):
    """Schema for updating a member's role. Ownership cannot be granted."""

    role: str = Field(..., pattern="^(admin|member|viewer)$")


class SeedResponse(BaseModel):
    """Schema for demo data seeding result."""

    tasks_created: int
