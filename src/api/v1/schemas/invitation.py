"""Pydantic schemas for Invitation API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.entities.invitation import Invitation


class CreateInvitationRequest(BaseModel):
    """Schema for creating a workspace invitation."""

    email: str = Field(..., min_length=3, max_length=255)
    role: str = Field("member", pattern="^(admin|member|viewer)$")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Basic email validation."""
        v = v.strip().lower()
        local, _, domain = v.partition("@")
        if not local or "." not in domain or domain.startswith(".") or domain.endswith("."):
            raise ValueError("Invalid email address")
        return v


class InvitationResponse(BaseModel):
    """Schema for Invitation response. Never carries the token."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "workspace_id": "456e4567-e89b-12d3-a456-426614174000",
                "email": "bob@x.com",
                "role": "member",
                "status": "pending",
                "invited_by": "789e4567-e89b-12d3-a456-426614174000",
                "created_at": "2026-02-01T10:00:00",
                "expires_at": "2026-02-08T10:00:00",
                "accepted_at": None,
            }
        },
    )

    id: UUID
    workspace_id: UUID
    email: str
    role: str
    status: str
    invited_by: UUID
    created_at: datetime
    expires_at: datetime
    accepted_at: datetime | None = None

    @classmethod
    def from_entity(cls, invitation: Invitation) -> "InvitationResponse":
        return cls(
            id=invitation.id,
            workspace_id=invitation.workspace_id,
            email=invitation.email,
            role=invitation.role.value,
            status=invitation.status.value,
            invited_by=invitation.invited_by,
            created_at=invitation.created_at,
            expires_at=invitation.expires_at,
            accepted_at=invitation.accepted_at,
        )


class CreatedInvitationResponse(BaseModel):
    """Schema for a freshly created invitation. The only place the token appears."""

    data: InvitationResponse
    token: str
    invite_url: str


class InvitationLookupResponse(BaseModel):
    """Schema for looking up an invitation by token."""

    data: InvitationResponse
    workspace_name: str
    expired: bool


class InvitationListResponse(BaseModel):
    """Schema for list of Invitations response."""

    data: list[InvitationResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class AcceptInvitationResponse(BaseModel):
    """Schema for an accepted invitation: the new membership."""

    workspace_id: UUID
    user_id: UUID
    role: str
