"""Pydantic schemas for Auth API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from domain.entities.profile import Identity


class ProfileResponse(BaseModel):
    """The caller's stored profile."""

    display_name: str | None
    avatar_url: str | None
    created_at: datetime


class IdentityResponse(BaseModel):
    """The authenticated caller."""

    id: UUID
    email: str
    display_name: str
    profile: ProfileResponse

    @classmethod
    def from_entity(cls, identity: Identity) -> "IdentityResponse":
        return cls(
            id=identity.id,
            email=identity.email,
            display_name=identity.display_name,
            profile=ProfileResponse(
                display_name=identity.profile.display_name,
                avatar_url=identity.profile.avatar_url,
                created_at=identity.profile.created_at,
            ),
        )


class IdentityDetailResponse(BaseModel):
    data: IdentityResponse
