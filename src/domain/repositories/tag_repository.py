"""Tag repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.tag import Tag


class ITagRepository(Protocol):
    """Repository interface for Tag entities."""

    async def get(self, workspace_id: UUID, id: UUID) -> Tag | None:
        """Get a tag by ID within a workspace."""
        ...

    async def get_all_for_workspace(self, workspace_id: UUID) -> list[Tag]:
        """Get all tags for a workspace."""
        ...

    async def get_many(self, workspace_id: UUID, ids: list[UUID]) -> list[Tag]:
        """Get the tags among ``ids`` that belong to the workspace."""
        ...

    async def get_by_name_in_workspace(self, workspace_id: UUID, name: str) -> Tag | None:
        """Get a tag by name within a workspace."""
        ...

    async def get_for_task(self, task_id: UUID) -> list[Tag]:
        """Get all tags attached to a task."""
        ...

    async def create(self, tag: Tag) -> Tag:
        """Create a new tag."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a tag and return success status."""
        ...

    async def get_usage_counts_batch(self, tag_ids: list[UUID]) -> dict[UUID, int]:
        """Get usage counts for multiple tags in a single query."""
        ...
