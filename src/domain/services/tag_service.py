"""Tag service layer with business logic."""

from typing import Callable, List, Optional
from uuid import UUID

from core.exceptions import DuplicateTagError, TagNotFoundError
from domain.authorization import Operation, authorize
from domain.entities.tag import Tag, TagWithCount
from domain.entities.workspace import WorkspaceContext
from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.cache.provider import IPathRevalidator, Views


class TagService:
    """Service layer for Tag business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        revalidator: Optional["IPathRevalidator"] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._revalidator = revalidator

    async def list_tags(self, ctx: WorkspaceContext) -> List[TagWithCount]:
        """Get all tags of the context workspace with usage counts."""
        authorize(ctx.role, Operation.READ_TASKS)
        async with self._uow_factory() as uow:
            tags = await uow.tags.get_all_for_workspace(ctx.workspace_id)

            tag_ids = [tag.id for tag in tags]
            usage_counts = await uow.tags.get_usage_counts_batch(tag_ids)
            return [
                TagWithCount(tag=tag, usage_count=usage_counts.get(tag.id, 0))
                for tag in tags
            ]

    async def create(
        self,
        ctx: WorkspaceContext,
        name: str,
        color: str = "#6366F1",
    ) -> Tag:
        """Create a tag in the context workspace. Names are unique per workspace."""
        authorize(ctx.role, Operation.CREATE_TAG)
        async with self._uow_factory() as uow:
            existing = await uow.tags.get_by_name_in_workspace(ctx.workspace_id, name)
            if existing:
                raise DuplicateTagError(name)

            tag = Tag(workspace_id=ctx.workspace_id, name=name, color=color)
            created = await uow.tags.create(tag)
            await uow.commit()
            return created  # type: ignore[no-any-return]

    async def delete(self, ctx: WorkspaceContext, tag_id: UUID) -> bool:
        """Delete a tag of the context workspace, unlinking it from tasks."""
        authorize(ctx.role, Operation.DELETE_TAG)
        async with self._uow_factory() as uow:
            tag = await uow.tags.get(ctx.workspace_id, tag_id)
            if not tag:
                raise TagNotFoundError(str(tag_id))

            deleted = await uow.tags.delete(tag_id)
            await uow.commit()

        if self._revalidator:
            await self._revalidator.revalidate(Views.TASK_LISTS)
        return deleted  # type: ignore[no-any-return]
