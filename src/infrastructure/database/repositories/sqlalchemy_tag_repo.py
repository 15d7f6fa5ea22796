"""SQLAlchemy implementation of Tag repository."""

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.tag import Tag
from infrastructure.database.models import TagModel, TaskTagModel


class SQLAlchemyTagRepository:
    """SQLAlchemy implementation of ITagRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, workspace_id: UUID, id: UUID) -> Tag | None:
        """Get a tag by ID within a workspace."""
        stmt = select(TagModel).where(TagModel.id == id, TagModel.workspace_id == workspace_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all_for_workspace(self, workspace_id: UUID) -> list[Tag]:
        """Get all tags for a workspace."""
        stmt = select(TagModel).where(TagModel.workspace_id == workspace_id).order_by(TagModel.name)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_many(self, workspace_id: UUID, ids: list[UUID]) -> list[Tag]:
        """Get the tags among ids that belong to the workspace."""
        if not ids:
            return []
        stmt = select(TagModel).where(
            TagModel.workspace_id == workspace_id,
            TagModel.id.in_(ids),
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_by_name_in_workspace(self, workspace_id: UUID, name: str) -> Tag | None:
        """Get a tag by name within a workspace."""
        stmt = select(TagModel).where(
            TagModel.workspace_id == workspace_id,
            TagModel.name == name,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_for_task(self, task_id: UUID) -> list[Tag]:
        """Get all tags attached to a task."""
        stmt = (
            select(TagModel)
            .join(TaskTagModel, TagModel.id == TaskTagModel.tag_id)
            .where(TaskTagModel.task_id == task_id)
            .order_by(TagModel.name)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, tag: Tag) -> Tag:
        """Create a new tag."""
        model = self._to_model(tag)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a tag. Task links go with it via ON DELETE CASCADE."""
        stmt = delete(TagModel).where(TagModel.id == id)
        result = await self._session.execute(stmt)
        await self._session.flush()
        return bool(result.rowcount)

    async def get_usage_counts_batch(self, tag_ids: list[UUID]) -> dict[UUID, int]:
        """Get usage counts for multiple tags in a single query."""
        if not tag_ids:
            return {}
        stmt = (
            select(
                TaskTagModel.tag_id,
                func.count().label("usage_count"),
            )
            .where(TaskTagModel.tag_id.in_(tag_ids))
            .group_by(TaskTagModel.tag_id)
        )
        result = await self._session.execute(stmt)
        return {row.tag_id: row.usage_count for row in result}

    def _to_entity(self, model: TagModel) -> Tag:
        """Convert ORM model to domain entity."""
        return Tag(
            id=model.id,
            workspace_id=model.workspace_id,
            name=model.name,
            color=model.color,
            created_at=model.created_at,
        )

    def _to_model(self, entity: Tag) -> TagModel:
        """Convert domain entity to ORM model."""
        return TagModel(
            id=entity.id,
            workspace_id=entity.workspace_id,
            name=entity.name,
            color=entity.color,
            created_at=entity.created_at,
        )
