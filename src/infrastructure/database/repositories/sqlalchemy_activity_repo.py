"""SQLAlchemy implementation of Activity Log repository."""

from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.activity import ActivityAction, ActivityLog
from infrastructure.database.models import ActivityLogModel


class SQLAlchemyActivityRepository:
    """SQLAlchemy implementation of IActivityRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, activity: ActivityLog) -> ActivityLog:
        """Create a new activity log entry."""
        model = self._to_model(activity)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def get_for_workspace(
        self,
        workspace_id: UUID,
        limit: int = 50,
        offset: int = 0,
    ) -> List[ActivityLog]:
        """Get activity log entries for a workspace, ordered by newest first."""
        stmt = (
            select(ActivityLogModel)
            .where(ActivityLogModel.workspace_id == workspace_id)
            .order_by(ActivityLogModel.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_for_task(
        self,
        workspace_id: UUID,
        task_id: UUID,
        limit: int = 50,
    ) -> List[ActivityLog]:
        """Get activity log entries for a specific task."""
        stmt = (
            select(ActivityLogModel)
            .where(
                ActivityLogModel.workspace_id == workspace_id,
                ActivityLogModel.task_id == task_id,
            )
            .order_by(ActivityLogModel.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: ActivityLogModel) -> ActivityLog:
        """Convert ORM model to domain entity."""
        return ActivityLog(
            id=model.id,
            workspace_id=model.workspace_id,
            actor_id=model.actor_id,
            action=ActivityAction(model.action),
            task_id=model.task_id,
            meta=dict(model.meta or {}),
            created_at=model.created_at,
        )

    def _to_model(self, entity: ActivityLog) -> ActivityLogModel:
        """Convert domain entity to ORM model."""
        return ActivityLogModel(
            id=entity.id,
            workspace_id=entity.workspace_id,
            actor_id=entity.actor_id,
            action=entity.action.value,
            task_id=entity.task_id,
            meta=entity.meta,
            created_at=entity.created_at,
        )
