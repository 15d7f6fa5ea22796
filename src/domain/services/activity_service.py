"""Activity service layer for logging and querying workspace activity."""

from collections.abc import Callable
from typing import Any
from uuid import UUID

from core.exceptions import TaskNotFoundError
from domain.authorization import Operation, authorize
from domain.entities.activity import ActivityAction, ActivityLog
from domain.entities.workspace import WorkspaceContext
from domain.repositories.unit_of_work import IUnitOfWork


class ActivityService:
    """Service layer for activity logging and retrieval."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def log(
        self,
        uow: IUnitOfWork,
        workspace_id: UUID,
        actor_id: UUID,
        action: ActivityAction,
        task_id: UUID | None = None,
        meta: dict[str, Any] | None = None,
    ) -> ActivityLog:
        """Append an activity entry within an existing UoW transaction.

        Called from other services inside their own transaction so the entry
        commits (or rolls back) together with the change it describes.

        Args:
            uow: The active Unit of Work (caller manages commit).
            workspace_id: The workspace where the activity occurred.
            actor_id: The user who performed the action.
            action: The kind of activity.
            task_id: The task concerned, if any.
            meta: Optional details, e.g. a field diff under ``"changes"``.

        Returns:
            The created ActivityLog entry.
        """
        activity = ActivityLog(
            workspace_id=workspace_id,
            actor_id=actor_id,
            action=action,
            task_id=task_id,
            meta=meta or {},
        )
        return await uow.activities.create(activity)

    async def get_workspace_activity(
        self,
        ctx: WorkspaceContext,
        limit: int = 50,
        offset: int = 0,
    ) -> list[ActivityLog]:
        """Get the activity feed for the context workspace, newest first."""
        authorize(ctx.role, Operation.READ_ACTIVITY)
        async with self._uow_factory() as uow:
            return await uow.activities.get_for_workspace(  # type: ignore[no-any-return]
                ctx.workspace_id, limit=limit, offset=offset
            )

    async def get_task_history(
        self,
        ctx: WorkspaceContext,
        task_id: UUID,
        limit: int = 50,
    ) -> list[ActivityLog]:
        """Get activity history for one task in the context workspace."""
        authorize(ctx.role, Operation.READ_ACTIVITY)
        async with self._uow_factory() as uow:
            task = await uow.tasks.get(ctx.workspace_id, task_id)
            if not task:
                raise TaskNotFoundError(str(task_id))

            return await uow.activities.get_for_task(  # type: ignore[no-any-return]
                ctx.workspace_id, task_id, limit=limit
            )

    @staticmethod
    def compute_diff(
        old_dict: dict[str, Any], new_dict: dict[str, Any]
    ) -> dict[str, dict[str, Any]]:
        """Compute field-level diff between two dictionaries.

        Args:
            old_dict: The original values.
            new_dict: The updated values.

        Returns:
            Dict of changed fields: {field_name: {"old": old_val, "new": new_val}}
        """
        diff: dict[str, dict[str, Any]] = {}
        all_keys = set(old_dict.keys()) | set(new_dict.keys())

        for key in all_keys:
            old_val = old_dict.get(key)
            new_val = new_dict.get(key)
            if old_val != new_val:
                diff[key] = {"old": old_val, "new": new_val}

        return diff
