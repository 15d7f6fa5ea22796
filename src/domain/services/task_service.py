"""Task service layer with business logic."""

from collections.abc import Callable
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from core.exceptions import (
    AuthorizationError,
    CommentNotFoundError,
    SubtaskNotFoundError,
    TaskNotFoundError,
    TaskRuleViolationError,
)
from domain.authorization import Operation, authorize, is_allowed
from domain.entities.activity import ActivityAction
from domain.entities.task import (
    Attachment,
    Comment,
    Subtask,
    Task,
    TaskDetail,
    TaskFilters,
    TaskPriority,
    TaskStatus,
)
from domain.entities.workspace import WorkspaceContext, WorkspaceRole
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService
from infrastructure.cache.provider import IPathRevalidator, Views

UPDATABLE_FIELDS = frozenset(
    {"title", "description", "status", "priority", "due_date", "assignee_id", "tag_ids"}
)


class TaskService:
    """Service layer for Task business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        activity_service: Optional["ActivityService"] = None,
        revalidator: Optional["IPathRevalidator"] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._activity = activity_service
        self._revalidator = revalidator

    async def list_tasks(
        self, ctx: WorkspaceContext, filters: TaskFilters | None = None
    ) -> list[Task]:
        """List tasks of the context workspace matching the filters."""
        authorize(ctx.role, Operation.READ_TASKS)
        async with self._uow_factory() as uow:
            return await uow.tasks.find(  # type: ignore[no-any-return]
                ctx.workspace_id, filters or TaskFilters()
            )

    async def get_task(self, ctx: WorkspaceContext, task_id: UUID) -> TaskDetail:
        """Get a task with its tags, subtasks, comments and attachments."""
        authorize(ctx.role, Operation.READ_TASKS)
        async with self._uow_factory() as uow:
            task = await uow.tasks.get(ctx.workspace_id, task_id)
            if not task:
                raise TaskNotFoundError(str(task_id))

            return TaskDetail(
                task=task,
                tags=await uow.tags.get_for_task(task_id),
                subtasks=await uow.tasks.get_subtasks(task_id),
                comments=await uow.tasks.get_comments(task_id),
                attachments=await uow.tasks.get_attachments(task_id),
            )

    async def create_task(
        self,
        ctx: WorkspaceContext,
        title: str,
        status: TaskStatus,
        priority: TaskPriority,
        description: str | None = None,
        due_date: Any = None,
        assignee_id: UUID | None = None,
        tag_ids: list[UUID] | None = None,
    ) -> Task:
        """Create a task, its tag links and a ``task_created`` entry atomically.

        Members may only create tasks assigned to themselves.

        Raises:
            InsufficientPermissionsError: If the caller is a viewer.
            TaskRuleViolationError: If a member assigns someone else, the
                assignee is not a workspace member, or a tag is unknown.
        """
        authorize(ctx.role, Operation.CREATE_TASK)
        if ctx.role == WorkspaceRole.MEMBER and assignee_id != ctx.user_id:
            raise TaskRuleViolationError(
                "assignee_id", "Members can only create tasks assigned to themselves"
            )

        tag_ids = list(dict.fromkeys(tag_ids or []))

        async with self._uow_factory() as uow:
            await self._validate_assignee(uow, ctx.workspace_id, assignee_id)
            await self._validate_tags(uow, ctx.workspace_id, tag_ids)

            task = Task(
                workspace_id=ctx.workspace_id,
                title=title,
                description=description,
                status=status,
                priority=priority,
                due_date=due_date,
                assignee_id=assignee_id,
                created_by=ctx.user_id,
                tag_ids=tag_ids,
            )
            created = await uow.tasks.create(task)

            if self._activity:
                await self._activity.log(
                    uow=uow,
                    workspace_id=ctx.workspace_id,
                    actor_id=ctx.user_id,
                    action=ActivityAction.TASK_CREATED,
                    task_id=created.id,
                    meta={"title": created.title},
                )

            await uow.commit()

        await self._revalidate(*Views.TASK_LISTS)
        return created  # type: ignore[no-any-return]

    async def update_task(
        self,
        ctx: WorkspaceContext,
        task_id: UUID,
        fields: dict[str, Any],
    ) -> Task:
        """Apply a partial update to a task.

        ``fields`` holds only the fields the caller supplied; an explicit
        ``None`` clears a nullable field. Logs ``status_changed`` when the
        status moves, otherwise ``task_updated``, with a field diff.

        Raises:
            InsufficientPermissionsError: If the caller is a viewer.
            TaskNotFoundError: If the task is not in the context workspace.
            AuthorizationError: If a member neither created nor is assigned
                to the task.
            TaskRuleViolationError: If a member reassigns the task to someone
                else, the assignee is not a member, or a tag is unknown.
        """
        authorize(ctx.role, Operation.UPDATE_TASK)
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise TaskRuleViolationError(sorted(unknown)[0], "Field cannot be updated")

        async with self._uow_factory() as uow:
            task = await uow.tasks.get(ctx.workspace_id, task_id)
            if not task:
                raise TaskNotFoundError(str(task_id))

            if ctx.role == WorkspaceRole.MEMBER:
                if not task.is_owned_or_assigned(ctx.user_id):
                    raise AuthorizationError(
                        "You can only update tasks you created or are assigned to"
                    )
                new_assignee = fields.get("assignee_id", task.assignee_id)
                if new_assignee != task.assignee_id and new_assignee != ctx.user_id:
                    raise TaskRuleViolationError(
                        "assignee_id", "Members can only assign tasks to themselves"
                    )

            if "assignee_id" in fields:
                await self._validate_assignee(uow, ctx.workspace_id, fields["assignee_id"])
            if "tag_ids" in fields:
                fields["tag_ids"] = list(dict.fromkeys(fields["tag_ids"] or []))
                await self._validate_tags(uow, ctx.workspace_id, fields["tag_ids"])

            old_state = self._snapshot(task)

            for name, value in fields.items():
                if name == "title" and value is None:
                    continue
                setattr(task, name, value)
            task.updated_at = datetime.utcnow()

            updated = await uow.tasks.update(task)

            if self._activity:
                changes = ActivityService.compute_diff(old_state, self._snapshot(updated))
                action = (
                    ActivityAction.STATUS_CHANGED
                    if "status" in changes
                    else ActivityAction.TASK_UPDATED
                )
                await self._activity.log(
                    uow=uow,
                    workspace_id=ctx.workspace_id,
                    actor_id=ctx.user_id,
                    action=action,
                    task_id=task_id,
                    meta={"title": updated.title, "changes": changes},
                )

            await uow.commit()

        await self._revalidate(*Views.TASK_LISTS, Views.task(task_id))
        return updated  # type: ignore[no-any-return]

    async def delete_task(self, ctx: WorkspaceContext, task_id: UUID) -> bool:
        """Delete a task and everything attached to it. Requires Owner or Admin."""
        authorize(ctx.role, Operation.DELETE_TASK)
        async with self._uow_factory() as uow:
            task = await uow.tasks.get(ctx.workspace_id, task_id)
            if not task:
                raise TaskNotFoundError(str(task_id))

            deleted = await uow.tasks.delete(ctx.workspace_id, task_id)

            # The task row is gone, so the entry keeps only its id and title
            if self._activity:
                await self._activity.log(
                    uow=uow,
                    workspace_id=ctx.workspace_id,
                    actor_id=ctx.user_id,
                    action=ActivityAction.TASK_DELETED,
                    meta={"task_id": str(task_id), "title": task.title},
                )

            await uow.commit()

        await self._revalidate(*Views.TASK_LISTS)
        return deleted  # type: ignore[no-any-return]

    # --- Subtasks ---

    async def add_subtask(
        self,
        ctx: WorkspaceContext,
        task_id: UUID,
        title: str,
        is_done: bool = False,
        position: int | None = None,
    ) -> Subtask:
        """Add a subtask; without a position it goes to the end of the list."""
        authorize(ctx.role, Operation.ADD_SUBTASK)
        async with self._uow_factory() as uow:
            await self._get_task_or_raise(uow, ctx, task_id)

            if position is None:
                position = await uow.tasks.next_subtask_position(task_id)

            subtask = Subtask(task_id=task_id, title=title, is_done=is_done, position=position)
            created = await uow.tasks.add_subtask(subtask)

            if self._activity:
                await self._activity.log(
                    uow=uow,
                    workspace_id=ctx.workspace_id,
                    actor_id=ctx.user_id,
                    action=ActivityAction.SUBTASK_ADDED,
                    task_id=task_id,
                    meta={"title": title},
                )

            await uow.commit()

        await self._revalidate(Views.task(task_id))
        return created  # type: ignore[no-any-return]

    async def update_subtask(
        self,
        ctx: WorkspaceContext,
        task_id: UUID,
        subtask_id: UUID,
        title: str | None = None,
        is_done: bool | None = None,
        position: int | None = None,
    ) -> Subtask:
        """Rename, toggle or reorder a subtask."""
        authorize(ctx.role, Operation.UPDATE_SUBTASK)
        async with self._uow_factory() as uow:
            await self._get_task_or_raise(uow, ctx, task_id)

            subtask = await uow.tasks.get_subtask(task_id, subtask_id)
            if not subtask:
                raise SubtaskNotFoundError(str(subtask_id))

            if title is not None:
                subtask.title = title
            if is_done is not None:
                subtask.is_done = is_done
            if position is not None:
                subtask.position = position

            updated = await uow.tasks.update_subtask(subtask)
            await uow.commit()

        await self._revalidate(Views.task(task_id))
        return updated  # type: ignore[no-any-return]

    async def delete_subtask(
        self, ctx: WorkspaceContext, task_id: UUID, subtask_id: UUID
    ) -> bool:
        authorize(ctx.role, Operation.DELETE_SUBTASK)
        async with self._uow_factory() as uow:
            await self._get_task_or_raise(uow, ctx, task_id)

            deleted = await uow.tasks.delete_subtask(task_id, subtask_id)
            if not deleted:
                raise SubtaskNotFoundError(str(subtask_id))
            await uow.commit()

        await self._revalidate(Views.task(task_id))
        return True

    # --- Comments ---

    async def add_comment(self, ctx: WorkspaceContext, task_id: UUID, content: str) -> Comment:
        authorize(ctx.role, Operation.ADD_COMMENT)
        async with self._uow_factory() as uow:
            await self._get_task_or_raise(uow, ctx, task_id)

            comment = Comment(task_id=task_id, user_id=ctx.user_id, content=content)
            created = await uow.tasks.add_comment(comment)

            if self._activity:
                await self._activity.log(
                    uow=uow,
                    workspace_id=ctx.workspace_id,
                    actor_id=ctx.user_id,
                    action=ActivityAction.COMMENT_ADDED,
                    task_id=task_id,
                    meta={"comment_id": str(created.id)},
                )

            await uow.commit()

        await self._revalidate(Views.task(task_id))
        return created  # type: ignore[no-any-return]

    async def delete_comment(
        self, ctx: WorkspaceContext, task_id: UUID, comment_id: UUID
    ) -> bool:
        """Delete a comment. Authors may delete their own; owners and admins any."""
        authorize(ctx.role, Operation.ADD_COMMENT)
        async with self._uow_factory() as uow:
            await self._get_task_or_raise(uow, ctx, task_id)

            comment = await uow.tasks.get_comment(task_id, comment_id)
            if not comment:
                raise CommentNotFoundError(str(comment_id))

            if comment.user_id != ctx.user_id and not is_allowed(
                ctx.role, Operation.DELETE_ANY_COMMENT
            ):
                raise AuthorizationError("You can only delete your own comments")

            await uow.tasks.delete_comment(task_id, comment_id)
            await uow.commit()

        await self._revalidate(Views.task(task_id))
        return True

    # --- Attachments ---

    async def add_attachment(
        self,
        ctx: WorkspaceContext,
        task_id: UUID,
        file_path: str,
        file_name: str,
        file_type: str | None = None,
        file_size: int | None = None,
    ) -> Attachment:
        """Register metadata for a file already uploaded to storage."""
        authorize(ctx.role, Operation.ADD_ATTACHMENT)
        async with self._uow_factory() as uow:
            await self._get_task_or_raise(uow, ctx, task_id)

            attachment = Attachment(
                task_id=task_id,
                user_id=ctx.user_id,
                file_path=file_path,
                file_name=file_name,
                file_type=file_type,
                file_size=file_size,
            )
            created = await uow.tasks.add_attachment(attachment)

            if self._activity:
                await self._activity.log(
                    uow=uow,
                    workspace_id=ctx.workspace_id,
                    actor_id=ctx.user_id,
                    action=ActivityAction.ATTACHMENT_ADDED,
                    task_id=task_id,
                    meta={"file_name": file_name},
                )

            await uow.commit()

        await self._revalidate(Views.task(task_id))
        return created  # type: ignore[no-any-return]

    # --- Internal helpers ---

    async def _get_task_or_raise(
        self, uow: IUnitOfWork, ctx: WorkspaceContext, task_id: UUID
    ) -> Task:
        task = await uow.tasks.get(ctx.workspace_id, task_id)
        if not task:
            raise TaskNotFoundError(str(task_id))
        return task

    async def _validate_assignee(
        self, uow: IUnitOfWork, workspace_id: UUID, assignee_id: UUID | None
    ) -> None:
        if assignee_id is None:
            return
        member = await uow.workspaces.get_member(workspace_id, assignee_id)
        if not member:
            raise TaskRuleViolationError(
                "assignee_id", "Assignee must be a member of this workspace"
            )

    async def _validate_tags(
        self, uow: IUnitOfWork, workspace_id: UUID, tag_ids: list[UUID]
    ) -> None:
        if not tag_ids:
            return
        found = await uow.tags.get_many(workspace_id, tag_ids)
        if len(found) != len(set(tag_ids)):
            raise TaskRuleViolationError("tag_ids", "Every tag must belong to this workspace")

    async def _revalidate(self, *paths: str) -> None:
        if self._revalidator:
            await self._revalidator.revalidate(paths)

    @staticmethod
    def _snapshot(task: Task) -> dict[str, Any]:
        """JSON-friendly view of the fields an update may change."""
        return {
            "title": task.title,
            "description": task.description,
            "status": task.status.value if task.status else None,
            "priority": task.priority.value if task.priority else None,
            "due_date": task.due_date.isoformat() if task.due_date else None,
            "assignee_id": str(task.assignee_id) if task.assignee_id else None,
            "tag_ids": sorted(str(t) for t in task.tag_ids),
        }
