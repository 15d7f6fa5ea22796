"""Workspace service layer with business logic."""

import logging
import random
from collections.abc import Callable
from datetime import date, datetime, timedelta
from typing import Optional
from uuid import UUID

from core.exceptions import (
    AuthorizationError,
    InvalidRoleError,
    LastOwnerError,
    MemberNotFoundError,
    NotAMemberError,
    WorkspaceNotFoundError,
)
from domain.authorization import Operation, authorize
from domain.entities.activity import ActivityAction
from domain.entities.tag import Tag
from domain.entities.task import Comment, Subtask, Task, TaskPriority, TaskStatus
from domain.entities.workspace import (
    ASSIGNABLE_ROLES,
    MemberWithProfile,
    Workspace,
    WorkspaceContext,
    WorkspaceMember,
    WorkspaceRole,
    WorkspaceWithRole,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService
from infrastructure.cache.provider import IPathRevalidator, Views

logger = logging.getLogger(__name__)

DEMO_TAGS = [
    ("Frontend", "#6366f1"),
    ("Backend", "#22c55e"),
    ("Bug", "#ef4444"),
    ("Feature", "#8b5cf6"),
]

DEMO_TASKS = [
    (
        "Set up project structure",
        "Initialize the project with proper folder structure and configuration files",
        TaskStatus.DONE,
        TaskPriority.HIGH,
    ),
    (
        "Implement authentication",
        "Add email magic link login and session management",
        TaskStatus.IN_PROGRESS,
        TaskPriority.HIGH,
    ),
    (
        "Create dashboard page",
        "Build the main dashboard with workspace overview",
        TaskStatus.IN_PROGRESS,
        TaskPriority.MEDIUM,
    ),
    (
        "Add kanban board",
        "Implement drag and drop kanban board with dnd-kit",
        TaskStatus.BACKLOG,
        TaskPriority.MEDIUM,
    ),
    (
        "Implement calendar view",
        "Add calendar view to show tasks by due date",
        TaskStatus.BACKLOG,
        TaskPriority.LOW,
    ),
    (
        "Add file attachments",
        "Implement file upload and attachment support",
        TaskStatus.BACKLOG,
        TaskPriority.LOW,
    ),
    (
        "Fix login redirect bug",
        "Users are not redirected properly after login",
        TaskStatus.BACKLOG,
        TaskPriority.URGENT,
    ),
]

# (task index, title, is_done)
DEMO_SUBTASKS = [
    (1, "Set up Supabase project", True),
    (1, "Create login form UI", True),
    (1, "Implement magic link sending", False),
]

# (task index, content)
DEMO_COMMENTS = [
    (1, "Started working on this. Will have a draft ready by tomorrow."),
    (2, "Dashboard wireframes are ready for review."),
]


class WorkspaceService:
    """Service layer for Workspace business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        activity_service: Optional["ActivityService"] = None,
        revalidator: Optional["IPathRevalidator"] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._activity = activity_service
        self._revalidator = revalidator

    async def get_all_for_user(self, user_id: UUID) -> list[WorkspaceWithRole]:
        """Get all workspaces a user is a member of, with their role."""
        async with self._uow_factory() as uow:
            return await uow.workspaces.get_all_for_user(user_id)  # type: ignore[no-any-return]

    async def resolve_context(
        self, user_id: UUID, selected_id: UUID | str | None
    ) -> WorkspaceContext | None:
        """Validate the caller's selected workspace against the store.

        Returns None when nothing is selected, the selector is malformed,
        the workspace is gone, or the caller is not a member of it.
        """
        if not selected_id:
            return None
        if not isinstance(selected_id, UUID):
            try:
                selected_id = UUID(str(selected_id))
            except ValueError:
                return None

        async with self._uow_factory() as uow:
            workspace = await uow.workspaces.get(selected_id)
            if not workspace:
                return None

            member = await uow.workspaces.get_member(selected_id, user_id)
            if not member:
                return None

            return WorkspaceContext(workspace=workspace, member=member)

    async def select(self, workspace_id: UUID, user_id: UUID) -> WorkspaceContext:
        """Validate an explicit selection. Raises instead of returning None."""
        async with self._uow_factory() as uow:
            workspace = await uow.workspaces.get(workspace_id)
            if not workspace:
                raise WorkspaceNotFoundError(str(workspace_id))

            member = await uow.workspaces.get_member(workspace_id, user_id)
            if not member:
                raise NotAMemberError(str(workspace_id))

            return WorkspaceContext(workspace=workspace, member=member)

    async def create(
        self,
        user_id: UUID,
        name: str,
        description: str | None = None,
    ) -> Workspace:
        """Create a new workspace and add the creator as Owner.

        Open to any authenticated user; no workspace context is needed.
        """
        async with self._uow_factory() as uow:
            workspace = Workspace(
                name=name,
                description=description,
                created_by=user_id,
            )
            created = await uow.workspaces.create(workspace)

            owner_member = WorkspaceMember(
                workspace_id=created.id,
                user_id=user_id,
                role=WorkspaceRole.OWNER,
            )
            await uow.workspaces.add_member(owner_member)

            if self._activity:
                await self._activity.log(
                    uow=uow,
                    workspace_id=created.id,
                    actor_id=user_id,
                    action=ActivityAction.WORKSPACE_CREATED,
                    meta={"name": created.name},
                )

            await uow.commit()

        logger.info("Workspace %s created by %s", created.id, user_id)
        await self._revalidate(Views.HOME)
        return created

    async def update(
        self,
        ctx: WorkspaceContext,
        name: str | None = None,
        description: str | None = None,
    ) -> Workspace:
        """Update the context workspace. Requires Owner role."""
        authorize(ctx.role, Operation.UPDATE_WORKSPACE)
        async with self._uow_factory() as uow:
            workspace = await uow.workspaces.get(ctx.workspace_id)
            if not workspace:
                raise WorkspaceNotFoundError(str(ctx.workspace_id))

            if name is not None:
                workspace.name = name
            if description is not None:
                workspace.description = description

            workspace.updated_at = datetime.utcnow()
            updated = await uow.workspaces.update(workspace)
            await uow.commit()

        await self._revalidate(Views.SETTINGS)
        return updated  # type: ignore[no-any-return]

    async def delete(self, ctx: WorkspaceContext) -> bool:
        """Delete the context workspace and everything in it. Requires Owner role."""
        authorize(ctx.role, Operation.DELETE_WORKSPACE)
        async with self._uow_factory() as uow:
            workspace = await uow.workspaces.get(ctx.workspace_id)
            if not workspace:
                raise WorkspaceNotFoundError(str(ctx.workspace_id))

            deleted = await uow.workspaces.delete(ctx.workspace_id)
            await uow.commit()

        logger.info("Workspace %s deleted by %s", ctx.workspace_id, ctx.user_id)
        await self._revalidate(Views.HOME)
        return deleted  # type: ignore[no-any-return]

    async def get_members(self, ctx: WorkspaceContext) -> list[MemberWithProfile]:
        """Get all members of the context workspace with their profiles."""
        authorize(ctx.role, Operation.READ_MEMBERS)
        async with self._uow_factory() as uow:
            return await uow.workspaces.get_members(ctx.workspace_id)  # type: ignore[no-any-return]

    async def update_member_role(
        self,
        ctx: WorkspaceContext,
        target_user_id: UUID,
        role: WorkspaceRole,
    ) -> WorkspaceMember:
        """Change a member's role. Requires Owner role.

        Only admin, member and viewer can be granted. Owners cannot change
        their own role.
        """
        authorize(ctx.role, Operation.CHANGE_ROLES)
        if role not in ASSIGNABLE_ROLES:
            raise InvalidRoleError(str(role))
        if target_user_id == ctx.user_id:
            raise AuthorizationError("You cannot change your own role")

        async with self._uow_factory() as uow:
            target_member = await uow.workspaces.get_member(ctx.workspace_id, target_user_id)
            if not target_member:
                raise MemberNotFoundError(str(target_user_id))

            if target_member.role == WorkspaceRole.OWNER:
                owner_count = await uow.workspaces.count_owners(ctx.workspace_id)
                if owner_count <= 1:
                    raise LastOwnerError()

            old_role = target_member.role
            updated = await uow.workspaces.update_member_role(
                ctx.workspace_id, target_user_id, role
            )

            if self._activity:
                await self._activity.log(
                    uow=uow,
                    workspace_id=ctx.workspace_id,
                    actor_id=ctx.user_id,
                    action=ActivityAction.ROLE_CHANGED,
                    meta={
                        "user_id": str(target_user_id),
                        "changes": {"role": {"old": old_role.value, "new": role.value}},
                    },
                )

            await uow.commit()

        await self._revalidate(Views.MEMBERS)
        return updated  # type: ignore[no-any-return]

    async def remove_member(self, ctx: WorkspaceContext, target_user_id: UUID) -> bool:
        """Remove a member from the context workspace. Requires Owner role.

        The last owner can never be removed.
        """
        authorize(ctx.role, Operation.MANAGE_MEMBERS)
        async with self._uow_factory() as uow:
            target_member = await uow.workspaces.get_member(ctx.workspace_id, target_user_id)
            if not target_member:
                raise MemberNotFoundError(str(target_user_id))

            if target_member.role == WorkspaceRole.OWNER:
                owner_count = await uow.workspaces.count_owners(ctx.workspace_id)
                if owner_count <= 1:
                    raise LastOwnerError()

            removed = await uow.workspaces.remove_member(ctx.workspace_id, target_user_id)

            if self._activity:
                await self._activity.log(
                    uow=uow,
                    workspace_id=ctx.workspace_id,
                    actor_id=ctx.user_id,
                    action=ActivityAction.MEMBER_REMOVED,
                    meta={"user_id": str(target_user_id), "role": target_member.role.value},
                )

            await uow.commit()

        await self._revalidate(Views.MEMBERS)
        return removed  # type: ignore[no-any-return]

    async def seed_demo_data(self, ctx: WorkspaceContext) -> int:
        """Fill the context workspace with sample tags, tasks, subtasks and comments.

        Existing tags with the demo names are reused. Everything is written
        in one transaction. Requires Owner or Admin role.

        Returns:
            The number of tasks created.
        """
        authorize(ctx.role, Operation.SEED_DEMO_DATA)
        async with self._uow_factory() as uow:
            tag_ids: list[UUID] = []
            for name, color in DEMO_TAGS:
                tag = await uow.tags.get_by_name_in_workspace(ctx.workspace_id, name)
                if not tag:
                    tag = await uow.tags.create(
                        Tag(workspace_id=ctx.workspace_id, name=name, color=color)
                    )
                tag_ids.append(tag.id)

            tasks: list[Task] = []
            for i, (title, description, status, priority) in enumerate(DEMO_TASKS):
                task = Task(
                    workspace_id=ctx.workspace_id,
                    title=title,
                    description=description,
                    status=status,
                    priority=priority,
                    created_by=ctx.user_id,
                    due_date=date.today() + timedelta(days=random.randint(0, 30)),
                    tag_ids=[tag_ids[i % len(tag_ids)]],
                )
                tasks.append(await uow.tasks.create(task))

            for position, (index, title, is_done) in enumerate(DEMO_SUBTASKS):
                await uow.tasks.add_subtask(
                    Subtask(
                        task_id=tasks[index].id,
                        title=title,
                        is_done=is_done,
                        position=position,
                    )
                )

            for index, content in DEMO_COMMENTS:
                await uow.tasks.add_comment(
                    Comment(task_id=tasks[index].id, user_id=ctx.user_id, content=content)
                )

            await uow.commit()

        await self._revalidate(*Views.TASK_LISTS)
        return len(tasks)

    # --- Internal helpers ---

    async def _revalidate(self, *paths: str) -> None:
        if self._revalidator:
            await self._revalidator.revalidate(paths)
