"""SQLAlchemy implementation of Task repository."""

from collections import defaultdict
from uuid import UUID

from sqlalchemy import case, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.task import (
    PRIORITY_RANK,
    Attachment,
    Comment,
    Subtask,
    Task,
    TaskFilters,
    TaskPriority,
    TaskStatus,
)
from infrastructure.database.models import (
    AttachmentModel,
    CommentModel,
    SubtaskModel,
    TaskModel,
    TaskTagModel,
)

_PRIORITY_ORDER = case(
    {priority.value: rank for priority, rank in PRIORITY_RANK.items()},
    value=TaskModel.priority,
    else_=0,
)

_SORT_COLUMNS = {
    "created_at": TaskModel.created_at,
    "updated_at": TaskModel.updated_at,
    "due_date": TaskModel.due_date,
    "title": TaskModel.title,
    "priority": _PRIORITY_ORDER,
}


class SQLAlchemyTaskRepository:
    """SQLAlchemy implementation of ITaskRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # --- Tasks ---

    async def get(self, workspace_id: UUID, id: UUID) -> Task | None:
        """Get a task by ID within a workspace."""
        stmt = select(TaskModel).where(
            TaskModel.id == id,
            TaskModel.workspace_id == workspace_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if not model:
            return None
        tag_ids = await self._get_tag_ids_batch([model.id])
        return self._to_entity(model, tag_ids.get(model.id, []))

    async def find(self, workspace_id: UUID, filters: TaskFilters) -> list[Task]:
        """List tasks of a workspace matching the filters."""
        stmt = select(TaskModel).where(TaskModel.workspace_id == workspace_id)

        if filters.status:
            stmt = stmt.where(TaskModel.status == filters.status.value)
        if filters.priority:
            stmt = stmt.where(TaskModel.priority == filters.priority.value)
        if filters.assignee_id:
            stmt = stmt.where(TaskModel.assignee_id == filters.assignee_id)
        if filters.tag_id:
            tagged = select(TaskTagModel.task_id).where(TaskTagModel.tag_id == filters.tag_id)
            stmt = stmt.where(TaskModel.id.in_(tagged))
        if filters.due_date_from:
            stmt = stmt.where(TaskModel.due_date >= filters.due_date_from)
        if filters.due_date_to:
            stmt = stmt.where(TaskModel.due_date <= filters.due_date_to)
        if filters.search:
            stmt = stmt.where(
                or_(
                    TaskModel.title.icontains(filters.search, autoescape=True),
                    TaskModel.description.icontains(filters.search, autoescape=True),
                )
            )

        column = _SORT_COLUMNS.get(filters.sort_by, TaskModel.created_at)
        ordering = column.asc() if filters.sort_order == "asc" else column.desc()
        # Tasks without a due date sort after dated ones either way
        stmt = stmt.order_by(ordering.nulls_last(), TaskModel.created_at.desc())

        result = await self._session.execute(stmt)
        models = list(result.scalars())
        tag_ids = await self._get_tag_ids_batch([model.id for model in models])
        return [self._to_entity(model, tag_ids.get(model.id, [])) for model in models]

    async def create(self, task: Task) -> Task:
        """Create a new task along with its tag links."""
        model = self._to_model(task)
        self._session.add(model)
        await self._session.flush()
        await self._replace_tags(model.id, task.tag_ids)
        await self._session.refresh(model)
        return self._to_entity(model, list(task.tag_ids))

    async def update(self, task: Task) -> Task:
        """Update an existing task, replacing its tag links."""
        stmt = select(TaskModel).where(
            TaskModel.id == task.id,
            TaskModel.workspace_id == task.workspace_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Task {task.id} not found")

        model.title = task.title
        model.description = task.description
        model.status = task.status.value
        model.priority = task.priority.value
        model.due_date = task.due_date
        model.assignee_id = task.assignee_id
        model.updated_at = task.updated_at

        await self._session.flush()
        await self._replace_tags(model.id, task.tag_ids)
        return self._to_entity(model, list(task.tag_ids))

    async def delete(self, workspace_id: UUID, id: UUID) -> bool:
        """Delete a task. Subtasks, comments, attachments and links cascade."""
        stmt = delete(TaskModel).where(
            TaskModel.id == id,
            TaskModel.workspace_id == workspace_id,
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return bool(result.rowcount)

    # --- Subtasks ---

    async def get_subtasks(self, task_id: UUID) -> list[Subtask]:
        """Get the subtasks of a task in position order."""
        stmt = (
            select(SubtaskModel)
            .where(SubtaskModel.task_id == task_id)
            .order_by(SubtaskModel.position, SubtaskModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._subtask_to_entity(model) for model in result.scalars()]

    async def get_subtask(self, task_id: UUID, id: UUID) -> Subtask | None:
        stmt = select(SubtaskModel).where(
            SubtaskModel.id == id,
            SubtaskModel.task_id == task_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._subtask_to_entity(model) if model else None

    async def next_subtask_position(self, task_id: UUID) -> int:
        """One past the highest subtask position on the task, 0 when empty."""
        stmt = select(func.max(SubtaskModel.position)).where(SubtaskModel.task_id == task_id)
        result = await self._session.execute(stmt)
        highest = result.scalar()
        return 0 if highest is None else highest + 1

    async def add_subtask(self, subtask: Subtask) -> Subtask:
        model = SubtaskModel(
            id=subtask.id,
            task_id=subtask.task_id,
            title=subtask.title,
            is_done=subtask.is_done,
            position=subtask.position,
            created_at=subtask.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._subtask_to_entity(model)

    async def update_subtask(self, subtask: Subtask) -> Subtask:
        stmt = select(SubtaskModel).where(
            SubtaskModel.id == subtask.id,
            SubtaskModel.task_id == subtask.task_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Subtask {subtask.id} not found")

        model.title = subtask.title
        model.is_done = subtask.is_done
        model.position = subtask.position

        await self._session.flush()
        return self._subtask_to_entity(model)

    async def delete_subtask(self, task_id: UUID, id: UUID) -> bool:
        stmt = delete(SubtaskModel).where(
            SubtaskModel.id == id,
            SubtaskModel.task_id == task_id,
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return bool(result.rowcount)

    # --- Comments ---

    async def get_comments(self, task_id: UUID) -> list[Comment]:
        """Get the comments on a task, oldest first."""
        stmt = (
            select(CommentModel)
            .where(CommentModel.task_id == task_id)
            .order_by(CommentModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._comment_to_entity(model) for model in result.scalars()]

    async def get_comment(self, task_id: UUID, id: UUID) -> Comment | None:
        stmt = select(CommentModel).where(
            CommentModel.id == id,
            CommentModel.task_id == task_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._comment_to_entity(model) if model else None

    async def add_comment(self, comment: Comment) -> Comment:
        model = CommentModel(
            id=comment.id,
            task_id=comment.task_id,
            user_id=comment.user_id,
            content=comment.content,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._comment_to_entity(model)

    async def delete_comment(self, task_id: UUID, id: UUID) -> bool:
        stmt = delete(CommentModel).where(
            CommentModel.id == id,
            CommentModel.task_id == task_id,
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return bool(result.rowcount)

    # --- Attachments ---

    async def get_attachments(self, task_id: UUID) -> list[Attachment]:
        """Get attachment metadata for a task, newest first."""
        stmt = (
            select(AttachmentModel)
            .where(AttachmentModel.task_id == task_id)
            .order_by(AttachmentModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._attachment_to_entity(model) for model in result.scalars()]

    async def add_attachment(self, attachment: Attachment) -> Attachment:
        model = AttachmentModel(
            id=attachment.id,
            task_id=attachment.task_id,
            user_id=attachment.user_id,
            file_path=attachment.file_path,
            file_name=attachment.file_name,
            file_type=attachment.file_type,
            file_size=attachment.file_size,
            created_at=attachment.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._attachment_to_entity(model)

    # --- Internal helpers ---

    async def _replace_tags(self, task_id: UUID, tag_ids: list[UUID]) -> None:
        await self._session.execute(delete(TaskTagModel).where(TaskTagModel.task_id == task_id))
        for tag_id in dict.fromkeys(tag_ids):
            self._session.add(TaskTagModel(task_id=task_id, tag_id=tag_id))
        await self._session.flush()

    async def _get_tag_ids_batch(self, task_ids: list[UUID]) -> dict[UUID, list[UUID]]:
        """Get linked tag IDs for multiple tasks in a single query."""
        if not task_ids:
            return {}
        stmt = select(TaskTagModel.task_id, TaskTagModel.tag_id).where(
            TaskTagModel.task_id.in_(task_ids)
        )
        result = await self._session.execute(stmt)

        tags_by_task: dict[UUID, list[UUID]] = defaultdict(list)
        for task_id, tag_id in result:
            tags_by_task[task_id].append(tag_id)
        return dict(tags_by_task)

    def _to_entity(self, model: TaskModel, tag_ids: list[UUID]) -> Task:
        """Convert ORM model to domain entity."""
        return Task(
            id=model.id,
            workspace_id=model.workspace_id,
            title=model.title,
            description=model.description,
            status=TaskStatus(model.status),
            priority=TaskPriority(model.priority),
            due_date=model.due_date,
            assignee_id=model.assignee_id,
            created_by=model.created_by,
            tag_ids=tag_ids,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Task) -> TaskModel:
        """Convert domain entity to ORM model."""
        return TaskModel(
            id=entity.id,
            workspace_id=entity.workspace_id,
            title=entity.title,
            description=entity.description,
            status=entity.status.value,
            priority=entity.priority.value,
            due_date=entity.due_date,
            assignee_id=entity.assignee_id,
            created_by=entity.created_by,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    def _subtask_to_entity(self, model: SubtaskModel) -> Subtask:
        return Subtask(
            id=model.id,
            task_id=model.task_id,
            title=model.title,
            is_done=model.is_done,
            position=model.position,
            created_at=model.created_at,
        )

    def _comment_to_entity(self, model: CommentModel) -> Comment:
        return Comment(
            id=model.id,
            task_id=model.task_id,
            user_id=model.user_id,
            content=model.content,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _attachment_to_entity(self, model: AttachmentModel) -> Attachment:
        return Attachment(
            id=model.id,
            task_id=model.task_id,
            user_id=model.user_id,
            file_path=model.file_path,
            file_name=model.file_name,
            file_type=model.file_type,
            file_size=model.file_size,
            created_at=model.created_at,
        )
