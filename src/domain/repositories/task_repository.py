"""Task repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.task import Attachment, Comment, Subtask, Task, TaskFilters


class ITaskRepository(Protocol):
    """Repository interface for Task aggregates.

    Every task lookup is scoped by workspace; a task id from another
    workspace behaves as if it did not exist.
    """

    async def get(self, workspace_id: UUID, id: UUID) -> Task | None:
        """Get a task by ID within a workspace."""
        ...

    async def find(self, workspace_id: UUID, filters: TaskFilters) -> list[Task]:
        """List tasks in a workspace matching the filters."""
        ...

    async def create(self, task: Task) -> Task:
        """Create a task together with its tag links."""
        ...

    async def update(self, task: Task) -> Task:
        """Update a task and replace its tag links."""
        ...

    async def delete(self, workspace_id: UUID, id: UUID) -> bool:
        """Delete a task; subtasks, comments, attachments and tag links go with it."""
        ...

    # --- Subtasks ---

    async def get_subtasks(self, task_id: UUID) -> list[Subtask]:
        """Get a task's subtasks ordered by position."""
        ...

    async def get_subtask(self, task_id: UUID, id: UUID) -> Subtask | None:
        """Get one subtask of a task."""
        ...

    async def next_subtask_position(self, task_id: UUID) -> int:
        """Position that places a new subtask at the end of the list."""
        ...

    async def add_subtask(self, subtask: Subtask) -> Subtask:
        """Create a subtask."""
        ...

    async def update_subtask(self, subtask: Subtask) -> Subtask:
        """Update a subtask."""
        ...

    async def delete_subtask(self, task_id: UUID, id: UUID) -> bool:
        """Delete a subtask."""
        ...

    # --- Comments ---

    async def get_comments(self, task_id: UUID) -> list[Comment]:
        """Get a task's comments, oldest first."""
        ...

    async def get_comment(self, task_id: UUID, id: UUID) -> Comment | None:
        """Get one comment of a task."""
        ...

    async def add_comment(self, comment: Comment) -> Comment:
        """Create a comment."""
        ...

    async def delete_comment(self, task_id: UUID, id: UUID) -> bool:
        """Delete a comment."""
        ...

    # --- Attachments ---

    async def get_attachments(self, task_id: UUID) -> list[Attachment]:
        """Get a task's attachment metadata."""
        ...

    async def add_attachment(self, attachment: Attachment) -> Attachment:
        """Register attachment metadata."""
        ...
