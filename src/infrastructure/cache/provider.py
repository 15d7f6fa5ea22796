"""Cache invalidation protocol."""

from collections.abc import Iterable
from typing import Protocol


class IPathRevalidator(Protocol):
    """Signals the web frontend to discard cached renders of views."""

    async def revalidate(self, paths: Iterable[str]) -> None:
        """Invalidate the cached render of each path.

        Implementations must not raise: a failed invalidation leaves a stale
        view, it does not undo the mutation that triggered it.
        """
        ...


class Views:
    """Frontend view paths whose cached renders mutations invalidate."""

    HOME = "/"
    TASKS = "/tasks"
    BOARD = "/board"
    CALENDAR = "/calendar"
    SETTINGS = "/settings"
    MEMBERS = "/settings/members"
    INVITES = "/settings/invites"

    TASK_LISTS = (TASKS, BOARD, CALENDAR)

    @staticmethod
    def task(task_id: object) -> str:
        return f"/tasks/{task_id}"
