"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.workspace import (
    Workspace,
    WorkspaceContext,
    WorkspaceMember,
    WorkspaceRole,
)


class FakeUnitOfWork:
    """Fake Unit of Work with all 6 repository mocks for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.tasks = AsyncMock()
        self.tags = AsyncMock()
        self.workspaces = AsyncMock()
        self.invitations = AsyncMock()
        self.activities = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


def make_context(
    role: WorkspaceRole,
    workspace_id: UUID | None = None,
    user_id: UUID | None = None,
) -> WorkspaceContext:
    """Build a resolved workspace context for a caller with ``role``."""
    user_id = user_id or uuid4()
    workspace = Workspace(id=workspace_id or uuid4(), name="Acme", created_by=user_id)
    member = WorkspaceMember(workspace_id=workspace.id, user_id=user_id, role=role)
    return WorkspaceContext(workspace=workspace, member=member)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def workspace_id() -> UUID:
    """A random workspace ID."""
    return uuid4()


@pytest.fixture
def actor_id() -> UUID:
    """A random actor ID (distinct from user_id)."""
    return uuid4()


@pytest.fixture
def owner_ctx(workspace_id: UUID, user_id: UUID) -> WorkspaceContext:
    return make_context(WorkspaceRole.OWNER, workspace_id, user_id)


@pytest.fixture
def admin_ctx(workspace_id: UUID, user_id: UUID) -> WorkspaceContext:
    return make_context(WorkspaceRole.ADMIN, workspace_id, user_id)


@pytest.fixture
def member_ctx(workspace_id: UUID, user_id: UUID) -> WorkspaceContext:
    return make_context(WorkspaceRole.MEMBER, workspace_id, user_id)


@pytest.fixture
def viewer_ctx(workspace_id: UUID, user_id: UUID) -> WorkspaceContext:
    return make_context(WorkspaceRole.VIEWER, workspace_id, user_id)
