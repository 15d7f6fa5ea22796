"""Unit tests for WorkspaceService."""

from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from core.exceptions import (
    AuthorizationError,
    InsufficientPermissionsError,
    InvalidRoleError,
    LastOwnerError,
    MemberNotFoundError,
    NotAMemberError,
    WorkspaceNotFoundError,
)
from domain.entities.activity import ActivityAction
from domain.entities.tag import Tag
from domain.entities.workspace import (
    Workspace,
    WorkspaceContext,
    WorkspaceMember,
    WorkspaceRole,
    WorkspaceWithRole,
)
from domain.services.workspace_service import DEMO_TASKS, WorkspaceService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def mock_activity_service() -> AsyncMock:
    """A mock ActivityService with a log() method."""
    mock = AsyncMock()
    mock.log = AsyncMock()
    return mock


@pytest.fixture
def mock_revalidator() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(
    uow: FakeUnitOfWork, mock_activity_service: AsyncMock, mock_revalidator: AsyncMock
) -> WorkspaceService:
    return WorkspaceService(
        lambda: uow, activity_service=mock_activity_service, revalidator=mock_revalidator
    )


@pytest.fixture
def sample_workspace(workspace_id: UUID, user_id: UUID) -> Workspace:
    return Workspace(
        id=workspace_id,
        name="Acme",
        description="A test workspace",
        created_by=user_id,
    )


# --- get_all_for_user ---


class TestGetAllForUser:
    @pytest.mark.asyncio
    async def test_returns_workspaces_with_roles(
        self, service: WorkspaceService, uow: FakeUnitOfWork, user_id: UUID
    ):
        ws1 = Workspace(name="WS1", created_by=user_id)
        ws2 = Workspace(name="WS2", created_by=uuid4())
        uow.workspaces.get_all_for_user.return_value = [
            WorkspaceWithRole(workspace=ws1, role=WorkspaceRole.OWNER),
            WorkspaceWithRole(workspace=ws2, role=WorkspaceRole.VIEWER),
        ]

        result = await service.get_all_for_user(user_id)

        assert [r.role for r in result] == [WorkspaceRole.OWNER, WorkspaceRole.VIEWER]
        uow.workspaces.get_all_for_user.assert_called_once_with(user_id)


# --- resolve_context / select ---


class TestResolveContext:
    @pytest.mark.asyncio
    async def test_returns_context_for_member(
        self,
        service: WorkspaceService,
        uow: FakeUnitOfWork,
        workspace_id: UUID,
        user_id: UUID,
        sample_workspace: Workspace,
    ):
        uow.workspaces.get.return_value = sample_workspace
        uow.workspaces.get_member.return_value = WorkspaceMember(
            workspace_id=workspace_id, user_id=user_id, role=WorkspaceRole.ADMIN
        )

        ctx = await service.resolve_context(user_id, str(workspace_id))

        assert ctx is not None
        assert ctx.workspace_id == workspace_id
        assert ctx.role == WorkspaceRole.ADMIN

    @pytest.mark.asyncio
    async def test_none_without_selection(self, service: WorkspaceService, uow: FakeUnitOfWork):
        assert await service.resolve_context(uuid4(), None) is None
        uow.workspaces.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_none_for_malformed_selector(
        self, service: WorkspaceService, uow: FakeUnitOfWork
    ):
        assert await service.resolve_context(uuid4(), "not-a-uuid") is None
        uow.workspaces.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_none_for_missing_workspace(
        self, service: WorkspaceService, uow: FakeUnitOfWork
    ):
        uow.workspaces.get.return_value = None

        assert await service.resolve_context(uuid4(), uuid4()) is None

    @pytest.mark.asyncio
    async def test_none_when_not_a_member(
        self, service: WorkspaceService, uow: FakeUnitOfWork, sample_workspace: Workspace
    ):
        uow.workspaces.get.return_value = sample_workspace
        uow.workspaces.get_member.return_value = None

        assert await service.resolve_context(uuid4(), sample_workspace.id) is None


class TestSelect:
    @pytest.mark.asyncio
    async def test_raises_not_found_when_missing(
        self, service: WorkspaceService, uow: FakeUnitOfWork, workspace_id: UUID, user_id: UUID
    ):
        uow.workspaces.get.return_value = None

        with pytest.raises(WorkspaceNotFoundError):
            await service.select(workspace_id, user_id)

    @pytest.mark.asyncio
    async def test_raises_not_a_member(
        self,
        service: WorkspaceService,
        uow: FakeUnitOfWork,
        workspace_id: UUID,
        user_id: UUID,
        sample_workspace: Workspace,
    ):
        uow.workspaces.get.return_value = sample_workspace
        uow.workspaces.get_member.return_value = None

        with pytest.raises(NotAMemberError):
            await service.select(workspace_id, user_id)


# --- create ---


class TestCreate:
    @pytest.mark.asyncio
    async def test_creator_becomes_owner(
        self,
        service: WorkspaceService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        mock_activity_service: AsyncMock,
        mock_revalidator: AsyncMock,
    ):
        uow.workspaces.create.side_effect = lambda ws: ws

        result = await service.create(user_id, "Acme", "Team space")

        assert result.name == "Acme"
        assert result.created_by == user_id
        member = uow.workspaces.add_member.call_args.args[0]
        assert member.user_id == user_id
        assert member.workspace_id == result.id
        assert member.role == WorkspaceRole.OWNER
        assert uow.committed

        kwargs = mock_activity_service.log.call_args.kwargs
        assert kwargs["action"] == ActivityAction.WORKSPACE_CREATED
        mock_revalidator.revalidate.assert_awaited_once()


# --- update / delete ---


class TestUpdate:
    @pytest.mark.asyncio
    async def test_owner_can_rename(
        self,
        service: WorkspaceService,
        uow: FakeUnitOfWork,
        owner_ctx: WorkspaceContext,
        sample_workspace: Workspace,
    ):
        uow.workspaces.get.return_value = sample_workspace
        uow.workspaces.update.side_effect = lambda ws: ws

        result = await service.update(owner_ctx, name="Renamed")

        assert result.name == "Renamed"
        assert result.description == "A test workspace"
        assert uow.committed

    @pytest.mark.asyncio
    async def test_admin_cannot_update(
        self, service: WorkspaceService, uow: FakeUnitOfWork, admin_ctx: WorkspaceContext
    ):
        with pytest.raises(InsufficientPermissionsError):
            await service.update(admin_ctx, name="Nope")

        uow.workspaces.get.assert_not_called()
        uow.workspaces.update.assert_not_called()


class TestDelete:
    @pytest.mark.asyncio
    async def test_owner_deletes(
        self,
        service: WorkspaceService,
        uow: FakeUnitOfWork,
        owner_ctx: WorkspaceContext,
        sample_workspace: Workspace,
    ):
        uow.workspaces.get.return_value = sample_workspace
        uow.workspaces.delete.return_value = True

        assert await service.delete(owner_ctx) is True
        uow.workspaces.delete.assert_called_once_with(owner_ctx.workspace_id)
        assert uow.committed

    @pytest.mark.asyncio
    async def test_admin_cannot_delete(
        self, service: WorkspaceService, uow: FakeUnitOfWork, admin_ctx: WorkspaceContext
    ):
        with pytest.raises(InsufficientPermissionsError):
            await service.delete(admin_ctx)

        uow.workspaces.delete.assert_not_called()


# --- members ---


class TestUpdateMemberRole:
    @pytest.mark.asyncio
    async def test_owner_changes_role_and_logs_diff(
        self,
        service: WorkspaceService,
        uow: FakeUnitOfWork,
        owner_ctx: WorkspaceContext,
        mock_activity_service: AsyncMock,
    ):
        target = uuid4()
        uow.workspaces.get_member.return_value = WorkspaceMember(
            workspace_id=owner_ctx.workspace_id, user_id=target, role=WorkspaceRole.MEMBER
        )

        await service.update_member_role(owner_ctx, target, WorkspaceRole.ADMIN)

        uow.workspaces.update_member_role.assert_called_once_with(
            owner_ctx.workspace_id, target, WorkspaceRole.ADMIN
        )
        meta = mock_activity_service.log.call_args.kwargs["meta"]
        assert meta["changes"] == {"role": {"old": "member", "new": "admin"}}
        assert mock_activity_service.log.call_args.kwargs["action"] == ActivityAction.ROLE_CHANGED

    @pytest.mark.asyncio
    async def test_cannot_grant_owner(
        self, service: WorkspaceService, uow: FakeUnitOfWork, owner_ctx: WorkspaceContext
    ):
        with pytest.raises(InvalidRoleError):
            await service.update_member_role(owner_ctx, uuid4(), WorkspaceRole.OWNER)

        uow.workspaces.update_member_role.assert_not_called()

    @pytest.mark.asyncio
    async def test_cannot_change_own_role(
        self, service: WorkspaceService, owner_ctx: WorkspaceContext
    ):
        with pytest.raises(AuthorizationError):
            await service.update_member_role(owner_ctx, owner_ctx.user_id, WorkspaceRole.ADMIN)

    @pytest.mark.asyncio
    async def test_admin_cannot_change_roles(
        self, service: WorkspaceService, uow: FakeUnitOfWork, admin_ctx: WorkspaceContext
    ):
        with pytest.raises(InsufficientPermissionsError):
            await service.update_member_role(admin_ctx, uuid4(), WorkspaceRole.VIEWER)

        uow.workspaces.get_member.assert_not_called()

    @pytest.mark.asyncio
    async def test_cannot_demote_last_owner(
        self, service: WorkspaceService, uow: FakeUnitOfWork, owner_ctx: WorkspaceContext
    ):
        target = uuid4()
        uow.workspaces.get_member.return_value = WorkspaceMember(
            workspace_id=owner_ctx.workspace_id, user_id=target, role=WorkspaceRole.OWNER
        )
        uow.workspaces.count_owners.return_value = 1

        with pytest.raises(LastOwnerError):
            await service.update_member_role(owner_ctx, target, WorkspaceRole.MEMBER)

    @pytest.mark.asyncio
    async def test_missing_member(
        self, service: WorkspaceService, uow: FakeUnitOfWork, owner_ctx: WorkspaceContext
    ):
        uow.workspaces.get_member.return_value = None

        with pytest.raises(MemberNotFoundError):
            await service.update_member_role(owner_ctx, uuid4(), WorkspaceRole.MEMBER)


class TestRemoveMember:
    @pytest.mark.asyncio
    async def test_owner_removes_member(
        self,
        service: WorkspaceService,
        uow: FakeUnitOfWork,
        owner_ctx: WorkspaceContext,
        mock_activity_service: AsyncMock,
    ):
        target = uuid4()
        uow.workspaces.get_member.return_value = WorkspaceMember(
            workspace_id=owner_ctx.workspace_id, user_id=target, role=WorkspaceRole.VIEWER
        )
        uow.workspaces.remove_member.return_value = True

        assert await service.remove_member(owner_ctx, target) is True
        assert mock_activity_service.log.call_args.kwargs["action"] == ActivityAction.MEMBER_REMOVED
        assert uow.committed

    @pytest.mark.asyncio
    async def test_cannot_remove_last_owner(
        self, service: WorkspaceService, uow: FakeUnitOfWork, owner_ctx: WorkspaceContext
    ):
        uow.workspaces.get_member.return_value = owner_ctx.member
        uow.workspaces.count_owners.return_value = 1

        with pytest.raises(LastOwnerError):
            await service.remove_member(owner_ctx, owner_ctx.user_id)

        uow.workspaces.remove_member.assert_not_called()

    @pytest.mark.asyncio
    async def test_member_cannot_remove(
        self, service: WorkspaceService, uow: FakeUnitOfWork, member_ctx: WorkspaceContext
    ):
        with pytest.raises(InsufficientPermissionsError):
            await service.remove_member(member_ctx, uuid4())

        uow.workspaces.remove_member.assert_not_called()


# --- seed_demo_data ---


class TestSeedDemoData:
    @pytest.mark.asyncio
    async def test_creates_demo_tasks_and_reuses_tags(
        self, service: WorkspaceService, uow: FakeUnitOfWork, admin_ctx: WorkspaceContext
    ):
        existing = Tag(workspace_id=admin_ctx.workspace_id, name="Bug")

        async def by_name(workspace_id: UUID, name: str) -> Tag | None:
            return existing if name == "Bug" else None

        uow.tags.get_by_name_in_workspace.side_effect = by_name
        uow.tags.create.side_effect = lambda tag: tag
        uow.tasks.create.side_effect = lambda task: task

        created = await service.seed_demo_data(admin_ctx)

        assert created == len(DEMO_TASKS)
        assert uow.tags.create.call_count == 3
        assert uow.tasks.add_subtask.call_count == 3
        assert uow.tasks.add_comment.call_count == 2
        for call in uow.tasks.create.call_args_list:
            assert call.args[0].workspace_id == admin_ctx.workspace_id
            assert call.args[0].created_by == admin_ctx.user_id
        assert uow.committed

    @pytest.mark.asyncio
    async def test_member_cannot_seed(
        self, service: WorkspaceService, uow: FakeUnitOfWork, member_ctx: WorkspaceContext
    ):
        with pytest.raises(InsufficientPermissionsError):
            await service.seed_demo_data(member_ctx)

        uow.tasks.create.assert_not_called()
