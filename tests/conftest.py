"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed test user ID for consistency
TEST_USER_ID = uuid4()


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database per test.

    StaticPool keeps the single connection alive so every session sees the
    same database.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Cascades and SET NULL rely on enforced foreign keys
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
def test_user() -> TokenUser:
    """Create a test user with fixed ID."""
    return TokenUser(
        id=TEST_USER_ID,
        email="test@example.com",
        display_name="Test User",
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
        jwks_url="",
        logout_url="",
    )


@pytest.fixture
def auth_token(auth_provider: JWTAuthProvider, test_user: TokenUser) -> str:
    """Create auth token for test user."""
    return str(auth_provider.create_token(test_user))


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def make_headers(auth_provider: JWTAuthProvider) -> Callable[..., dict[str, str]]:
    """Build bearer headers for any user, optionally selecting a workspace."""

    def _make(
        email: str,
        user_id: UUID | None = None,
        workspace_id: UUID | str | None = None,
    ) -> dict[str, str]:
        user = TokenUser(id=user_id or uuid4(), email=email, display_name=email.split("@")[0])
        headers = {"Authorization": f"Bearer {auth_provider.create_token(user)}"}
        if workspace_id:
            headers["X-Workspace-Id"] = str(workspace_id)
        return headers

    return _make


@pytest.fixture
def app(
    session_factory: async_sessionmaker[AsyncSession],
    auth_provider: JWTAuthProvider,
) -> Any:
    """
    Create the application wired to the test database.

    Every service uses a UoW over the in-memory SQLite database, the auth
    provider signs with the test secret, and cache revalidation is off.
    """
    from api.dependencies.auth import get_auth_provider
    from api.dependencies.services import (
        get_activity_service,
        get_identity_service,
        get_invitation_service,
        get_tag_service,
        get_task_service,
        get_workspace_service,
    )
    from domain.services.activity_service import ActivityService
    from domain.services.identity_service import IdentityService
    from domain.services.invitation_service import InvitationService
    from domain.services.tag_service import TagService
    from domain.services.task_service import TaskService
    from domain.services.workspace_service import WorkspaceService
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    app = create_app()

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    activity_service = ActivityService(test_uow_factory)

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_activity_service] = lambda: activity_service
    app.dependency_overrides[get_identity_service] = lambda: IdentityService(test_uow_factory)
    app.dependency_overrides[get_workspace_service] = lambda: WorkspaceService(
        test_uow_factory, activity_service=activity_service
    )
    app.dependency_overrides[get_invitation_service] = lambda: InvitationService(
        test_uow_factory,
        activity_service=activity_service,
        app_base_url="http://test",
    )
    app.dependency_overrides[get_task_service] = lambda: TaskService(
        test_uow_factory, activity_service=activity_service
    )
    app.dependency_overrides[get_tag_service] = lambda: TagService(test_uow_factory)

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def client(app: Any) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def authenticated_client(
    client: AsyncClient, auth_headers: dict[str, str]
) -> AsyncGenerator[AsyncClient, None]:
    """Test client sending the test user's bearer token on every request."""
    client.headers.update(auth_headers)
    yield client


@pytest.fixture
async def workspace_client(
    authenticated_client: AsyncClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Authenticated client whose workspace has been created and selected.

    The workspace id is kept on ``client.workspace_id`` and sent as the
    X-Workspace-Id header.
    """
    response = await authenticated_client.post("/api/v1/workspaces", json={"name": "Acme"})
    assert response.status_code == 201
    workspace_id = response.json()["data"]["id"]
    authenticated_client.headers["X-Workspace-Id"] = workspace_id
    authenticated_client.workspace_id = workspace_id  # type: ignore[attr-defined]
    yield authenticated_client


@pytest.fixture
def join_workspace(
    make_headers: Callable[..., dict[str, str]],
) -> Callable[..., Any]:
    """Invite a new user into the client's workspace and accept as them.

    Returns the new member's headers with the workspace selected.
    """

    async def _join(client: AsyncClient, email: str, role: str = "member") -> dict[str, str]:
        workspace_id = client.workspace_id  # type: ignore[attr-defined]
        invite = await client.post(
            f"/api/v1/workspaces/{workspace_id}/invitations",
            json={"email": email, "role": role},
        )
        assert invite.status_code == 201, invite.text

        user_id = uuid4()
        accept = await client.post(
            f"/api/v1/invitations/{invite.json()['token']}/accept",
            headers=make_headers(email, user_id),
        )
        assert accept.status_code == 200, accept.text
        return make_headers(email, user_id, workspace_id)

    return _join
