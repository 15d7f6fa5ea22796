"""Integration tests for Workspaces API."""

from collections.abc import Callable
from typing import Any
from uuid import uuid4

import pytest
from httpx import AsyncClient


class TestWorkspaceCRUD:
    """Tests for workspace create, select, update, delete."""

    @pytest.mark.asyncio
    async def test_create_workspace(self, authenticated_client: AsyncClient) -> None:
        """POST /api/v1/workspaces returns 201, makes the creator owner and selects it."""
        response = await authenticated_client.post(
            "/api/v1/workspaces",
            json={"name": "Acme", "description": "A test workspace"},
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["name"] == "Acme"
        assert data["role"] == "owner"
        assert f"current_workspace_id={data['id']}" in response.headers["set-cookie"]

    @pytest.mark.asyncio
    async def test_create_requires_name(self, authenticated_client: AsyncClient) -> None:
        """POST /api/v1/workspaces with an empty name returns 422."""
        response = await authenticated_client.post("/api/v1/workspaces", json={"name": ""})

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_list_workspaces(self, workspace_client: AsyncClient) -> None:
        """GET /api/v1/workspaces returns the caller's workspaces with roles."""
        await workspace_client.post("/api/v1/workspaces", json={"name": "Side project"})

        response = await workspace_client.get("/api/v1/workspaces")

        assert response.status_code == 200
        body = response.json()
        assert body["meta"]["total"] == 2
        assert {w["name"] for w in body["data"]} == {"Acme", "Side project"}
        assert {w["role"] for w in body["data"]} == {"owner"}

    @pytest.mark.asyncio
    async def test_list_requires_login(self, client: AsyncClient) -> None:
        """GET /api/v1/workspaces without a session returns 401."""
        response = await client.get("/api/v1/workspaces")

        assert response.status_code == 401
        assert response.json()["error_code"] == "LOGIN_REQUIRED"

    @pytest.mark.asyncio
    async def test_get_current_workspace(self, workspace_client: AsyncClient) -> None:
        """GET /api/v1/workspaces/current resolves the selected workspace."""
        response = await workspace_client.get("/api/v1/workspaces/current")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == workspace_client.workspace_id  # type: ignore[attr-defined]
        assert data["role"] == "owner"

    @pytest.mark.asyncio
    async def test_current_without_selection_is_428(
        self, authenticated_client: AsyncClient
    ) -> None:
        """A signed-in user with no workspace gets 428 from workspace-scoped routes."""
        response = await authenticated_client.get("/api/v1/workspaces/current")

        assert response.status_code == 428
        assert response.json()["error_code"] == "WORKSPACE_CONTEXT_REQUIRED"

    @pytest.mark.asyncio
    async def test_forged_selector_is_428(self, workspace_client: AsyncClient) -> None:
        """A workspace id the caller does not belong to is not a valid context."""
        response = await workspace_client.get(
            "/api/v1/workspaces/current", headers={"X-Workspace-Id": str(uuid4())}
        )

        assert response.status_code == 428

    @pytest.mark.asyncio
    async def test_select_workspace(self, workspace_client: AsyncClient) -> None:
        """POST /api/v1/workspaces/{id}/select sets the selector cookie."""
        other = await workspace_client.post("/api/v1/workspaces", json={"name": "Other"})
        other_id = other.json()["data"]["id"]

        response = await workspace_client.post(f"/api/v1/workspaces/{other_id}/select")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == other_id
        assert f"current_workspace_id={other_id}" in response.headers["set-cookie"]

    @pytest.mark.asyncio
    async def test_select_unknown_workspace(self, workspace_client: AsyncClient) -> None:
        """Selecting a workspace that does not exist returns 404."""
        response = await workspace_client.post(f"/api/v1/workspaces/{uuid4()}/select")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_select_foreign_workspace(
        self,
        workspace_client: AsyncClient,
        make_headers: Callable[..., dict[str, str]],
    ) -> None:
        """Selecting a workspace the caller is not a member of returns 403."""
        outsider = make_headers("eve@x.com")
        ws_id = workspace_client.workspace_id  # type: ignore[attr-defined]

        response = await workspace_client.post(
            f"/api/v1/workspaces/{ws_id}/select", headers=outsider
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "NOT_A_MEMBER"

    @pytest.mark.asyncio
    async def test_update_workspace(self, workspace_client: AsyncClient) -> None:
        """PATCH /api/v1/workspaces/{id} updates the name."""
        ws_id = workspace_client.workspace_id  # type: ignore[attr-defined]

        response = await workspace_client.patch(
            f"/api/v1/workspaces/{ws_id}", json={"name": "Acme Corp"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Acme Corp"

    @pytest.mark.asyncio
    async def test_update_requires_matching_selection(
        self, workspace_client: AsyncClient
    ) -> None:
        """PATCH on a workspace other than the selected one returns 428."""
        response = await workspace_client.patch(
            f"/api/v1/workspaces/{uuid4()}", json={"name": "Hijack"}
        )

        assert response.status_code == 428

    @pytest.mark.asyncio
    async def test_admin_cannot_update(
        self, workspace_client: AsyncClient, join_workspace: Callable[..., Any]
    ) -> None:
        """Only the owner may rename the workspace."""
        admin = await join_workspace(workspace_client, "ann@x.com", role="admin")
        ws_id = workspace_client.workspace_id  # type: ignore[attr-defined]

        response = await workspace_client.patch(
            f"/api/v1/workspaces/{ws_id}", json={"name": "Mine now"}, headers=admin
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "INSUFFICIENT_PERMISSIONS"

    @pytest.mark.asyncio
    async def test_delete_workspace(self, workspace_client: AsyncClient) -> None:
        """DELETE /api/v1/workspaces/{id} returns 204 and removes everything."""
        ws_id = workspace_client.workspace_id  # type: ignore[attr-defined]
        await workspace_client.post(
            "/api/v1/tasks", json={"title": "Doomed", "status": "backlog", "priority": "low"}
        )

        response = await workspace_client.delete(f"/api/v1/workspaces/{ws_id}")

        assert response.status_code == 204
        listing = await workspace_client.get("/api/v1/workspaces")
        assert listing.json()["data"] == []
        tasks = await workspace_client.get("/api/v1/tasks")
        assert tasks.status_code == 428
        select = await workspace_client.post(f"/api/v1/workspaces/{ws_id}/select")
        assert select.status_code == 404


class TestWorkspaceMembers:
    """Tests for workspace member management."""

    @pytest.mark.asyncio
    async def test_list_members(
        self, workspace_client: AsyncClient, join_workspace: Callable[..., Any]
    ) -> None:
        """GET /api/v1/workspaces/{id}/members lists members with profiles."""
        viewer = await join_workspace(workspace_client, "val@x.com", role="viewer")
        ws_id = workspace_client.workspace_id  # type: ignore[attr-defined]

        response = await workspace_client.get(
            f"/api/v1/workspaces/{ws_id}/members", headers=viewer
        )

        assert response.status_code == 200
        members = {m["email"]: m["role"] for m in response.json()["data"]}
        assert members == {"test@example.com": "owner", "val@x.com": "viewer"}

    @pytest.mark.asyncio
    async def test_change_member_role(
        self, workspace_client: AsyncClient, join_workspace: Callable[..., Any]
    ) -> None:
        """PATCH /api/v1/workspaces/{id}/members/{user_id} changes the role."""
        await join_workspace(workspace_client, "bob@x.com")
        ws_id = workspace_client.workspace_id  # type: ignore[attr-defined]
        members = await workspace_client.get(f"/api/v1/workspaces/{ws_id}/members")
        bob = next(m for m in members.json()["data"] if m["email"] == "bob@x.com")

        response = await workspace_client.patch(
            f"/api/v1/workspaces/{ws_id}/members/{bob['user_id']}", json={"role": "admin"}
        )

        assert response.status_code == 200
        assert response.json()["role"] == "admin"

        activity = await workspace_client.get("/api/v1/activity")
        assert "role_changed" in {e["action"] for e in activity.json()["data"]}

    @pytest.mark.asyncio
    async def test_cannot_grant_owner(self, workspace_client: AsyncClient) -> None:
        """Ownership is not an assignable role."""
        ws_id = workspace_client.workspace_id  # type: ignore[attr-defined]

        response = await workspace_client.patch(
            f"/api/v1/workspaces/{ws_id}/members/{uuid4()}", json={"role": "owner"}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_remove_member(
        self, workspace_client: AsyncClient, join_workspace: Callable[..., Any]
    ) -> None:
        """DELETE /api/v1/workspaces/{id}/members/{user_id} revokes access."""
        bob = await join_workspace(workspace_client, "bob@x.com")
        ws_id = workspace_client.workspace_id  # type: ignore[attr-defined]
        members = await workspace_client.get(f"/api/v1/workspaces/{ws_id}/members")
        bob_id = next(m for m in members.json()["data"] if m["email"] == "bob@x.com")["user_id"]

        response = await workspace_client.delete(f"/api/v1/workspaces/{ws_id}/members/{bob_id}")

        assert response.status_code == 204
        after = await workspace_client.get("/api/v1/tasks", headers=bob)
        assert after.status_code == 428

    @pytest.mark.asyncio
    async def test_remove_unknown_member(self, workspace_client: AsyncClient) -> None:
        """Removing someone who is not a member returns 404."""
        ws_id = workspace_client.workspace_id  # type: ignore[attr-defined]

        response = await workspace_client.delete(
            f"/api/v1/workspaces/{ws_id}/members/{uuid4()}"
        )

        assert response.status_code == 404


class TestSeedDemoData:
    """Tests for demo data seeding."""

    @pytest.mark.asyncio
    async def test_seed_creates_demo_tasks(self, workspace_client: AsyncClient) -> None:
        """POST /api/v1/workspaces/{id}/seed fills the workspace."""
        ws_id = workspace_client.workspace_id  # type: ignore[attr-defined]

        response = await workspace_client.post(f"/api/v1/workspaces/{ws_id}/seed")

        assert response.status_code == 201
        assert response.json()["tasks_created"] == 7
        tasks = await workspace_client.get("/api/v1/tasks")
        assert tasks.json()["meta"]["total"] == 7
        tags = await workspace_client.get("/api/v1/tags")
        assert tags.json()["meta"]["total"] == 4

    @pytest.mark.asyncio
    async def test_member_cannot_seed(
        self, workspace_client: AsyncClient, join_workspace: Callable[..., Any]
    ) -> None:
        """Seeding is restricted to owners and admins."""
        member = await join_workspace(workspace_client, "bob@x.com")
        ws_id = workspace_client.workspace_id  # type: ignore[attr-defined]

        response = await workspace_client.post(
            f"/api/v1/workspaces/{ws_id}/seed", headers=member
        )

        assert response.status_code == 403
