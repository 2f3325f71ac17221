"""End-to-end walk through workspace, project and task lifecycle over HTTP."""

import pytest
from httpx import AsyncClient

from workhub.models.user import User


@pytest.mark.asyncio
class TestWorkspaceToTaskScenario:
    """Create W > P > T1, T2, delete P, and check what survives."""

    async def test_full_flow(
        self,
        client: AsyncClient,
        auth_headers: dict,
        auth_headers_2: dict,
        test_user: User,
        test_user_2: User,
    ):
        response = await client.post("/api/workspaces", data={"name": "W"}, headers=auth_headers)
        assert response.status_code == 200
        workspace = response.json()

        response = await client.post(
            "/api/projects",
            data={"name": "P", "workspaceId": workspace["id"]},
            headers=auth_headers,
        )
        assert response.status_code == 200
        project = response.json()

        body = {
            "status": "TODO",
            "workspaceId": workspace["id"],
            "projectId": project["id"],
            "dueDate": "2030-01-01T00:00:00Z",
        }
        t1 = (await client.post("/api/tasks", json={**body, "name": "T1"}, headers=auth_headers)).json()
        t2 = (await client.post("/api/tasks", json={**body, "name": "T2"}, headers=auth_headers)).json()
        assert t2["position"] == t1["position"] + 1000

        # The second user joins with the invite code and sees both tasks
        response = await client.post(
            f"/api/workspaces/{workspace['id']}/join",
            json={"code": workspace["invite_code"]},
            headers=auth_headers_2,
        )
        assert response.status_code == 200
        response = await client.get(
            "/api/tasks", params={"workspaceId": workspace["id"]}, headers=auth_headers_2
        )
        assert {t["name"] for t in response.json()} == {"T1", "T2"}

        response = await client.delete(f"/api/projects/{project['id']}", headers=auth_headers)
        assert response.status_code == 200

        response = await client.get(
            "/api/tasks", params={"workspaceId": workspace["id"]}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json() == []

        response = await client.get(f"/api/workspaces/{workspace['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["name"] == "W"


@pytest.mark.asyncio
class TestHealth:
    """Tests for the service endpoints."""

    async def test_root(self, client: AsyncClient):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_health_reports_database(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "ok"
