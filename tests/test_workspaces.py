"""Tests for workspace endpoints and the invite code manager."""

from uuid import uuid4

import pytest
from fastapi import HTTPException
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workhub.models.member import Member, MemberRole
from workhub.models.user import User
from workhub.models.workspace import Workspace
from workhub.services.invite_code_service import (
    INVITE_CODE_ALPHABET,
    generate_invite_code,
    join_workspace,
    rotate_invite_code,
)


class TestGenerateInviteCode:
    """Tests for invite code generation."""

    def test_default_length_and_alphabet(self):
        """Codes are six alphanumeric characters by default."""
        for _ in range(50):
            code = generate_invite_code()
            assert len(code) == 6
            assert all(ch in INVITE_CODE_ALPHABET for ch in code)

    def test_custom_length(self):
        """An explicit length is honoured."""
        assert len(generate_invite_code(10)) == 10

    def test_invalid_length(self):
        """Non-positive lengths are rejected."""
        with pytest.raises(ValueError):
            generate_invite_code(-1)
        with pytest.raises(ValueError):
            generate_invite_code(0)


@pytest.mark.asyncio
class TestCreateWorkspace:
    """Tests for workspace creation."""

    async def test_create_workspace_enrolls_admin(
        self, client: AsyncClient, auth_headers: dict, db_session: AsyncSession, test_user: User
    ):
        """The creator becomes the only ADMIN member."""
        response = await client.post(
            "/api/workspaces",
            data={"name": "  Acme  ", "image": "https://cdn.example.com/acme.png"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Acme"
        assert data["user_id"] == str(test_user.id)
        assert data["image_url"] == "https://cdn.example.com/acme.png"
        assert len(data["invite_code"]) == 6

        result = await db_session.execute(select(Member))
        members = result.unique().scalars().all()
        assert len(members) == 1
        assert str(members[0].workspace_id) == data["id"]
        assert members[0].user_id == test_user.id
        assert members[0].role == MemberRole.ADMIN.value

    async def test_create_workspace_blank_name(self, client: AsyncClient, auth_headers: dict):
        """A whitespace-only name is rejected."""
        response = await client.post(
            "/api/workspaces", data={"name": "   "}, headers=auth_headers
        )

        assert response.status_code == 400

    async def test_create_workspace_requires_auth(self, client: AsyncClient):
        """Anonymous callers are rejected."""
        response = await client.post("/api/workspaces", data={"name": "Acme"})

        assert response.status_code == 401


@pytest.mark.asyncio
class TestReadWorkspace:
    """Tests for listing and reading workspaces."""

    async def test_list_only_own_workspaces(
        self,
        client: AsyncClient,
        auth_headers: dict,
        auth_headers_2: dict,
        test_workspace: Workspace,
    ):
        """Each user only sees workspaces they belong to."""
        await client.post("/api/workspaces", data={"name": "Second"}, headers=auth_headers)
        await client.post("/api/workspaces", data={"name": "Other"}, headers=auth_headers_2)

        response = await client.get("/api/workspaces", headers=auth_headers)

        assert response.status_code == 200
        names = [w["name"] for w in response.json()]
        assert sorted(names) == ["Second", "Test Workspace"]

    async def test_get_workspace_member(
        self, client: AsyncClient, auth_headers: dict, test_workspace: Workspace
    ):
        """Members can read the workspace."""
        response = await client.get(f"/api/workspaces/{test_workspace.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["invite_code"] == test_workspace.invite_code

    async def test_get_workspace_non_member(
        self, client: AsyncClient, auth_headers_2: dict, test_workspace: Workspace
    ):
        """Non-members get a bare 401."""
        response = await client.get(
            f"/api/workspaces/{test_workspace.id}", headers=auth_headers_2
        )

        assert response.status_code == 401
        assert response.json() == {"detail": "Unauthorized"}

    async def test_get_missing_workspace_is_unauthorized(
        self, client: AsyncClient, auth_headers: dict
    ):
        """A workspace that does not exist looks the same as one you cannot see."""
        response = await client.get(f"/api/workspaces/{uuid4()}", headers=auth_headers)

        assert response.status_code == 401
        assert response.json() == {"detail": "Unauthorized"}

    async def test_workspace_info(
        self,
        client: AsyncClient,
        auth_headers: dict,
        auth_headers_2: dict,
        test_workspace: Workspace,
    ):
        """The info summary requires membership too."""
        response = await client.get(
            f"/api/workspaces/{test_workspace.id}/info", headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json() == {
            "id": str(test_workspace.id),
            "name": "Test Workspace",
            "image_url": None,
        }

        response = await client.get(
            f"/api/workspaces/{test_workspace.id}/info", headers=auth_headers_2
        )
        assert response.status_code == 401


@pytest.mark.asyncio
class TestUpdateWorkspace:
    """Tests for workspace updates."""

    async def test_admin_can_update(
        self, client: AsyncClient, auth_headers: dict, test_workspace: Workspace
    ):
        """ADMINs can rename and set an image, and clear it with an empty value."""
        response = await client.patch(
            f"/api/workspaces/{test_workspace.id}",
            data={"name": "Renamed", "image": "img-1"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"
        assert response.json()["image_url"] == "img-1"

        response = await client.patch(
            f"/api/workspaces/{test_workspace.id}",
            data={"image": ""},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"
        assert response.json()["image_url"] is None

    async def test_omitted_image_is_kept(
        self, client: AsyncClient, auth_headers: dict, test_workspace: Workspace
    ):
        """A rename without an image field leaves the image alone."""
        await client.patch(
            f"/api/workspaces/{test_workspace.id}",
            data={"image": "img-1"},
            headers=auth_headers,
        )

        response = await client.patch(
            f"/api/workspaces/{test_workspace.id}",
            data={"name": "Renamed"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"
        assert response.json()["image_url"] == "img-1"

    async def test_member_cannot_update(
        self,
        client: AsyncClient,
        auth_headers_2: dict,
        test_workspace: Workspace,
        second_member: Member,
    ):
        """Plain MEMBERs cannot edit the workspace."""
        response = await client.patch(
            f"/api/workspaces/{test_workspace.id}",
            data={"name": "Hijacked"},
            headers=auth_headers_2,
        )

        assert response.status_code == 401


@pytest.mark.asyncio
class TestInviteCodes:
    """Tests for invite code rotation and joining."""

    async def test_rotation_invalidates_old_code(
        self,
        client: AsyncClient,
        auth_headers: dict,
        auth_headers_2: dict,
        test_workspace: Workspace,
    ):
        """After a reset the old code no longer admits anyone."""
        old_code = test_workspace.invite_code

        response = await client.post(
            f"/api/workspaces/{test_workspace.id}/reset-invite-code", headers=auth_headers
        )
        assert response.status_code == 200
        new_code = response.json()["invite_code"]
        assert new_code != old_code
        assert len(new_code) == 6

        response = await client.post(
            f"/api/workspaces/{test_workspace.id}/join",
            json={"code": old_code},
            headers=auth_headers_2,
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid invite code"

        response = await client.post(
            f"/api/workspaces/{test_workspace.id}/join",
            json={"code": new_code},
            headers=auth_headers_2,
        )
        assert response.status_code == 200
        assert response.json()["id"] == str(test_workspace.id)

    async def test_member_cannot_rotate(
        self,
        client: AsyncClient,
        auth_headers_2: dict,
        test_workspace: Workspace,
        second_member: Member,
    ):
        """Only ADMINs can reset the code."""
        response = await client.post(
            f"/api/workspaces/{test_workspace.id}/reset-invite-code", headers=auth_headers_2
        )

        assert response.status_code == 401

    async def test_join_once(
        self,
        client: AsyncClient,
        auth_headers_2: dict,
        db_session: AsyncSession,
        test_workspace: Workspace,
        test_user_2: User,
    ):
        """A second join with the same code reports an existing membership."""
        url = f"/api/workspaces/{test_workspace.id}/join"
        body = {"code": test_workspace.invite_code}

        first = await client.post(url, json=body, headers=auth_headers_2)
        second = await client.post(url, json=body, headers=auth_headers_2)

        assert first.status_code == 200
        assert second.status_code == 400
        assert second.json()["detail"] == "Already a member"

        result = await db_session.execute(
            select(Member).where(
                Member.workspace_id == test_workspace.id,
                Member.user_id == test_user_2.id,
            )
        )
        members = result.unique().scalars().all()
        assert len(members) == 1
        assert members[0].role == MemberRole.MEMBER.value

    async def test_join_is_case_sensitive(
        self,
        db_session: AsyncSession,
        test_workspace: Workspace,
        test_user_2: User,
    ):
        """Codes must match exactly, with no case folding."""
        test_workspace.invite_code = "aBcDeF"
        await db_session.commit()

        with pytest.raises(HTTPException) as exc_info:
            await join_workspace(db_session, test_workspace.id, "abcdef", test_user_2)

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Invalid invite code"

    async def test_join_missing_workspace(
        self, db_session: AsyncSession, test_user_2: User
    ):
        """Joining an unknown workspace is an invalid code, not a crash."""
        with pytest.raises(HTTPException) as exc_info:
            await join_workspace(db_session, uuid4(), "abc123", test_user_2)

        assert exc_info.value.status_code == 400

    async def test_rotate_always_changes_code(
        self, db_session: AsyncSession, test_workspace: Workspace
    ):
        """Rotation never hands back the code it replaced."""
        seen = {test_workspace.invite_code}
        for _ in range(5):
            previous = test_workspace.invite_code
            await rotate_invite_code(db_session, test_workspace)
            assert test_workspace.invite_code != previous
            seen.add(test_workspace.invite_code)
        assert len(seen) > 1
