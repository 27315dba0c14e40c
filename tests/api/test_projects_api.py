"""Project member API tests.

Project routes are gated on the project's organization, loaded through
project_ops; that lookup is patched per test.
"""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock, patch

import pytest

from app.domain import project_member_ops, project_ops, user_ops
from app.models.organization import OrganizationRole
from app.models.project_member import ProjectRole

from tests.helpers.mock_factories import (
    make_identity,
    make_mock_project,
    make_mock_project_member,
    make_mock_user,
)


@pytest.fixture
def project(org_id):
    return make_mock_project(organization_id=org_id)


@pytest.fixture
def patched_project(project):
    with patch.object(project_ops, "get", AsyncMock(return_value=project)):
        yield project


def _member_identity(org_id, project, role: ProjectRole, org_role=OrganizationRole.USER):
    return make_identity(org_role, organization_id=org_id, memberships={project.id: role})


class TestListMembers:
    @pytest.mark.asyncio
    async def test_member_lists_members(
        self, api_client, current_identity, org_id, patched_project
    ):
        current_identity.value = _member_identity(org_id, patched_project, ProjectRole.VIEWER)
        user = make_mock_user(organization_id=org_id)
        members = [
            make_mock_project_member(project_id=patched_project.id, user_id=user.id, user=user)
        ]

        with patch.object(project_member_ops, "get_by_project", AsyncMock(return_value=members)):
            response = await api_client.get(f"/api/v1/projects/{patched_project.id}/members")

        assert response.status_code == 200
        assert response.json()[0]["user"]["email"] == "test@example.com"

    @pytest.mark.asyncio
    async def test_unknown_project_is_404(self, api_client, current_identity, plain_user):
        current_identity.value = plain_user

        with patch.object(project_ops, "get", AsyncMock(return_value=None)):
            response = await api_client.get(f"/api/v1/projects/{uuid.uuid4()}/members")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_other_tenant_is_forbidden(self, api_client, current_identity, patched_project):
        current_identity.value = make_identity(OrganizationRole.ORG_ADMIN)

        response = await api_client.get(f"/api/v1/projects/{patched_project.id}/members")

        assert response.status_code == 403
        assert response.json()["detail"]["reason"] == "not_organization_member"


class TestAssignableRoles:
    @pytest.mark.asyncio
    async def test_admin_assigns_member_and_viewer(
        self, api_client, current_identity, org_id, patched_project
    ):
        current_identity.value = _member_identity(org_id, patched_project, ProjectRole.ADMIN)

        response = await api_client.get(
            f"/api/v1/projects/{patched_project.id}/members/assignable-roles"
        )

        assert response.json() == ["member", "viewer"]

    @pytest.mark.asyncio
    async def test_org_admin_assigns_everything(
        self, api_client, current_identity, org_admin, patched_project
    ):
        current_identity.value = org_admin

        response = await api_client.get(
            f"/api/v1/projects/{patched_project.id}/members/assignable-roles"
        )

        assert response.json() == ["owner", "admin", "member", "viewer"]


class TestAddMember:
    @pytest.mark.asyncio
    async def test_owner_adds_member(self, api_client, current_identity, org_id, patched_project):
        current_identity.value = _member_identity(org_id, patched_project, ProjectRole.OWNER)
        target = make_mock_user(organization_id=org_id)

        with (
            patch.object(user_ops, "get_by_id", AsyncMock(return_value=target)),
            patch.object(
                project_member_ops, "get_by_project_and_user", AsyncMock(return_value=None)
            ),
        ):
            response = await api_client.post(
                f"/api/v1/projects/{patched_project.id}/members",
                json={"user_id": str(target.id), "role": "admin"},
            )

        assert response.status_code == 201
        assert response.json()["role"] == "admin"
        assert response.json()["user_id"] == str(target.id)

    @pytest.mark.asyncio
    async def test_existing_member_is_409(
        self, api_client, current_identity, org_admin, org_id, patched_project
    ):
        current_identity.value = org_admin
        target = make_mock_user(organization_id=org_id)

        with (
            patch.object(user_ops, "get_by_id", AsyncMock(return_value=target)),
            patch.object(
                project_member_ops,
                "get_by_project_and_user",
                AsyncMock(return_value=make_mock_project_member()),
            ),
        ):
            response = await api_client.post(
                f"/api/v1/projects/{patched_project.id}/members",
                json={"user_id": str(target.id), "role": "viewer"},
            )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_admin_cannot_add_owner(
        self, api_client, current_identity, org_id, patched_project
    ):
        current_identity.value = _member_identity(org_id, patched_project, ProjectRole.ADMIN)
        target = make_mock_user(organization_id=org_id)

        with (
            patch.object(user_ops, "get_by_id", AsyncMock(return_value=target)),
            patch.object(
                project_member_ops, "get_by_project_and_user", AsyncMock(return_value=None)
            ),
        ):
            response = await api_client.post(
                f"/api/v1/projects/{patched_project.id}/members",
                json={"user_id": str(target.id), "role": "owner"},
            )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_member_lacks_manage_project(
        self, api_client, current_identity, org_id, patched_project
    ):
        current_identity.value = _member_identity(org_id, patched_project, ProjectRole.MEMBER)

        response = await api_client.post(
            f"/api/v1/projects/{patched_project.id}/members",
            json={"user_id": str(uuid.uuid4()), "role": "viewer"},
        )

        assert response.status_code == 403
        assert response.json()["detail"]["reason"] == "insufficient_permissions"


class TestChangeAndRemove:
    @pytest.mark.asyncio
    async def test_last_owner_cannot_be_demoted(
        self, api_client, current_identity, org_admin, patched_project
    ):
        current_identity.value = org_admin
        member = make_mock_project_member(project_id=patched_project.id, role="owner")

        with (
            patch.object(
                project_member_ops, "get_by_project_and_user", AsyncMock(return_value=member)
            ),
            patch.object(project_member_ops, "count_owners", AsyncMock(return_value=1)),
        ):
            response = await api_client.patch(
                f"/api/v1/projects/{patched_project.id}/members/{member.user_id}",
                json={"role": "admin"},
            )

        assert response.status_code == 400
        assert member.role == "owner"

    @pytest.mark.asyncio
    async def test_owner_changes_role(self, api_client, current_identity, org_id, patched_project):
        current_identity.value = _member_identity(org_id, patched_project, ProjectRole.OWNER)
        member = make_mock_project_member(project_id=patched_project.id, role="viewer")

        with patch.object(
            project_member_ops, "get_by_project_and_user", AsyncMock(return_value=member)
        ):
            response = await api_client.patch(
                f"/api/v1/projects/{patched_project.id}/members/{member.user_id}",
                json={"role": "member"},
            )

        assert response.status_code == 200
        assert response.json()["old_role"] == "viewer"
        assert response.json()["new_role"] == "member"

    @pytest.mark.asyncio
    async def test_missing_member_is_404(
        self, api_client, current_identity, org_admin, patched_project
    ):
        current_identity.value = org_admin

        with patch.object(
            project_member_ops, "get_by_project_and_user", AsyncMock(return_value=None)
        ):
            response = await api_client.delete(
                f"/api/v1/projects/{patched_project.id}/members/{uuid.uuid4()}"
            )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_cannot_remove_self(self, api_client, current_identity, org_id, patched_project):
        identity = _member_identity(org_id, patched_project, ProjectRole.OWNER)
        current_identity.value = identity
        member = make_mock_project_member(
            project_id=patched_project.id, user_id=identity.user_id, role="owner"
        )

        with patch.object(
            project_member_ops, "get_by_project_and_user", AsyncMock(return_value=member)
        ):
            response = await api_client.delete(
                f"/api/v1/projects/{patched_project.id}/members/{identity.user_id}"
            )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_admin_removes_viewer(
        self, api_client, current_identity, org_id, patched_project
    ):
        current_identity.value = _member_identity(org_id, patched_project, ProjectRole.ADMIN)
        member = make_mock_project_member(project_id=patched_project.id, role="viewer")

        with patch.object(
            project_member_ops, "get_by_project_and_user", AsyncMock(return_value=member)
        ):
            response = await api_client.delete(
                f"/api/v1/projects/{patched_project.id}/members/{member.user_id}"
            )

        assert response.status_code == 200
        assert response.json()["new_role"] is None
