"""Permission introspection API tests: catalog, effective permissions, speculative checks."""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock, patch

import pytest

from app.core.permissions import Permission
from app.domain import project_ops
from app.models.organization import OrganizationRole
from app.models.project_member import ProjectRole

from tests.helpers.mock_factories import make_identity, make_mock_project


class TestPermissionsRequireAuth:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method,url,body",
        [
            ("get", "/api/v1/permissions/catalog", None),
            ("get", "/api/v1/permissions/me", None),
            ("post", "/api/v1/permissions/check", {"permissions": ["view_project"], "mode": "all"}),
        ],
    )
    async def test_returns_401_without_identity(self, api_client, method, url, body):
        kwargs = {"json": body} if body is not None else {}
        response = await getattr(api_client, method)(url, **kwargs)
        assert response.status_code == 401


class TestCatalog:
    @pytest.mark.asyncio
    async def test_lists_catalog_and_role_tables(self, api_client, current_identity, viewer):
        current_identity.value = viewer

        response = await api_client.get("/api/v1/permissions/catalog")

        assert response.status_code == 200
        data = response.json()
        assert data["permissions"] == [p.value for p in Permission]
        assert data["organization_roles"]["viewer"] == [
            "view_organization",
            "view_project",
            "view_document",
        ]
        assert len(data["organization_roles"]["super_admin"]) == len(Permission)
        assert data["project_hierarchy"]["owner"] > data["project_hierarchy"]["admin"]
        assert "manage_system" in data["groups"]["system"]


class TestMyPermissions:
    @pytest.mark.asyncio
    async def test_resolves_for_requested_project(self, api_client, current_identity, org_id):
        project_id = uuid.uuid4()
        current_identity.value = make_identity(
            OrganizationRole.USER,
            organization_id=org_id,
            memberships={project_id: ProjectRole.ADMIN},
        )

        project = make_mock_project(id=project_id, organization_id=org_id)

        with patch.object(project_ops, "get", AsyncMock(return_value=project)):
            response = await api_client.get(
                "/api/v1/permissions/me", params={"project_id": str(project_id)}
            )

        assert response.status_code == 200
        data = response.json()
        assert data["organization_role"] == "user"
        assert data["highest_role"] == "admin"
        assert "manage_project" in data["permissions"]
        assert "manage_project" not in data["organization_permissions"]
        assert data["project_roles"] == {str(project_id): "admin"}

    @pytest.mark.asyncio
    async def test_without_project_returns_org_level(
        self, api_client, current_identity, plain_user
    ):
        current_identity.value = plain_user

        response = await api_client.get("/api/v1/permissions/me")

        data = response.json()
        assert data["project_id"] is None
        assert data["permissions"] == data["organization_permissions"]

    @pytest.mark.asyncio
    async def test_project_in_other_organization_gets_org_level_only(
        self, api_client, current_identity, org_id
    ):
        project = make_mock_project(organization_id=uuid.uuid4())
        current_identity.value = make_identity(
            OrganizationRole.USER,
            organization_id=org_id,
            memberships={project.id: ProjectRole.ADMIN},
        )

        with patch.object(project_ops, "get", AsyncMock(return_value=project)):
            response = await api_client.get(
                "/api/v1/permissions/me", params={"project_id": str(project.id)}
            )

        assert response.status_code == 200
        data = response.json()
        assert data["permissions"] == data["organization_permissions"]
        assert "manage_project" not in data["permissions"]

    @pytest.mark.asyncio
    async def test_unknown_project_is_404(self, api_client, current_identity, plain_user):
        current_identity.value = plain_user

        with patch.object(project_ops, "get", AsyncMock(return_value=None)):
            response = await api_client.get(
                "/api/v1/permissions/me", params={"project_id": str(uuid.uuid4())}
            )

        assert response.status_code == 404


class TestCheck:
    @pytest.mark.asyncio
    async def test_mode_is_required(self, api_client, current_identity, plain_user):
        current_identity.value = plain_user

        response = await api_client.post(
            "/api/v1/permissions/check", json={"permissions": ["edit_document"]}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_empty_permissions_rejected(self, api_client, current_identity, plain_user):
        current_identity.value = plain_user

        response = await api_client.post(
            "/api/v1/permissions/check", json={"permissions": [], "mode": "all"}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_all_mode_reports_missing(self, api_client, current_identity, plain_user):
        current_identity.value = plain_user

        response = await api_client.post(
            "/api/v1/permissions/check",
            json={"permissions": ["edit_document", "manage_users"], "mode": "all"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "allowed": False,
            "reason": "insufficient_permissions",
            "missing": ["manage_users"],
        }

    @pytest.mark.asyncio
    async def test_any_mode_allows(self, api_client, current_identity, plain_user):
        current_identity.value = plain_user

        response = await api_client.post(
            "/api/v1/permissions/check",
            json={"permissions": ["edit_document", "manage_users"], "mode": "any"},
        )

        assert response.json() == {"allowed": True, "reason": None, "missing": []}

    @pytest.mark.asyncio
    async def test_org_admin_manages_any_project_in_own_organization(
        self, api_client, current_identity, org_admin, org_id
    ):
        current_identity.value = org_admin
        project = make_mock_project(organization_id=org_id)

        with patch.object(project_ops, "get", AsyncMock(return_value=project)):
            response = await api_client.post(
                "/api/v1/permissions/check",
                json={
                    "permissions": ["manage_project"],
                    "project_id": str(project.id),
                    "mode": "all",
                },
            )

        assert response.json()["allowed"] is True

    @pytest.mark.asyncio
    async def test_user_without_membership_is_not_project_member(
        self, api_client, current_identity, plain_user, org_id
    ):
        current_identity.value = plain_user
        project = make_mock_project(organization_id=org_id)

        with patch.object(project_ops, "get", AsyncMock(return_value=project)):
            response = await api_client.post(
                "/api/v1/permissions/check",
                json={
                    "permissions": ["manage_project"],
                    "project_id": str(project.id),
                    "mode": "all",
                },
            )

        assert response.json()["reason"] == "not_project_member"

    @pytest.mark.asyncio
    async def test_fresh_user_is_not_org_member(self, api_client, current_identity):
        current_identity.value = make_identity(None, organization_id=None)

        response = await api_client.post(
            "/api/v1/permissions/check",
            json={"permissions": ["view_project"], "mode": "any"},
        )

        assert response.json()["reason"] == "not_organization_member"

    @pytest.mark.asyncio
    async def test_org_admin_denied_on_other_organization_project(
        self, api_client, current_identity, org_admin
    ):
        current_identity.value = org_admin
        project = make_mock_project(organization_id=uuid.uuid4())

        with patch.object(project_ops, "get", AsyncMock(return_value=project)):
            response = await api_client.post(
                "/api/v1/permissions/check",
                json={
                    "permissions": ["manage_project"],
                    "project_id": str(project.id),
                    "mode": "all",
                },
            )

        assert response.status_code == 200
        assert response.json()["allowed"] is False
        assert response.json()["reason"] == "not_organization_member"

    @pytest.mark.asyncio
    async def test_super_admin_allowed_on_any_organization_project(
        self, api_client, current_identity, super_admin
    ):
        current_identity.value = super_admin
        project = make_mock_project(organization_id=uuid.uuid4())

        with patch.object(project_ops, "get", AsyncMock(return_value=project)):
            response = await api_client.post(
                "/api/v1/permissions/check",
                json={
                    "permissions": ["manage_project"],
                    "project_id": str(project.id),
                    "mode": "all",
                },
            )

        assert response.json()["allowed"] is True

    @pytest.mark.asyncio
    async def test_unknown_project_is_404(self, api_client, current_identity, plain_user):
        current_identity.value = plain_user

        with patch.object(project_ops, "get", AsyncMock(return_value=None)):
            response = await api_client.post(
                "/api/v1/permissions/check",
                json={
                    "permissions": ["view_project"],
                    "project_id": str(uuid.uuid4()),
                    "mode": "all",
                },
            )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_fresh_user_project_check_skips_lookup(self, api_client, current_identity):
        current_identity.value = make_identity(None, organization_id=None)

        with patch.object(project_ops, "get", AsyncMock(return_value=None)) as mock_get:
            response = await api_client.post(
                "/api/v1/permissions/check",
                json={
                    "permissions": ["view_project"],
                    "project_id": str(uuid.uuid4()),
                    "mode": "all",
                },
            )

        mock_get.assert_not_awaited()
        assert response.json()["reason"] == "not_organization_member"
