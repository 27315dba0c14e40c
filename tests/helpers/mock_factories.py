"""Mock object factories for unit tests.

Creates consistent mock objects that match the real model shapes.
Used in unit tests where the database is fully mocked.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from unittest.mock import MagicMock

from app.core.access import Identity
from app.models.organization import OrganizationRole
from app.models.project_member import ProjectRole

_UNSET = object()


def make_identity(
    organization_role: OrganizationRole | None = OrganizationRole.USER,
    organization_id: uuid.UUID | None | object = _UNSET,
    memberships: dict[uuid.UUID, ProjectRole] | None = None,
    user_id: uuid.UUID | None = None,
) -> Identity:
    """Build an Identity; organization_id defaults to a fresh id."""
    if organization_id is _UNSET:
        organization_id = uuid.uuid4()
    return Identity(
        user_id=user_id or uuid.uuid4(),
        organization_role=organization_role,
        organization_id=organization_id,  # type: ignore[arg-type]
        project_memberships=memberships or {},
    )


def make_mock_user(**overrides: object) -> MagicMock:
    user = MagicMock()
    user.id = overrides.get("id", uuid.uuid4())
    user.email = overrides.get("email", "test@example.com")
    user.display_name = overrides.get("display_name", "Test User")
    user.avatar_url = overrides.get("avatar_url")
    user.auth_provider = overrides.get("auth_provider", "email")
    user.organization_id = overrides.get("organization_id", uuid.uuid4())
    user.role = overrides.get("role", OrganizationRole.USER.value)
    user.project_memberships = overrides.get("project_memberships", [])
    user.created_at = overrides.get("created_at", datetime.now(UTC))
    user.updated_at = overrides.get("updated_at")
    return user


def make_mock_project(**overrides: object) -> MagicMock:
    project = MagicMock()
    project.id = overrides.get("id", uuid.uuid4())
    project.name = overrides.get("name", "__test_project")
    project.description = overrides.get("description", "Test project")
    project.organization_id = overrides.get("organization_id", uuid.uuid4())
    project.created_by_user_id = overrides.get("created_by_user_id", uuid.uuid4())
    project.created_at = overrides.get("created_at", datetime.now(UTC))
    project.updated_at = overrides.get("updated_at", datetime.now(UTC))
    return project


def make_mock_project_member(**overrides: object) -> MagicMock:
    member = MagicMock()
    member.id = overrides.get("id", uuid.uuid4())
    member.project_id = overrides.get("project_id", uuid.uuid4())
    member.user_id = overrides.get("user_id", uuid.uuid4())
    member.role = overrides.get("role", ProjectRole.MEMBER.value)
    member.added_by = overrides.get("added_by")
    member.user = overrides.get("user")
    member.created_at = overrides.get("created_at", datetime.now(UTC))
    member.updated_at = overrides.get("updated_at", datetime.now(UTC))
    return member


def mock_scalars_result(values: list) -> MagicMock:
    """Create a mock execute() result that yields values via .scalars().all()."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = values
    result.scalars.return_value.first.return_value = values[0] if values else None
    return result


def mock_scalar_result(value: object) -> MagicMock:
    """Create a mock execute() result that yields a single value."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar.return_value = value
    return result


def mock_rows_result(rows: list[tuple]) -> MagicMock:
    """Create a mock execute() result that yields rows via .all()."""
    result = MagicMock()
    result.all.return_value = rows
    return result
