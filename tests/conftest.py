"""Root conftest - test infrastructure for all backend tests.

Provides:
- Identity fixtures for each organization role
- API client with dependency overrides (no database, no identity provider)

Everything runs against mocks; no test needs a database connection.
"""

from __future__ import annotations

import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from app.models.organization import OrganizationRole

from tests.helpers.mock_factories import make_identity

# ─────────────────────────────────────────────────────────────────────────────
# Identities
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def org_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def project_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def org_admin(org_id):
    return make_identity(OrganizationRole.ORG_ADMIN, organization_id=org_id)


@pytest.fixture
def manager(org_id):
    return make_identity(OrganizationRole.MANAGER, organization_id=org_id)


@pytest.fixture
def plain_user(org_id):
    return make_identity(OrganizationRole.USER, organization_id=org_id)


@pytest.fixture
def viewer(org_id):
    return make_identity(OrganizationRole.VIEWER, organization_id=org_id)


@pytest.fixture
def super_admin():
    return make_identity(OrganizationRole.SUPER_ADMIN, organization_id=None)


# ─────────────────────────────────────────────────────────────────────────────
# API Client
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def mock_db() -> AsyncMock:
    """AsyncSession stand-in shared by every dependency in a request."""
    db = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def current_identity() -> SimpleNamespace:
    """The identity the api_client authenticates as; tests set .value."""
    return SimpleNamespace(value=None)


@pytest.fixture
async def api_client(mock_db, current_identity):
    """HTTP client that bypasses JWT auth and the database.

    Overrides: get_current_identity_optional (returns current_identity.value),
    get_db (yields mock_db).
    """
    from app.api.deps.auth import get_current_identity_optional
    from app.core.database import get_db
    from app.main import app

    app.dependency_overrides[get_current_identity_optional] = lambda: current_identity.value

    async def override_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
