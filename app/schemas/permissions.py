"""Request/response schemas for permission introspection endpoints."""

import uuid as uuid_pkg

from pydantic import BaseModel, Field

from app.core.access import DenialReason, PermissionMode
from app.core.permissions import Permission


class PermissionCheckRequest(BaseModel):
    """Ask whether the caller holds a set of permissions.

    mode has no default: callers state whether they need all or any.
    """

    permissions: list[Permission] = Field(min_length=1)
    project_id: uuid_pkg.UUID | None = None
    mode: PermissionMode


class PermissionCheckResponse(BaseModel):
    """Outcome of a permission check."""

    allowed: bool
    reason: DenialReason | None = None
    missing: list[Permission] = []


class EffectivePermissionsResponse(BaseModel):
    """Everything the frontend needs to render permission-dependent controls."""

    user_id: uuid_pkg.UUID
    organization_id: uuid_pkg.UUID | None
    organization_role: str | None
    highest_role: str | None
    project_id: uuid_pkg.UUID | None  # Scope of `permissions`, if requested
    permissions: list[Permission]
    organization_permissions: list[Permission]
    project_roles: dict[str, str]  # project_id -> role
    project_permissions: dict[str, list[Permission]]  # project_id -> resolved set


class PermissionCatalogResponse(BaseModel):
    """Canonical permission catalog and role tables."""

    permissions: list[Permission]
    groups: dict[str, list[Permission]]
    organization_roles: dict[str, list[Permission]]  # Highest role first
    project_roles: dict[str, list[Permission]]  # Highest role first
    organization_hierarchy: dict[str, int]  # role -> level, higher = more authority
    project_hierarchy: dict[str, int]
