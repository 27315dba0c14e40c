"""Permission introspection endpoints for the frontend."""

import uuid as uuid_pkg

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import CurrentIdentity, project_organization_id
from app.core.access import authorize, effective_permissions, highest_role, resolve
from app.core.database import get_db
from app.core.permissions import PERMISSION_GROUPS, Permission, in_catalog_order
from app.core.role_permissions import ORGANIZATION_ROLE_PERMISSIONS, PROJECT_ROLE_PERMISSIONS
from app.core.roles import ORGANIZATION_ROLE_HIERARCHY, PROJECT_ROLE_HIERARCHY
from app.schemas.permissions import (
    EffectivePermissionsResponse,
    PermissionCatalogResponse,
    PermissionCheckRequest,
    PermissionCheckResponse,
)

router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.get("/catalog", response_model=PermissionCatalogResponse)
async def get_catalog(_identity: CurrentIdentity) -> PermissionCatalogResponse:
    """
    Return the canonical permission catalog and both role tables.

    The frontend renders from this instead of keeping its own copy, so the
    UI never assumes a permission the server doesn't enforce.
    """
    return PermissionCatalogResponse(
        permissions=list(Permission),
        groups={group: list(perms) for group, perms in PERMISSION_GROUPS.items()},
        organization_roles={
            role.value: in_catalog_order(perms)
            for role, perms in ORGANIZATION_ROLE_PERMISSIONS.items()
        },
        project_roles={
            role.value: in_catalog_order(perms) for role, perms in PROJECT_ROLE_PERMISSIONS.items()
        },
        organization_hierarchy=dict(ORGANIZATION_ROLE_HIERARCHY),
        project_hierarchy=dict(PROJECT_ROLE_HIERARCHY),
    )


@router.get("/me", response_model=EffectivePermissionsResponse)
async def get_my_permissions(
    identity: CurrentIdentity,
    project_id: uuid_pkg.UUID | None = None,
    db: AsyncSession = Depends(get_db),
) -> EffectivePermissionsResponse:
    """
    Get the caller's effective permissions.

    `permissions` is resolved for `project_id` when given, otherwise it
    holds organization-level permissions only. A project owned by another
    organization also gets organization-level permissions only, and an
    unknown project is a 404. Per-project sets for every membership are
    included for bulk rendering.
    """
    scope = project_id
    if project_id is not None:
        owner_id = await project_organization_id(db, identity, project_id)
        if owner_id is None or not (
            identity.is_super_admin or owner_id == identity.organization_id
        ):
            scope = None

    effective = effective_permissions(identity)
    top_role = highest_role(identity)

    return EffectivePermissionsResponse(
        user_id=identity.user_id,
        organization_id=identity.organization_id,
        organization_role=identity.organization_role.value if identity.organization_role else None,
        highest_role=top_role.value if top_role else None,
        project_id=project_id,
        permissions=in_catalog_order(
            resolve(identity.organization_role, identity.project_memberships, scope)
        ),
        organization_permissions=in_catalog_order(effective.organization),
        project_roles={str(pid): role.value for pid, role in identity.project_memberships.items()},
        project_permissions={
            str(pid): in_catalog_order(perms) for pid, perms in effective.projects.items()
        },
    )


@router.post("/check", response_model=PermissionCheckResponse)
async def check_permissions(
    data: PermissionCheckRequest,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_db),
) -> PermissionCheckResponse:
    """
    Check permissions without raising.

    Used for speculative UI checks. Applies the same tenant check as
    RequirePermissions: the project is loaded (404 when unknown) and a
    project owned by another organization is denied.
    """
    organization_id = None
    if data.project_id is not None:
        organization_id = await project_organization_id(db, identity, data.project_id)

    decision = authorize(
        identity,
        data.permissions,
        data.project_id,
        mode=data.mode,
        organization_id=organization_id,
    )
    return PermissionCheckResponse(
        allowed=decision.allowed,
        reason=decision.reason,
        missing=list(decision.missing) if not decision.allowed else [],
    )
