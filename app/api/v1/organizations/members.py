"""Organization member and role management endpoints."""

import uuid as uuid_pkg

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import RequirePermissions
from app.api.v1.errors import raise_for_role_change
from app.api.v1.organizations.schemas import (
    OrgMemberResponse,
    RoleChangeResponse,
    RoleStatisticsResponse,
)
from app.core.access import Identity
from app.core.database import get_db
from app.core.exceptions import NotFoundError, ValidationError
from app.core.permissions import Permission
from app.core.role_guards import RoleChangeError
from app.domain import project_member_ops, user_ops
from app.models.organization import OrganizationRole, OrganizationRoleUpdate


async def list_members(
    org_id: uuid_pkg.UUID,
    _identity: Identity = Depends(RequirePermissions(Permission.VIEW_USERS)),
    db: AsyncSession = Depends(get_db),
) -> list[OrgMemberResponse]:
    """List all users of an organization with their roles."""
    users = await user_ops.get_by_org(db, org_id)
    return [
        OrgMemberResponse(
            user_id=str(u.id),
            email=u.email,
            display_name=u.display_name,
            avatar_url=u.avatar_url,
            role=u.role,
            joined_at=u.created_at.isoformat(),
        )
        for u in users
    ]


async def update_member_role(
    org_id: uuid_pkg.UUID,
    user_id: uuid_pkg.UUID,
    data: OrganizationRoleUpdate,
    identity: Identity = Depends(RequirePermissions(Permission.MANAGE_USERS)),
    db: AsyncSession = Depends(get_db),
) -> RoleChangeResponse:
    """
    Change a user's organization role.

    Requires manage_users. The caller must outrank the user's current role
    and the role being assigned, and may never change their own role.
    """
    if data.role == OrganizationRole.SUPER_ADMIN:
        raise ValidationError("The super_admin role cannot be assigned within an organization")

    target = await user_ops.get_by_id(db, user_id)
    if not target or target.organization_id != org_id:
        raise NotFoundError("Member")

    try:
        event = await user_ops.change_role(db, identity, target, data.role)
    except RoleChangeError as e:
        raise_for_role_change(e)
    await db.commit()

    return RoleChangeResponse(
        user_id=str(event.user_id),
        old_role=event.old_role,
        new_role=event.new_role,
        changed_by=str(event.changed_by),
        changed_at=event.timestamp.isoformat(),
    )


async def get_role_statistics(
    org_id: uuid_pkg.UUID,
    _identity: Identity = Depends(RequirePermissions(Permission.VIEW_USERS)),
    db: AsyncSession = Depends(get_db),
) -> RoleStatisticsResponse:
    """Count organization roles and project roles across the organization."""
    return RoleStatisticsResponse(
        organization_roles=await user_ops.count_by_role(db, org_id),
        project_roles=await project_member_ops.count_by_role_for_org(db, org_id),
    )
