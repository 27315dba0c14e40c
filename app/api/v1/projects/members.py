"""Project member management: project-scoped roles."""

import uuid as uuid_pkg

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import RequirePermissions
from app.api.v1.errors import raise_for_role_change
from app.api.v1.organizations.schemas import RoleChangeResponse
from app.core.access import Identity, effective_project_role
from app.core.database import get_db
from app.core.exceptions import NotFoundError
from app.core.permissions import Permission
from app.core.role_guards import RoleChangeError, assignable_project_roles
from app.domain import project_member_ops, project_ops, user_ops
from app.domain.project_member_operations import MembershipError
from app.domain.role_events import RoleChangeEvent
from app.models.project_member import (
    MemberUserInfo,
    ProjectMember,
    ProjectMemberCreate,
    ProjectMemberRead,
    ProjectMemberUpdate,
    ProjectMemberWithUser,
)

router = APIRouter()


def _event_response(event: RoleChangeEvent) -> RoleChangeResponse:
    return RoleChangeResponse(
        user_id=str(event.user_id),
        old_role=event.old_role,
        new_role=event.new_role,
        changed_by=str(event.changed_by),
        changed_at=event.timestamp.isoformat(),
    )


async def _get_member_or_404(
    db: AsyncSession,
    project_id: uuid_pkg.UUID,
    user_id: uuid_pkg.UUID,
) -> ProjectMember:
    member = await project_member_ops.get_by_project_and_user(db, project_id, user_id)
    if not member:
        raise NotFoundError("Project member")
    return member


@router.get("/{project_id}/members", response_model=list[ProjectMemberWithUser])
async def list_members(
    project_id: uuid_pkg.UUID,
    _identity: Identity = Depends(RequirePermissions(Permission.VIEW_PROJECT)),
    db: AsyncSession = Depends(get_db),
):
    """
    List the explicit members of a project.

    Organization admins are not listed; they manage every project
    without a membership.
    """
    members = await project_member_ops.get_by_project(db, project_id)
    return [
        ProjectMemberWithUser(
            id=m.id,
            project_id=m.project_id,
            user_id=m.user_id,
            role=m.role,
            added_by=m.added_by,
            created_at=m.created_at,
            updated_at=m.updated_at,
            user=MemberUserInfo(
                id=m.user.id,
                email=m.user.email,
                display_name=m.user.display_name,
                avatar_url=m.user.avatar_url,
            ),
        )
        for m in members
        if m.user  # Safety check
    ]


@router.get("/{project_id}/members/assignable-roles", response_model=list[str])
async def list_assignable_roles(
    project_id: uuid_pkg.UUID,
    identity: Identity = Depends(RequirePermissions(Permission.VIEW_PROJECT)),
):
    """Project roles the caller may assign on this project, highest first."""
    actor_role = effective_project_role(identity, project_id)
    return [role.value for role in assignable_project_roles(actor_role)]


@router.post(
    "/{project_id}/members",
    response_model=ProjectMemberRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_member(
    project_id: uuid_pkg.UUID,
    data: ProjectMemberCreate,
    identity: Identity = Depends(RequirePermissions(Permission.MANAGE_PROJECT)),
    db: AsyncSession = Depends(get_db),
):
    """
    Add a user from the project's organization to the project.

    Owners (and organization admins) may assign any role; project admins
    may assign member or viewer.
    """
    project = await project_ops.get(db, project_id)
    if not project:
        raise NotFoundError("Project")

    target = await user_ops.get_by_id(db, data.user_id)
    if not target:
        raise NotFoundError("User")

    try:
        member, _event = await project_member_ops.add_member(
            db, identity, project, target, data.role
        )
    except (RoleChangeError, MembershipError) as e:
        raise_for_role_change(e)
    await db.commit()

    return ProjectMemberRead.model_validate(member, from_attributes=True)


@router.patch("/{project_id}/members/{user_id}", response_model=RoleChangeResponse)
async def update_member_role(
    project_id: uuid_pkg.UUID,
    user_id: uuid_pkg.UUID,
    data: ProjectMemberUpdate,
    identity: Identity = Depends(RequirePermissions(Permission.MANAGE_PROJECT)),
    db: AsyncSession = Depends(get_db),
):
    """Change a member's project role. The last owner cannot be demoted."""
    member = await _get_member_or_404(db, project_id, user_id)

    try:
        event = await project_member_ops.change_role(db, identity, member, data.role)
    except RoleChangeError as e:
        raise_for_role_change(e)
    await db.commit()

    return _event_response(event)


@router.delete("/{project_id}/members/{user_id}", response_model=RoleChangeResponse)
async def remove_member(
    project_id: uuid_pkg.UUID,
    user_id: uuid_pkg.UUID,
    identity: Identity = Depends(RequirePermissions(Permission.MANAGE_PROJECT)),
    db: AsyncSession = Depends(get_db),
):
    """Remove a member from a project. Nobody can remove themselves or the last owner."""
    member = await _get_member_or_404(db, project_id, user_id)

    try:
        event = await project_member_ops.remove_member(db, identity, member)
    except RoleChangeError as e:
        raise_for_role_change(e)
    await db.commit()

    return _event_response(event)
