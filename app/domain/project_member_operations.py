"""Domain operations for ProjectMember model - project-scoped roles."""

import uuid as uuid_pkg

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.access import Identity, effective_project_role
from app.core.role_guards import (
    ensure_can_assign_project_role,
    ensure_can_remove_project_member,
    ensure_not_self,
    ensure_owner_remains,
)
from app.core.roles import parse_project_role
from app.domain.role_events import RoleChangeEvent, RoleScope, log_role_change
from app.models.project import Project
from app.models.project_member import ProjectMember, ProjectRole
from app.models.user import User


class MembershipError(Exception):
    """Base class for invalid membership requests."""

    pass


class MembershipExistsError(MembershipError):
    """Raised when the user already holds a role on the project."""

    def __init__(self, message: str = "User is already a member of this project"):
        super().__init__(message)


class CrossOrganizationError(MembershipError):
    """Raised when the user belongs to a different organization than the project."""

    def __init__(self, message: str = "User does not belong to this project's organization"):
        super().__init__(message)


class ProjectMemberOperations:
    """Operations for managing project memberships."""

    async def get_by_project_and_user(
        self,
        db: AsyncSession,
        project_id: uuid_pkg.UUID,
        user_id: uuid_pkg.UUID,
    ) -> ProjectMember | None:
        """Get a specific membership by project and user."""
        statement = select(ProjectMember).where(
            ProjectMember.project_id == project_id,  # type: ignore[arg-type]
            ProjectMember.user_id == user_id,  # type: ignore[arg-type]
        )
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_project(
        self,
        db: AsyncSession,
        project_id: uuid_pkg.UUID,
    ) -> list[ProjectMember]:
        """Get all members of a project with the user relationship loaded."""
        statement = (
            select(ProjectMember)
            .options(selectinload(ProjectMember.user))  # type: ignore[arg-type]
            .where(ProjectMember.project_id == project_id)  # type: ignore[arg-type]
            .order_by(ProjectMember.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def count_owners(
        self,
        db: AsyncSession,
        project_id: uuid_pkg.UUID,
    ) -> int:
        """
        Count the owners of a project.

        The owner rows stay locked until the transaction ends, so concurrent
        demotions or removals of different owners are serialized.
        """
        statement = (
            select(ProjectMember.id)
            .where(
                ProjectMember.project_id == project_id,  # type: ignore[arg-type]
                ProjectMember.role == ProjectRole.OWNER.value,  # type: ignore[arg-type]
            )
            .with_for_update()
        )
        result = await db.execute(statement)
        return len(result.scalars().all())

    async def count_by_role_for_org(
        self,
        db: AsyncSession,
        organization_id: uuid_pkg.UUID,
    ) -> dict[str, int]:
        """Count memberships per project role across an organization's projects."""
        statement = (
            select(ProjectMember.role, func.count(ProjectMember.id))  # type: ignore[call-overload]
            .join(Project, Project.id == ProjectMember.project_id)
            .where(Project.organization_id == organization_id)
            .group_by(ProjectMember.role)
        )
        result = await db.execute(statement)
        return {role: count for role, count in result.all()}

    async def add_member(
        self,
        db: AsyncSession,
        actor: Identity,
        project: Project,
        target: User,
        role: ProjectRole,
    ) -> tuple[ProjectMember, RoleChangeEvent]:
        """
        Add a user to a project.

        Raises:
            SelfModificationError: actor adds themselves
            CrossOrganizationError: target is outside the project's organization
            MembershipExistsError: target already has a role on the project
            RoleHierarchyError: actor may not hand out this role
        """
        ensure_not_self(actor.user_id, target.id)
        if target.organization_id != project.organization_id:
            raise CrossOrganizationError()

        existing = await self.get_by_project_and_user(db, project.id, target.id)
        if existing:
            raise MembershipExistsError()

        ensure_can_assign_project_role(effective_project_role(actor, project.id), None, role)

        member = ProjectMember(
            project_id=project.id,
            user_id=target.id,
            role=role.value,
            added_by=actor.user_id,
        )
        db.add(member)
        await db.flush()
        await db.refresh(member)

        event = log_role_change(
            RoleChangeEvent(
                scope=RoleScope.PROJECT,
                user_id=target.id,
                changed_by=actor.user_id,
                old_role=None,
                new_role=role.value,
                organization_id=project.organization_id,
                project_id=project.id,
            )
        )
        return member, event

    async def change_role(
        self,
        db: AsyncSession,
        actor: Identity,
        member: ProjectMember,
        new_role: ProjectRole,
    ) -> RoleChangeEvent:
        """
        Change a member's project role.

        Raises:
            SelfModificationError: actor changes their own membership
            RoleHierarchyError: actor may not touch the member or hand out new_role
            LastOwnerError: the project's only owner would be demoted
        """
        ensure_not_self(actor.user_id, member.user_id)
        current_role = parse_project_role(member.role)
        ensure_can_assign_project_role(
            effective_project_role(actor, member.project_id), current_role, new_role
        )
        if current_role == ProjectRole.OWNER:
            owner_count = await self.count_owners(db, member.project_id)
            ensure_owner_remains(current_role, new_role, owner_count)

        member.role = new_role.value
        db.add(member)
        await db.flush()
        await db.refresh(member)

        return log_role_change(
            RoleChangeEvent(
                scope=RoleScope.PROJECT,
                user_id=member.user_id,
                changed_by=actor.user_id,
                old_role=current_role.value if current_role else None,
                new_role=new_role.value,
                project_id=member.project_id,
            )
        )

    async def remove_member(
        self,
        db: AsyncSession,
        actor: Identity,
        member: ProjectMember,
    ) -> RoleChangeEvent:
        """
        Remove a member from a project.

        Raises:
            SelfModificationError: actor removes themselves
            RoleHierarchyError: actor may not remove a member with this role
            LastOwnerError: the member is the project's only owner
        """
        ensure_not_self(actor.user_id, member.user_id)
        # Rows with unparseable roles are removable like viewers
        current_role = parse_project_role(member.role) or ProjectRole.VIEWER
        ensure_can_remove_project_member(
            effective_project_role(actor, member.project_id), current_role
        )
        if current_role == ProjectRole.OWNER:
            owner_count = await self.count_owners(db, member.project_id)
            ensure_owner_remains(current_role, None, owner_count)

        await db.delete(member)
        await db.flush()

        return log_role_change(
            RoleChangeEvent(
                scope=RoleScope.PROJECT,
                user_id=member.user_id,
                changed_by=actor.user_id,
                old_role=member.role,
                new_role=None,
                project_id=member.project_id,
            )
        )


project_member_ops = ProjectMemberOperations()
