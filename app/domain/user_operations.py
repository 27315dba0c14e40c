"""Domain operations for User model - identity lookup and organization roles."""

import logging
import uuid as uuid_pkg

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.access import Identity
from app.core.role_guards import ensure_can_assign_organization_role, ensure_not_self
from app.core.roles import parse_organization_role, parse_project_role
from app.domain.role_events import RoleChangeEvent, RoleScope, log_role_change
from app.models.organization import OrganizationRole
from app.models.user import User

logger = logging.getLogger(__name__)


class UserOperations:
    """Operations for the local user mirror."""

    async def get_by_id(
        self,
        db: AsyncSession,
        user_id: uuid_pkg.UUID,
    ) -> User | None:
        """Get a user by ID."""
        statement = select(User).where(User.id == user_id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def get_identity(
        self,
        db: AsyncSession,
        user_id: uuid_pkg.UUID,
    ) -> Identity | None:
        """
        Load the identity snapshot the access guard works on.

        Reads the user's organization role and every project membership in
        one round trip. Always hits the database so that role changes take
        effect on the next request.

        Returns None if no user record exists.
        """
        statement = (
            select(User)
            .options(selectinload(User.project_memberships))  # type: ignore[arg-type]
            .where(User.id == user_id)
        )
        result = await db.execute(statement)
        user = result.scalar_one_or_none()
        if not user:
            return None
        return self.build_identity(user)

    def build_identity(self, user: User) -> Identity:
        """
        Convert a user row (with memberships loaded) into an Identity.

        Unknown stored role values are dropped, which denies rather than
        grants access.
        """
        memberships = {}
        for membership in user.project_memberships:
            project_role = parse_project_role(membership.role)
            if project_role is None:
                logger.warning(
                    f"Ignoring unknown project role '{membership.role}' "
                    f"for user {user.id} on project {membership.project_id}"
                )
                continue
            memberships[membership.project_id] = project_role

        return Identity(
            user_id=user.id,
            organization_role=parse_organization_role(user.role),
            organization_id=user.organization_id,
            project_memberships=memberships,
        )

    async def get_by_org(
        self,
        db: AsyncSession,
        organization_id: uuid_pkg.UUID,
    ) -> list[User]:
        """Get all users of an organization, oldest first."""
        statement = (
            select(User)
            .where(User.organization_id == organization_id)
            .order_by(User.created_at.asc())  # type: ignore[attr-defined]
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def count_by_role(
        self,
        db: AsyncSession,
        organization_id: uuid_pkg.UUID,
    ) -> dict[str, int]:
        """Count an organization's users per organization role."""
        statement = (
            select(User.role, func.count(User.id))  # type: ignore[call-overload]
            .where(User.organization_id == organization_id)
            .group_by(User.role)
        )
        result = await db.execute(statement)
        return {role: count for role, count in result.all() if role}

    async def change_role(
        self,
        db: AsyncSession,
        actor: Identity,
        target: User,
        new_role: OrganizationRole,
    ) -> RoleChangeEvent:
        """
        Change a user's organization role after applying the mutation guards.

        Raises:
            SelfModificationError: actor and target are the same user
            RoleHierarchyError: actor may not touch the target or hand out new_role
        """
        ensure_not_self(actor.user_id, target.id)
        if actor.organization_role is None:
            # Callers authorize first; an identity without a role never gets here
            raise ValueError("Actor has no organization role")
        old_role = parse_organization_role(target.role)
        ensure_can_assign_organization_role(actor.organization_role, old_role, new_role)

        target.role = new_role.value
        db.add(target)
        await db.flush()
        await db.refresh(target)

        return log_role_change(
            RoleChangeEvent(
                scope=RoleScope.ORGANIZATION,
                user_id=target.id,
                changed_by=actor.user_id,
                old_role=old_role.value if old_role else None,
                new_role=new_role.value,
                organization_id=target.organization_id,
            )
        )


user_ops = UserOperations()
