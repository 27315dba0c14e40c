"""
Effective permission resolution and the access guard.

Everything here is a pure function of an Identity snapshot loaded for the
current request. Results are never cached: role and membership changes must
take effect on the very next decision.

Usage:
    identity = await user_ops.get_identity(db, user_id)
    decision = authorize(identity, [Permission.EDIT_DOCUMENT], project_id)
    if not decision.allowed:
        ...  # map decision.reason to 401/403
"""

import uuid as uuid_pkg
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from app.core.permissions import ALL_PERMISSIONS, Permission
from app.core.role_permissions import (
    permissions_for_organization_role,
    permissions_for_project_role,
)
from app.core.roles import ELEVATED_ORGANIZATION_ROLES
from app.models.organization import OrganizationRole
from app.models.project_member import ProjectRole


class PermissionMode(str, Enum):
    """How a list of required permissions is combined."""

    ALL = "all"  # Every permission must be granted
    ANY = "any"  # At least one permission must be granted


class DenialReason(str, Enum):
    """Why an authorization decision was negative."""

    UNAUTHENTICATED = "unauthenticated"
    NOT_ORGANIZATION_MEMBER = "not_organization_member"
    NOT_PROJECT_MEMBER = "not_project_member"
    INSUFFICIENT_PERMISSIONS = "insufficient_permissions"


@dataclass(frozen=True)
class Identity:
    """Request-scoped snapshot of who the caller is and what roles they hold."""

    user_id: uuid_pkg.UUID
    organization_role: OrganizationRole | None
    organization_id: uuid_pkg.UUID | None
    project_memberships: Mapping[uuid_pkg.UUID, ProjectRole] = field(default_factory=dict)

    @property
    def is_super_admin(self) -> bool:
        return self.organization_role == OrganizationRole.SUPER_ADMIN

    @property
    def has_organization(self) -> bool:
        """
        Whether the identity belongs to a tenant.

        Super admins are organization-agnostic; everyone else needs both an
        organization and a role.
        """
        if self.organization_role is None:
            return False
        return self.is_super_admin or self.organization_id is not None


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of authorize(): allowed, or denied with a typed reason."""

    allowed: bool
    reason: DenialReason | None = None
    missing: tuple[Permission, ...] = ()

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = AccessDecision(allowed=True)


def resolve(
    organization_role: OrganizationRole | None,
    project_memberships: Mapping[uuid_pkg.UUID, ProjectRole],
    target_project_id: uuid_pkg.UUID | None = None,
) -> frozenset[Permission]:
    """
    Compute the effective permission set.

    Organization-level permissions always apply. Project-level permissions
    are added only for an explicit target project the user is a member of.
    Super admins get the whole catalog regardless of scope.
    """
    if organization_role == OrganizationRole.SUPER_ADMIN:
        return ALL_PERMISSIONS

    granted = permissions_for_organization_role(organization_role)
    if target_project_id is None:
        return granted

    project_role = project_memberships.get(target_project_id)
    if project_role is None:
        return granted
    return granted | permissions_for_project_role(project_role)


def _satisfies(
    granted: frozenset[Permission],
    required: tuple[Permission, ...],
    mode: PermissionMode,
) -> bool:
    if mode == PermissionMode.ANY:
        return any(p in granted for p in required)
    return all(p in granted for p in required)


def authorize(
    identity: Identity | None,
    required: Iterable[Permission],
    target_project_id: uuid_pkg.UUID | None = None,
    *,
    mode: PermissionMode = PermissionMode.ALL,
    organization_id: uuid_pkg.UUID | None = None,
) -> AccessDecision:
    """
    Decide whether an identity holds the required permissions.

    Args:
        identity: Resolved caller, or None when no identity could be resolved
        required: Permissions the operation needs (must not be empty)
        target_project_id: Project the operation is scoped to, if any
        mode: ALL (default) or ANY
        organization_id: Organization owning the target resource, if known

    Returns:
        AccessDecision. Never raises for a denial.
    """
    required = tuple(required)
    if not required:
        raise ValueError("authorize() needs at least one required permission")

    if identity is None:
        return AccessDecision(False, DenialReason.UNAUTHENTICATED, required)

    if not identity.has_organization:
        return AccessDecision(False, DenialReason.NOT_ORGANIZATION_MEMBER, required)

    if (
        organization_id is not None
        and not identity.is_super_admin
        and organization_id != identity.organization_id
    ):
        return AccessDecision(False, DenialReason.NOT_ORGANIZATION_MEMBER, required)

    granted = resolve(identity.organization_role, identity.project_memberships, target_project_id)
    if _satisfies(granted, required, mode):
        return ALLOW

    missing = tuple(p for p in required if p not in granted)
    if (
        target_project_id is not None
        and target_project_id not in identity.project_memberships
        and identity.organization_role not in ELEVATED_ORGANIZATION_ROLES
    ):
        return AccessDecision(False, DenialReason.NOT_PROJECT_MEMBER, missing)
    return AccessDecision(False, DenialReason.INSUFFICIENT_PERMISSIONS, missing)


# ---------------------------------------------------------------------------
# Derived views for UI consumers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EffectivePermissions:
    """Organization-level permissions plus the resolved set for every membership."""

    organization: frozenset[Permission]
    projects: Mapping[uuid_pkg.UUID, frozenset[Permission]]

    @property
    def all(self) -> frozenset[Permission]:
        combined = set(self.organization)
        for permissions in self.projects.values():
            combined.update(permissions)
        return frozenset(combined)


def effective_permissions(identity: Identity) -> EffectivePermissions:
    """Resolve every scope the identity can act in, for bulk UI rendering."""
    return EffectivePermissions(
        organization=resolve(identity.organization_role, identity.project_memberships),
        projects={
            project_id: resolve(
                identity.organization_role, identity.project_memberships, project_id
            )
            for project_id in identity.project_memberships
        },
    )


def missing_permissions(
    identity: Identity,
    required: Iterable[Permission],
    target_project_id: uuid_pkg.UUID | None = None,
) -> list[Permission]:
    """List the required permissions the identity lacks, in request order."""
    granted = resolve(identity.organization_role, identity.project_memberships, target_project_id)
    return [p for p in required if p not in granted]


def projects_with_permission(identity: Identity, permission: Permission) -> list[uuid_pkg.UUID]:
    """Membership projects where the permission resolves."""
    return [
        project_id
        for project_id in identity.project_memberships
        if permission
        in resolve(identity.organization_role, identity.project_memberships, project_id)
    ]


def effective_project_role(identity: Identity, project_id: uuid_pkg.UUID) -> ProjectRole | None:
    """
    The project role used for member-management decisions.

    Super admins and org admins act as owners on every project in their
    scope without a membership row.
    """
    if identity.organization_role in ELEVATED_ORGANIZATION_ROLES:
        return ProjectRole.OWNER
    return identity.project_memberships.get(project_id)


def highest_role(identity: Identity) -> OrganizationRole | ProjectRole | None:
    """Most senior role to display for the identity."""
    if identity.organization_role in ELEVATED_ORGANIZATION_ROLES:
        return identity.organization_role

    project_roles = set(identity.project_memberships.values())
    if ProjectRole.OWNER in project_roles:
        return ProjectRole.OWNER
    if ProjectRole.ADMIN in project_roles:
        return ProjectRole.ADMIN
    return identity.organization_role
