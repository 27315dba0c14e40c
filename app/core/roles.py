"""Role hierarchy constants and comparison utilities for both role scopes."""

from types import MappingProxyType

from app.models.organization import OrganizationRole
from app.models.project_member import ProjectRole

Role = OrganizationRole | ProjectRole

# Hierarchy levels (higher = more authority)
ORGANIZATION_ROLE_HIERARCHY: MappingProxyType[str, int] = MappingProxyType(
    {
        OrganizationRole.VIEWER.value: 0,
        OrganizationRole.USER.value: 1,
        OrganizationRole.MANAGER.value: 2,
        OrganizationRole.ORG_ADMIN.value: 3,
        OrganizationRole.SUPER_ADMIN.value: 4,
    }
)

PROJECT_ROLE_HIERARCHY: MappingProxyType[str, int] = MappingProxyType(
    {
        ProjectRole.VIEWER.value: 0,
        ProjectRole.MEMBER.value: 1,
        ProjectRole.ADMIN.value: 2,
        ProjectRole.OWNER.value: 3,
    }
)

# Which roles each role may manage (promote, demote, remove)
MANAGEABLE_ORGANIZATION_ROLES: MappingProxyType[OrganizationRole, frozenset[OrganizationRole]] = (
    MappingProxyType(
        {
            OrganizationRole.SUPER_ADMIN: frozenset(OrganizationRole),
            OrganizationRole.ORG_ADMIN: frozenset(OrganizationRole)
            - {OrganizationRole.SUPER_ADMIN},
            OrganizationRole.MANAGER: frozenset({OrganizationRole.USER, OrganizationRole.VIEWER}),
            OrganizationRole.USER: frozenset(),
            OrganizationRole.VIEWER: frozenset(),
        }
    )
)

MANAGEABLE_PROJECT_ROLES: MappingProxyType[ProjectRole, frozenset[ProjectRole]] = MappingProxyType(
    {
        ProjectRole.OWNER: frozenset(ProjectRole),
        ProjectRole.ADMIN: frozenset({ProjectRole.MEMBER, ProjectRole.VIEWER}),
        ProjectRole.MEMBER: frozenset(),
        ProjectRole.VIEWER: frozenset(),
    }
)

ELEVATED_ORGANIZATION_ROLES: frozenset[OrganizationRole] = frozenset(
    {OrganizationRole.SUPER_ADMIN, OrganizationRole.ORG_ADMIN}
)


def parse_organization_role(value: str | None) -> OrganizationRole | None:
    """Parse a stored organization role; unknown or empty values yield None."""
    if not value:
        return None
    try:
        return OrganizationRole(value)
    except ValueError:
        return None


def parse_project_role(value: str | None) -> ProjectRole | None:
    """Parse a stored project role; unknown or empty values yield None."""
    if not value:
        return None
    try:
        return ProjectRole(value)
    except ValueError:
        return None


def get_role_level(role: Role) -> int:
    """Get the hierarchy level for a role within its own scope."""
    if isinstance(role, OrganizationRole):
        return ORGANIZATION_ROLE_HIERARCHY[role.value]
    return PROJECT_ROLE_HIERARCHY[role.value]


def _check_same_scope(role_a: Role, role_b: Role) -> None:
    if type(role_a) is not type(role_b):
        raise TypeError(
            f"Cannot compare {type(role_a).__name__} with {type(role_b).__name__}"
        )


def is_higher(role_a: Role, role_b: Role) -> bool:
    """Check if role_a strictly outranks role_b. Both must share a scope."""
    _check_same_scope(role_a, role_b)
    return get_role_level(role_a) > get_role_level(role_b)


def has_minimum_role(role: Role, required: Role) -> bool:
    """Check if a role meets or exceeds the required role level."""
    _check_same_scope(role, required)
    return get_role_level(role) >= get_role_level(required)


def can_manage(actor_role: Role, target_role: Role) -> bool:
    """
    Check if a holder of actor_role may manage a holder of target_role.

    Organization scope: super admins manage everyone, org admins everyone
    but super admins, managers only users and viewers.
    Project scope: owners manage everyone, admins only members and viewers.

    This does not stop users from modifying themselves; callers apply
    role_guards.ensure_not_self for that.
    """
    _check_same_scope(actor_role, target_role)
    if isinstance(actor_role, OrganizationRole):
        return target_role in MANAGEABLE_ORGANIZATION_ROLES[actor_role]
    return target_role in MANAGEABLE_PROJECT_ROLES[actor_role]
