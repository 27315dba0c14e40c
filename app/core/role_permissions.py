"""Static role-to-permission tables for both role hierarchies.

Built once at import time as read-only mappings of frozensets. Each role's
set is a superset of the set of the role directly below it.
"""

from types import MappingProxyType

from app.core.permissions import ALL_PERMISSIONS, Permission
from app.models.organization import OrganizationRole
from app.models.project_member import ProjectRole

_VIEWER_ORG = frozenset(
    {
        Permission.VIEW_ORGANIZATION,
        Permission.VIEW_PROJECT,
        Permission.VIEW_DOCUMENT,
    }
)

_USER_ORG = _VIEWER_ORG | {
    Permission.CREATE_DOCUMENT,
    Permission.EDIT_DOCUMENT,
}

_MANAGER_ORG = _USER_ORG | {
    Permission.VIEW_USERS,
    Permission.CREATE_PROJECT,
    Permission.MANAGE_PROJECT,
    Permission.DELETE_DOCUMENT,
    Permission.PUBLISH_DOCUMENT,
    Permission.VIEW_ANALYTICS,
}

_ORG_ADMIN_ORG = _MANAGER_ORG | {
    Permission.MANAGE_ORGANIZATION,
    Permission.MANAGE_USERS,
    Permission.INVITE_USERS,
    Permission.EXPORT_DATA,
    Permission.USE_AI_FEATURES,
    Permission.MANAGE_AI_SETTINGS,
}

ORGANIZATION_ROLE_PERMISSIONS: MappingProxyType[OrganizationRole, frozenset[Permission]] = (
    MappingProxyType(
        {
            OrganizationRole.SUPER_ADMIN: ALL_PERMISSIONS,
            OrganizationRole.ORG_ADMIN: _ORG_ADMIN_ORG,
            OrganizationRole.MANAGER: _MANAGER_ORG,
            OrganizationRole.USER: _USER_ORG,
            OrganizationRole.VIEWER: _VIEWER_ORG,
        }
    )
)

_VIEWER_PROJECT = frozenset({Permission.VIEW_PROJECT, Permission.VIEW_DOCUMENT})

_MEMBER_PROJECT = _VIEWER_PROJECT | {
    Permission.CREATE_DOCUMENT,
    Permission.EDIT_DOCUMENT,
}

_ADMIN_PROJECT = _MEMBER_PROJECT | {
    Permission.MANAGE_PROJECT,
    Permission.DELETE_DOCUMENT,
    Permission.PUBLISH_DOCUMENT,
    Permission.VIEW_ANALYTICS,
}

_OWNER_PROJECT = _ADMIN_PROJECT | {
    Permission.DELETE_PROJECT,
    Permission.EXPORT_DATA,
}

PROJECT_ROLE_PERMISSIONS: MappingProxyType[ProjectRole, frozenset[Permission]] = MappingProxyType(
    {
        ProjectRole.OWNER: _OWNER_PROJECT,
        ProjectRole.ADMIN: _ADMIN_PROJECT,
        ProjectRole.MEMBER: _MEMBER_PROJECT,
        ProjectRole.VIEWER: _VIEWER_PROJECT,
    }
)


def permissions_for_organization_role(role: OrganizationRole | None) -> frozenset[Permission]:
    """Get the permissions an organization role grants (empty for no role)."""
    if role is None:
        return frozenset()
    return ORGANIZATION_ROLE_PERMISSIONS.get(role, frozenset())


def permissions_for_project_role(role: ProjectRole | None) -> frozenset[Permission]:
    """Get the permissions a project role grants (empty for no role)."""
    if role is None:
        return frozenset()
    return PROJECT_ROLE_PERMISSIONS.get(role, frozenset())
