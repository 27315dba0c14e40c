"""Permission catalog - the closed set of capabilities the platform checks.

This enum is the single source of truth for both server-side guards and the
frontend's conditional rendering (served by GET /permissions/catalog).
"""

from enum import Enum
from types import MappingProxyType


class Permission(str, Enum):
    """Fine-grained capabilities, each independently checkable."""

    # Organization
    MANAGE_ORGANIZATION = "manage_organization"
    VIEW_ORGANIZATION = "view_organization"

    # Users
    MANAGE_USERS = "manage_users"
    INVITE_USERS = "invite_users"
    VIEW_USERS = "view_users"

    # Projects
    CREATE_PROJECT = "create_project"
    MANAGE_PROJECT = "manage_project"
    DELETE_PROJECT = "delete_project"
    VIEW_PROJECT = "view_project"

    # Documents
    CREATE_DOCUMENT = "create_document"
    EDIT_DOCUMENT = "edit_document"
    DELETE_DOCUMENT = "delete_document"
    VIEW_DOCUMENT = "view_document"
    PUBLISH_DOCUMENT = "publish_document"

    # Analytics and export
    VIEW_ANALYTICS = "view_analytics"
    EXPORT_DATA = "export_data"

    # AI features
    USE_AI_FEATURES = "use_ai_features"
    MANAGE_AI_SETTINGS = "manage_ai_settings"

    # Platform administration (super admin only)
    MANAGE_SYSTEM = "manage_system"
    VIEW_SYSTEM_LOGS = "view_system_logs"
    MANAGE_BILLING = "manage_billing"


ALL_PERMISSIONS: frozenset[Permission] = frozenset(Permission)

PERMISSION_GROUPS: MappingProxyType[str, tuple[Permission, ...]] = MappingProxyType(
    {
        "organization": (Permission.MANAGE_ORGANIZATION, Permission.VIEW_ORGANIZATION),
        "users": (Permission.MANAGE_USERS, Permission.INVITE_USERS, Permission.VIEW_USERS),
        "projects": (
            Permission.CREATE_PROJECT,
            Permission.MANAGE_PROJECT,
            Permission.DELETE_PROJECT,
            Permission.VIEW_PROJECT,
        ),
        "documents": (
            Permission.CREATE_DOCUMENT,
            Permission.EDIT_DOCUMENT,
            Permission.DELETE_DOCUMENT,
            Permission.VIEW_DOCUMENT,
            Permission.PUBLISH_DOCUMENT,
        ),
        "analytics": (Permission.VIEW_ANALYTICS,),
        "export": (Permission.EXPORT_DATA,),
        "ai": (Permission.USE_AI_FEATURES, Permission.MANAGE_AI_SETTINGS),
        "system": (
            Permission.MANAGE_SYSTEM,
            Permission.VIEW_SYSTEM_LOGS,
            Permission.MANAGE_BILLING,
        ),
    }
)


def in_catalog_order(permissions: frozenset[Permission] | set[Permission]) -> list[Permission]:
    """List permissions in catalog declaration order (stable for UIs and tests)."""
    return [p for p in Permission if p in permissions]
