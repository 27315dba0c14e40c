"""Guards applied by every role or membership mutation.

These sit above the hierarchy comparator: can_manage() answers "may this
role touch that role", while the guards add the rules a mutation needs on
top (no self-modification, no escalation past the actor, never leave a
project without an owner).
"""

import uuid as uuid_pkg

from app.core.roles import can_manage, is_higher
from app.models.organization import OrganizationRole
from app.models.project_member import ProjectRole


class RoleChangeError(Exception):
    """Base class for rejected role or membership mutations."""

    pass


class SelfModificationError(RoleChangeError):
    """Raised when a user tries to change or remove their own role."""

    def __init__(self, message: str = "You cannot change your own role"):
        super().__init__(message)


class RoleHierarchyError(RoleChangeError):
    """Raised when the actor's role does not outrank the roles involved."""

    pass


class LastOwnerError(RoleChangeError):
    """Raised when a change would leave a project without an owner."""

    def __init__(self, message: str = "Cannot remove the last project owner"):
        super().__init__(message)


def ensure_not_self(actor_id: uuid_pkg.UUID, target_id: uuid_pkg.UUID) -> None:
    """Reject any mutation where the actor is the target, whatever their role."""
    if actor_id == target_id:
        raise SelfModificationError()


def ensure_can_assign_organization_role(
    actor_role: OrganizationRole,
    current_role: OrganizationRole | None,
    new_role: OrganizationRole,
) -> None:
    """
    Validate an organization role assignment.

    The actor must manage the target's current role, and may only hand out
    roles strictly below their own. Super admins may assign anything.
    """
    if current_role is not None and not can_manage(actor_role, current_role):
        raise RoleHierarchyError(
            f"A {actor_role.value} cannot change the role of a {current_role.value}"
        )
    if actor_role == OrganizationRole.SUPER_ADMIN:
        return
    if not is_higher(actor_role, new_role):
        raise RoleHierarchyError(f"A {actor_role.value} cannot assign the {new_role.value} role")


def ensure_can_assign_project_role(
    actor_role: ProjectRole | None,
    current_role: ProjectRole | None,
    new_role: ProjectRole,
) -> None:
    """
    Validate a project role assignment (add or change).

    Owners assign any role; admins assign member and viewer only.
    """
    if actor_role is None:
        raise RoleHierarchyError("You do not hold a role on this project")
    if current_role is not None and not can_manage(actor_role, current_role):
        raise RoleHierarchyError(
            f"A project {actor_role.value} cannot change the role of a project {current_role.value}"
        )
    if not can_manage(actor_role, new_role):
        raise RoleHierarchyError(
            f"A project {actor_role.value} cannot assign the {new_role.value} role"
        )


def ensure_can_remove_project_member(
    actor_role: ProjectRole | None,
    target_role: ProjectRole,
) -> None:
    """Validate removing a member holding target_role."""
    if actor_role is None or not can_manage(actor_role, target_role):
        raise RoleHierarchyError("You cannot remove this project member")


def ensure_owner_remains(
    current_role: ProjectRole,
    new_role: ProjectRole | None,
    owner_count: int,
) -> None:
    """
    Reject demoting or removing the last owner of a project.

    new_role is None for a removal.
    """
    if current_role != ProjectRole.OWNER or new_role == ProjectRole.OWNER:
        return
    if owner_count <= 1:
        raise LastOwnerError()


def assignable_project_roles(actor_role: ProjectRole | None) -> list[ProjectRole]:
    """Project roles the actor may hand out, highest first."""
    if actor_role is None:
        return []
    return [role for role in ProjectRole if can_manage(actor_role, role)]
