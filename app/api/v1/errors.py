"""Translation of domain mutation errors to HTTP errors."""

from typing import NoReturn

from app.core.exceptions import DuplicateError, ForbiddenError, ValidationError
from app.core.role_guards import RoleChangeError, RoleHierarchyError
from app.domain.project_member_operations import MembershipError, MembershipExistsError


def raise_for_role_change(error: RoleChangeError | MembershipError) -> NoReturn:
    """
    Raise the HTTP error matching a rejected role or membership change.

    Hierarchy violations are 403, duplicate memberships 409, and the rest
    (self-modification, last owner, cross-organization) 400.
    """
    if isinstance(error, RoleHierarchyError):
        raise ForbiddenError(str(error)) from error
    if isinstance(error, MembershipExistsError):
        raise DuplicateError(str(error)) from error
    raise ValidationError(str(error)) from error
