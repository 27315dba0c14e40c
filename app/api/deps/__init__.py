"""API dependencies - re-exports from submodules."""

from .auth import (
    CurrentIdentity,
    get_current_identity,
    get_current_identity_optional,
    get_current_user,
    get_current_user_optional,
    get_jwks,
    get_signing_key,
    security,
    validate_token,
)
from .permissions import RequirePermissions, project_organization_id, raise_for_decision

__all__ = [
    # Auth
    "security",
    "get_jwks",
    "get_signing_key",
    "validate_token",
    "get_current_user",
    "get_current_user_optional",
    "get_current_identity",
    "get_current_identity_optional",
    "CurrentIdentity",
    # Permissions
    "RequirePermissions",
    "raise_for_decision",
    "project_organization_id",
]
