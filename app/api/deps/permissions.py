"""Permission-gating dependencies built on the access guard."""

import uuid as uuid_pkg

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.access import AccessDecision, DenialReason, Identity, PermissionMode, authorize
from app.core.database import get_db
from app.core.exceptions import ForbiddenError, NotFoundError, UnauthorizedError, ValidationError
from app.core.permissions import Permission
from app.domain.project_operations import project_ops

from .auth import get_current_identity_optional

_DENIAL_MESSAGES: dict[DenialReason, str] = {
    DenialReason.NOT_ORGANIZATION_MEMBER: "You are not a member of this organization",
    DenialReason.NOT_PROJECT_MEMBER: "You are not a member of this project",
    DenialReason.INSUFFICIENT_PERMISSIONS: "You don't have permission to perform this action",
}


def raise_for_decision(decision: AccessDecision) -> None:
    """
    Translate a negative decision into the matching HTTP error.

    UNAUTHENTICATED maps to 401; every other reason maps to 403 with the
    reason code in the response detail.
    """
    if decision.allowed:
        return
    if decision.reason == DenialReason.UNAUTHENTICATED:
        raise UnauthorizedError()

    reason = decision.reason or DenialReason.INSUFFICIENT_PERMISSIONS
    message = _DENIAL_MESSAGES[reason]
    if reason == DenialReason.INSUFFICIENT_PERMISSIONS and decision.missing:
        message = f"{message}. Missing: {', '.join(p.value for p in decision.missing)}"
    raise ForbiddenError(message, reason=reason.value)


def _path_uuid(request: Request, name: str) -> uuid_pkg.UUID | None:
    raw = request.path_params.get(name)
    if raw is None:
        return None
    if isinstance(raw, uuid_pkg.UUID):
        return raw
    try:
        return uuid_pkg.UUID(str(raw))
    except ValueError:
        raise ValidationError(f"Invalid {name}") from None


async def project_organization_id(
    db: AsyncSession,
    identity: Identity | None,
    project_id: uuid_pkg.UUID,
) -> uuid_pkg.UUID | None:
    """
    Look up the organization owning a project, for the tenant check.

    Callers outside any organization are denied by authorize() regardless,
    so the lookup is skipped for them and they can't tell which project ids
    exist. Raises NotFoundError for an unknown project.
    """
    if identity is None or not identity.has_organization:
        return None
    project = await project_ops.get(db, project_id)
    if not project:
        raise NotFoundError("Project")
    return project.organization_id


class RequirePermissions:
    """
    Dependency class gating a route on one or more permissions.

    Scope is taken from the route's path parameters: `project_id` makes the
    check project-scoped (and tenant-checked against the project's
    organization), `org_id` makes it organization-scoped.

    Usage:
        @router.patch("/projects/{project_id}/members/{user_id}")
        async def update_member(
            identity: Identity = Depends(RequirePermissions(Permission.MANAGE_PROJECT)),
            ...
        ):
            ...
    """

    def __init__(self, *permissions: Permission, mode: PermissionMode = PermissionMode.ALL):
        if not permissions:
            raise ValueError("RequirePermissions needs at least one permission")
        self.permissions = permissions
        self.mode = mode

    async def __call__(
        self,
        request: Request,
        identity: Identity | None = Depends(get_current_identity_optional),
        db: AsyncSession = Depends(get_db),
    ) -> Identity:
        project_id = _path_uuid(request, "project_id")
        organization_id = _path_uuid(request, "org_id")

        if project_id is not None:
            organization_id = await project_organization_id(db, identity, project_id)

        decision = authorize(
            identity,
            self.permissions,
            project_id,
            mode=self.mode,
            organization_id=organization_id,
        )
        raise_for_decision(decision)
        if identity is None:  # unreachable: authorize() denies a missing identity
            raise UnauthorizedError()
        return identity
