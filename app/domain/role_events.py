"""Audit records for role and membership changes."""

import logging
import uuid as uuid_pkg
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

logger = logging.getLogger(__name__)


class RoleScope(str, Enum):
    ORGANIZATION = "organization"
    PROJECT = "project"


@dataclass(frozen=True)
class RoleChangeEvent:
    """One committed-or-pending role change, as written to the audit log."""

    scope: RoleScope
    user_id: uuid_pkg.UUID
    changed_by: uuid_pkg.UUID
    old_role: str | None
    new_role: str | None  # None when a membership was removed
    organization_id: uuid_pkg.UUID | None = None
    project_id: uuid_pkg.UUID | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


def log_role_change(event: RoleChangeEvent) -> RoleChangeEvent:
    """Write the event to the audit log and hand it back to the caller."""
    target = event.project_id if event.scope == RoleScope.PROJECT else event.organization_id
    logger.info(
        f"Role change [{event.scope.value}:{target}] user={event.user_id} "
        f"{event.old_role or '-'} -> {event.new_role or '-'} by={event.changed_by}"
    )
    return event
