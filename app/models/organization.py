"""Organization model - the tenant unit."""

from enum import Enum
from typing import TYPE_CHECKING

from sqlmodel import Field, Relationship, SQLModel

from app.models.base import TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.project import Project
    from app.models.user import User


class OrganizationRole(str, Enum):
    """Tenant-wide roles, in strictly decreasing authority."""

    SUPER_ADMIN = "super_admin"  # Platform operator, not bound to any organization
    ORG_ADMIN = "org_admin"  # Full control of one organization
    MANAGER = "manager"  # Runs projects, manages users and viewers
    USER = "user"  # Writes documents
    VIEWER = "viewer"  # Read-only


class Organization(UUIDMixin, TimestampMixin, table=True):
    """
    Organization model - the tenant that owns projects.

    Every user other than a platform super admin belongs to exactly one
    organization and holds exactly one organization role in it.
    """

    __tablename__ = "organizations"

    name: str = Field(max_length=100, nullable=False)
    slug: str = Field(max_length=100, unique=True, index=True, nullable=False)

    # Relationships
    users: list["User"] = Relationship(back_populates="organization")
    projects: list["Project"] = Relationship(
        back_populates="organization",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


# Request/Response schemas
class OrganizationRoleUpdate(SQLModel):
    """Schema for changing a user's organization role."""

    role: OrganizationRole
