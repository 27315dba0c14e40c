"""Project membership model - per-user, project-scoped roles."""

import uuid as uuid_pkg
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Column, ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlmodel import Field, Relationship, SQLModel

from app.models.base import TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.project import Project
    from app.models.user import User


class ProjectRole(str, Enum):
    """Roles a user can hold on a single project."""

    OWNER = "owner"  # Full control, can delete the project
    ADMIN = "admin"  # Manages members and viewers
    MEMBER = "member"  # Writes documents
    VIEWER = "viewer"  # Read-only


class ProjectMember(UUIDMixin, TimestampMixin, table=True):
    """
    Project membership - join table between users and projects.

    A user holds at most one role per project. Organization admins and
    platform super admins need no row here to manage a project.
    """

    __tablename__ = "project_members"
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_member_project_user"),
    )

    project_id: uuid_pkg.UUID = Field(
        sa_column=Column(
            PG_UUID(as_uuid=True),
            ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    user_id: uuid_pkg.UUID = Field(
        sa_column=Column(
            PG_UUID(as_uuid=True),
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    role: str = Field(
        default=ProjectRole.MEMBER.value,
        sa_column=Column(String(20), nullable=False, server_default="member"),
    )
    added_by: uuid_pkg.UUID | None = Field(
        default=None,
        foreign_key="users.id",
        nullable=True,
    )

    # Relationships
    project: Optional["Project"] = Relationship(back_populates="members")
    user: Optional["User"] = Relationship(
        back_populates="project_memberships",
        sa_relationship_kwargs={"foreign_keys": "[ProjectMember.user_id]"},
    )


# Request/Response schemas
class ProjectMemberCreate(SQLModel):
    """Schema for adding a member to a project."""

    user_id: uuid_pkg.UUID
    role: ProjectRole = ProjectRole.MEMBER


class ProjectMemberUpdate(SQLModel):
    """Schema for changing a member's project role."""

    role: ProjectRole


class ProjectMemberRead(SQLModel):
    """Schema for reading a project membership."""

    id: uuid_pkg.UUID
    project_id: uuid_pkg.UUID
    user_id: uuid_pkg.UUID
    role: str
    added_by: uuid_pkg.UUID | None = None
    created_at: datetime
    updated_at: datetime


class MemberUserInfo(SQLModel):
    """Basic user info attached to member listings."""

    id: uuid_pkg.UUID
    email: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None


class ProjectMemberWithUser(ProjectMemberRead):
    """Project membership with the member's user details."""

    user: MemberUserInfo
