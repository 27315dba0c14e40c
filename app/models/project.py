import uuid as uuid_pkg
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Column, ForeignKey
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlmodel import Field, Relationship, SQLModel

from app.models.base import TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.organization import Organization
    from app.models.project_member import ProjectMember


class ProjectBase(SQLModel):
    """Base fields shared across Project schemas."""

    name: str = Field(max_length=255, index=True)
    description: str | None = Field(default=None, max_length=2000)


class Project(ProjectBase, UUIDMixin, TimestampMixin, table=True):
    """Project - groups documents inside an organization."""

    __tablename__ = "projects"

    organization_id: uuid_pkg.UUID = Field(
        sa_column=Column(
            PG_UUID(as_uuid=True),
            ForeignKey("organizations.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    created_by_user_id: uuid_pkg.UUID | None = Field(
        default=None,
        foreign_key="users.id",
        nullable=True,
    )

    # Relationships
    organization: Optional["Organization"] = Relationship(back_populates="projects")
    members: list["ProjectMember"] = Relationship(
        back_populates="project",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
