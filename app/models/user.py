import uuid as uuid_pkg
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Column, DateTime, ForeignKey, String, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.organization import Organization
    from app.models.project_member import ProjectMember


class User(SQLModel, table=True):
    """
    User model - local mirror of the identity provider's user.

    The id is the provider's subject claim. Records are created on the
    first authenticated API call; organization and role stay empty until
    an invite is accepted or an administrator assigns them.
    """

    __tablename__ = "users"

    id: uuid_pkg.UUID = Field(
        primary_key=True,
        index=True,
        nullable=False,
        description="Subject id from the identity provider",
    )
    email: str | None = Field(default=None, max_length=255, index=True)
    display_name: str | None = Field(default=None, max_length=100)
    avatar_url: str | None = Field(default=None, max_length=500)
    auth_provider: str | None = Field(default=None, max_length=50)

    # Tenant membership - NULL organization is reserved for platform super admins
    organization_id: uuid_pkg.UUID | None = Field(
        default=None,
        sa_column=Column(
            PG_UUID(as_uuid=True),
            ForeignKey("organizations.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
    )
    role: str | None = Field(
        default=None,
        sa_column=Column(String(20), nullable=True),
    )

    created_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=lambda: datetime.now(UTC),
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": text("now()")},
    )
    updated_at: datetime | None = Field(  # type: ignore[call-overload]
        default=None,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"onupdate": text("now()")},
    )

    # Relationships
    organization: Optional["Organization"] = Relationship(back_populates="users")
    project_memberships: list["ProjectMember"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={
            "foreign_keys": "[ProjectMember.user_id]",
            "cascade": "all, delete-orphan",
        },
    )
