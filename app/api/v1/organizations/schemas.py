"""Response schemas for organization API endpoints."""

from pydantic import BaseModel


class OrgMemberResponse(BaseModel):
    """Organization member with their organization role."""

    user_id: str
    email: str | None
    display_name: str | None
    avatar_url: str | None
    role: str | None
    joined_at: str


class RoleChangeResponse(BaseModel):
    """Result of a role or membership change."""

    user_id: str
    old_role: str | None
    new_role: str | None
    changed_by: str
    changed_at: str


class RoleStatisticsResponse(BaseModel):
    """Role counts across an organization."""

    organization_roles: dict[str, int]
    project_roles: dict[str, int]
