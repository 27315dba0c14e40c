from app.models.organization import Organization, OrganizationRole, OrganizationRoleUpdate
from app.models.project import Project
from app.models.project_member import (
    MemberUserInfo,
    ProjectMember,
    ProjectMemberCreate,
    ProjectMemberRead,
    ProjectMemberUpdate,
    ProjectMemberWithUser,
    ProjectRole,
)
from app.models.user import User

__all__ = [
    "User",
    "Organization",
    "OrganizationRole",
    "OrganizationRoleUpdate",
    "Project",
    "ProjectMember",
    "ProjectMemberCreate",
    "ProjectMemberRead",
    "ProjectMemberUpdate",
    "ProjectMemberWithUser",
    "ProjectRole",
    "MemberUserInfo",
]
