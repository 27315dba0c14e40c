"""Organizations API package.

Modules:
- schemas.py - Response schemas
- members.py - Member listing, role changes and role statistics
"""

from fastapi import APIRouter

from app.api.v1.organizations.members import (
    get_role_statistics,
    list_members,
    update_member_role,
)

router = APIRouter(prefix="/organizations", tags=["organizations"])

# Member management routes
router.add_api_route("/{org_id}/members", list_members, methods=["GET"])
router.add_api_route("/{org_id}/members/{user_id}/role", update_member_role, methods=["PATCH"])
router.add_api_route("/{org_id}/role-statistics", get_role_statistics, methods=["GET"])

__all__ = ["router"]
