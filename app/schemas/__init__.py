"""Pydantic schemas for API request/response validation."""

from app.schemas.permissions import (
    EffectivePermissionsResponse,
    PermissionCatalogResponse,
    PermissionCheckRequest,
    PermissionCheckResponse,
)

__all__ = [
    "EffectivePermissionsResponse",
    "PermissionCatalogResponse",
    "PermissionCheckRequest",
    "PermissionCheckResponse",
]
