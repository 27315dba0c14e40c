from app.api.v1 import organizations, permissions, projects

__all__ = [
    "permissions",
    "organizations",
    "projects",
]
