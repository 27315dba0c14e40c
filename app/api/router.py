from fastapi import APIRouter

from app.api.v1 import organizations, permissions, projects

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(permissions.router)
api_router.include_router(organizations.router)
api_router.include_router(projects.router)
