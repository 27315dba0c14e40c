"""Projects API router - composed from sub-routers."""

from fastapi import APIRouter

from .members import router as members_router

router = APIRouter(prefix="/projects", tags=["projects"])

router.include_router(members_router)
