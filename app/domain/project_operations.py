"""Domain operations for Project model."""

import uuid as uuid_pkg

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.project import Project


class ProjectOperations:
    """Read operations for Project model."""

    async def get(
        self,
        db: AsyncSession,
        id: uuid_pkg.UUID,
    ) -> Project | None:
        """Get a project by ID."""
        statement = select(Project).where(Project.id == id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()


project_ops = ProjectOperations()
