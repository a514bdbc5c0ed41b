"""
SQL Project Store

Project store on the async SQLAlchemy engine. Each replace runs in its
own transaction, so concurrent writes to different projects never
interleave within a record.
"""
import logging
from typing import Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .base import ProjectStore
from ..database import async_session
from ..models.project import ProjectRecord
from ..schemas.project import Project

logger = logging.getLogger(__name__)


class SqlProjectStore(ProjectStore):
    """Store backed by the `projects` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = async_session):
        self._session_factory = session_factory

    async def get(self, project_id: str) -> Optional[Project]:
        async with self._session_factory() as session:
            record = await session.get(ProjectRecord, project_id)
            return record.to_project() if record else None

    async def list(self) -> list[Project]:
        async with self._session_factory() as session:
            stmt = select(ProjectRecord).order_by(ProjectRecord.updated_at.desc())
            result = await session.execute(stmt)
            return [record.to_project() for record in result.scalars().all()]

    async def replace(self, project: Project) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                record = await session.get(ProjectRecord, project.id)
                if record is None:
                    session.add(ProjectRecord.from_project(project))
                    logger.debug(f"Inserted project {project.id}")
                else:
                    record.update_from(project)
                    logger.debug(f"Replaced project {project.id}")

    async def delete(self, project_id: str) -> bool:
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    delete(ProjectRecord).where(ProjectRecord.id == project_id)
                )
                return result.rowcount > 0
