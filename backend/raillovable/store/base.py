"""
Project Store Interface

Durable keyed storage for Project records. Every write replaces a
whole record, so a reader never observes a half-applied turn.
"""
from abc import ABC, abstractmethod
from typing import Optional

from ..schemas.project import Project


class ProjectNotFoundError(LookupError):
    """No project with the requested id."""

    def __init__(self, project_id: str):
        super().__init__(f"Project not found: {project_id}")
        self.project_id = project_id


class ProjectStore(ABC):
    """
    Abstract project store.

    Implementations hand out copies: mutating a returned Project has
    no effect until it is passed back to replace().
    """

    @abstractmethod
    async def get(self, project_id: str) -> Optional[Project]:
        """Load a project, or None if it does not exist."""
        pass

    @abstractmethod
    async def list(self) -> list[Project]:
        """All projects, most recently updated first."""
        pass

    @abstractmethod
    async def replace(self, project: Project) -> None:
        """Insert the project or atomically replace the stored record."""
        pass

    @abstractmethod
    async def delete(self, project_id: str) -> bool:
        """Delete a project. Returns True if it existed."""
        pass

    async def require(self, project_id: str) -> Project:
        """Load a project or raise ProjectNotFoundError."""
        project = await self.get(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project
