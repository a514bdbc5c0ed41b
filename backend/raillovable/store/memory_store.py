"""
In-Memory Project Store

Process-local store for tests and throwaway sessions.
"""
from typing import Dict, Optional

from .base import ProjectStore
from ..schemas.project import Project


class InMemoryProjectStore(ProjectStore):
    """Dict-backed store. Records are deep-copied on the way in and out."""

    def __init__(self):
        self._projects: Dict[str, Project] = {}

    async def get(self, project_id: str) -> Optional[Project]:
        project = self._projects.get(project_id)
        return project.model_copy(deep=True) if project else None

    async def list(self) -> list[Project]:
        projects = sorted(self._projects.values(), key=lambda p: p.updated_at, reverse=True)
        return [p.model_copy(deep=True) for p in projects]

    async def replace(self, project: Project) -> None:
        self._projects[project.id] = project.model_copy(deep=True)

    async def delete(self, project_id: str) -> bool:
        return self._projects.pop(project_id, None) is not None
