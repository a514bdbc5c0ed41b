"""
Project Model

One row per project. Turns and files are stored as JSON so that a
project is always read and replaced as a whole record.
"""
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base
from ..schemas.project import Project


def _as_utc(value: datetime) -> datetime:
    """SQLite drops tzinfo; stored values are always UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ProjectRecord(Base):
    """
    Persisted form of a Project.

    turns: list of serialized Turn objects, oldest first
    files: mapping of normalized path to file content
    """
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    turns: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    files: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_projects_updated_at", "updated_at"),
    )

    @classmethod
    def from_project(cls, project: Project) -> "ProjectRecord":
        record = cls(id=project.id)
        record.update_from(project)
        return record

    def update_from(self, project: Project) -> None:
        """Overwrite every field with the project's current state."""
        data = project.model_dump(mode="json")
        self.name = project.name
        self.turns = data["turns"]
        self.files = data["files"]
        self.created_at = project.created_at
        self.updated_at = project.updated_at

    def to_project(self) -> Project:
        return Project.model_validate({
            "id": self.id,
            "name": self.name,
            "turns": self.turns or [],
            "files": self.files or {},
            "created_at": _as_utc(self.created_at),
            "updated_at": _as_utc(self.updated_at),
        })

    def __repr__(self) -> str:
        return f"<ProjectRecord(id={self.id}, name={self.name})>"
