"""
Project Schemas

Domain models for projects, turns and attachments, plus the
request/response models of the projects API.
"""
import enum
import uuid
from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from ..config import settings


DEFAULT_PROJECT_NAME = "New Project"

# Files are keyed by normalized absolute path
FileSet = dict[str, str]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def decoded_size(data: str) -> int:
    """Byte length of a base64 payload, without decoding it."""
    data = data.strip()
    padding = len(data) - len(data.rstrip("="))
    return len(data) * 3 // 4 - padding


class TurnRole(str, enum.Enum):
    """Author of a turn."""
    USER = "user"
    ASSISTANT = "assistant"


class Attachment(BaseModel):
    """
    A file attached to a user turn.

    Immutable once created. Construction fails if the file is larger
    than the configured attachment limit, judged on both the declared
    size_bytes and the decoded length of data, or if the two disagree.
    """
    name: str
    mime_type: str
    size_bytes: int = Field(..., ge=0)
    data: str  # base64

    model_config = {"frozen": True}

    @field_validator("size_bytes")
    @classmethod
    def validate_size(cls, v: int) -> int:
        """Reject attachments above MAX_ATTACHMENT_BYTES."""
        if v > settings.max_attachment_bytes:
            raise ValueError(
                f"Attachment is {v} bytes; the limit is {settings.max_attachment_bytes} bytes"
            )
        return v

    @field_validator("data", mode="before")
    @classmethod
    def strip_data_url(cls, v: str) -> str:
        """Accept browser data URLs by dropping the 'data:<mime>;base64,' prefix."""
        if isinstance(v, str) and v.startswith("data:") and "," in v:
            return v.split(",", 1)[1]
        return v

    @model_validator(mode="after")
    def validate_payload(self) -> "Attachment":
        """The payload itself must respect the limit and match size_bytes."""
        actual = decoded_size(self.data)
        if actual > settings.max_attachment_bytes:
            raise ValueError(
                f"Attachment data is {actual} bytes; the limit is {settings.max_attachment_bytes} bytes"
            )
        if actual != self.size_bytes:
            raise ValueError(f"size_bytes is {self.size_bytes} but data decodes to {actual} bytes")
        return self

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")


class Turn(BaseModel):
    """
    One message in a project conversation.

    streaming=True marks the assistant placeholder whose text is not
    final yet. Only the orchestrator creates or changes turns.
    """
    id: str = Field(default_factory=new_id)
    role: TurnRole
    text: str = ""
    attachments: list[Attachment] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    streaming: bool = False


class Project(BaseModel):
    """A conversation plus the files generated from it."""
    id: str = Field(default_factory=new_id)
    name: str = DEFAULT_PROJECT_NAME
    turns: list[Turn] = Field(default_factory=list)
    files: FileSet = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def find_turn(self, turn_id: str) -> Optional[Turn]:
        for turn in self.turns:
            if turn.id == turn_id:
                return turn
        return None

    def touch(self) -> None:
        self.updated_at = utcnow()


# =======================================
# API Schemas
# =======================================

class ProjectCreate(BaseModel):
    """Request to create a new, empty project."""
    name: str = Field(DEFAULT_PROJECT_NAME, min_length=1, max_length=255)

    model_config = {"extra": "forbid"}


class ProjectUpdate(BaseModel):
    """Request to rename a project."""
    name: str = Field(..., min_length=1, max_length=255)

    model_config = {"extra": "forbid"}


class ProjectSummary(BaseModel):
    """Project entry in listings."""
    id: str
    name: str
    turn_count: int
    file_count: int
    generating: bool = False
    created_at: datetime
    updated_at: datetime


class ProjectListResponse(BaseModel):
    """List of projects."""
    projects: list[ProjectSummary]
    total: int


class ProjectFilesResponse(BaseModel):
    """Current merged files of a project."""
    project_id: str
    files: FileSet
