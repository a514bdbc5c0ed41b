"""
Chat Schemas

Pydantic models for the chat, generation status and settings APIs.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from .project import Attachment, Project
from .provider import ProviderName


class ChatRequest(BaseModel):
    """A user turn. Omit project_id to start a new project."""
    project_id: Optional[str] = None
    text: str = ""
    attachments: list[Attachment] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


class ChatResponse(BaseModel):
    """Project after the turn (or with the pending turn when not waiting)."""
    project: Project
    assistant_turn_id: str
    state: str  # idle, generating, errored


class GenerationStatusResponse(BaseModel):
    """Whether a project is generating right now."""
    project_id: str
    state: str
    started_at: Optional[datetime] = None
    assistant_turn_id: Optional[str] = None


class CancelResponse(BaseModel):
    """Result of a cancel request. cancelled=False means nothing was running."""
    project_id: str
    cancelled: bool
    state: str


class SettingsResponse(BaseModel):
    """Provider configuration as visible to clients. Never includes secrets."""
    provider: ProviderName
    model: str
    has_api_key: bool
    configured_providers: list[str]

    model_config = {"protected_namespaces": ()}


class SettingsUpdate(BaseModel):
    """Runtime change of provider, model or keys. Unset fields are left alone."""
    provider: Optional[ProviderName] = None
    model: Optional[str] = None
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None

    model_config = {"extra": "forbid", "protected_namespaces": ()}
