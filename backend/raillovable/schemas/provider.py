"""
Provider Schemas

Provider configuration and the normalized request shape every
backend variant is built from.
"""
from typing import Literal, Union
from pydantic import BaseModel, Field


ProviderName = Literal["openai", "anthropic", "gemini"]

PROVIDER_LABELS = {
    "openai": "OpenAI",
    "anthropic": "Anthropic",
    "gemini": "Gemini",
}


class ProviderConfig(BaseModel):
    """Provider selection and credentials for one generation. Read-only to the core."""
    provider: ProviderName
    model: str
    credentials: dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True, "protected_namespaces": ()}

    def api_key(self) -> str:
        """Secret for the selected provider, or an empty string."""
        return self.credentials.get(self.provider, "")


class TextPart(BaseModel):
    """Plain text content of a message."""
    type: Literal["text"] = "text"
    text: str


class ImagePart(BaseModel):
    """Inline base64 image content of a message."""
    type: Literal["image"] = "image"
    mime_type: str
    data: str  # base64, no data-URL prefix

    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


MessagePart = Union[TextPart, ImagePart]


class WireMessage(BaseModel):
    """One history entry in provider-neutral form."""
    role: Literal["user", "assistant"]
    parts: list[MessagePart]

    def is_text_only(self) -> bool:
        return all(isinstance(part, TextPart) for part in self.parts)

    def text(self) -> str:
        """Concatenated text parts."""
        return "\n".join(part.text for part in self.parts if isinstance(part, TextPart))


class ProviderRequest(BaseModel):
    """Normalized request handed to a provider variant."""
    system_prompt: str
    messages: list[WireMessage]
    model: str
    max_output_tokens: int = 4096
    temperature: float = 0.7

    model_config = {"protected_namespaces": ()}
