"""
RailLovable Configuration

Environment-based configuration for provider selection, credentials,
generation parameters and storage. API keys are never hardcoded; a missing
key is reported when a turn is sent, not at startup.
"""
from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

from .schemas.provider import ProviderConfig, ProviderName


DEFAULT_MODELS = {
    "openai": "gpt-4o",
    "anthropic": "claude-sonnet-4-20250514",
    "gemini": "gemini-2.5-flash",
}


def clean_api_key(value: str) -> str:
    """Treat placeholder values like 'your-key-here' as unset."""
    if value and "your-" in value.lower():
        return ""
    return value


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # LLM Provider Selection
    llm_provider: ProviderName = "openai"

    # API Keys - only the selected provider's key is needed
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    gemini_api_key: str = ""

    # Explicit model override; empty means the provider default below
    llm_model: str = ""

    openai_model: str = DEFAULT_MODELS["openai"]
    anthropic_model: str = DEFAULT_MODELS["anthropic"]
    gemini_model: str = DEFAULT_MODELS["gemini"]

    # Generation parameters
    max_output_tokens: int = 4096
    temperature: float = 0.7

    # Attachments larger than this are rejected (20 MiB)
    max_attachment_bytes: int = 20 * 1024 * 1024

    # Storage
    store_backend: Literal["sqlite", "memory"] = "sqlite"
    database_url: str = "sqlite+aiosqlite:///./raillovable.db"

    # Debug mode (verbose low-level logging)
    debug: bool = False

    # Follow-through mode (structured step-by-step execution tracing)
    follow_through: bool = False

    @field_validator("openai_api_key", "anthropic_api_key", "gemini_api_key", mode="before")
    @classmethod
    def validate_not_placeholder(cls, v: str) -> str:
        return clean_api_key(v)

    def credentials(self) -> dict[str, str]:
        """Configured secrets keyed by provider name. Empty keys are left out."""
        keys = {
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
            "gemini": self.gemini_api_key,
        }
        return {name: key for name, key in keys.items() if key}

    def get_model(self, provider: Optional[ProviderName] = None) -> str:
        """Get the model name for a provider (defaults to the selected one)."""
        provider = provider or self.llm_provider
        if self.llm_model and provider == self.llm_provider:
            return self.llm_model
        return {
            "openai": self.openai_model,
            "anthropic": self.anthropic_model,
            "gemini": self.gemini_model,
        }[provider]

    def has_api_key(self) -> bool:
        """Whether the selected provider has a credential configured."""
        return self.llm_provider in self.credentials()

    def provider_config(self) -> ProviderConfig:
        """Snapshot of the provider configuration for one generation."""
        return ProviderConfig(
            provider=self.llm_provider,
            model=self.get_model(),
            credentials=self.credentials(),
        )


# Global settings instance
settings = Settings()
