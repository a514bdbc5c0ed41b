"""
LLM Provider Base Class

Abstract interface that every provider variant implements, and the
error kinds a generation can fail with.
"""
from abc import ABC, abstractmethod
from typing import Any, Optional
import logging

from ..schemas.provider import ProviderRequest, PROVIDER_LABELS

logger = logging.getLogger(__name__)

# Returned when a backend answers successfully but without text
NO_RESPONSE_TEXT = "No response generated."


class GenerationError(Exception):
    """Base exception for generation failures."""

    def user_message(self) -> str:
        """Text shown to the user on the failed assistant turn."""
        return str(self)


class ConfigError(GenerationError):
    """No usable credential for the selected provider."""
    pass


class TransportError(GenerationError):
    """The network call could not complete (DNS, TCP, TLS, timeout)."""
    pass


class ProviderError(GenerationError):
    """The backend rejected the request with a non-success status."""

    def __init__(self, status_code: int, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.hint = hint

    def user_message(self) -> str:
        if self.hint:
            return f"{self.message}\n\n{self.hint}"
        return self.message


class Cancelled(GenerationError):
    """The generation was cancelled before the provider answered."""

    def __init__(self, message: str = "Generation cancelled"):
        super().__init__(message)


def extract_error_message(body: Any) -> Optional[str]:
    """
    Pull the human-readable message out of a structured error body.

    Handles {"message": ...}, {"error": {"message": ...}} and {"error": "..."}.
    """
    if not isinstance(body, dict):
        return None
    message = body.get("message")
    if isinstance(message, str) and message:
        return message
    error = body.get("error")
    if isinstance(error, dict):
        return extract_error_message(error)
    if isinstance(error, str) and error:
        return error
    return None


class LLMProvider(ABC):
    """
    Abstract base class for provider variants.

    A variant converts a normalized ProviderRequest into its backend's
    wire shape, performs exactly one call and translates failures into
    TransportError or ProviderError. Variants never retry.
    """

    name: str = ""
    error_hint: Optional[str] = None

    @property
    def label(self) -> str:
        return PROVIDER_LABELS.get(self.name, self.name)

    @abstractmethod
    async def complete(self, request: ProviderRequest, api_key: str) -> str:
        """
        Send one request and return the assistant text.

        Args:
            request: Normalized request (system prompt, history, sampling)
            api_key: Secret for this provider

        Returns:
            Assistant text

        Raises:
            TransportError: the backend could not be reached
            ProviderError: the backend answered with an error status
        """
        pass

    def status_error(self, status_code: int, body: Any) -> ProviderError:
        """Build a ProviderError from an error status and its response body."""
        message = extract_error_message(body) or f"{self.label} error: {status_code}"
        logger.warning(f"{self.label} returned {status_code}: {message}")
        return ProviderError(status_code, message, hint=self.error_hint)

    def transport_error(self, exc: Exception) -> TransportError:
        logger.warning(f"{self.label} unreachable: {exc}")
        return TransportError(f"Could not reach {self.label}: {exc}")
