"""
Provider Gateway

Single entry point for generation. Normalizes turn history into the
provider-neutral request shape, picks the provider variant named by the
configuration and races the provider call against the session's
cancellation token. Stateless: nothing is persisted here.
"""
import asyncio
import logging
from typing import Dict, Optional, Sequence

from .base import LLMProvider, GenerationError, ConfigError, Cancelled
from .router import get_llm_provider
from ..config import settings, DEFAULT_MODELS
from ..engine.cancellation import CancellationToken
from ..prompts.system import WEBSITE_BUILDER_SYSTEM, IMAGE_ONLY_PROMPT
from ..schemas.project import Turn
from ..schemas.provider import (
    ImagePart,
    MessagePart,
    ProviderConfig,
    ProviderRequest,
    TextPart,
    WireMessage,
    PROVIDER_LABELS,
)
from ..tracer import trace_call, trace_result

logger = logging.getLogger(__name__)


def normalize_turn(turn: Turn) -> WireMessage:
    """
    Convert one turn to a provider-neutral message.

    Text-only turns pass through verbatim. Image attachments become
    inline image parts after the text; other attachments are only
    mentioned by name.
    """
    if not turn.attachments:
        return WireMessage(role=turn.role.value, parts=[TextPart(text=turn.text)])

    images = [a for a in turn.attachments if a.is_image]
    others = [a for a in turn.attachments if not a.is_image]

    text = turn.text
    if others:
        notes = "\n".join(f"[Attached file: {a.name} ({a.mime_type})]" for a in others)
        text = f"{text}\n\n{notes}" if text.strip() else notes
    if not text.strip():
        text = IMAGE_ONLY_PROMPT

    parts: list[MessagePart] = [TextPart(text=text)]
    parts.extend(ImagePart(mime_type=a.mime_type, data=a.data) for a in images)
    return WireMessage(role=turn.role.value, parts=parts)


def normalize_history(history: Sequence[Turn]) -> list[WireMessage]:
    return [normalize_turn(turn) for turn in history]


class ProviderGateway:
    """
    Polymorphic gateway over the configured provider variants.

    Failure modes:
    - ConfigError: no credential for the configured provider
    - TransportError / ProviderError: raised by the variant
    - Cancelled: the token fired before the provider answered
    """

    def __init__(
        self,
        providers: Optional[Dict[str, LLMProvider]] = None,
        system_prompt: str = WEBSITE_BUILDER_SYSTEM,
        max_output_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ):
        self._providers = providers or {}
        self.system_prompt = system_prompt
        self.max_output_tokens = max_output_tokens
        self.temperature = temperature

    def _provider(self, name: str) -> LLMProvider:
        return self._providers.get(name) or get_llm_provider(name)

    def build_request(self, history: Sequence[Turn], config: ProviderConfig) -> ProviderRequest:
        """Build the normalized request for a history."""
        return ProviderRequest(
            system_prompt=self.system_prompt,
            messages=normalize_history(history),
            model=config.model or DEFAULT_MODELS[config.provider],
            max_output_tokens=self.max_output_tokens or settings.max_output_tokens,
            temperature=self.temperature if self.temperature is not None else settings.temperature,
        )

    async def generate(
        self,
        history: Sequence[Turn],
        config: ProviderConfig,
        cancel: CancellationToken,
    ) -> str:
        """
        Generate a reply for a turn history.

        Args:
            history: Turns to send, oldest first
            config: Provider selection and credentials
            cancel: Token observed until the provider answers

        Returns:
            Raw assistant text
        """
        api_key = config.api_key()
        if not api_key:
            label = PROVIDER_LABELS[config.provider]
            raise ConfigError(f"{label} API key not configured. Go to Settings to add it.")

        provider = self._provider(config.provider)
        request = self.build_request(history, config)

        logger.info(
            f"Generating with {provider.label} ({request.model}), "
            f"{len(request.messages)} messages"
        )
        trace_call("llm.gateway", f"{provider.name}.complete", f"{len(request.messages)} messages")

        try:
            text = await self._call(provider, request, api_key, cancel)
        except Cancelled:
            trace_result("llm.gateway", f"{provider.name}.complete", False, "cancelled")
            raise
        except GenerationError as e:
            trace_result("llm.gateway", f"{provider.name}.complete", False, str(e))
            raise
        except OSError as e:
            raise provider.transport_error(e) from e

        trace_result("llm.gateway", f"{provider.name}.complete", True, text)
        return text

    async def _call(
        self,
        provider: LLMProvider,
        request: ProviderRequest,
        api_key: str,
        cancel: CancellationToken,
    ) -> str:
        """Run the provider call, aborting it if the token fires first."""
        if cancel.cancelled:
            raise Cancelled()

        call = asyncio.ensure_future(provider.complete(request, api_key))
        watcher = asyncio.ensure_future(cancel.wait())
        try:
            done, _ = await asyncio.wait({call, watcher}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            watcher.cancel()
            if not call.done():
                call.cancel()

        if call in done:
            return call.result()

        # Let the aborted request unwind before reporting
        await asyncio.gather(call, return_exceptions=True)
        logger.info(f"{provider.label} call aborted by cancellation")
        raise Cancelled()
