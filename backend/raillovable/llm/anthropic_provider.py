"""
Anthropic LLM Provider

Implementation using Anthropic's Messages API.
"""
import logging

from anthropic import AsyncAnthropic, APIConnectionError, APIStatusError

from .base import LLMProvider, NO_RESPONSE_TEXT
from ..schemas.provider import ImagePart, ProviderRequest

logger = logging.getLogger(__name__)


class AnthropicProvider(LLMProvider):
    """
    Anthropic API implementation.

    The system prompt travels outside the message list, and image
    blocks are placed before the text they illustrate.
    """

    name = "anthropic"
    error_hint = (
        "Note: Anthropic may block requests made from a browser origin (CORS). "
        "Try OpenAI instead."
    )

    def format_messages(self, request: ProviderRequest) -> list[dict]:
        """Convert the normalized history to Messages API content blocks."""
        messages = []
        for message in request.messages:
            if message.is_text_only():
                messages.append({"role": message.role, "content": message.text()})
                continue

            images = [
                {
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": part.mime_type,
                        "data": part.data,
                    },
                }
                for part in message.parts
                if isinstance(part, ImagePart)
            ]
            messages.append({
                "role": message.role,
                "content": images + [{"type": "text", "text": message.text()}],
            })
        return messages

    async def complete(self, request: ProviderRequest, api_key: str) -> str:
        """Generate text using Anthropic Messages API."""
        try:
            async with AsyncAnthropic(api_key=api_key, max_retries=0) as client:
                response = await client.messages.create(
                    model=request.model,
                    system=request.system_prompt,
                    messages=self.format_messages(request),
                    max_tokens=request.max_output_tokens,
                    temperature=request.temperature,
                )
        except APIConnectionError as e:
            raise self.transport_error(e) from e
        except APIStatusError as e:
            raise self.status_error(e.status_code, e.body) from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        return text or NO_RESPONSE_TEXT
