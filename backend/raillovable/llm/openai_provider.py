"""
OpenAI LLM Provider

Implementation using OpenAI's Chat Completions API.
"""
import logging

from openai import AsyncOpenAI, APIConnectionError, APIStatusError

from .base import LLMProvider, NO_RESPONSE_TEXT
from ..schemas.provider import ImagePart, ProviderRequest

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """
    OpenAI API implementation.

    Images are sent as data-URL image_url parts after the turn's text.
    """

    name = "openai"

    def format_messages(self, request: ProviderRequest) -> list[dict]:
        """Convert the normalized history to Chat Completions messages."""
        messages = [{"role": "system", "content": request.system_prompt}]
        for message in request.messages:
            if message.is_text_only():
                messages.append({"role": message.role, "content": message.text()})
                continue

            content = []
            for part in message.parts:
                if isinstance(part, ImagePart):
                    content.append({
                        "type": "image_url",
                        "image_url": {"url": part.data_url()},
                    })
                else:
                    content.append({"type": "text", "text": part.text})
            messages.append({"role": message.role, "content": content})
        return messages

    async def complete(self, request: ProviderRequest, api_key: str) -> str:
        """Generate text using OpenAI Chat Completions API."""
        try:
            # SDK-level retries are disabled; a retry is a new user turn
            async with AsyncOpenAI(api_key=api_key, max_retries=0) as client:
                response = await client.chat.completions.create(
                    model=request.model,
                    messages=self.format_messages(request),
                    max_tokens=request.max_output_tokens,
                    temperature=request.temperature,
                )
        except APIConnectionError as e:
            raise self.transport_error(e) from e
        except APIStatusError as e:
            raise self.status_error(e.status_code, e.body) from e

        if not response.choices:
            return NO_RESPONSE_TEXT
        return response.choices[0].message.content or NO_RESPONSE_TEXT
