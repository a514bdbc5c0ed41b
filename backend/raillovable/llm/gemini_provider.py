"""
Google Gemini LLM Provider

Implementation using Google's Generative AI SDK.
"""
import base64
import logging

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from .base import LLMProvider, NO_RESPONSE_TEXT
from ..schemas.provider import ImagePart, ProviderRequest

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    """
    Google Gemini API implementation.

    Assistant turns use Gemini's "model" role; images are inline blobs.
    """

    name = "gemini"

    def format_contents(self, request: ProviderRequest) -> list[dict]:
        """Convert the normalized history to Gemini contents."""
        contents = []
        for message in request.messages:
            parts = []
            for part in message.parts:
                if isinstance(part, ImagePart):
                    parts.append({
                        "mime_type": part.mime_type,
                        "data": base64.b64decode(part.data),
                    })
                else:
                    parts.append(part.text)
            contents.append({
                "role": "model" if message.role == "assistant" else "user",
                "parts": parts,
            })
        return contents

    async def complete(self, request: ProviderRequest, api_key: str) -> str:
        """Generate text using Gemini Generative API."""
        try:
            genai.configure(api_key=api_key)
            gen_model = genai.GenerativeModel(
                model_name=request.model,
                system_instruction=request.system_prompt,
            )
            generation_config = genai.GenerationConfig(
                max_output_tokens=request.max_output_tokens,
                temperature=request.temperature,
            )
            response = await gen_model.generate_content_async(
                self.format_contents(request),
                generation_config=generation_config,
            )
        # Retries ran out before the endpoint answered at all
        except google_exceptions.RetryError as e:
            raise self.transport_error(e) from e
        except google_exceptions.GoogleAPICallError as e:
            raise self.status_error(int(e.code or 500), {"message": e.message}) from e

        try:
            return response.text or NO_RESPONSE_TEXT
        except ValueError:
            # Raised when the candidate was blocked and carries no text parts
            logger.warning("Gemini response had no text parts")
            return NO_RESPONSE_TEXT
