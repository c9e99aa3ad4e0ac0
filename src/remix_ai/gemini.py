"""
Client for the Gemini image model.

This module holds all communication with the remote generation service: it
owns the static credential, builds the request parts and submits a single
generate_content call.

Responsibilities:
- Fail at construction when the credential is missing
- Encode images and prompt as ordered content parts
- Declare that both image and text response modalities are accepted
"""

import logging
from typing import Optional

from google import genai
from google.genai import types

from remix_ai.config import DEFAULT_MODEL
from remix_ai.errors import ConfigurationError
from remix_ai.models import ImageInput

logger = logging.getLogger(__name__)

RESPONSE_MODALITIES = ["IMAGE", "TEXT"]


def image_part(image: ImageInput) -> types.Part:
    return types.Part(
        inline_data=types.Blob(data=image.data, mime_type=image.mime_type)
    )


def build_parts(image_a: ImageInput, image_b: ImageInput, prompt: str) -> list:
    """Content parts in the order the model reads them: image A, image B, prompt."""
    return [image_part(image_a), image_part(image_b), types.Part(text=prompt)]


class GeminiClient:

    def __init__(self, api_key: Optional[str], model: str = DEFAULT_MODEL):
        if not api_key:
            raise ConfigurationError("API_KEY environment variable not set")
        self.model = model
        self._client = genai.Client(api_key=api_key)
        logger.info("Gemini client ready (model=%s)", model)

    async def generate_content(self, parts: list):
        config = types.GenerateContentConfig(response_modalities=RESPONSE_MODALITIES)
        logger.debug("Submitting %d parts to %s", len(parts), self.model)
        return await self._client.aio.models.generate_content(
            model=self.model,
            contents=parts,
            config=config,
        )
