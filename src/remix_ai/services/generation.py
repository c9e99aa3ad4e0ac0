"""
Image remix generation service

Implements the request adapter between the session and the Gemini client.

Responsibilities:
- Send the two images and the prompt as a single request
- Interpret the interleaved image/text parts of the response
- Translate every remote failure into a GenerationFailure
"""

import logging
from typing import Iterable

from remix_ai.errors import (UNKNOWN_REMOTE_ERROR, GenerationFailure,
                             NoImageReturned)
from remix_ai.gemini import build_parts
from remix_ai.models import GenerationResult, ImageInput
from remix_ai.utils import build_data_url

logger = logging.getLogger(__name__)


def iter_response_parts(response) -> Iterable:
    """Yield the parts of the first candidate, in order."""
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) if content is not None else None
    for part in parts or []:
        yield part


def normalize_response(response) -> GenerationResult:
    # Last image and last text win; multiple images are not merged.
    image_url = None
    text = None
    for part in iter_response_parts(response):
        inline_data = getattr(part, "inline_data", None)
        if inline_data is not None:
            # Any inline-data part counts as the image, even with an empty payload.
            mime_type = inline_data.mime_type or "image/png"
            image_url = build_data_url(mime_type, inline_data.data or b"")
        elif getattr(part, "text", None):
            text = part.text
    return GenerationResult(image_url=image_url, text=text)


class RemixService:

    def __init__(self, client):
        self.client = client

    async def generate(
        self, image_a: ImageInput, image_b: ImageInput, prompt: str
    ) -> GenerationResult:
        """
        Remix two images following the prompt.

        Raises GenerationFailure when the remote call fails and NoImageReturned
        when it succeeds without an image part.
        """
        try:
            parts = build_parts(image_a, image_b, prompt)
            response = await self.client.generate_content(parts)
            result = normalize_response(response)
        except Exception as e:
            logger.exception("Error calling Gemini API")
            message = str(e)
            if message:
                raise GenerationFailure(f"Failed to generate image: {message}") from e
            raise GenerationFailure(UNKNOWN_REMOTE_ERROR) from e

        if not result.image_url:
            logger.info("Gemini response contained no image (text=%r)", result.text)
            raise NoImageReturned()
        return result
