"""
Data models and validation

Defines the Pydantic schemas used to:
- Validate the input data of the endpoints
- Serialize session snapshots for HTTP and WebSocket clients
- Document the API automatically with OpenAPI
"""

from typing import Optional

from pydantic import BaseModel

from remix_ai.models import GenerationResult, ImageInput, SessionStatus
from remix_ai.session import SessionSnapshot


class PromptRequest(BaseModel):
    prompt: str


class ImageInfo(BaseModel):
    mime_type: str
    filename: Optional[str] = None
    size: int
    preview_url: str

    @classmethod
    def from_image(cls, image: Optional[ImageInput]) -> Optional["ImageInfo"]:
        if image is None:
            return None
        return cls(
            mime_type=image.mime_type,
            filename=image.filename,
            size=image.size,
            preview_url=image.to_data_url(),
        )


class ResultInfo(BaseModel):
    imageUrl: Optional[str] = None
    text: Optional[str] = None

    @classmethod
    def from_result(cls, result: Optional[GenerationResult]) -> Optional["ResultInfo"]:
        if result is None:
            return None
        return cls(imageUrl=result.image_url, text=result.text)


class SessionResponse(BaseModel):
    status: SessionStatus
    image_a: Optional[ImageInfo] = None
    image_b: Optional[ImageInfo] = None
    prompt: str = ""
    in_progress: bool = False
    can_generate: bool = False
    result: Optional[ResultInfo] = None
    error: Optional[str] = None

    @classmethod
    def from_snapshot(cls, snapshot: SessionSnapshot) -> "SessionResponse":
        state = snapshot.state
        return cls(
            status=snapshot.status,
            image_a=ImageInfo.from_image(state.image_a),
            image_b=ImageInfo.from_image(state.image_b),
            prompt=state.prompt,
            in_progress=state.in_progress,
            can_generate=snapshot.can_generate,
            result=ResultInfo.from_result(state.result),
            error=state.error,
        )
