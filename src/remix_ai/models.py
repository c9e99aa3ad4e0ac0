"""
Domain types shared by the adapter and the session.

Images live only in memory for the duration of a session; nothing here is
persisted.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from remix_ai.utils import build_data_url


class Slot(str, Enum):
    A = "a"
    B = "b"


class SessionStatus(str, Enum):
    IDLE = "idle"
    READY = "ready"
    GENERATING = "generating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ImageInput:
    data: bytes
    mime_type: str
    filename: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)

    def to_data_url(self) -> str:
        return build_data_url(self.mime_type, self.data)


@dataclass(frozen=True)
class GenerationRequest:
    image_a: ImageInput
    image_b: ImageInput
    prompt: str

    def __post_init__(self):
        if not self.prompt or not self.prompt.strip():
            raise ValueError("A generation request needs a non-empty prompt")


@dataclass(frozen=True)
class GenerationResult:
    image_url: Optional[str] = None
    text: Optional[str] = None
