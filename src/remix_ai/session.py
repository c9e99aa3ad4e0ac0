"""
Remix session state machine

Owns everything the UI shows: the two selected images, the prompt, the
in-progress flag, the last result and the last error.

Lifecycle: idle -> ready -> generating -> succeeded | failed. Editing inputs
moves back to ready/idle by readiness, reset() always returns to idle.

Only one generation may be in flight. Every accepted generation carries a
token; reset() invalidates it, so a completion arriving afterwards is dropped.
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Optional

from remix_ai.errors import GenerationFailure
from remix_ai.models import (GenerationRequest, GenerationResult, ImageInput,
                             SessionStatus, Slot)

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "An unknown error occurred."


@dataclass
class SessionState:
    image_a: Optional[ImageInput] = None
    image_b: Optional[ImageInput] = None
    prompt: str = ""
    in_progress: bool = False
    result: Optional[GenerationResult] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class SessionSnapshot:
    status: SessionStatus
    can_generate: bool
    state: SessionState


class RemixSession:

    def __init__(self, service):
        self.service = service
        self.state = SessionState()
        self._token = 0
        self._status = SessionStatus.IDLE
        self._subscribers: set[asyncio.Queue] = set()

    @property
    def can_generate(self) -> bool:
        state = self.state
        return (
            state.image_a is not None
            and state.image_b is not None
            and bool(state.prompt.strip())
            and not state.in_progress
        )

    @property
    def status(self) -> SessionStatus:
        return self._status

    def _refresh_status(self):
        # Edits leave a running generation alone; otherwise readiness decides.
        if self.state.in_progress:
            return
        self._status = SessionStatus.READY if self.can_generate else SessionStatus.IDLE

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            status=self.status,
            can_generate=self.can_generate,
            state=replace(self.state),
        )

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue):
        self._subscribers.discard(queue)

    def _publish(self):
        snapshot = self.snapshot()
        for queue in self._subscribers:
            queue.put_nowait(snapshot)

    def set_image(self, slot: Slot, image: Optional[ImageInput]):
        """
        Replace the image in a slot. The prompt and any previous result or
        error stay visible until the next generate() or reset().
        """
        if Slot(slot) is Slot.A:
            self.state.image_a = image
        else:
            self.state.image_b = image
        self._refresh_status()
        self._publish()

    def set_prompt(self, text: str):
        self.state.prompt = text
        self._refresh_status()
        self._publish()

    def reset(self):
        self._token += 1
        self.state = SessionState()
        self._status = SessionStatus.IDLE
        self._publish()

    async def generate(self) -> bool:
        """
        Run one generation if the session is ready.

        Returns False without touching the state when the session is not
        ready or a generation is already running. Never raises: failures end
        up in state.error.
        """
        if not self.can_generate:
            return False

        request = GenerationRequest(
            image_a=self.state.image_a,
            image_b=self.state.image_b,
            prompt=self.state.prompt,
        )
        self._token += 1
        token = self._token

        self.state.result = None
        self.state.error = None
        self.state.in_progress = True
        self._status = SessionStatus.GENERATING
        self._publish()

        result = None
        error = None
        try:
            result = await self.service.generate(
                request.image_a, request.image_b, request.prompt
            )
        except asyncio.CancelledError:
            if token == self._token:
                self.state.in_progress = False
                self._refresh_status()
                self._publish()
            raise
        except GenerationFailure as e:
            error = e.message
        except Exception as e:
            logger.exception("Unexpected error during generation")
            error = str(e) or UNKNOWN_ERROR

        if token != self._token:
            logger.info("Discarding stale generation result (token %d)", token)
            return True

        self.state.in_progress = False
        if error is not None:
            logger.error("Generation failed: %s", error)
            self.state.error = error
            self._status = SessionStatus.FAILED
        else:
            self.state.result = result
            self._status = SessionStatus.SUCCEEDED
        self._publish()
        return True
