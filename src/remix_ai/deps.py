"""
Provides the shared service and session instances that can be injected at any
point of the application.

Manages:
- Gemini client and remix service, built once at startup
- The single remix session owned by the application

This module keeps a single place for shared dependencies and avoids repeated
initialization.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, WebSocket

from remix_ai.config import Settings
from remix_ai.gemini import GeminiClient
from remix_ai.services.generation import RemixService
from remix_ai.session import RemixSession

logger = logging.getLogger(__name__)


def build_service(settings: Settings) -> RemixService:
    """Raises ConfigurationError when the credential is missing."""
    client = GeminiClient(settings.api_key, model=settings.model)
    return RemixService(client)


def get_session(request: Request) -> RemixSession:
    return request.app.state.session


def get_ws_session(websocket: WebSocket) -> RemixSession:
    return websocket.app.state.session


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Remix session ready")
    yield

    logger.info("Remix session shutting down.")
    app.state.session.reset()
