import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import remix_ai.routers.api as api_router
import remix_ai.routers.websocket as websocket_router
from remix_ai.config import Settings, get_settings
from remix_ai.deps import build_service, lifespan
from remix_ai.session import RemixSession


def create_app(settings: Optional[Settings] = None, service=None) -> FastAPI:
    """
    Build the application. Without an injected service the Gemini client is
    created here, so a missing API_KEY stops startup.
    """
    settings = settings or get_settings()
    if service is None:
        service = build_service(settings)

    app = FastAPI(title="Remix AI Image Generation API", lifespan=lifespan)
    app.state.settings = settings
    app.state.session = RemixSession(service)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router.get_router(), prefix="/api")
    app.include_router(websocket_router.get_router(), prefix="/api")
    return app


def run():
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
