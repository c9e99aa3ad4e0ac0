"""
Session snapshot stream for browser clients

The browser receives the current snapshot on connect and one snapshot per
state transition afterwards. The connection ends when either side fails:
the browser leaving, or a send that can no longer be delivered.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from remix_ai.deps import get_ws_session
from remix_ai.schemas import SessionResponse
from remix_ai.session import RemixSession, SessionSnapshot

logger = logging.getLogger(__name__)

router = APIRouter()


async def _send_snapshot(websocket: WebSocket, snapshot: SessionSnapshot):
    payload = SessionResponse.from_snapshot(snapshot).model_dump(mode="json")
    await websocket.send_json(payload)


async def _forward_updates(websocket: WebSocket, queue: asyncio.Queue):
    while True:
        snapshot = await queue.get()
        await _send_snapshot(websocket, snapshot)


async def _wait_for_disconnect(websocket: WebSocket):
    # Incoming messages are ignored.
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("WebSocket client disconnected")


@router.websocket("/ws/")
async def websocket_endpoint(
    websocket_browser: WebSocket, session: RemixSession = Depends(get_ws_session)
):
    """Stream a session snapshot after every state transition."""
    await websocket_browser.accept()

    queue = session.subscribe()
    try:
        await _send_snapshot(websocket_browser, session.snapshot())
        receiver = asyncio.create_task(_wait_for_disconnect(websocket_browser))
        forwarder = asyncio.create_task(_forward_updates(websocket_browser, queue))
        tasks = (receiver, forwarder)
        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                if not task.cancelled() and task.exception() is not None:
                    logger.info("WebSocket stream closed: %s", task.exception())
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
    finally:
        session.unsubscribe(queue)


def get_router():
    return router
