"""
Session endpoints

Each route drives one session operation and answers with the resulting
session snapshot. Picker uploads accept any file; dropped files must be
image/*.
"""

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile

from remix_ai.deps import get_session
from remix_ai.models import Slot
from remix_ai.schemas import PromptRequest, SessionResponse
from remix_ai.services.images import export_result, read_dropped_upload, read_upload
from remix_ai.session import RemixSession

router = APIRouter()


def _respond(session: RemixSession) -> SessionResponse:
    return SessionResponse.from_snapshot(session.snapshot())


@router.get("/session")
async def get_session_state(session: RemixSession = Depends(get_session)):
    return _respond(session)


@router.put("/images/{slot}")
async def upload_image(
    slot: Slot,
    image: UploadFile = File(...),
    session: RemixSession = Depends(get_session),
):
    """Upload from the file picker. Any file type is accepted."""
    session.set_image(slot, await read_upload(image))
    return _respond(session)


@router.put("/images/{slot}/drop")
async def drop_image(
    slot: Slot,
    image: UploadFile = File(...),
    session: RemixSession = Depends(get_session),
):
    """Upload from drag and drop. Files that are not images are ignored."""
    dropped = await read_dropped_upload(image)
    if dropped is not None:
        session.set_image(slot, dropped)
    return _respond(session)


@router.delete("/images/{slot}")
async def remove_image(slot: Slot, session: RemixSession = Depends(get_session)):
    session.set_image(slot, None)
    return _respond(session)


@router.put("/prompt")
async def set_prompt(req: PromptRequest, session: RemixSession = Depends(get_session)):
    session.set_prompt(req.prompt)
    return _respond(session)


@router.post("/generate")
async def generate_remix(session: RemixSession = Depends(get_session)):
    """Generate a remix of both images and wait for the outcome."""
    accepted = await session.generate()
    if not accepted:
        raise HTTPException(
            status_code=409,
            detail="Two images and a prompt are required, and no generation may be running",
        )
    return _respond(session)


@router.post("/reset")
async def reset_session(session: RemixSession = Depends(get_session)):
    session.reset()
    return _respond(session)


@router.get("/result/download")
async def download_result(session: RemixSession = Depends(get_session)):
    result = session.state.result
    if result is None:
        raise HTTPException(status_code=404, detail="No generated image to download")
    filename, payload, mime_type = export_result(result)
    return Response(
        content=payload,
        media_type=mime_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def get_router():
    return router
