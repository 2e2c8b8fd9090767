"""
Voicemail routes for the sign-up wizard.
Handles microphone recording, file selection and clearing the pending voicemail.
"""

import logging
from typing import Literal

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from app.api.common.responses import json_success
from app.api.common.schemas import RecordingData, VoicemailData

from ..session_store import SignupWizardSession
from .shared_utils import ensure_not_submitting, limiter, load_session, rate_limit

logger = logging.getLogger(__name__)

router = APIRouter()


def _voicemail_session(request: Request, session_id: str) -> SignupWizardSession:
    session = load_session(request, session_id)
    ensure_not_submitting(session)
    session.require_step("voicemail")
    return session


def _pending(session: SignupWizardSession) -> dict | None:
    payload = session.data.voicemail_payload
    return payload.describe() if payload else None


@router.post("/voicemail/recording/start")
async def start_recording(
    request: Request,
    session_id: str = Form(...),
    mime_type: str | None = Form(None),
) -> JSONResponse:
    """Open a recording. Chunks follow via /voicemail/recording/chunk."""
    session = _voicemail_session(request, session_id)
    session.resolver.start_recording(mime_type)
    session.touch()
    return JSONResponse(content=json_success(RecordingData(recording=True).model_dump()))


@router.post("/voicemail/recording/chunk")
@limiter.limit(rate_limit("recording_chunk"))
async def append_recording_chunk(
    request: Request,
    session_id: str = Form(...),
    chunk: UploadFile = File(...),
) -> JSONResponse:
    session = _voicemail_session(request, session_id)
    size = session.resolver.append_recording(await chunk.read())
    session.touch()
    return JSONResponse(
        content=json_success(RecordingData(recording=True, size=size).model_dump())
    )


@router.post("/voicemail/recording/stop")
async def stop_recording(request: Request, session_id: str = Form(...)) -> JSONResponse:
    """Finish the recording and make it the pending voicemail."""
    session = _voicemail_session(request, session_id)
    had_file = session.resolver.selected_file is not None

    captured = session.resolver.stop_recording()
    session.sync_voicemail()

    if captured is None:
        logger.info(f"Recording for session {session_id} stopped without audio")

    data = RecordingData(
        recording=False,
        size=len(captured.data) if captured else 0,
        captured=captured is not None,
    ).model_dump()
    data["voicemail"] = _pending(session)
    data["replaced_file"] = had_file and session.resolver.selected_file is None
    return JSONResponse(content=json_success(data))


@router.post("/voicemail/file")
@limiter.limit(rate_limit("voicemail_upload"))
async def select_voicemail_file(
    request: Request,
    session_id: str = Form(...),
    file: UploadFile = File(...),
) -> JSONResponse:
    """Select an audio file. A rejected file leaves the pending voicemail unchanged."""
    session = _voicemail_session(request, session_id)
    had_recording = session.resolver.recording is not None or session.resolver.is_recording

    content = await file.read()
    session.resolver.select_file(file.filename, file.content_type, content)
    session.sync_voicemail()
    logger.info(f"Voicemail file selected for session {session_id} ({len(content)} bytes)")

    return JSONResponse(
        content=json_success(
            VoicemailData(voicemail=_pending(session), replaced_recording=had_recording).model_dump()
        )
    )


@router.post("/voicemail/clear")
async def clear_voicemail(
    request: Request,
    session_id: str = Form(...),
    target: Literal["recording", "file", "all"] = Form("all"),
) -> JSONResponse:
    """Drop the pending recording, the selected file, or both."""
    session = _voicemail_session(request, session_id)

    if target == "recording":
        session.resolver.clear_recording()
        session.sync_voicemail()
    elif target == "file":
        session.resolver.clear_file()
        session.sync_voicemail()
    else:
        session.clear_voicemail()

    return JSONResponse(content=json_success(VoicemailData(voicemail=_pending(session)).model_dump()))
