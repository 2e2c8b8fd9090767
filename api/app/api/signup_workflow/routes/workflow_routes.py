"""
Workflow management routes for the sign-up wizard.
Handles wizard initialization, status, navigation and abandonment.
"""

import logging

from fastapi import APIRouter, Form, Request
from fastapi.responses import JSONResponse

from app.api.common.responses import json_success
from app.api.common.schemas import WorkflowInitData
from app.api.common.utils import SIGNUP_SESSION_KEY
from app.api.signup_workflow.session_store import (
    cleanup_expired_sessions,
    create_signup_session,
    discard_signup_session,
)

from .shared_utils import ensure_not_submitting, load_session, step_data

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/start")
async def start_signup(request: Request) -> JSONResponse:
    """Create a new wizard session bound to the browser session."""

    # Clean up expired sessions periodically
    cleanup_expired_sessions()

    session = create_signup_session(request.app.state.signup_config)

    session_manager = request.app.state.session_manager
    session_manager.remember_signup_session(request, session.session_id)
    csrf_token = session_manager.get_or_create_csrf_token(request)

    return JSONResponse(
        content=json_success(
            WorkflowInitData(
                session_id=session.session_id,
                current_step=session.current_step,
                current_step_name=session.current_step_name,
                step_prompt=session.get_step_prompt(),
                workflow_steps=session.get_workflow_steps(),
                csrf_token=csrf_token,
            ).model_dump()
        )
    )


@router.get("/session/{session_id}")
async def get_session_status(request: Request, session_id: str) -> JSONResponse:
    """Get current wizard state. The password is never returned."""
    session = load_session(request, session_id, check_csrf=False)
    return JSONResponse(content=json_success(session.get_summary()))


@router.post("/back")
async def go_back(request: Request, session_id: str = Form(...)) -> JSONResponse:
    """Return to the previous step. Refused while a submission is in flight."""
    session = load_session(request, session_id)
    ensure_not_submitting(session)

    session.retreat()
    return JSONResponse(content=json_success(step_data(session)))


@router.post("/abandon")
async def abandon_signup(request: Request, session_id: str = Form(...)) -> JSONResponse:
    """Discard the wizard and everything entered so far."""
    session = load_session(request, session_id)
    ensure_not_submitting(session)

    session.reset()
    discard_signup_session(session_id)
    request.app.state.session_manager.clear_session_data(request, SIGNUP_SESSION_KEY)
    logger.info(f"Session {session_id} abandoned")

    return JSONResponse(content=json_success({"abandoned": True}))
