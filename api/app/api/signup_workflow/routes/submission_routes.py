"""
Submission routes for the sign-up wizard.
Runs the sign-up sequence from the voicemail step.
"""

import logging

from fastapi import APIRouter, Form, Request
from fastapi.responses import JSONResponse

from app.api.common.responses import json_error, json_success
from app.api.common.schemas import SignUpResultData

from ..models import SignUpOutcome
from ..session_store import SignupWizardSession
from .shared_utils import (
    ensure_not_submitting,
    get_orchestrator,
    limiter,
    load_session,
    rate_limit,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _outcome_response(session: SignupWizardSession, outcome: SignUpOutcome) -> JSONResponse:
    if not outcome.completed:
        return JSONResponse(
            content=json_error(
                outcome.error_code or "SIGNUP_ERROR",
                outcome.message,
                details={"current_step": session.current_step, **outcome.details},
            ),
            status_code=502,
        )

    return JSONResponse(
        content=json_success(
            SignUpResultData(
                status=outcome.status.value,
                message=outcome.message,
                user_id=outcome.user_id,
                redirect_to=outcome.redirect_to,
                current_step=session.current_step,
                details=outcome.details,
            ).model_dump()
        )
    )


async def _complete(request: Request, session_id: str, skip_voicemail: bool) -> JSONResponse:
    session = load_session(request, session_id)
    ensure_not_submitting(session)
    session.require_step("voicemail")

    if skip_voicemail:
        logger.info(f"Session {session_id} skipping voicemail")
        session.clear_voicemail()

    outcome = await get_orchestrator(request).complete(
        session, session.run_context, allow_missing_voicemail=skip_voicemail
    )

    if outcome.completed:
        logger.info(f"Sign up for session {session_id} finished with status {outcome.status.value}")
    else:
        logger.error(f"Sign up for session {session_id} failed: {outcome.message}")
    return _outcome_response(session, outcome)


@router.post("/complete")
@limiter.limit(rate_limit("signup_submission"))
async def complete_signup(request: Request, session_id: str = Form(...)) -> JSONResponse:
    """Create the account with the pending voicemail, if any."""
    return await _complete(request, session_id, skip_voicemail=False)


@router.post("/complete/skip-voicemail")
@limiter.limit(rate_limit("signup_submission"))
async def complete_signup_without_voicemail(
    request: Request, session_id: str = Form(...)
) -> JSONResponse:
    """Create the account and drop any pending voicemail."""
    return await _complete(request, session_id, skip_voicemail=True)
