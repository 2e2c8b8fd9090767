"""
Step processing routes for the sign-up wizard (account and committee steps).
"""

import logging

from fastapi import APIRouter, Form, Request
from fastapi.responses import JSONResponse

from app.api.common.responses import json_success
from app.api.signup_workflow.step_handlers import process_account_step, process_committee_step

from .shared_utils import ensure_not_submitting, limiter, load_session, rate_limit, step_data

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/step/account")
@limiter.limit(rate_limit("step_submission"))
async def submit_account_step(
    request: Request,
    session_id: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
) -> JSONResponse:
    """Step 1: account credentials."""
    session = load_session(request, session_id)
    ensure_not_submitting(session)

    process_account_step(session, email, password)
    return JSONResponse(content=json_success(step_data(session, confirmed_step="account")))


@router.post("/step/committee")
@limiter.limit(rate_limit("step_submission"))
async def submit_committee_step(
    request: Request,
    session_id: str = Form(...),
    committee_type: str = Form(...),
    organization_name: str | None = Form(None),
    candidate_first_name: str | None = Form(None),
    candidate_middle_initial: str | None = Form(None),
    candidate_last_name: str | None = Form(None),
    candidate_suffix: str | None = Form(None),
) -> JSONResponse:
    """Step 2: organization or candidate details."""
    session = load_session(request, session_id)
    ensure_not_submitting(session)

    process_committee_step(
        session,
        committee_type=committee_type,
        organization_name=organization_name,
        candidate_first_name=candidate_first_name,
        candidate_middle_initial=candidate_middle_initial,
        candidate_last_name=candidate_last_name,
        candidate_suffix=candidate_suffix,
    )
    return JSONResponse(content=json_success(step_data(session, confirmed_step="committee")))
