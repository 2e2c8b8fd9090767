"""
Shared utilities and helper functions for sign-up workflow routes.
"""

import logging
from collections.abc import Callable
from typing import Any

from fastapi import Request
from slowapi import Limiter

from app.api.common.schemas import StepConfirmData
from app.api.common.utils import get_session_or_ip
from app.api.signup_workflow.config import get_signup_config
from app.api.signup_workflow.orchestrator import SignUpOrchestrator
from app.api.signup_workflow.session_store import SignupWizardSession, get_signup_session
from app.api.signup_workflow.validators import validate_session_id
from app.api.workflow_base.exceptions import (
    CSRFValidationException,
    SessionNotFoundException,
    SubmissionInProgressError,
)

logger = logging.getLogger(__name__)

# Initialize limiter with custom key function
limiter = Limiter(key_func=get_session_or_ip)

CSRF_HEADER = "X-CSRF-Token"


def rate_limit(name: str) -> Callable[[], str]:
    """Limit for a route group, read from the workflow config on each request."""
    return lambda: get_signup_config().get_rate_limits()[name]


def load_session(request: Request, session_id: str, check_csrf: bool = True) -> SignupWizardSession:
    """
    Resolve the wizard session for a request.

    The id must be a UUID4, belong to this browser session and, for
    mutating requests, come with the CSRF token issued at start.
    """
    validation_result = validate_session_id(session_id)
    if not validation_result["is_valid"]:
        raise SessionNotFoundException(session_id)

    session_manager = request.app.state.session_manager
    if check_csrf and not session_manager.validate_csrf_token(
        request, request.headers.get(CSRF_HEADER)
    ):
        raise CSRFValidationException()

    if session_manager.get_signup_session_id(request) != session_id:
        logger.warning(f"Session {session_id} is not bound to this browser session")
        raise SessionNotFoundException(session_id)

    return get_signup_session(session_id)


def ensure_not_submitting(session: SignupWizardSession) -> None:
    if session.run_context.submitting:
        raise SubmissionInProgressError(session.session_id)


def get_orchestrator(request: Request) -> SignUpOrchestrator:
    return request.app.state.orchestrator


def step_data(session: SignupWizardSession, confirmed_step: str | None = None) -> dict[str, Any]:
    """Navigation payload returned after a step changes."""
    return StepConfirmData(
        confirmed_step=confirmed_step,
        current_step=session.current_step,
        current_step_name=session.current_step_name,
        step_prompt=session.get_step_prompt(),
        completed_steps=session.completed_steps,
    ).model_dump()
