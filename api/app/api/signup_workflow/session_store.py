"""
Session management for the sign-up workflow.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from app.api.voicemail import AudioCaptureSource, FileSelectionSource, VoicemailInputResolver
from app.api.workflow_base import BaseWorkflowSession, WorkflowStatus
from app.api.workflow_base.exceptions import (
    SessionExpiredException,
    SessionNotFoundException,
    StepValidationException,
)

from .config import SignupWorkflowConfig, get_signup_config
from .models import OrchestratorState, RunContext, WizardData

logger = logging.getLogger(__name__)

# In-memory session storage (for simplicity)
# In production, consider Redis or database storage
_sessions: dict[str, "SignupWizardSession"] = {}


class SignupWizardSession(BaseWorkflowSession):
    """Sign-up wizard state: accumulated form data plus the step pointer."""

    def __init__(self, session_id: str | None = None, config: SignupWorkflowConfig | None = None):
        self.config = config or get_signup_config()
        super().__init__(session_id)
        self.data = WizardData()
        self.resolver = VoicemailInputResolver(
            AudioCaptureSource(max_size=self.config.max_file_upload_size),
            FileSelectionSource(
                self.config.accepted_audio_types, max_size=self.config.max_file_upload_size
            ),
            recording_replaces_file=self.config.recording_replaces_file,
        )
        self.run_context = RunContext()

    def get_workflow_steps(self) -> list[str]:
        """Return ordered list of workflow steps."""
        return self.config.get_workflow_steps()

    def update_data(self, partial: dict[str, Any]) -> WizardData:
        """Shallow-merge fields into the wizard data. Unmentioned fields are kept."""
        merged = self.data.model_dump()
        merged.update(partial)
        self.data = WizardData.model_validate(merged)
        self.touch()
        return self.data

    def sync_voicemail(self) -> None:
        """Store the resolver's current payload (or None) in the wizard data."""
        self.update_data({"voicemail_payload": self.resolver.resolve()})

    def clear_voicemail(self) -> None:
        self.resolver.clear()
        self.update_data({"voicemail_payload": None})

    def reset(self) -> None:
        """Restore empty data and the first step."""
        self.data = WizardData()
        self.resolver.clear()
        self.run_context = RunContext()
        self.reset_navigation()

    @property
    def status(self) -> WorkflowStatus:
        if self.run_context.submitting:
            return WorkflowStatus.SUBMITTING
        if self.run_context.state == OrchestratorState.FAILED:
            return WorkflowStatus.ERROR
        return WorkflowStatus.IN_PROGRESS

    def require_step(self, step: str) -> None:
        """Reject an action that belongs to a step other than the active one."""
        if self.current_step_name != step:
            raise StepValidationException(
                step=step,
                field="step",
                validation_error=(
                    f"The {step} step is not active. Current step: {self.current_step_name}."
                ),
            )

    def get_step_prompt(self) -> str:
        """Get the prompt for the current step."""
        return self.config.get_step_prompts().get(self.current_step_name, "Unknown step")

    def get_summary(self) -> dict[str, Any]:
        """Get a summary of collected sign-up data."""
        base_summary = self.to_dict()  # Use parent's serialization
        base_summary.update(
            {
                "status": self.status.value,
                "step_prompt": self.get_step_prompt(),
                "wizard_data": self.data.summary(),
                "is_recording": self.resolver.is_recording,
                "submitting": self.run_context.submitting,
                "submission_state": self.run_context.state.value,
            }
        )
        return base_summary


# Session management functions
def create_signup_session(config: SignupWorkflowConfig | None = None) -> SignupWizardSession:
    """Create and register a new sign-up wizard session."""
    session = SignupWizardSession(config=config)
    _sessions[session.session_id] = session
    logger.info(f"Created new session: {session.session_id}")
    return session


def get_signup_session(session_id: str) -> SignupWizardSession:
    """
    Look up an active sign-up session.

    Raises:
        SessionNotFoundException: If the id is unknown
        SessionExpiredException: If the session has been idle too long
    """
    session = _sessions.get(session_id)
    if session is None:
        raise SessionNotFoundException(session_id)

    timeout = timedelta(minutes=session.config.session_timeout_minutes)
    if datetime.now(UTC) - session.updated_at > timeout and not session.run_context.submitting:
        logger.info(f"Session {session_id} expired")
        del _sessions[session_id]
        raise SessionExpiredException(session_id)

    return session


def discard_signup_session(session_id: str) -> bool:
    """Drop a session when the user abandons the wizard."""
    return _sessions.pop(session_id, None) is not None


def cleanup_expired_sessions() -> int:
    """Remove expired sessions from memory."""
    current_time = datetime.now(UTC)
    expired = [
        sid
        for sid, s in _sessions.items()
        if current_time - s.updated_at > timedelta(minutes=s.config.session_timeout_minutes)
        and not s.run_context.submitting
    ]
    for session_id in expired:
        del _sessions[session_id]
        logger.info(f"Cleaned up expired session: {session_id}")
    return len(expired)
