"""
Sign-up workflow module: account, committee and voicemail steps.
"""

from .config import CompensationStrategy, SignupWorkflowConfig, get_signup_config
from .models import (
    CommitteeType,
    OrchestratorState,
    OutcomeStatus,
    RunContext,
    SignUpOutcome,
    WizardData,
)
from .orchestrator import SignUpOrchestrator, build_organizational_record
from .session_store import SignupWizardSession, create_signup_session, get_signup_session

__all__ = [
    "CommitteeType",
    "CompensationStrategy",
    "OrchestratorState",
    "OutcomeStatus",
    "RunContext",
    "SignUpOrchestrator",
    "SignUpOutcome",
    "SignupWizardSession",
    "SignupWorkflowConfig",
    "WizardData",
    "build_organizational_record",
    "create_signup_session",
    "get_signup_config",
    "get_signup_session",
]
