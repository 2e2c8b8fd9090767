"""
Common utilities shared across the application.
"""

from app.api.common.responses import (
    json_error,
    json_success,
    workflow_error_response,
)
from app.api.common.schemas import (
    RecordingData,
    SignUpResultData,
    StepConfirmData,
    VoicemailData,
    WorkflowInitData,
)
from app.api.common.utils import get_session_or_ip

__all__ = [
    # Responses
    "json_error",
    "json_success",
    "workflow_error_response",
    # Schemas
    "RecordingData",
    "SignUpResultData",
    "StepConfirmData",
    "VoicemailData",
    "WorkflowInitData",
    # Utils
    "get_session_or_ip",
]
