"""
Pydantic schemas for API responses.

These schemas define the structure of JSON responses for the sign-up API.
"""

from typing import Any

from pydantic import BaseModel, Field


# Workflow response schemas
class WorkflowInitData(BaseModel):
    """Workflow initialization response data."""

    session_id: str
    current_step: int
    current_step_name: str
    step_prompt: str
    workflow_steps: list[str]
    csrf_token: str | None = None


class StepConfirmData(BaseModel):
    """Step completion / navigation response data."""

    confirmed_step: str | None = None
    current_step: int
    current_step_name: str
    step_prompt: str
    completed_steps: list[str]


class RecordingData(BaseModel):
    """Recording progress response data."""

    recording: bool
    size: int = 0
    captured: bool = False


class VoicemailData(BaseModel):
    """Pending voicemail response data."""

    voicemail: dict[str, Any] | None = None
    replaced_recording: bool = False


class SignUpResultData(BaseModel):
    """Sign-up submission response data."""

    status: str
    message: str
    user_id: str | None = None
    redirect_to: str | None = None
    current_step: int
    details: dict[str, Any] = Field(default_factory=dict)
