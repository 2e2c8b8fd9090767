"""
Configuration for the sign-up workflow.
Centralizes steps, prompts, voicemail handling and rate limits.
"""

from enum import Enum
from functools import lru_cache

from app.api.workflow_base.config import BaseWorkflowConfig


class CompensationStrategy(str, Enum):
    """How a sign-up that failed after creating the identity is recovered."""

    RESUME = "resume"
    DELETE_IDENTITY = "delete_identity"


class SignupWorkflowConfig(BaseWorkflowConfig):
    """Configuration specific to the sign-up workflow."""

    # Override base settings
    app_name: str = "Sign Up Workflow"

    committees_table: str = "committees"
    voicemails_table: str = "voicemails"
    voicemail_bucket: str = "voicemails"
    voicemail_cache_control: str = "3600"
    default_voicemail_name: str = "Default Voicemail"
    voicemail_required: bool = False
    recording_replaces_file: bool = False
    accepted_audio_types: set[str] = {"audio/mpeg", "audio/wav", "audio/x-aiff"}
    audio_extension_fallback: dict[str, str] = {
        "audio/webm": "webm",
        "audio/mpeg": "mp3",
        "audio/wav": "wav",
        "audio/x-aiff": "aiff",
    }
    generic_audio_extension: str = "audio"
    compensation_strategy: CompensationStrategy = CompensationStrategy.RESUME
    signin_path: str = "/auth/signin"

    # slowapi limit strings, read on every request
    signup_rate_limit: str = "5/minute"
    step_rate_limit: str = "30/minute"
    voicemail_upload_rate_limit: str = "10/minute"
    recording_chunk_rate_limit: str = "600/minute"

    def get_workflow_steps(self) -> list[str]:
        """Return ordered list of workflow steps."""
        return ["account", "committee", "voicemail"]

    def get_step_prompts(self) -> dict[str, str]:
        """Return prompts for each step."""
        return {
            "account": "Enter the email and password for your new account.",
            "committee": "Tell us whether you are signing up an organization or a candidate.",
            "voicemail": "Record or upload the voicemail donors will hear.",
        }

    def get_rate_limits(self) -> dict[str, str]:
        """Return rate limiting configuration."""
        return {
            "signup_submission": self.signup_rate_limit,
            "step_submission": self.step_rate_limit,
            "voicemail_upload": self.voicemail_upload_rate_limit,
            "recording_chunk": self.recording_chunk_rate_limit,
        }

    def get_error_messages(self) -> dict[str, str]:
        """Return custom error messages for the sign-up workflow."""
        base_messages = super().get_error_messages()
        base_messages.update(
            {
                "missing_identity": "Failed to create user account",
                "signup_failed": "An error occurred during the sign up process",
                "missing_voicemail": "Please record or upload a voicemail message.",
                "signup_success": (
                    "Your account has been created successfully. You can now sign in."
                ),
                "voicemail_warning": (
                    "Your account was created, but there was an issue with the voicemail: "
                ),
            }
        )
        return base_messages


@lru_cache
def get_signup_config() -> SignupWorkflowConfig:
    """Get cached sign-up workflow configuration."""
    return SignupWorkflowConfig()
