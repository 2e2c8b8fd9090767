"""
Pydantic models for the sign-up workflow.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, SecretStr, model_validator

from app.api.voicemail.models import VoicemailPayload
from app.api.workflow_base.backends import Identity

CANDIDATE_FIELDS = (
    "candidate_first_name",
    "candidate_middle_initial",
    "candidate_last_name",
    "candidate_suffix",
)
ORGANIZATION_FIELDS = ("organization_name",)


class CommitteeType(str, Enum):
    """Kind of committee being registered."""

    ORGANIZATION = "organization"
    CANDIDATE = "candidate"


class WizardData(BaseModel):
    """Form data accumulated across the wizard steps."""

    model_config = ConfigDict(extra="forbid")

    email: str | None = None
    password: SecretStr | None = None
    committee_type: CommitteeType | None = None
    organization_name: str | None = None
    candidate_first_name: str | None = None
    candidate_middle_initial: str | None = None
    candidate_last_name: str | None = None
    candidate_suffix: str | None = None
    voicemail_payload: VoicemailPayload | None = None

    def summary(self) -> dict[str, Any]:
        """Serializable view with the password masked and audio bytes omitted."""
        data = self.model_dump(exclude={"password", "voicemail_payload"}, mode="json")
        data["has_password"] = self.password is not None
        data["voicemail"] = self.voicemail_payload.describe() if self.voicemail_payload else None
        return data


class AccountStep(BaseModel):
    """Step 1: account credentials."""

    email: EmailStr = Field(..., description="Sign-in email address")
    password: SecretStr = Field(..., min_length=6, max_length=72)


class CommitteeStep(BaseModel):
    """Step 2: committee details for the selected committee type."""

    committee_type: CommitteeType
    organization_name: str | None = None
    candidate_first_name: str | None = None
    candidate_middle_initial: str | None = Field(None, max_length=1)
    candidate_last_name: str | None = None
    candidate_suffix: str | None = None

    @model_validator(mode="after")
    def check_type_fields(self) -> "CommitteeStep":
        if self.committee_type == CommitteeType.ORGANIZATION and not self.organization_name:
            raise ValueError("Organization name is required")
        if self.committee_type == CommitteeType.CANDIDATE and not self.candidate_first_name:
            raise ValueError("Candidate first name is required")
        return self

    def to_wizard_update(self) -> dict[str, Any]:
        """
        Fields to merge into WizardData.

        Fields of the other committee type are set to None explicitly so that
        switching type never leaves stale values behind.
        """
        update: dict[str, Any] = {"committee_type": self.committee_type}
        if self.committee_type == CommitteeType.ORGANIZATION:
            kept, cleared = ORGANIZATION_FIELDS, CANDIDATE_FIELDS
        else:
            kept, cleared = CANDIDATE_FIELDS, ORGANIZATION_FIELDS
        for field in kept:
            update[field] = getattr(self, field)
        for field in cleared:
            update[field] = None
        return update



class OrchestratorState(str, Enum):
    """Stages of a sign-up submission."""

    IDLE = "idle"
    CREATING_IDENTITY = "creating_identity"
    CREATING_ORGANIZATIONAL_RECORD = "creating_organizational_record"
    UPLOADING_VOICEMAIL = "uploading_voicemail"
    COMPLETED = "completed"
    FAILED = "failed"


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    FAILURE = "failure"


class SignUpOutcome(BaseModel):
    """Aggregate result of a sign-up submission."""

    status: OutcomeStatus
    message: str
    error_code: str | None = None
    user_id: str | None = None
    redirect_to: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)

    @property
    def completed(self) -> bool:
        return self.status != OutcomeStatus.FAILURE


class RunContext(BaseModel):
    """
    Per-session submission context.

    submitting is true while a submission is in flight; callers must not
    start another submission or navigate back until it clears. identity and
    committed_record checkpoint committed stages so a retry can resume;
    committed_record is the committee row exactly as it was stored.
    """

    submitting: bool = False
    state: OrchestratorState = OrchestratorState.IDLE
    history: list[OrchestratorState] = Field(default_factory=list)
    identity: Identity | None = None
    committed_record: dict[str, Any] | None = None
    warnings: list[str] = Field(default_factory=list)

    def transition(self, state: OrchestratorState) -> None:
        self.state = state
        self.history.append(state)
