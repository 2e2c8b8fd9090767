"""
Sign-up orchestration: identity, committee record, then the voicemail.

The first two stages are required and abort the submission on failure.
The voicemail stage is best-effort unless the workflow is configured to
require a voicemail.
"""

import logging
from typing import Any

from app.api.voicemail import VoicemailUploadPipeline
from app.api.workflow_base.backends import Identity, IdentityProvider, RecordStore
from app.api.workflow_base.exceptions import (
    BackendError,
    IdentityCreationError,
    RecordCreationError,
    SignUpError,
    SubmissionInProgressError,
    UploadError,
    VoicemailValidationError,
)

from .config import CompensationStrategy, SignupWorkflowConfig, get_signup_config
from .models import (
    CANDIDATE_FIELDS,
    ORGANIZATION_FIELDS,
    CommitteeType,
    OrchestratorState,
    OutcomeStatus,
    RunContext,
    SignUpOutcome,
    WizardData,
)
from .session_store import SignupWizardSession

logger = logging.getLogger(__name__)


def build_organizational_record(owner_id: str, data: WizardData) -> dict[str, Any]:
    """
    Build the committee row for an owner.

    Only the fields of the selected committee type carry values; the other
    type's fields are always None.
    """
    is_organization = data.committee_type == CommitteeType.ORGANIZATION
    is_candidate = data.committee_type == CommitteeType.CANDIDATE

    record: dict[str, Any] = {
        "user_id": owner_id,
        "type": data.committee_type.value if data.committee_type else None,
    }
    for field in ORGANIZATION_FIELDS:
        record[field] = getattr(data, field) if is_organization else None
    for field in CANDIDATE_FIELDS:
        record[field] = getattr(data, field) if is_candidate else None
    return record


class SignUpOrchestrator:
    """Drives the terminal wizard step against the backend collaborators."""

    def __init__(
        self,
        identity_provider: IdentityProvider,
        record_store: RecordStore,
        upload_pipeline: VoicemailUploadPipeline,
        config: SignupWorkflowConfig | None = None,
    ):
        self.identity_provider = identity_provider
        self.record_store = record_store
        self.upload_pipeline = upload_pipeline
        self.config = config or get_signup_config()
        self.messages = self.config.get_error_messages()

    async def complete(
        self,
        wizard: SignupWizardSession,
        context: RunContext,
        allow_missing_voicemail: bool = False,
    ) -> SignUpOutcome:
        """
        Run the sign-up for a wizard snapshot.

        Args:
            wizard: Wizard session; reset on completion, left untouched on failure
            context: Submission context owned by the caller
            allow_missing_voicemail: Skip the required-voicemail check (explicit skip)

        Returns:
            SignUpOutcome with status success, warning or failure

        Raises:
            SubmissionInProgressError: If context already has a submission in flight
            VoicemailValidationError: If a voicemail is required but missing
        """
        if context.submitting:
            raise SubmissionInProgressError(wizard.session_id)

        data = wizard.data.model_copy()
        if (
            self.config.voicemail_required
            and data.voicemail_payload is None
            and not allow_missing_voicemail
        ):
            raise VoicemailValidationError(self.messages["missing_voicemail"])

        context.submitting = True
        context.warnings = []
        context.history = []
        context.transition(OrchestratorState.IDLE)
        try:
            identity = await self._ensure_identity(data, context)
            await self._ensure_organizational_record(identity, data, context)
            warning = await self._store_voicemail(identity, data, context)
        except SignUpError as e:
            context.transition(OrchestratorState.FAILED)
            logger.error(f"Sign up process error: {e}")
            details = await self._compensate(context, e)
            return SignUpOutcome(
                status=OutcomeStatus.FAILURE,
                message=e.user_message or self.messages["signup_failed"],
                error_code=e.error_code,
                user_id=context.identity.id if context.identity else None,
                details=details,
            )
        finally:
            context.submitting = False

        context.transition(OrchestratorState.COMPLETED)
        wizard.reset()
        logger.info(f"Sign up completed for user {identity.id}")

        if warning:
            return SignUpOutcome(
                status=OutcomeStatus.WARNING,
                message=self.messages["voicemail_warning"] + warning.user_message,
                error_code=warning.error_code,
                user_id=identity.id,
                redirect_to=self.config.signin_path,
            )
        return SignUpOutcome(
            status=OutcomeStatus.SUCCESS,
            message=self.messages["signup_success"],
            user_id=identity.id,
            redirect_to=self.config.signin_path,
        )

    async def _ensure_identity(self, data: WizardData, context: RunContext) -> Identity:
        if context.identity is not None:
            if context.identity.email == data.email:
                logger.info(f"Reusing identity {context.identity.id} from previous attempt")
                return context.identity
            logger.warning(
                f"Email changed since identity {context.identity.id} was created; "
                "the earlier identity is left without a committee"
            )
            context.identity = None
            context.committed_record = None

        context.transition(OrchestratorState.CREATING_IDENTITY)
        password = data.password.get_secret_value() if data.password else ""
        try:
            identity = await self.identity_provider.create_identity(data.email or "", password)
        except BackendError as e:
            raise IdentityCreationError(e.user_message, e) from e

        if identity is None:
            raise IdentityCreationError(self.messages["missing_identity"])

        if identity.email is None:
            identity = identity.model_copy(update={"email": data.email})
        context.identity = identity
        logger.info(f"Created identity {identity.id}")
        return identity

    async def _ensure_organizational_record(
        self, identity: Identity, data: WizardData, context: RunContext
    ) -> None:
        record = build_organizational_record(identity.id, data)
        if context.committed_record == record:
            logger.info(f"Committee for {identity.id} already stored by previous attempt")
            return

        context.transition(OrchestratorState.CREATING_ORGANIZATIONAL_RECORD)
        try:
            if context.committed_record is not None:
                logger.info(f"Committee details changed; replacing record for {identity.id}")
                await self.record_store.delete(
                    self.config.committees_table, {"user_id": identity.id}
                )
                context.committed_record = None
            await self.record_store.insert(self.config.committees_table, record)
        except BackendError as e:
            raise RecordCreationError(e.user_message, e) from e

        context.committed_record = record
        logger.info(f"Created committee record for {identity.id}")

    async def _store_voicemail(
        self, identity: Identity, data: WizardData, context: RunContext
    ) -> UploadError | None:
        """Upload the voicemail and insert its row. Returns the error when best-effort."""
        if data.voicemail_payload is None:
            return None

        context.transition(OrchestratorState.UPLOADING_VOICEMAIL)
        logger.info("Starting voicemail upload process")
        try:
            reference = await self.upload_pipeline.upload(
                identity.id, data.voicemail_payload.resolve()
            )
            try:
                await self.record_store.insert(
                    self.config.voicemails_table,
                    {
                        "user_id": identity.id,
                        "file_path": reference,
                        "name": self.config.default_voicemail_name,
                        "is_default": True,
                    },
                )
            except BackendError as e:
                logger.error(f"Voicemail record error: {e}")
                raise UploadError(e.user_message, e) from e
        except UploadError as e:
            if self.config.voicemail_required:
                raise
            logger.warning(f"Error with storage or voicemail: {e}")
            context.warnings.append(e.user_message)
            return e

        logger.info("Voicemail record created successfully")
        return None

    async def _compensate(self, context: RunContext, error: SignUpError) -> dict[str, Any]:
        """Apply the configured recovery for a failure after the identity exists."""
        details: dict[str, Any] = {"stage": error.stage}
        identity = context.identity
        if identity is None:
            return details

        if self.config.compensation_strategy == CompensationStrategy.RESUME:
            details["resumable"] = True
            return details

        if context.committed_record is not None:
            try:
                await self.record_store.delete(
                    self.config.committees_table, {"user_id": identity.id}
                )
            except BackendError as e:
                logger.error(f"Could not remove committee for {identity.id}: {e}")
                details["compensation_error"] = e.user_message
                details["orphaned_identity"] = identity.id
                return details
            context.committed_record = None
            details["record_removed"] = True

        try:
            await self.identity_provider.delete_identity(identity.id)
        except BackendError as e:
            logger.error(f"Could not remove identity {identity.id} after failed sign up: {e}")
            details["compensation_error"] = e.user_message
            details["orphaned_identity"] = identity.id
            return details

        logger.info(f"Removed identity {identity.id} after failed sign up")
        context.identity = None
        details["identity_removed"] = True
        return details
