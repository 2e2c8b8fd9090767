"""
Step processing for the sign-up wizard.

Each handler validates its step's input, merges it into the wizard data
and advances the wizard. WizardState itself never validates.
"""

import logging

from pydantic import ValidationError

from app.api.workflow_base.exceptions import StepValidationException

from .models import AccountStep, CommitteeStep, CommitteeType
from .session_store import SignupWizardSession
from .validators import (
    sanitize_email,
    sanitize_middle_initial,
    sanitize_name,
    sanitize_optional_name,
)

logger = logging.getLogger(__name__)


def _first_error(step: str, error: ValidationError) -> StepValidationException:
    # Extract the most relevant error
    detail = error.errors()[0] if error.errors() else {"msg": "Validation failed"}
    loc = detail.get("loc") or ("unknown",)
    message = str(detail.get("msg", "Please provide valid information")).removeprefix("Value error, ")
    return StepValidationException(step=step, field=str(loc[0]), validation_error=message)


def process_account_step(session: SignupWizardSession, email: str, password: str) -> AccountStep:
    """Step 1: store credentials and move to the committee step."""
    session.require_step("account")

    try:
        email = sanitize_email(email)
    except ValueError as e:
        raise StepValidationException(step="account", field="email", validation_error=str(e))

    try:
        account = AccountStep(email=email, password=password)
    except ValidationError as e:
        raise _first_error("account", e)

    session.update_data({"email": str(account.email), "password": account.password})
    session.mark_step_complete("account")
    session.advance()
    logger.info(f"Account step completed for session {session.session_id}")
    return account


def process_committee_step(
    session: SignupWizardSession,
    committee_type: str,
    organization_name: str | None = None,
    candidate_first_name: str | None = None,
    candidate_middle_initial: str | None = None,
    candidate_last_name: str | None = None,
    candidate_suffix: str | None = None,
) -> CommitteeStep:
    """Step 2: store committee details and move to the voicemail step."""
    session.require_step("committee")

    if committee_type not in {t.value for t in CommitteeType}:
        raise StepValidationException(
            step="committee",
            field="committee_type",
            validation_error="Please choose either organization or candidate.",
        )

    try:
        if committee_type == CommitteeType.ORGANIZATION.value:
            fields = {"organization_name": sanitize_name(organization_name or "", "Organization name")}
        else:
            fields = {
                "candidate_first_name": sanitize_name(candidate_first_name or "", "First name"),
                "candidate_middle_initial": sanitize_middle_initial(candidate_middle_initial),
                "candidate_last_name": sanitize_optional_name(candidate_last_name, "Last name"),
                "candidate_suffix": sanitize_optional_name(candidate_suffix, "Suffix"),
            }
    except ValueError as e:
        raise StepValidationException(step="committee", validation_error=str(e))

    try:
        committee = CommitteeStep(committee_type=committee_type, **fields)
    except ValidationError as e:
        raise _first_error("committee", e)

    session.update_data(committee.to_wizard_update())
    session.mark_step_complete("committee")
    session.advance()
    logger.info(f"Committee step completed for session {session.session_id}")
    return committee
