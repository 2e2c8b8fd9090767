"""
Custom exceptions for the sign-up workflow.
Provides a hierarchy of exceptions for better error handling.
"""

from typing import Any


class WorkflowException(Exception):
    """Base exception for all workflow-related errors."""

    error_code = "WORKFLOW_ERROR"
    status_code = 500

    def __init__(
        self,
        message: str,
        step: str | None = None,
        details: dict[str, Any] | None = None,
        user_message: str | None = None,
    ):
        """
        Initialize workflow exception.

        Args:
            message: Technical error message for logging
            step: Workflow step where error occurred
            details: Additional error details
            user_message: User-friendly message to display
        """
        self.message = message
        self.step = step
        self.details = details or {}
        self.user_message = user_message or "An error occurred. Please try again."
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.user_message,
            "step": self.step,
            "details": self.details,
        }


class SessionException(WorkflowException):
    """Base exception for session-related errors."""


class SessionExpiredException(SessionException):
    """Raised when a session has expired."""

    error_code = "SESSION_EXPIRED"
    status_code = 410

    def __init__(self, session_id: str):
        super().__init__(
            message=f"Session {session_id} has expired",
            user_message="Your session has expired. Please start over.",
            details={"session_id": session_id},
        )


class SessionNotFoundException(SessionException):
    """Raised when a session cannot be found."""

    error_code = "SESSION_NOT_FOUND"
    status_code = 404

    def __init__(self, session_id: str):
        super().__init__(
            message=f"Session {session_id} not found",
            user_message="Session not found. Please start a new session.",
            details={"session_id": session_id},
        )


class CSRFValidationException(SessionException):
    """Raised when a mutating request carries no valid CSRF token."""

    error_code = "INVALID_CSRF"
    status_code = 403

    def __init__(self):
        super().__init__(
            message="Missing or invalid CSRF token",
            user_message="Invalid security token. Please refresh the page.",
        )


class StepValidationException(WorkflowException):
    """Raised when step validation fails."""

    error_code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, step: str, field: str | None = None, validation_error: str | None = None):
        super().__init__(
            message=f"Validation failed for step {step}",
            step=step,
            user_message=validation_error or "Please check your input and try again.",
            details={"field": field, "validation_error": validation_error},
        )
        self.field = field


class VoicemailValidationError(StepValidationException):
    """Raised for unsupported audio, oversized audio or a missing required voicemail."""

    def __init__(self, validation_error: str, field: str = "voicemail"):
        super().__init__(step="voicemail", field=field, validation_error=validation_error)


class RecordingError(VoicemailValidationError):
    """Raised when a recording is started or stopped out of order."""

    def __init__(self, validation_error: str):
        super().__init__(validation_error, field="recording")


class SubmissionInProgressError(WorkflowException):
    """Raised when a second submission is attempted while one is in flight."""

    error_code = "SUBMISSION_IN_PROGRESS"
    status_code = 409

    def __init__(self, session_id: str | None = None):
        super().__init__(
            message=f"Submission already in progress for session {session_id}",
            user_message="Your sign up is already being processed. Please wait.",
            details={"session_id": session_id},
        )


class ExternalServiceException(WorkflowException):
    """Base exception for external service errors."""

    error_code = "BACKEND_ERROR"
    status_code = 502

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
        response: dict | None = None,
        user_message: str | None = None,
    ):
        super().__init__(
            message=f"{service} error: {message}",
            user_message=user_message or f"Service error: {service}. Please try again later.",
            details={"service": service, "status_code": status_code, "response": response},
        )
        self.service = service
        self.backend_status = status_code
        self.reason = message


class BackendError(ExternalServiceException):
    """Raised by backend adapters when an identity, table or storage call fails."""

    def __init__(
        self,
        service: str,
        operation: str,
        error_message: str,
        status_code: int | None = None,
        backend_error: dict | None = None,
    ):
        super().__init__(
            service=service,
            message=f"{operation} failed: {error_message}",
            status_code=status_code,
            response=backend_error,
            user_message=error_message,
        )
        self.operation = operation


class SignUpError(WorkflowException):
    """Base exception for failures of the sign-up sequence."""

    error_code = "SIGNUP_ERROR"
    status_code = 502
    stage = "signup"

    def __init__(self, user_message: str, cause: Exception | None = None):
        super().__init__(
            message=f"{self.stage} failed: {cause or user_message}",
            step=self.stage,
            user_message=user_message,
            details={"cause": str(cause) if cause else None},
        )
        self.cause = cause


class IdentityCreationError(SignUpError):
    """The identity provider errored or returned no identity."""

    error_code = "IDENTITY_CREATION_FAILED"
    stage = "identity"


class RecordCreationError(SignUpError):
    """The organizational record could not be inserted."""

    error_code = "RECORD_CREATION_FAILED"
    stage = "committee"


class UploadError(SignUpError):
    """The voicemail could not be stored or recorded."""

    error_code = "VOICEMAIL_UPLOAD_FAILED"
    stage = "voicemail"


class ProvisioningError(UploadError):
    """The voicemail storage bucket could not be listed or created."""

    error_code = "STORAGE_PROVISIONING_FAILED"

