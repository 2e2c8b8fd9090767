"""
Validators package for the sign-up workflow.
Provides field-level and session-level validation utilities.
"""

from .field_validators import (
    sanitize_email,
    sanitize_middle_initial,
    sanitize_name,
    sanitize_optional_name,
)
from .session_validators import validate_session_id

__all__ = [
    # Field validators
    "sanitize_email",
    "sanitize_middle_initial",
    "sanitize_name",
    "sanitize_optional_name",
    # Session validators
    "validate_session_id",
]
