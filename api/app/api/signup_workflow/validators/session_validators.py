"""
Session validators for the sign-up workflow.
"""

import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

UUID4_PATTERN = r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$"


def validate_session_id(session_id: str | None) -> dict[str, Any]:
    """
    Validate session ID format.

    Args:
        session_id: Session ID to validate

    Returns:
        Dict with validation result and details
    """
    result = {"is_valid": False, "error": None, "session_id": session_id}

    if not session_id:
        result["error"] = "Session ID is required"
        return result

    # UUID v4 format validation
    if not re.match(UUID4_PATTERN, session_id.lower()):
        result["error"] = "Invalid session ID format"
        return result

    result["is_valid"] = True
    return result
