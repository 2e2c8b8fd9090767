"""
Response envelope helpers shared by all JSON endpoints.
"""

from typing import Any

from fastapi.responses import JSONResponse

from app.api.workflow_base.exceptions import WorkflowException


def json_success(data: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    Create a standard success response envelope.

    Args:
        data: Optional data payload

    Returns:
        Standardized success response dict
    """
    return {"success": True, "data": data, "error": None}


def json_error(
    code: str,
    message: str,
    field: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Create a standard error response envelope.

    Args:
        code: Error code (e.g., "VALIDATION_ERROR", "SESSION_NOT_FOUND")
        message: Human-readable error message
        field: Optional field name for validation errors
        details: Optional additional error details

    Returns:
        Standardized error response dict
    """
    error = {"code": code, "message": message}
    if field:
        error["field"] = field
    if details:
        error["details"] = details
    return {"success": False, "data": None, "error": error}


def workflow_error_response(exc: WorkflowException) -> JSONResponse:
    """Render a workflow exception as an error envelope with its HTTP status."""
    return JSONResponse(
        content=json_error(
            exc.error_code,
            exc.user_message,
            field=getattr(exc, "field", None),
            details=exc.to_dict(),
        ),
        status_code=exc.status_code,
    )
