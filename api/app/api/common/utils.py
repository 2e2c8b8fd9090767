"""
Common utility functions shared across the application.
"""

from fastapi import Request
from slowapi.util import get_remote_address

SIGNUP_SESSION_KEY = "signup_session_id"


def get_session_or_ip(request: Request) -> str:
    """Get the signed wizard session value for rate limiting, fallback to IP."""
    try:
        session = request.session
        if session and session.get(SIGNUP_SESSION_KEY):
            return f"session:{session[SIGNUP_SESSION_KEY]}"
    except (AttributeError, KeyError, AssertionError):
        pass
    return get_remote_address(request)
