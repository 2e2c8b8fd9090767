"""
Secure session management utilities for the sign-up wizard.
"""

import logging
import secrets
from typing import Any

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from starlette.requests import Request

from app.api.common.utils import SIGNUP_SESSION_KEY

logger = logging.getLogger(__name__)


class SecureSessionManager:
    """Secure session management using signed cookies."""

    def __init__(self, secret_key: str, max_age: int = 3600):
        """
        Initialize session manager with signing key.

        Args:
            secret_key: Secret key for signing session cookies
            max_age: Session expiration time in seconds
        """
        self.serializer = URLSafeTimedSerializer(secret_key)
        self.max_age = max_age

    def get_session_data(self, request: Request, key: str) -> Any | None:
        """
        Safely retrieve data from session.

        Args:
            request: FastAPI request object
            key: Session key to retrieve

        Returns:
            Session data if exists and valid, None otherwise
        """
        session_data = request.session.get(key)
        if session_data is None:
            return None

        try:
            # Verify signature and expiration
            return self.serializer.loads(session_data, max_age=self.max_age)

        except (BadSignature, SignatureExpired) as e:
            logger.warning(f"Invalid session data for key {key}: {e}")
            # Clear invalid session data
            request.session.pop(key, None)
            return None

    def set_session_data(self, request: Request, key: str, data: Any) -> None:
        """
        Securely store data in session with signature.

        Args:
            request: FastAPI request object
            key: Session key to store
            data: Data to store in session
        """
        try:
            request.session[key] = self.serializer.dumps(data)
        except Exception as e:
            logger.error(f"Error storing session data: {e}")
            raise

    def clear_session_data(self, request: Request, key: str) -> None:
        """
        Clear specific session data.

        Args:
            request: FastAPI request object
            key: Session key to clear
        """
        request.session.pop(key, None)

    def remember_signup_session(self, request: Request, session_id: str) -> None:
        """Bind a wizard session to the browser session."""
        self.set_session_data(request, SIGNUP_SESSION_KEY, session_id)

    def get_signup_session_id(self, request: Request) -> str | None:
        return self.get_session_data(request, SIGNUP_SESSION_KEY)

    def get_or_create_csrf_token(self, request: Request) -> str:
        """
        Get existing or create new CSRF token.

        Args:
            request: FastAPI request object

        Returns:
            CSRF token string
        """
        token = self.get_session_data(request, "csrf_token")
        if not token:
            token = secrets.token_urlsafe(32)
            self.set_session_data(request, "csrf_token", token)
        return token

    def validate_csrf_token(self, request: Request, token: str | None) -> bool:
        """
        Validate CSRF token from request.

        Args:
            request: FastAPI request object
            token: CSRF token to validate

        Returns:
            True if token is valid, False otherwise
        """
        if not token:
            return False
        stored_token = self.get_session_data(request, "csrf_token")
        return bool(stored_token) and secrets.compare_digest(stored_token, token)
