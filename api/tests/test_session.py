"""
Tests for secure session management utilities.
"""

from unittest.mock import Mock, patch

import pytest
from itsdangerous import BadSignature, SignatureExpired
from starlette.requests import Request

from app.api.common.utils import SIGNUP_SESSION_KEY, get_session_or_ip
from app.api.session import SecureSessionManager
from app.api.signup_workflow.validators import validate_session_id


@pytest.fixture
def session_manager():
    """Provide SecureSessionManager instance for testing."""
    return SecureSessionManager("test-secret-key", max_age=3600)


@pytest.fixture
def mock_request():
    """Provide mock request with session."""
    request = Mock(spec=Request)
    request.session = {}
    return request


class TestSecureSessionManager:
    """Test secure session management functionality."""

    def test_init(self):
        manager = SecureSessionManager("secret", max_age=1800)

        assert manager.max_age == 1800
        assert manager.serializer.secret_key == b"secret"

    def test_set_and_get_session_data(self, session_manager, mock_request):
        """Test storing and retrieving session data."""
        session_manager.set_session_data(mock_request, "test_key", {"key": "value", "number": 42})

        assert session_manager.get_session_data(mock_request, "test_key") == {
            "key": "value",
            "number": 42,
        }
        # stored value is signed, not the raw data
        assert mock_request.session["test_key"] != {"key": "value", "number": 42}

    def test_get_nonexistent_session_data(self, session_manager, mock_request):
        assert session_manager.get_session_data(mock_request, "nonexistent") is None

    def test_clear_session_data(self, session_manager, mock_request):
        session_manager.set_session_data(mock_request, "test_key", {"key": "value"})
        session_manager.clear_session_data(mock_request, "test_key")

        assert session_manager.get_session_data(mock_request, "test_key") is None

    def test_invalid_signature_handling(self, session_manager, mock_request):
        """Test handling of tampered session data."""
        mock_request.session["test_key"] = "invalid.signature.data"

        with patch.object(
            session_manager.serializer, "loads", side_effect=BadSignature("Bad signature")
        ):
            result = session_manager.get_session_data(mock_request, "test_key")

        assert result is None
        assert "test_key" not in mock_request.session

    def test_expired_signature_handling(self, session_manager, mock_request):
        """Test handling of expired session data."""
        mock_request.session["test_key"] = "expired.signature.data"

        with patch.object(
            session_manager.serializer, "loads", side_effect=SignatureExpired("Signature expired")
        ):
            result = session_manager.get_session_data(mock_request, "test_key")

        assert result is None
        assert "test_key" not in mock_request.session

    def test_data_signed_with_other_key_is_rejected(self, session_manager, mock_request):
        SecureSessionManager("other-secret").set_session_data(mock_request, "test_key", "x")

        assert session_manager.get_session_data(mock_request, "test_key") is None

    def test_serialization_error_handling(self, session_manager, mock_request):
        class UnserializableClass:
            pass

        with pytest.raises(Exception):
            session_manager.set_session_data(mock_request, "test_key", UnserializableClass())


class TestSignupSessionBinding:
    def test_remember_signup_session(self, session_manager, mock_request):
        session_manager.remember_signup_session(mock_request, "abc")

        assert session_manager.get_signup_session_id(mock_request) == "abc"
        assert SIGNUP_SESSION_KEY in mock_request.session

    def test_no_signup_session(self, session_manager, mock_request):
        assert session_manager.get_signup_session_id(mock_request) is None


class TestCSRF:
    def test_token_is_stable_per_session(self, session_manager, mock_request):
        token = session_manager.get_or_create_csrf_token(mock_request)

        assert token
        assert session_manager.get_or_create_csrf_token(mock_request) == token

    def test_validate(self, session_manager, mock_request):
        token = session_manager.get_or_create_csrf_token(mock_request)

        assert session_manager.validate_csrf_token(mock_request, token)
        assert not session_manager.validate_csrf_token(mock_request, "wrong")
        assert not session_manager.validate_csrf_token(mock_request, None)

    def test_validate_without_issued_token(self, session_manager, mock_request):
        assert not session_manager.validate_csrf_token(mock_request, "anything")


class TestRateLimitKey:
    def test_uses_signup_session(self, mock_request):
        mock_request.session = {SIGNUP_SESSION_KEY: "signed-value"}

        assert get_session_or_ip(mock_request) == "session:signed-value"

    def test_falls_back_to_ip(self, mock_request):
        mock_request.client = Mock(host="10.0.0.1")

        assert get_session_or_ip(mock_request) == "10.0.0.1"


class TestValidateSessionId:
    def test_valid_uuid4(self):
        assert validate_session_id("3f2b8c1e-4d5a-4b6c-8d7e-9f0a1b2c3d4e")["is_valid"]

    @pytest.mark.parametrize("session_id", [None, "", "not-a-uuid", "3f2b8c1e-4d5a-1b6c-8d7e-9f0a1b2c3d4e"])
    def test_invalid(self, session_id):
        result = validate_session_id(session_id)

        assert not result["is_valid"]
        assert result["error"]
