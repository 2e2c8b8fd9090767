"""
Application settings and the Supabase identity provider.
"""

import logging
from collections.abc import Awaitable, Callable

import httpx
from pydantic_settings import BaseSettings, SettingsConfigDict
from supabase import AsyncClient

from app.api.signup_workflow.supabase_service import to_backend_error
from app.api.workflow_base.backends import Identity, IdentityProvider
from app.api.workflow_base.exceptions import BackendError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings with environment variable validation."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    supabase_url: str = ""
    supabase_service_key: str = ""
    session_secret_key: str = "change-me"
    debug: bool = False
    app_name: str = "Callback Engine"
    cors_origins: str = "http://localhost:3000,http://localhost:8000"


class SupabaseIdentityProvider(IdentityProvider):
    """
    Creates users through Supabase Auth.

    client is the shared service-role client, used for admin calls.
    sign_up_client_factory returns a fresh client for each sign up.
    """

    def __init__(
        self,
        client: AsyncClient,
        sign_up_client_factory: Callable[[], Awaitable[AsyncClient]],
    ):
        self.client = client
        self.sign_up_client_factory = sign_up_client_factory

    async def create_identity(self, email: str, password: str) -> Identity | None:
        """
        Register a user with email and password.

        Args:
            email: Sign-in email
            password: Plain password, forwarded to Supabase only

        Returns:
            Identity for the new user, or None if Supabase returned no user

        Raises:
            BackendError: If Supabase rejects the sign up
        """
        logger.info(f"Creating identity for {email}")
        sign_up_client = await self.sign_up_client_factory()
        try:
            response = await sign_up_client.auth.sign_up({"email": email, "password": password})
        except httpx.TimeoutException as e:
            logger.error("Supabase auth request timed out")
            raise BackendError(
                "Supabase Auth", "sign up", "The sign up request timed out. Please try again."
            ) from e
        except Exception as e:
            logger.error(f"Supabase sign up failed: {e}")
            raise to_backend_error("Supabase Auth", "sign up", e) from e

        user = getattr(response, "user", None)
        if user is None:
            logger.error("No user returned in sign up response")
            return None

        return Identity(id=str(user.id), email=getattr(user, "email", None) or email)

    async def delete_identity(self, identity_id: str) -> None:
        """Delete a user with the service-role admin API."""
        try:
            await self.client.auth.admin.delete_user(identity_id)
        except Exception as e:
            logger.error(f"Supabase delete user {identity_id} failed: {e}")
            raise to_backend_error("Supabase Auth", "delete user", e) from e
