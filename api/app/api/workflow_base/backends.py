"""
Backend collaborator interfaces consumed by the sign-up workflow.

Adapters raise BackendError on any failure. The orchestrator and upload
pipeline translate those into the sign-up error taxonomy.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel


class Identity(BaseModel):
    """Backend-issued authenticated user."""

    id: str
    email: str | None = None


class IdentityProvider(ABC):
    """Creates (and, for compensation, removes) user identities."""

    @abstractmethod
    async def create_identity(self, email: str, password: str) -> Identity | None:
        """Register a new identity. Returns None when the provider issues no user."""

    @abstractmethod
    async def delete_identity(self, identity_id: str) -> None:
        """Remove an identity created by a sign-up that could not finish."""


class RecordStore(ABC):
    """Relational store holding committee and voicemail rows."""

    @abstractmethod
    async def insert(self, table: str, record: dict) -> None:
        """Insert a single row into a table."""

    @abstractmethod
    async def delete(self, table: str, match: dict) -> None:
        """Delete the rows whose columns equal every value in match."""


class ObjectStore(ABC):
    """Object storage organised into named containers (buckets)."""

    @abstractmethod
    async def list_containers(self) -> list[str]:
        """Return the names of existing containers."""

    @abstractmethod
    async def create_container(self, name: str, public: bool = False) -> None:
        """Create a container."""

    @abstractmethod
    async def upload(
        self,
        container: str,
        key: str,
        data: bytes,
        content_type: str,
        cache_control: str = "3600",
        overwrite: bool = False,
    ) -> None:
        """Store bytes under a key."""

    @abstractmethod
    async def get_public_reference(self, container: str, key: str) -> str | None:
        """Return a publicly fetchable URL for a stored object."""
