"""
Supabase adapters for the sign-up workflow: committee/voicemail tables and storage.
"""

import inspect
import logging
from typing import Any

from supabase import AsyncClient, create_async_client
from supabase.lib.client_options import AsyncClientOptions

from app.api.workflow_base.backends import ObjectStore, RecordStore
from app.api.workflow_base.exceptions import BackendError

logger = logging.getLogger(__name__)


async def create_supabase_client(url: str, key: str) -> AsyncClient:
    """Create the async Supabase client shared by the adapters."""
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set in settings.")
    return await create_async_client(url, key)


async def create_sign_up_client(url: str, key: str) -> AsyncClient:
    """
    Create a throwaway client for a single sign up.

    A successful sign up stores the user session on the calling client and
    swaps its Authorization header to the user JWT, so it must never run on
    the client shared by the table and storage adapters.
    """
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set in settings.")
    return await create_async_client(
        url, key, options=AsyncClientOptions(persist_session=False, auto_refresh_token=False)
    )


def describe_supabase_error(error: Exception) -> tuple[str, Any]:
    """
    Extract a readable message and status from Supabase client exceptions.

    Auth errors carry .message/.status, PostgREST errors .message/.code and
    storage errors a dict payload in args[0].
    """
    payload = error.args[0] if error.args else None
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error") or str(error)
        return message, payload.get("statusCode") or payload.get("status")

    message = getattr(error, "message", None) or str(error) or error.__class__.__name__
    status = getattr(error, "status", None) or getattr(error, "code", None)
    return message, status


def to_backend_error(service: str, operation: str, error: Exception) -> BackendError:
    message, status = describe_supabase_error(error)
    return BackendError(service, operation, message, status_code=status)


class SupabaseRecordStore(RecordStore):
    """Inserts rows through PostgREST."""

    def __init__(self, client: AsyncClient):
        self.client = client

    async def insert(self, table: str, record: dict) -> None:
        try:
            await self.client.table(table).insert(record).execute()
        except Exception as e:
            logger.error(f"Insert into {table} failed: {e}")
            raise to_backend_error("Supabase", f"insert into {table}", e) from e

    async def delete(self, table: str, match: dict) -> None:
        try:
            await self.client.table(table).delete().match(match).execute()
        except Exception as e:
            logger.error(f"Delete from {table} failed: {e}")
            raise to_backend_error("Supabase", f"delete from {table}", e) from e


class SupabaseObjectStore(ObjectStore):
    """Storage buckets and objects."""

    def __init__(self, client: AsyncClient):
        self.client = client

    async def list_containers(self) -> list[str]:
        try:
            buckets = await self.client.storage.list_buckets()
        except Exception as e:
            raise to_backend_error("Supabase Storage", "list buckets", e) from e
        return [bucket.name for bucket in buckets or []]

    async def create_container(self, name: str, public: bool = False) -> None:
        try:
            await self.client.storage.create_bucket(name, options={"public": public})
        except Exception as e:
            raise to_backend_error("Supabase Storage", f"create bucket {name}", e) from e

    async def upload(
        self,
        container: str,
        key: str,
        data: bytes,
        content_type: str,
        cache_control: str = "3600",
        overwrite: bool = False,
    ) -> None:
        storage = self.client.storage.from_(container)
        try:
            await storage.upload(
                path=key,
                file=data,
                file_options={
                    "content-type": content_type,
                    "cache-control": cache_control,
                    "upsert": "true" if overwrite else "false",
                },
            )
        except Exception as e:
            raise to_backend_error("Supabase Storage", f"upload {key}", e) from e

    async def get_public_reference(self, container: str, key: str) -> str | None:
        try:
            value = self.client.storage.from_(container).get_public_url(key)
            if inspect.isawaitable(value):
                value = await value
        except Exception as e:
            raise to_backend_error("Supabase Storage", f"public url for {key}", e) from e

        if isinstance(value, str):
            return value or None
        if isinstance(value, dict):
            if "publicUrl" in value:
                return value["publicUrl"]
            data = value.get("data")
            if isinstance(data, dict):
                return data.get("publicUrl")
        return None
