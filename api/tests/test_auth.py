"""
Tests for settings and the Supabase identity, table and storage adapters.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from app.api.auth import Settings, SupabaseIdentityProvider
from app.api.signup_workflow.supabase_service import (
    SupabaseObjectStore,
    SupabaseRecordStore,
    create_sign_up_client,
    create_supabase_client,
    describe_supabase_error,
    to_backend_error,
)
from app.api.workflow_base.backends import Identity
from app.api.workflow_base.exceptions import BackendError


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        settings = Settings(_env_file=None)

        assert settings.supabase_url == ""
        assert settings.debug is False

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
        monkeypatch.setenv("DEBUG", "true")

        settings = Settings(_env_file=None)

        assert settings.supabase_url == "https://project.supabase.co"
        assert settings.debug is True


class TestDescribeSupabaseError:
    def test_storage_error_payload(self):
        error = Exception({"statusCode": "404", "error": "not_found", "message": "Bucket not found"})

        assert describe_supabase_error(error) == ("Bucket not found", "404")

    def test_error_with_attributes(self):
        error = Exception("raw")
        error.message = "User already registered"
        error.status = 422

        assert describe_supabase_error(error) == ("User already registered", 422)

    def test_plain_exception(self):
        assert describe_supabase_error(RuntimeError("boom")) == ("boom", None)

    def test_to_backend_error(self):
        error = to_backend_error("Supabase", "insert", Exception({"message": "duplicate key"}))

        assert isinstance(error, BackendError)
        assert error.user_message == "duplicate key"
        assert error.reason == "insert failed: duplicate key"


@pytest.mark.asyncio
async def test_create_client_requires_settings():
    with pytest.raises(ValueError, match="SUPABASE_URL"):
        await create_supabase_client("", "")


@pytest.mark.asyncio
async def test_create_sign_up_client_requires_settings():
    with pytest.raises(ValueError, match="SUPABASE_URL"):
        await create_sign_up_client("https://project.supabase.co", "")


class TestSupabaseIdentityProvider:
    @pytest.fixture
    def client(self):
        client = Mock()
        client.options.headers = {"Authorization": "Bearer service-role-key"}
        client.auth.sign_up = AsyncMock()
        return client

    @pytest.fixture
    def sign_up_client(self):
        return Mock()

    @pytest.fixture
    def provider(self, client, sign_up_client):
        return SupabaseIdentityProvider(client, AsyncMock(return_value=sign_up_client))

    @pytest.mark.asyncio
    async def test_create_identity(self, provider, sign_up_client):
        sign_up_client.auth.sign_up = AsyncMock(
            return_value=SimpleNamespace(user=SimpleNamespace(id="u-1", email="a@example.com"))
        )

        identity = await provider.create_identity("a@example.com", "secret1")

        assert identity == Identity(id="u-1", email="a@example.com")
        sign_up_client.auth.sign_up.assert_awaited_once_with(
            {"email": "a@example.com", "password": "secret1"}
        )

    @pytest.mark.asyncio
    async def test_each_sign_up_gets_its_own_client(self, client, sign_up_client):
        sign_up_client.auth.sign_up = AsyncMock(
            return_value=SimpleNamespace(user=SimpleNamespace(id="u-1", email="a@example.com"))
        )
        factory = AsyncMock(return_value=sign_up_client)
        provider = SupabaseIdentityProvider(client, factory)

        await provider.create_identity("a@example.com", "secret1")
        await provider.create_identity("b@example.com", "secret1")

        assert factory.await_count == 2
        client.auth.sign_up.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_inserts_keep_service_role_after_sign_up(self, client, sign_up_client):
        def signed_in(credentials):
            # a signed-in client sends the new user's JWT from then on
            sign_up_client.options.headers["Authorization"] = "Bearer user-jwt"
            return SimpleNamespace(user=SimpleNamespace(id="u-1", email=credentials["email"]))

        sign_up_client.options.headers = {"Authorization": "Bearer service-role-key"}
        sign_up_client.auth.sign_up = AsyncMock(side_effect=signed_in)
        client.table.return_value.insert.return_value.execute = AsyncMock()
        provider = SupabaseIdentityProvider(client, AsyncMock(return_value=sign_up_client))

        await provider.create_identity("a@example.com", "secret1")
        await SupabaseRecordStore(client).insert("committees", {"user_id": "u-1"})

        assert sign_up_client is not client
        assert client.options.headers["Authorization"] == "Bearer service-role-key"
        client.table.return_value.insert.assert_called_once_with({"user_id": "u-1"})

    @pytest.mark.asyncio
    async def test_no_user_returned(self, provider, sign_up_client):
        sign_up_client.auth.sign_up = AsyncMock(return_value=SimpleNamespace(user=None, session=None))

        assert await provider.create_identity("a@example.com", "x") is None

    @pytest.mark.asyncio
    async def test_rejected_sign_up(self, provider, sign_up_client):
        error = Exception("rejected")
        error.message = "User already registered"
        sign_up_client.auth.sign_up = AsyncMock(side_effect=error)

        with pytest.raises(BackendError) as exc_info:
            await provider.create_identity("a@example.com", "secret1")

        assert exc_info.value.user_message == "User already registered"

    @pytest.mark.asyncio
    async def test_timeout(self, provider, sign_up_client):
        sign_up_client.auth.sign_up = AsyncMock(side_effect=httpx.ReadTimeout("timed out"))

        with pytest.raises(BackendError, match="timed out"):
            await provider.create_identity("a@example.com", "secret1")

    @pytest.mark.asyncio
    async def test_delete_identity(self, provider, client):
        client.auth.admin.delete_user = AsyncMock()

        await provider.delete_identity("u-1")

        client.auth.admin.delete_user.assert_awaited_once_with("u-1")


class TestSupabaseRecordStore:
    @pytest.mark.asyncio
    async def test_insert(self):
        client = Mock()
        client.table.return_value.insert.return_value.execute = AsyncMock()

        await SupabaseRecordStore(client).insert("committees", {"user_id": "u-1"})

        client.table.assert_called_once_with("committees")
        client.table.return_value.insert.assert_called_once_with({"user_id": "u-1"})

    @pytest.mark.asyncio
    async def test_delete(self):
        client = Mock()
        client.table.return_value.delete.return_value.match.return_value.execute = AsyncMock()

        await SupabaseRecordStore(client).delete("committees", {"user_id": "u-1"})

        client.table.assert_called_once_with("committees")
        client.table.return_value.delete.return_value.match.assert_called_once_with(
            {"user_id": "u-1"}
        )

    @pytest.mark.asyncio
    async def test_delete_failure(self):
        client = Mock()
        client.table.return_value.delete.return_value.match.return_value.execute = AsyncMock(
            side_effect=Exception({"message": "permission denied", "code": "42501"})
        )

        with pytest.raises(BackendError) as exc_info:
            await SupabaseRecordStore(client).delete("committees", {"user_id": "u-1"})

        assert exc_info.value.reason == "delete from committees failed: permission denied"

    @pytest.mark.asyncio
    async def test_insert_failure(self):
        client = Mock()
        client.table.return_value.insert.return_value.execute = AsyncMock(
            side_effect=Exception({"message": "permission denied", "code": "42501"})
        )

        with pytest.raises(BackendError) as exc_info:
            await SupabaseRecordStore(client).insert("committees", {})

        assert exc_info.value.user_message == "permission denied"


class TestSupabaseObjectStore:
    @pytest.fixture
    def client(self):
        client = Mock()
        client.storage.from_.return_value.upload = AsyncMock()
        return client

    @pytest.mark.asyncio
    async def test_list_containers(self, client):
        client.storage.list_buckets = AsyncMock(
            return_value=[SimpleNamespace(name="voicemails"), SimpleNamespace(name="avatars")]
        )

        assert await SupabaseObjectStore(client).list_containers() == ["voicemails", "avatars"]

    @pytest.mark.asyncio
    async def test_create_container(self, client):
        client.storage.create_bucket = AsyncMock()

        await SupabaseObjectStore(client).create_container("voicemails", public=True)

        client.storage.create_bucket.assert_awaited_once_with(
            "voicemails", options={"public": True}
        )

    @pytest.mark.asyncio
    async def test_create_container_conflict(self, client):
        client.storage.create_bucket = AsyncMock(
            side_effect=Exception({"statusCode": "409", "message": "The resource already exists"})
        )

        with pytest.raises(BackendError) as exc_info:
            await SupabaseObjectStore(client).create_container("voicemails", public=True)

        assert exc_info.value.backend_status == "409"

    @pytest.mark.asyncio
    async def test_upload_options(self, client):
        await SupabaseObjectStore(client).upload(
            "voicemails", "u-1/voicemail_1.webm", b"voice", "audio/webm"
        )

        client.storage.from_.assert_called_with("voicemails")
        client.storage.from_.return_value.upload.assert_awaited_once_with(
            path="u-1/voicemail_1.webm",
            file=b"voice",
            file_options={
                "content-type": "audio/webm",
                "cache-control": "3600",
                "upsert": "false",
            },
        )

    @pytest.mark.asyncio
    async def test_public_reference_sync(self, client):
        client.storage.from_.return_value.get_public_url = Mock(return_value="https://cdn/x.webm")

        assert await SupabaseObjectStore(client).get_public_reference("voicemails", "x.webm") == (
            "https://cdn/x.webm"
        )

    @pytest.mark.asyncio
    async def test_public_reference_async_dict(self, client):
        client.storage.from_.return_value.get_public_url = AsyncMock(
            return_value={"data": {"publicUrl": "https://cdn/x.webm"}}
        )

        assert await SupabaseObjectStore(client).get_public_reference("voicemails", "x.webm") == (
            "https://cdn/x.webm"
        )

    @pytest.mark.asyncio
    async def test_public_reference_empty(self, client):
        client.storage.from_.return_value.get_public_url = Mock(return_value="")

        assert await SupabaseObjectStore(client).get_public_reference("voicemails", "x") is None
