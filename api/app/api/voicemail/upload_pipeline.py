"""
Voicemail upload pipeline: bucket provisioning, key naming, upload and URL lookup.
"""

import logging
import time
from collections.abc import Callable

from app.api.workflow_base.backends import ObjectStore
from app.api.workflow_base.exceptions import BackendError, ProvisioningError, UploadError

from .models import CapturedVoicemail, ResolvedVoicemail, SelectedVoicemail, safe_extension

logger = logging.getLogger(__name__)

DEFAULT_CONTAINER = "voicemails"
GENERIC_EXTENSION = "audio"
DEFAULT_EXTENSION_MAP = {
    "audio/webm": "webm",
    "audio/mpeg": "mp3",
    "audio/wav": "wav",
    "audio/x-aiff": "aiff",
}


def _epoch_millis() -> int:
    return int(time.time() * 1000)


def is_already_exists(error: BackendError) -> bool:
    """True when a create call failed only because the resource is already there."""
    if str(error.backend_status) == "409":
        return True
    reason = error.reason.lower()
    return "already exists" in reason or "duplicate" in reason


class VoicemailUploadPipeline:
    """
    Stores a voicemail for an owner and returns its public URL.

    One instance is shared by the application so that bucket provisioning
    happens once per process. There are no retries here; retrying is up to
    the caller.
    """

    def __init__(
        self,
        object_store: ObjectStore,
        container: str = DEFAULT_CONTAINER,
        extension_map: dict[str, str] | None = None,
        fallback_extension: str = GENERIC_EXTENSION,
        cache_control: str = "3600",
        clock: Callable[[], int] = _epoch_millis,
    ):
        self.object_store = object_store
        self.container = container
        self.extension_map = extension_map if extension_map is not None else DEFAULT_EXTENSION_MAP
        self.fallback_extension = fallback_extension
        self.cache_control = cache_control
        self.clock = clock
        self._provisioned = False

    @property
    def provisioned(self) -> bool:
        return self._provisioned

    async def ensure_container(self) -> None:
        """
        Make sure the target bucket exists, creating it publicly readable if absent.

        Raises:
            ProvisioningError: If buckets cannot be listed or the bucket cannot be created
        """
        if self._provisioned:
            return

        try:
            existing = await self.object_store.list_containers()
        except BackendError as e:
            logger.error(f"Error checking buckets: {e}")
            raise ProvisioningError("Failed to check storage buckets", e) from e

        if self.container not in existing:
            logger.info(f"Creating {self.container} bucket")
            try:
                await self.object_store.create_container(self.container, public=True)
            except BackendError as e:
                if not is_already_exists(e):
                    logger.error(f"Error creating bucket: {e}")
                    raise ProvisioningError("Failed to create storage bucket", e) from e
                logger.info(f"Bucket {self.container} was created concurrently")

        self._provisioned = True

    def derive_extension(self, voicemail: ResolvedVoicemail) -> str:
        extension = safe_extension(voicemail.suggested_extension)
        if extension:
            return extension
        return self.extension_map.get(voicemail.mime_type, self.fallback_extension)

    def build_storage_key(self, owner_id: str, extension: str) -> str:
        return f"{owner_id}/voicemail_{self.clock()}.{extension}"

    async def upload(
        self,
        owner_id: str,
        voicemail: ResolvedVoicemail | CapturedVoicemail | SelectedVoicemail,
    ) -> str:
        """
        Upload a voicemail under the owner's prefix.

        Args:
            owner_id: Identity id the voicemail belongs to
            voicemail: Payload to store

        Returns:
            Public URL of the stored object

        Raises:
            UploadError: On any storage failure (ProvisioningError for bucket problems)
        """
        if not isinstance(voicemail, ResolvedVoicemail):
            voicemail = voicemail.resolve()

        await self.ensure_container()

        key = self.build_storage_key(owner_id, self.derive_extension(voicemail))
        logger.info(f"Uploading file: {key} Type: {voicemail.mime_type}")

        try:
            await self.object_store.upload(
                self.container,
                key,
                voicemail.data,
                content_type=voicemail.mime_type,
                cache_control=self.cache_control,
                overwrite=False,
            )
        except BackendError as e:
            logger.error(f"Storage upload error: {e}")
            raise UploadError(e.user_message, e) from e

        try:
            reference = await self.object_store.get_public_reference(self.container, key)
        except BackendError as e:
            logger.error(f"Public URL lookup error: {e}")
            raise UploadError("Failed to get public URL for the voicemail", e) from e

        if not reference:
            logger.error("Failed to get public URL")
            raise UploadError("Failed to get public URL for the voicemail")

        logger.info(f"Public URL: {reference}")
        return reference
