"""
Voicemail input sources: browser recordings and user-selected audio files.
"""

import logging

from app.api.workflow_base.exceptions import RecordingError, VoicemailValidationError

from .models import CapturedVoicemail, SelectedVoicemail

logger = logging.getLogger(__name__)

# Maximum allowed audio size (10MB)
MAX_AUDIO_SIZE = 10 * 1024 * 1024

DEFAULT_CAPTURE_MIME_TYPE = "audio/webm"


def normalize_mime_type(mime_type: str | None) -> str:
    """Drop parameters such as ';codecs=opus' and lowercase the type."""
    if not mime_type:
        return ""
    return mime_type.split(";", 1)[0].strip().lower()


class AudioCaptureSource:
    """
    Accumulates a microphone recording delivered as a stream of chunks.

    start() opens the recording, append() receives each chunk the browser's
    media recorder emits, stop() finalizes the chunks into one blob.
    """

    def __init__(self, max_size: int = MAX_AUDIO_SIZE):
        self.max_size = max_size
        self._chunks: list[bytes] | None = None
        self._mime_type = DEFAULT_CAPTURE_MIME_TYPE
        self._size = 0

    @property
    def is_recording(self) -> bool:
        return self._chunks is not None

    @property
    def size(self) -> int:
        return self._size

    def start(self, mime_type: str | None = None) -> None:
        if self.is_recording:
            raise RecordingError("A recording is already in progress.")

        self._chunks = []
        self._size = 0
        self._mime_type = normalize_mime_type(mime_type) or DEFAULT_CAPTURE_MIME_TYPE
        logger.info(f"Recording started ({self._mime_type})")

    def append(self, chunk: bytes) -> int:
        """Add a chunk to the active recording and return the total size so far."""
        if self._chunks is None:
            raise RecordingError("No recording in progress. Start a recording first.")

        if self._size + len(chunk) > self.max_size:
            self.discard()
            raise VoicemailValidationError(
                "Recording too large. Please keep recordings under "
                f"{self.max_size // (1024 * 1024)}MB.",
                field="recording",
            )

        self._chunks.append(chunk)
        self._size += len(chunk)
        return self._size

    def stop(self) -> CapturedVoicemail | None:
        """Finish the recording. Returns None when no audio was captured."""
        if self._chunks is None:
            raise RecordingError("No recording in progress.")

        data = b"".join(self._chunks)
        self._chunks = None
        self._size = 0

        if not data:
            logger.info("Recording stopped without audio")
            return None

        logger.info(f"Recording stopped ({len(data)} bytes)")
        return CapturedVoicemail(data=data, mime_type=self._mime_type)

    def discard(self) -> None:
        if self._chunks is not None:
            logger.info("Recording discarded")
        self._chunks = None
        self._size = 0


class FileSelectionSource:
    """Validates user-selected audio files against the accepted media types."""

    def __init__(self, accepted_types: set[str] | frozenset[str], max_size: int = MAX_AUDIO_SIZE):
        self.accepted_types = frozenset(normalize_mime_type(t) for t in accepted_types)
        self.max_size = max_size

    def validate(self, filename: str | None, mime_type: str | None, data: bytes) -> SelectedVoicemail:
        """
        Check a selected file and wrap it as a voicemail payload.

        Args:
            filename: Original file name (may lack an extension)
            mime_type: Content type reported by the client
            data: File contents

        Returns:
            SelectedVoicemail for the file

        Raises:
            VoicemailValidationError: If the type, size or content is not acceptable
        """
        mime = normalize_mime_type(mime_type)
        if mime not in self.accepted_types:
            accepted = ", ".join(sorted(self.accepted_types))
            raise VoicemailValidationError(
                f"Unsupported audio type '{mime or 'unknown'}'. Accepted types: {accepted}.",
                field="file",
            )

        if not data:
            raise VoicemailValidationError("The selected file is empty.", field="file")

        if len(data) > self.max_size:
            raise VoicemailValidationError(
                f"Audio file too large. Please keep files under {self.max_size // (1024 * 1024)}MB.",
                field="file",
            )

        return SelectedVoicemail(data=data, filename=filename or "voicemail", mime_type=mime)
