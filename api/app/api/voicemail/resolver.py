"""
Reconciles a recorded voicemail and a selected voicemail file into one payload.
"""

import logging

from .models import CapturedVoicemail, SelectedVoicemail
from .sources import AudioCaptureSource, FileSelectionSource

logger = logging.getLogger(__name__)

CAPTURE = "capture"
FILE = "file"


class VoicemailInputResolver:
    """
    Holds at most one pending recording and one selected file.

    Selecting a file always drops the pending recording. Whether a finished
    recording drops a selected file depends on recording_replaces_file; in
    either case resolve() hands out only the side that was set last.
    """

    def __init__(
        self,
        capture: AudioCaptureSource,
        selection: FileSelectionSource,
        recording_replaces_file: bool = False,
    ):
        self.capture = capture
        self.selection = selection
        self.recording_replaces_file = recording_replaces_file
        self.recording: CapturedVoicemail | None = None
        self.selected_file: SelectedVoicemail | None = None
        self._last_set: str | None = None

    @property
    def is_recording(self) -> bool:
        return self.capture.is_recording

    def start_recording(self, mime_type: str | None = None) -> None:
        self.capture.start(mime_type)

    def append_recording(self, chunk: bytes) -> int:
        return self.capture.append(chunk)

    def stop_recording(self) -> CapturedVoicemail | None:
        """Finalize the active recording and make it the pending payload."""
        blob = self.capture.stop()
        if blob is None:
            return None

        self.recording = blob
        self._last_set = CAPTURE
        if self.recording_replaces_file and self.selected_file is not None:
            logger.info("Recording replaced selected voicemail file")
            self.selected_file = None
        return blob

    def select_file(self, filename: str | None, mime_type: str | None, data: bytes) -> SelectedVoicemail:
        """Validate and select a file. A rejected file leaves all state untouched."""
        selected = self.selection.validate(filename, mime_type, data)

        self.capture.discard()
        if self.recording is not None:
            logger.info("Selected file replaced pending recording")
        self.recording = None
        self.selected_file = selected
        self._last_set = FILE
        return selected

    def clear_recording(self) -> None:
        self.capture.discard()
        self.recording = None
        if self._last_set == CAPTURE:
            self._last_set = FILE if self.selected_file else None

    def clear_file(self) -> None:
        self.selected_file = None
        if self._last_set == FILE:
            self._last_set = CAPTURE if self.recording else None

    def clear(self) -> None:
        self.clear_recording()
        self.clear_file()

    def resolve(self) -> CapturedVoicemail | SelectedVoicemail | None:
        """Return the single payload to submit, preferring the most recently set side."""
        if self._last_set == FILE and self.selected_file is not None:
            return self.selected_file
        if self._last_set == CAPTURE and self.recording is not None:
            return self.recording
        return self.selected_file or self.recording
