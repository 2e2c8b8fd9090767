"""
Voicemail capture, selection and upload.
"""

from .models import CapturedVoicemail, ResolvedVoicemail, SelectedVoicemail, VoicemailPayload
from .resolver import VoicemailInputResolver
from .sources import AudioCaptureSource, FileSelectionSource
from .upload_pipeline import VoicemailUploadPipeline

__all__ = [
    "AudioCaptureSource",
    "CapturedVoicemail",
    "FileSelectionSource",
    "ResolvedVoicemail",
    "SelectedVoicemail",
    "VoicemailInputResolver",
    "VoicemailPayload",
    "VoicemailUploadPipeline",
]
