"""
Pydantic models for voicemail payloads.
"""

import re
from pathlib import PurePosixPath
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

# storage key extensions are plain lowercase alphanumerics
SAFE_EXTENSION = re.compile(r"[a-z0-9]{1,8}")


def safe_extension(value: str | None) -> str | None:
    if value and SAFE_EXTENSION.fullmatch(value):
        return value
    return None


class ResolvedVoicemail(BaseModel):
    """Canonical upload input, independent of how the audio was obtained."""

    data: bytes = Field(..., repr=False)
    mime_type: str
    suggested_extension: str | None = None


class CapturedVoicemail(BaseModel):
    """Audio recorded in the browser and streamed to the service."""

    kind: Literal["capture"] = "capture"
    data: bytes = Field(..., repr=False)
    mime_type: str

    def resolve(self) -> ResolvedVoicemail:
        return ResolvedVoicemail(data=self.data, mime_type=self.mime_type)

    def describe(self) -> dict[str, Any]:
        return {"kind": self.kind, "mime_type": self.mime_type, "size": len(self.data)}


class SelectedVoicemail(BaseModel):
    """Audio file chosen by the user."""

    kind: Literal["file"] = "file"
    data: bytes = Field(..., repr=False)
    filename: str
    mime_type: str

    def resolve(self) -> ResolvedVoicemail:
        suffix = PurePosixPath(self.filename).suffix.lstrip(".").lower()
        return ResolvedVoicemail(
            data=self.data,
            mime_type=self.mime_type,
            suggested_extension=safe_extension(suffix),
        )

    def describe(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "mime_type": self.mime_type,
            "size": len(self.data),
            "filename": self.filename,
        }


VoicemailPayload = Annotated[CapturedVoicemail | SelectedVoicemail, Field(discriminator="kind")]
