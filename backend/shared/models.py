import mimetypes
import random
import string
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from shared.enums import AspectRatio, ProgressOperation, VoiceGender

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_slide_id(length: int = 9) -> str:
    """Return a short random base36 token used as a slide identifier."""
    return "".join(random.choices(_ID_ALPHABET, k=length))


class SlideImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., repr=False, description="Raw encoded image bytes")
    mime_type: str = Field(default="image/png", description="Image MIME type")
    filename: str | None = None

    @classmethod
    def from_path(cls, path: str | Path) -> "SlideImage":
        """Load an uploaded image file from disk."""
        file_path = Path(path)
        mime_type, _ = mimetypes.guess_type(file_path.name)
        return cls(
            data=file_path.read_bytes(),
            mime_type=mime_type or "application/octet-stream",
            filename=file_path.name,
        )


class Slide(BaseModel):
    """One uploaded image and its narration state."""

    model_config = ConfigDict(frozen=True)

    slide_id: str = Field(default_factory=generate_slide_id)
    image: SlideImage
    script: str = ""
    audio_bytes: bytes | None = Field(default=None, repr=False)
    is_generating_script: bool = False
    is_generating_audio: bool = False

    @property
    def has_audio(self) -> bool:
        return bool(self.audio_bytes)


class SessionSettings(BaseModel):
    """Options selected before slide processing starts."""

    model_config = ConfigDict(frozen=True)

    aspect_ratio: AspectRatio = AspectRatio.LANDSCAPE
    style_id: str = "general"
    tone_id: str = "moderate"
    voice_id: str = "Zephyr"
    voice_speed: float = Field(default=1.0, ge=0.5, le=2.0, description="Narration playback speed")


class StyleOption(BaseModel):
    id: str
    label: str
    prompt: str = ""


class ToneOption(BaseModel):
    id: str
    label: str
    description: str = ""


class VoiceOption(BaseModel):
    id: str
    label: str
    gender: VoiceGender = VoiceGender.NEUTRAL
    description: str = ""


class ProgressUpdate(BaseModel):
    """Progress report for a bulk operation."""

    operation: ProgressOperation
    progress: float = Field(..., ge=0.0, le=100.0)
    completed: int
    total: int
    slide_id: str | None = None


class TimelineEntry(BaseModel):
    """One scheduled slide segment of the output video."""

    model_config = ConfigDict(frozen=True)

    slide_id: str
    start: float = Field(..., ge=0.0, description="Segment start offset in seconds")
    audio_duration: float = Field(..., ge=0.0, description="Speed-adjusted narration length")
    hold: float = Field(..., ge=0.0, description="Time the slide stays on screen")

    @property
    def end(self) -> float:
        return self.start + self.hold


class VideoResult(BaseModel):
    path: str
    mime_type: str
    video_codec: str
    audio_codec: str
    duration: float
    width: int
    height: int
    slide_count: int
    file_size: int
