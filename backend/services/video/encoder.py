"""Encoding a slide timeline into a WebM file with moviepy/ffmpeg."""

from __future__ import annotations

import subprocess
from bisect import bisect_right
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Sequence

import imageio_ffmpeg
import numpy as np
from moviepy import VideoClip
from moviepy.audio.AudioClip import AudioArrayClip

from shared.logging_utils import setup_logging
from shared.media_utils import AudioBuffer
from shared.models import TimelineEntry

from .canvas import render_slide_frame

logger = setup_logging("video-encoder")


@dataclass(frozen=True)
class CodecProfile:
    mime_type: str
    video_codec: str
    audio_codec: str
    extension: str = "webm"


PREFERRED_PROFILE = CodecProfile(
    mime_type="video/webm;codecs=vp9,opus", video_codec="libvpx-vp9", audio_codec="libopus"
)
FALLBACK_PROFILE = CodecProfile(mime_type="video/webm", video_codec="libvpx", audio_codec="libvorbis")


@dataclass(frozen=True)
class RenderSegment:
    """A scheduled slide with its encoded image and speed-adjusted audio."""

    entry: TimelineEntry
    image_data: bytes
    audio: AudioBuffer


def _available_encoders() -> str:
    ffmpeg_path = imageio_ffmpeg.get_ffmpeg_exe()
    result = subprocess.run(
        [ffmpeg_path, "-hide_banner", "-encoders"],
        capture_output=True,
        text=True,
        timeout=10,
    )
    return result.stdout


@lru_cache(maxsize=1)
def select_codec_profile() -> CodecProfile:
    """Prefer VP9 + Opus when the bundled ffmpeg supports both."""
    try:
        encoders = _available_encoders()
    except (OSError, RuntimeError, subprocess.SubprocessError) as exc:
        logger.warning(f"Could not list ffmpeg encoders ({exc}); using generic WebM")
        return FALLBACK_PROFILE

    if PREFERRED_PROFILE.video_codec in encoders and PREFERRED_PROFILE.audio_codec in encoders:
        return PREFERRED_PROFILE
    logger.info("VP9/Opus encoders unavailable; using generic WebM")
    return FALLBACK_PROFILE


class SlideFrames:
    """Frame source for the whole timeline; only the current slide is kept drawn."""

    def __init__(self, segments: Sequence[RenderSegment], size: tuple[int, int]) -> None:
        self.segments = list(segments)
        self.size = size
        self._starts = [segment.entry.start for segment in self.segments]
        self._index: int | None = None
        self._frame: np.ndarray | None = None

    def __call__(self, t: float) -> np.ndarray:
        index = min(max(bisect_right(self._starts, t) - 1, 0), len(self.segments) - 1)
        if index != self._index:
            self._frame = render_slide_frame(self.segments[index].image_data, self.size)
            self._index = index
        return self._frame


def mix_timeline_audio(segments: Sequence[RenderSegment], duration: float) -> np.ndarray:
    """Place each segment's audio at its start offset on one silent track."""
    sample_rate = segments[0].audio.sample_rate
    channels = segments[0].audio.channels
    total_frames = int(round(duration * sample_rate))
    track = np.zeros((total_frames, channels), dtype=np.float32)
    for segment in segments:
        start = int(round(segment.entry.start * sample_rate))
        samples = segment.audio.samples[: max(total_frames - start, 0)]
        track[start:start + len(samples)] = samples
    return track


class TimelineEncoder:
    """Mux slide frames and narration into one file."""

    def __init__(self, fps: int = 30, bitrate: str = "50M") -> None:
        self.fps = fps
        self.bitrate = bitrate

    def render(
        self,
        segments: Sequence[RenderSegment],
        output_path: Path,
        profile: CodecProfile,
        size: tuple[int, int],
    ) -> None:
        if not segments:
            raise ValueError("Nothing to encode")

        duration = segments[-1].entry.end
        sample_rate = segments[0].audio.sample_rate
        audio_clip = AudioArrayClip(mix_timeline_audio(segments, duration), fps=sample_rate)
        clip = (
            VideoClip(frame_function=SlideFrames(segments, size), duration=duration)
            .with_audio(audio_clip.with_duration(duration))
        )
        try:
            clip.write_videofile(
                str(output_path),
                fps=self.fps,
                codec=profile.video_codec,
                audio_codec=profile.audio_codec,
                audio_fps=sample_rate,
                bitrate=self.bitrate,
                logger=None,
            )
        finally:
            clip.close()
            audio_clip.close()
