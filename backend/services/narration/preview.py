"""Render a slide's narration to a WAV file for listening."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from pathlib import Path
from typing import Any

from shared.logging_utils import setup_logging
from shared.media_utils import AudioBuffer, apply_playback_rate, write_wav

logger = setup_logging("audio-preview")

AudioPlayer = Callable[[Path], Any]


class PreviewRenderer:
    """Write speed-adjusted preview audio under ``media_root/previews``."""

    def __init__(self, media_root: Path, player: AudioPlayer | None = None) -> None:
        self.previews_dir = Path(media_root) / "previews"
        self.player = player

    def render(self, slide_id: str, buffer: AudioBuffer, speed: float) -> Path:
        adjusted = apply_playback_rate(buffer, speed)
        path = write_wav(self.previews_dir / f"{slide_id}_{uuid.uuid4().hex[:8]}.wav", adjusted)
        logger.info(f"Preview for slide {slide_id} written to {path} ({adjusted.duration:.2f}s)")

        if self.player is not None:
            self.player(path)
        return path
