"""Composite slide images and narration into a single video file."""

from __future__ import annotations

import asyncio
import time
import uuid
from collections.abc import Callable, Sequence
from pathlib import Path

from shared.config import config as service_config
from shared.enums import AspectRatio, ProgressOperation
from shared.exceptions import CompositionError, CompositionInProgressError, MissingAudioError
from shared.logging_utils import setup_logging
from shared.media_utils import apply_playback_rate, decode_pcm
from shared.models import ProgressUpdate, Slide, VideoResult

from .canvas import canvas_size
from .encoder import RenderSegment, TimelineEncoder, select_codec_profile
from .timeline import build_timeline, total_duration

logger = setup_logging("video-compositor")

ProgressCallback = Callable[[ProgressUpdate], None]


class VideoCompositor:
    """Turn an ordered slide collection into one narrated video."""

    def __init__(
        self,
        media_root: Path | None = None,
        encoder: TimelineEncoder | None = None,
        padding: float | None = None,
        sample_rate: int | None = None,
    ) -> None:
        self.media_root = Path(media_root or service_config.get("media_root", "./media"))
        self.encoder = encoder or TimelineEncoder(
            fps=int(service_config.get_pipeline_value("video.fps", 30)),
            bitrate=str(service_config.get_pipeline_value("video.bitrate", "50M")),
        )
        self.padding = float(
            padding if padding is not None
            else service_config.get_pipeline_value("video.slide_padding", 0.4)
        )
        self.sample_rate = int(
            sample_rate or service_config.get_pipeline_value("audio.sample_rate", 24000)
        )
        self.is_generating = False
        self.progress = 0.0

    async def compose_video(
        self,
        slides: Sequence[Slide],
        aspect_ratio: AspectRatio | str,
        voice_speed: float,
        progress_callback: ProgressCallback | None = None,
    ) -> VideoResult:
        if self.is_generating:
            raise CompositionInProgressError("A video is already being composed")
        if not slides:
            raise CompositionError("No slides to compose")
        for slide in slides:
            if not slide.audio_bytes:
                raise MissingAudioError(slide.slide_id)

        self.is_generating = True
        self.progress = 0.0
        start_time = time.time()
        output_path: Path | None = None

        try:
            size = canvas_size(aspect_ratio)
            logger.info(
                f"Composing {len(slides)} slides at {size[0]}x{size[1]}, speed {voice_speed}"
            )

            natural_durations: list[tuple[str, float]] = []
            buffers = []
            for index, slide in enumerate(slides):
                decoded = decode_pcm(slide.audio_bytes or b"", sample_rate=self.sample_rate)
                natural_durations.append((slide.slide_id, decoded.duration))
                buffer = apply_playback_rate(decoded, voice_speed)
                buffers.append(buffer)

                self.progress = (index + 1) / len(slides) * 100
                if progress_callback:
                    progress_callback(
                        ProgressUpdate(
                            operation=ProgressOperation.VIDEO,
                            progress=self.progress,
                            completed=index + 1,
                            total=len(slides),
                            slide_id=slide.slide_id,
                        )
                    )

            timeline = build_timeline(natural_durations, speed=voice_speed, padding=self.padding)
            segments = [
                RenderSegment(entry=entry, image_data=slide.image.data, audio=buffer)
                for entry, slide, buffer in zip(timeline, slides, buffers)
            ]

            profile = select_codec_profile()
            videos_dir = self.media_root / "videos"
            videos_dir.mkdir(parents=True, exist_ok=True)
            output_path = videos_dir / f"narration_{uuid.uuid4().hex}.{profile.extension}"

            await asyncio.to_thread(self.encoder.render, segments, output_path, profile, size)

            duration = total_duration(timeline)
            logger.info(
                f"Video composed: {output_path} ({duration:.2f}s) in {time.time() - start_time:.2f}s"
            )
            return VideoResult(
                path=str(output_path),
                mime_type=profile.mime_type,
                video_codec=profile.video_codec,
                audio_codec=profile.audio_codec,
                duration=duration,
                width=size[0],
                height=size[1],
                slide_count=len(slides),
                file_size=output_path.stat().st_size if output_path.exists() else 0,
            )
        except Exception as exc:
            logger.error(f"Video composition failed: {exc}", exc_info=True)
            if output_path is not None:
                output_path.unlink(missing_ok=True)
            raise CompositionError(f"Video composition failed: {exc}") from exc
        finally:
            self.is_generating = False
