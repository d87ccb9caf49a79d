"""Deterministic slide timeline for the composed video."""

from __future__ import annotations

from collections.abc import Sequence

from shared.media_utils import adjusted_duration
from shared.models import TimelineEntry

DEFAULT_SLIDE_PADDING = 0.4


def build_timeline(
    segments: Sequence[tuple[str, float]],
    speed: float,
    padding: float = DEFAULT_SLIDE_PADDING,
) -> list[TimelineEntry]:
    """
    Lay slides end to end.

    Args:
        segments: (slide_id, natural audio duration in seconds) in playback order
        speed: Narration playback speed
        padding: Silence held after every slide, including the last

    Returns:
        Timeline entries whose holds sum to sum(duration / speed) + padding * N
    """
    timeline: list[TimelineEntry] = []
    position = 0.0
    for slide_id, duration in segments:
        audio_duration = adjusted_duration(duration, speed)
        entry = TimelineEntry(
            slide_id=slide_id,
            start=position,
            audio_duration=audio_duration,
            hold=audio_duration + padding,
        )
        timeline.append(entry)
        position = entry.end
    return timeline


def total_duration(timeline: Sequence[TimelineEntry]) -> float:
    return timeline[-1].end if timeline else 0.0
