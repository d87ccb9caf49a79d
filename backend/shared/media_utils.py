"""
Audio decoding and timing utilities.
"""

import io
import wave
from dataclasses import dataclass
from pathlib import Path

import numpy as np

PCM_SAMPLE_RATE = 24000
PCM_CHANNELS = 1
PCM_SAMPLE_WIDTH = 2  # 16-bit little-endian


@dataclass(frozen=True)
class AudioBuffer:
    """Decoded time-domain audio."""

    samples: np.ndarray  # float32, shape (frames, channels)
    sample_rate: int

    @property
    def channels(self) -> int:
        return int(self.samples.shape[1])

    @property
    def frame_count(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration(self) -> float:
        return self.frame_count / float(self.sample_rate)


def decode_pcm(
    data: bytes,
    sample_rate: int = PCM_SAMPLE_RATE,
    channels: int = PCM_CHANNELS,
) -> AudioBuffer:
    """Decode raw signed 16-bit little-endian PCM into a float32 buffer in [-1, 1)."""
    frame_width = PCM_SAMPLE_WIDTH * channels
    usable = len(data) - (len(data) % frame_width)
    pcm = np.frombuffer(data[:usable], dtype="<i2")
    samples = (pcm.astype(np.float32) / 32768.0).reshape(-1, channels)
    return AudioBuffer(samples=samples, sample_rate=sample_rate)


def adjusted_duration(duration: float, speed: float) -> float:
    """Wall-clock length of ``duration`` seconds of audio played at ``speed``."""
    if speed <= 0:
        raise ValueError(f"Playback speed must be positive, got {speed}")
    return duration / speed


def apply_playback_rate(buffer: AudioBuffer, rate: float) -> AudioBuffer:
    """
    Resample a buffer so that it plays ``rate`` times faster at the same sample rate.

    Pitch shifts with the rate, matching a media element's playback rate.
    """
    if rate <= 0:
        raise ValueError(f"Playback rate must be positive, got {rate}")
    if rate == 1.0 or buffer.frame_count == 0:
        return buffer

    target_frames = max(1, int(round(buffer.frame_count / rate)))
    source_positions = np.arange(buffer.frame_count, dtype=np.float64)
    target_positions = np.linspace(0, buffer.frame_count - 1, target_frames)
    channels = [
        np.interp(target_positions, source_positions, buffer.samples[:, channel])
        for channel in range(buffer.channels)
    ]
    resampled = np.stack(channels, axis=1).astype(np.float32)
    return AudioBuffer(samples=resampled, sample_rate=buffer.sample_rate)


def pad_to_duration(buffer: AudioBuffer, duration: float) -> AudioBuffer:
    """Append silence so the buffer lasts at least ``duration`` seconds."""
    target_frames = int(round(duration * buffer.sample_rate))
    missing = target_frames - buffer.frame_count
    if missing <= 0:
        return buffer
    silence = np.zeros((missing, buffer.channels), dtype=np.float32)
    return AudioBuffer(
        samples=np.concatenate([buffer.samples, silence], axis=0),
        sample_rate=buffer.sample_rate,
    )


def encode_wav(buffer: AudioBuffer) -> bytes:
    """Encode a buffer as a 16-bit PCM WAV file."""
    clipped = np.clip(buffer.samples, -1.0, 1.0)
    pcm = (clipped * 32767.0).astype("<i2")
    stream = io.BytesIO()
    with wave.open(stream, "wb") as wav_file:
        wav_file.setnchannels(buffer.channels)
        wav_file.setsampwidth(PCM_SAMPLE_WIDTH)
        wav_file.setframerate(buffer.sample_rate)
        wav_file.writeframes(pcm.tobytes())
    return stream.getvalue()


def write_wav(path: str | Path, buffer: AudioBuffer) -> Path:
    """Write a buffer to ``path`` as WAV and return the path."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(encode_wav(buffer))
    return target
