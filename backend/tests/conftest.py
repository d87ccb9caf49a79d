import io
import os
import sys
from pathlib import Path
from typing import Callable, Generator

import numpy as np
import pytest
from PIL import Image

ROOT_DIR = Path(__file__).resolve().parents[1]
PROJECT_ROOT = ROOT_DIR.parent
for path in (PROJECT_ROOT, ROOT_DIR):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from shared.config import config as service_config
from shared.models import SlideImage

SAMPLE_RATE = 24000


@pytest.fixture(autouse=True)
def test_environment(tmp_path: Path) -> Generator[Path, None, None]:
    """Point storage at a temp directory and keep drivers offline per-test."""
    media_root = tmp_path / "media"
    media_root.mkdir(parents=True, exist_ok=True)

    saved_config = dict(service_config.config)
    saved_pipeline = service_config.pipeline_config

    os.environ["MEDIA_ROOT"] = str(media_root)
    service_config.set("media_root", str(media_root))
    service_config.set("script_driver", "stub")
    service_config.set("tts_driver", "stub")
    service_config.set("gemini_api_key", "test-key")
    service_config.set_pipeline_config(
        {
            "retry": {
                "max_retries": 6,
                "base_delay": 1.0,
                "single_script_attempts": 5,
                "batch_script_attempts": 3,
                "audio_attempts": 5,
                "preview_attempts": 3,
            },
            "audio": {"chunk_size": 3, "sample_rate": SAMPLE_RATE},
            "video": {
                "fps": 30,
                "bitrate": "50M",
                "slide_padding": 0.4,
                "width": 3840,
                "height": 2160,
            },
        }
    )

    try:
        yield media_root
    finally:
        service_config.config = saved_config
        service_config.pipeline_config = saved_pipeline
        os.environ.pop("MEDIA_ROOT", None)


@pytest.fixture
def media_root(test_environment: Path) -> Path:
    return test_environment


@pytest.fixture
def make_image() -> Callable[..., SlideImage]:
    """Build a small PNG slide image of the given size."""

    def _make(width: int = 64, height: int = 48, color: tuple = (200, 30, 30), name: str = "slide.png"):
        buffer = io.BytesIO()
        Image.new("RGB", (width, height), color).save(buffer, format="PNG")
        return SlideImage(data=buffer.getvalue(), mime_type="image/png", filename=name)

    return _make


@pytest.fixture
def make_pcm() -> Callable[[float], bytes]:
    """Build 24 kHz mono s16le PCM of ``seconds`` length (a quiet tone)."""

    def _make(seconds: float, frequency: float = 440.0) -> bytes:
        frames = int(round(seconds * SAMPLE_RATE))
        t = np.arange(frames) / SAMPLE_RATE
        samples = (0.2 * np.sin(2 * np.pi * frequency * t) * 32767).astype("<i2")
        return samples.tobytes()

    return _make


@pytest.fixture
def no_sleep() -> Callable:
    """Async sleep replacement that records requested delays."""
    delays: list[float] = []

    async def _sleep(delay: float) -> None:
        delays.append(delay)

    _sleep.delays = delays  # type: ignore[attr-defined]
    return _sleep
