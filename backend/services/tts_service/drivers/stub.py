from typing import Any, ClassVar

from shared.media_utils import PCM_SAMPLE_RATE, PCM_SAMPLE_WIDTH

from .base import TTSEngine


class StubTTSEngine(TTSEngine):
    """Offline TTS engine that returns silence sized to the text."""

    SECONDS_PER_WORD: ClassVar[float] = 0.4

    def __init__(self, sample_rate: int = PCM_SAMPLE_RATE):
        self.sample_rate = sample_rate

    async def synthesize(self, text: str, voice: str, **kwargs: Any) -> bytes:
        words = max(1, len(text.split()))
        frames = int(words * self.SECONDS_PER_WORD * self.sample_rate)
        return bytes(frames * PCM_SAMPLE_WIDTH)
