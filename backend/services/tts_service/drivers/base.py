from abc import ABC, abstractmethod
from typing import Any


class TTSEngine(ABC):
    """Abstract base class for TTS engines."""

    @abstractmethod
    async def synthesize(self, text: str, voice: str, **kwargs: Any) -> bytes:
        """Synthesize speech from text. Returns raw 16-bit mono PCM bytes."""
        pass
