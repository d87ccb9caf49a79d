"""TTS driver implementations"""

from .base import TTSEngine
from .gemini_tts import GeminiTTSEngine
from .stub import StubTTSEngine

__all__ = ["GeminiTTSEngine", "StubTTSEngine", "TTSEngine"]
