"""Application-level Text-to-Speech service wrapper."""

from __future__ import annotations

import logging
from typing import Any

from services.credentials import CredentialProvider
from shared.config import config as service_config
from shared.media_utils import AudioBuffer, decode_pcm

from .drivers import GeminiTTSEngine, StubTTSEngine, TTSEngine

logger = logging.getLogger(__name__)

TTS_DRIVERS: dict[str, type[TTSEngine]] = {
    "gemini": GeminiTTSEngine,
    "stub": StubTTSEngine,
}
DEFAULT_DRIVER = "gemini"


class SpeechSynthesisClient:
    """Provide a simple interface for synthesizing narration via registered drivers."""

    def __init__(
        self,
        driver: TTSEngine | None = None,
        credentials: CredentialProvider | None = None,
        sample_rate: int | None = None,
    ) -> None:
        self.driver = driver or self._load_driver(
            service_config.get("tts_driver", DEFAULT_DRIVER), credentials
        )
        self.sample_rate = int(
            sample_rate or service_config.get_pipeline_value("audio.sample_rate", 24000)
        )

    @staticmethod
    def _load_driver(driver_name: str, credentials: CredentialProvider | None) -> TTSEngine:
        driver_cls = TTS_DRIVERS.get(driver_name.lower())
        if driver_cls is None:
            logger.warning(f"Unknown TTS driver '{driver_name}', falling back to {DEFAULT_DRIVER}")
            driver_cls = TTS_DRIVERS[DEFAULT_DRIVER]
        if driver_cls is GeminiTTSEngine:
            return GeminiTTSEngine(credentials=credentials)
        return driver_cls()

    async def generate_speech(
        self, text: str, voice_id: str, extra_options: dict[str, Any] | None = None
    ) -> bytes:
        if not text or not text.strip():
            raise ValueError("Cannot synthesize speech for empty text")

        logger.info(
            f"TTS - driver: {type(self.driver).__name__}, text_len: {len(text)}, voice: {voice_id}"
        )
        audio_bytes = await self.driver.synthesize(text=text, voice=voice_id, **(extra_options or {}))
        logger.info(f"TTS - received {len(audio_bytes)} bytes of PCM audio")
        return audio_bytes

    def decode(self, audio_bytes: bytes) -> AudioBuffer:
        """Decode synthesized PCM into a playable buffer."""
        return decode_pcm(audio_bytes, sample_rate=self.sample_rate)
