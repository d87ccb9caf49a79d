import base64
from typing import Any, ClassVar

from google import genai
from google.genai import types

from services.credentials import CredentialProvider
from shared.config import config as service_config
from shared.exceptions import MissingCredentialError, SpeechSynthesisError
from shared.gemini_client import create_gemini_client

from .base import TTSEngine


class GeminiTTSEngine(TTSEngine):
    """Gemini TTS implementation using prebuilt voices."""

    SUPPORTED_VOICES: ClassVar[list[str]] = [
        "Zephyr", "Puck", "Charon", "Kore", "Fenrir", "Leda", "Orus", "Aoede",
    ]
    DEFAULT_VOICE: ClassVar[str] = "Zephyr"

    def __init__(self, credentials: CredentialProvider | None = None, model: str | None = None):
        """
        Initialize Gemini TTS engine.

        Args:
            credentials: Provider for the API key (configuration is used if None)
            model: TTS model name
        """
        self.credentials = credentials
        self.model: str = model or service_config.get("tts_model", "gemini-2.5-flash-preview-tts")
        self._client: genai.Client | None = None
        self._client_key: str | None = None

    def _get_client(self) -> genai.Client:
        api_key = self.credentials.api_key if self.credentials else None
        if self.credentials is not None and not api_key:
            raise MissingCredentialError("No API key selected. Select a key before generating.")
        if self._client is None or api_key != self._client_key:
            self._client = create_gemini_client(api_key)
            self._client_key = api_key
        return self._client

    async def synthesize(self, text: str, voice: str, **kwargs: Any) -> bytes:
        """
        Synthesize speech from text using Gemini TTS.

        Args:
            text: Text to convert to speech
            voice: Prebuilt voice name (Zephyr, Puck, Charon, ...)
            **kwargs: Additional options
                - model: TTS model override

        Returns:
            Raw 24 kHz mono 16-bit PCM bytes
        """
        if voice not in self.SUPPORTED_VOICES:
            voice = self.DEFAULT_VOICE

        model = kwargs.get("model", self.model)
        client = self._get_client()

        try:
            response = await client.aio.models.generate_content(
                model=model,
                contents=text,
                config=types.GenerateContentConfig(
                    response_modalities=["AUDIO"],
                    speech_config=types.SpeechConfig(
                        voice_config=types.VoiceConfig(
                            prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice)
                        )
                    ),
                ),
            )
        except Exception as e:
            raise SpeechSynthesisError(f"Gemini TTS synthesis failed: {e!s}") from e

        try:
            data = response.candidates[0].content.parts[0].inline_data.data
        except (AttributeError, IndexError, TypeError) as e:
            raise SpeechSynthesisError("Gemini TTS response contained no audio") from e

        if isinstance(data, str):
            data = base64.b64decode(data)
        if not data:
            raise SpeechSynthesisError("Gemini TTS response contained no audio")
        return bytes(data)
