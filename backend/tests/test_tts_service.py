import base64
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest

from services.credentials import StaticCredentialProvider
from services.tts_service.drivers import GeminiTTSEngine, StubTTSEngine
from services.tts_service.drivers.base import TTSEngine
from services.tts_service.service import SpeechSynthesisClient
from shared.exceptions import SpeechSynthesisError


class RecordingDriver(TTSEngine):
    def __init__(self, audio: bytes) -> None:
        self.audio = audio
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    async def synthesize(self, text: str, voice: str, **kwargs: Any) -> bytes:
        self.calls.append((text, voice, kwargs))
        return self.audio


def _audio_response(data: Any) -> SimpleNamespace:
    part = SimpleNamespace(inline_data=SimpleNamespace(data=data))
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


def _engine_with(monkeypatch: pytest.MonkeyPatch, response=None, error=None):
    engine = GeminiTTSEngine(credentials=StaticCredentialProvider("key"))
    generate_content = AsyncMock(return_value=response, side_effect=error)
    fake = SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_content=generate_content)))
    monkeypatch.setattr(engine, "_get_client", lambda: fake)
    return engine, generate_content


def test_client_uses_configured_stub_driver() -> None:
    assert isinstance(SpeechSynthesisClient().driver, StubTTSEngine)


@pytest.mark.asyncio
async def test_generate_speech_forwards_voice_and_options() -> None:
    driver = RecordingDriver(b"\x01\x00" * 10)
    client = SpeechSynthesisClient(driver=driver)

    audio = await client.generate_speech("Hello world", "Puck", {"model": "tts-x"})

    assert audio == b"\x01\x00" * 10
    assert driver.calls == [("Hello world", "Puck", {"model": "tts-x"})]


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   \n"])
async def test_blank_text_is_never_submitted(text: str) -> None:
    driver = RecordingDriver(b"")
    client = SpeechSynthesisClient(driver=driver)

    with pytest.raises(ValueError):
        await client.generate_speech(text, "Zephyr")
    assert driver.calls == []


@pytest.mark.asyncio
async def test_decode_returns_buffer_at_configured_rate(make_pcm) -> None:
    client = SpeechSynthesisClient(driver=RecordingDriver(b""))

    buffer = client.decode(make_pcm(1.5))

    assert buffer.sample_rate == 24000
    assert buffer.duration == pytest.approx(1.5)


@pytest.mark.asyncio
async def test_stub_engine_sizes_silence_by_words() -> None:
    audio = await StubTTSEngine().synthesize("one two three", "Zephyr")
    # 3 words * 0.4 s * 24000 frames * 2 bytes
    assert len(audio) == 57600
    assert set(audio) == {0}


@pytest.mark.asyncio
async def test_gemini_engine_returns_inline_audio(monkeypatch: pytest.MonkeyPatch) -> None:
    engine, generate_content = _engine_with(monkeypatch, response=_audio_response(b"\x10\x00\x20\x00"))

    audio = await engine.synthesize("Hi", "Kore")

    assert audio == b"\x10\x00\x20\x00"
    config = generate_content.await_args.kwargs["config"]
    assert config.response_modalities == ["AUDIO"]
    assert config.speech_config.voice_config.prebuilt_voice_config.voice_name == "Kore"


@pytest.mark.asyncio
async def test_gemini_engine_decodes_base64_payload(monkeypatch: pytest.MonkeyPatch) -> None:
    payload = base64.b64encode(b"\x01\x02\x03\x04").decode("ascii")
    engine, _ = _engine_with(monkeypatch, response=_audio_response(payload))

    assert await engine.synthesize("Hi", "Zephyr") == b"\x01\x02\x03\x04"


@pytest.mark.asyncio
async def test_gemini_engine_falls_back_to_default_voice(monkeypatch: pytest.MonkeyPatch) -> None:
    engine, generate_content = _engine_with(monkeypatch, response=_audio_response(b"\x00\x00"))

    await engine.synthesize("Hi", "en-US-AriaNeural")

    config = generate_content.await_args.kwargs["config"]
    assert config.speech_config.voice_config.prebuilt_voice_config.voice_name == "Zephyr"


@pytest.mark.asyncio
async def test_gemini_engine_without_audio_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    engine, _ = _engine_with(monkeypatch, response=SimpleNamespace(candidates=[]))

    with pytest.raises(SpeechSynthesisError):
        await engine.synthesize("Hi", "Zephyr")


@pytest.mark.asyncio
async def test_gemini_engine_wraps_service_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    engine, _ = _engine_with(monkeypatch, error=RuntimeError("Requested entity was not found."))

    with pytest.raises(SpeechSynthesisError, match="Requested entity was not found"):
        await engine.synthesize("Hi", "Zephyr")
