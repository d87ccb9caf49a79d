import pytest

from shared.enums import VoiceGender
from shared.options import OptionCatalog, catalog


def test_default_catalog_contents() -> None:
    assert catalog.get_default("style") == "general"
    assert catalog.get_default("voice") == "Zephyr"
    assert {style.id for style in catalog.get_styles()} >= {"general", "education"}
    assert catalog.get_voice("Puck").gender in set(VoiceGender)
    assert len(catalog.get_tones()) == 5
    voice_ids = [voice.id for voice in catalog.get_voices()]
    assert voice_ids[:2] == ["Zephyr", "Puck"]


def test_style_prompt_and_tone_label() -> None:
    assert catalog.style_prompt("education").startswith("Narrate like a patient teacher")
    assert catalog.tone_label("calm") == "Calm"


def test_unknown_ids_yield_empty_directive(caplog: pytest.LogCaptureFixture) -> None:
    assert catalog.style_prompt("haiku") == ""
    assert catalog.tone_label("sarcastic") == ""
    assert "Unknown style 'haiku'" in caplog.text


def test_invalid_catalog_is_rejected(tmp_path) -> None:
    path = tmp_path / "options.yaml"
    path.write_text(
        "defaults:\n  style: missing\n"
        "styles:\n  general:\n    label: General\n"
        "tones:\n  calm:\n    label: Calm\n"
        "voices:\n  Zephyr:\n    label: Zephyr\n",
        encoding="utf-8",
    )

    with pytest.raises(ValueError):
        OptionCatalog(str(path))


def test_missing_catalog_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        OptionCatalog(str(tmp_path / "nope.yaml"))
