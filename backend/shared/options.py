"""
Catalog of narration styles, tones and voices.
Handles loading and validation of the YAML option file.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from shared.models import StyleOption, ToneOption, VoiceOption

logger = logging.getLogger(__name__)


class OptionCatalog:
    """Style, tone and voice options selectable for a session."""

    REQUIRED_SECTIONS = ("styles", "tones", "voices")

    def __init__(self, catalog_path: str | None = None):
        if catalog_path is None:
            catalog_path = os.path.join(os.path.dirname(__file__), "options.yaml")

        self.catalog_path = Path(catalog_path)
        self._catalog = self._load_catalog()
        if not self.validate_catalog():
            raise ValueError(f"Invalid option catalog: {self.catalog_path}")

    def _load_catalog(self) -> dict[str, Any]:
        """Load catalog from YAML file."""
        try:
            with open(self.catalog_path, encoding="utf-8") as file:
                catalog = yaml.safe_load(file) or {}
                logger.info(f"Loaded option catalog from {self.catalog_path}")
                return catalog
        except FileNotFoundError:
            logger.error(f"Option catalog not found: {self.catalog_path}")
            raise
        except yaml.YAMLError as e:
            logger.error(f"Error parsing option catalog: {e}")
            raise

    def validate_catalog(self) -> bool:
        """Validate the loaded catalog."""
        for section in self.REQUIRED_SECTIONS:
            if not self._catalog.get(section):
                logger.error(f"Missing required catalog section: {section}")
                return False

        for section in self.REQUIRED_SECTIONS:
            for option_id, option in self._catalog[section].items():
                if "label" not in option:
                    logger.error(f"Missing 'label' for {section} option '{option_id}'")
                    return False

        defaults = self._catalog.get("defaults", {})
        for key, section in (("style", "styles"), ("tone", "tones"), ("voice", "voices")):
            default_id = defaults.get(key)
            if default_id is not None and default_id not in self._catalog[section]:
                logger.error(f"Default {key} '{default_id}' is not defined in {section}")
                return False

        return True

    def get_styles(self) -> list[StyleOption]:
        return [StyleOption(id=key, **value) for key, value in self._catalog["styles"].items()]

    def get_tones(self) -> list[ToneOption]:
        return [ToneOption(id=key, **value) for key, value in self._catalog["tones"].items()]

    def get_voices(self) -> list[VoiceOption]:
        return [VoiceOption(id=key, **value) for key, value in self._catalog["voices"].items()]

    def get_style(self, style_id: str) -> StyleOption | None:
        data = self._catalog["styles"].get(style_id)
        return StyleOption(id=style_id, **data) if data else None

    def get_tone(self, tone_id: str) -> ToneOption | None:
        data = self._catalog["tones"].get(tone_id)
        return ToneOption(id=tone_id, **data) if data else None

    def get_voice(self, voice_id: str) -> VoiceOption | None:
        data = self._catalog["voices"].get(voice_id)
        return VoiceOption(id=voice_id, **data) if data else None

    def style_prompt(self, style_id: str) -> str:
        """Prompt text for a style, or an empty directive for unknown ids."""
        style = self.get_style(style_id)
        if style is None:
            logger.warning(f"Unknown style '{style_id}', generating without a style directive")
            return ""
        return style.prompt

    def tone_label(self, tone_id: str) -> str:
        """Label for a tone, or an empty directive for unknown ids."""
        tone = self.get_tone(tone_id)
        if tone is None:
            logger.warning(f"Unknown tone '{tone_id}', generating without a tone directive")
            return ""
        return tone.label

    def get_default(self, key: str) -> str | None:
        return self._catalog.get("defaults", {}).get(key)


# Global catalog instance
catalog = OptionCatalog()
