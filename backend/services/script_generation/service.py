"""Script generation service implementation."""

from __future__ import annotations

import time

from services.credentials import CredentialProvider
from shared.config import config as service_config
from shared.exceptions import BatchGenerationError
from shared.logging_utils import setup_logging
from shared.models import SlideImage

from .drivers import GeminiScriptGenerator, ScriptGenerator, StubScriptGenerator


class ScriptGenerationClient:
    """Request narration text for one slide image or a batch of them."""

    def __init__(
        self,
        generator: ScriptGenerator | None = None,
        credentials: CredentialProvider | None = None,
    ) -> None:
        self.logger = setup_logging("script-generation")
        self.generator = generator or self._load_generator(
            service_config.get("script_driver", "gemini"), credentials
        )

    def _load_generator(
        self, driver_name: str, credentials: CredentialProvider | None
    ) -> ScriptGenerator:
        if driver_name.lower() == "stub":
            return StubScriptGenerator()
        if driver_name.lower() != "gemini":
            self.logger.warning("Unknown script driver '%s', falling back to gemini", driver_name)
        return GeminiScriptGenerator(credentials=credentials)

    async def generate_script(self, image: SlideImage, style_prompt: str, tone_label: str) -> str:
        start_time = time.time()
        script = await self.generator.generate(image, style_prompt, tone_label)
        self.logger.info(
            "Generated script for %s (%d chars) in %.2fs",
            image.filename or "slide",
            len(script),
            time.time() - start_time,
        )
        return script

    async def generate_scripts_batch(
        self, images: list[SlideImage], style_prompt: str, tone_label: str
    ) -> list[str]:
        if not images:
            return []

        start_time = time.time()
        scripts = await self.generator.generate_batch(images, style_prompt, tone_label)
        if len(scripts) != len(images):
            raise BatchGenerationError(
                f"Batch returned {len(scripts)} scripts for {len(images)} images"
            )

        self.logger.info(
            "Generated %d scripts in one batch in %.2fs", len(scripts), time.time() - start_time
        )
        return scripts
