"""Stub script generator producing deterministic narration."""

from __future__ import annotations

from shared.models import SlideImage

from .base import ScriptGenerator


class StubScriptGenerator(ScriptGenerator):
    """Generate placeholder narration without external services."""

    async def generate(self, image: SlideImage, style_prompt: str, tone_label: str) -> str:
        subject = image.filename or "this slide"
        parts = [f"Here we look at {subject}."]
        if tone_label:
            parts.append(f"The narration keeps a {tone_label.lower()} tone.")
        return " ".join(parts)

    async def generate_batch(
        self, images: list[SlideImage], style_prompt: str, tone_label: str
    ) -> list[str]:
        return [await self.generate(image, style_prompt, tone_label) for image in images]
