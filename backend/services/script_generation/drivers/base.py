"""Base classes for script generation providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shared.models import SlideImage


class ScriptGenerator(ABC):
    """Abstract provider that writes narration text for slide images."""

    @abstractmethod
    async def generate(self, image: SlideImage, style_prompt: str, tone_label: str) -> str:
        """Return narration text for a single image."""

    @abstractmethod
    async def generate_batch(
        self, images: list[SlideImage], style_prompt: str, tone_label: str
    ) -> list[str]:
        """Return narration text for every image, aligned to input order."""
