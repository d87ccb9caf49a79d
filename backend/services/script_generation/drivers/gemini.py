"""Gemini script generation provider."""

from __future__ import annotations

import json
from typing import Any

from google import genai
from google.genai import types

from services.credentials import CredentialProvider
from shared.config import config as service_config
from shared.exceptions import BatchGenerationError, MissingCredentialError, ScriptGenerationError
from shared.gemini_client import create_gemini_client
from shared.models import SlideImage

from ..prompts import build_batch_prompt, build_single_prompt, slide_marker
from .base import ScriptGenerator


class GeminiScriptGenerator(ScriptGenerator):
    """Multimodal Gemini model that writes narration from slide images."""

    def __init__(
        self,
        credentials: CredentialProvider | None = None,
        model: str | None = None,
        temperature: float = 0.7,
    ) -> None:
        self.credentials = credentials
        self.model: str = model or service_config.get("script_model", "gemini-2.5-flash")
        self.temperature = temperature
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

    @staticmethod
    def _image_part(image: SlideImage) -> types.Part:
        return types.Part.from_bytes(data=image.data, mime_type=image.mime_type)

    async def generate(self, image: SlideImage, style_prompt: str, tone_label: str) -> str:
        client = self._get_client()
        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=[self._image_part(image), build_single_prompt(style_prompt, tone_label)],
                config=types.GenerateContentConfig(temperature=self.temperature),
            )
        except Exception as exc:
            raise ScriptGenerationError(f"Gemini script generation failed: {exc!s}") from exc

        text = (response.text or "").strip()
        if not text:
            raise ScriptGenerationError("Gemini returned an empty script")
        return text

    async def generate_batch(
        self, images: list[SlideImage], style_prompt: str, tone_label: str
    ) -> list[str]:
        contents: list[Any] = [build_batch_prompt(len(images), style_prompt, tone_label)]
        for index, image in enumerate(images):
            contents.append(slide_marker(index))
            contents.append(self._image_part(image))

        client = self._get_client()
        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=types.GenerateContentConfig(
                    temperature=self.temperature,
                    response_mime_type="application/json",
                    response_schema=list[str],
                ),
            )
        except Exception as exc:
            raise BatchGenerationError(f"Gemini batch script generation failed: {exc!s}") from exc

        payload = response.parsed
        if payload is None:
            try:
                payload = json.loads(response.text or "")
            except json.JSONDecodeError as exc:
                raise BatchGenerationError("Gemini batch response was not valid JSON") from exc

        if not isinstance(payload, list):
            raise BatchGenerationError("Gemini batch response was not a JSON array")
        return [str(item).strip() if item is not None else "" for item in payload]
