"""Slide pipeline orchestrator: owns the slide collection and drives script and audio generation."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from pathlib import Path
from typing import Any

from services.credentials import CredentialProvider, EnvironmentCredentialProvider
from services.retry import BackoffExecutor
from services.script_generation.service import ScriptGenerationClient
from services.tts_service.service import SpeechSynthesisClient
from shared.config import config
from shared.enums import ProgressOperation
from shared.exceptions import InvalidCredentialError
from shared.logging_utils import setup_logging
from shared.models import ProgressUpdate, SessionSettings, Slide, SlideImage
from shared.options import OptionCatalog, catalog as default_catalog

from .preview import AudioPlayer, PreviewRenderer
from .strategies import BatchScriptStrategy

logger = setup_logging("narration-orchestrator")

CHUNK_SIZE = 3

ProgressCallback = Callable[[ProgressUpdate], None]


class SlidePipelineOrchestrator:
    """Holds the session's slides and coordinates the generation services."""

    def __init__(
        self,
        settings: SessionSettings | None = None,
        script_client: ScriptGenerationClient | None = None,
        speech_client: SpeechSynthesisClient | None = None,
        credentials: CredentialProvider | None = None,
        catalog: OptionCatalog | None = None,
        media_root: Path | str | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        on_invalid_key: Callable[[], Any] | None = None,
        on_progress: ProgressCallback | None = None,
        player: AudioPlayer | None = None,
    ):
        self.settings = settings or SessionSettings()
        self.credentials = credentials or EnvironmentCredentialProvider()
        self.script_client = script_client or ScriptGenerationClient(credentials=self.credentials)
        self.speech_client = speech_client or SpeechSynthesisClient(credentials=self.credentials)
        self.catalog = catalog or default_catalog
        self.media_root = Path(media_root or config.get("media_root", "./media"))
        self.preview = PreviewRenderer(self.media_root, player=player)
        self.on_invalid_key = on_invalid_key
        self.on_progress = on_progress
        self._sleep = sleep

        self._slides: tuple[Slide, ...] = ()
        self.is_generating_all_scripts = False
        self.is_generating_all_audios = False
        self.audio_progress = 0.0

    # ------------------------------------------------------------------
    # Slide collection
    # ------------------------------------------------------------------

    @property
    def slides(self) -> tuple[Slide, ...]:
        return self._slides

    def get_slide(self, slide_id: str) -> Slide | None:
        for slide in self._slides:
            if slide.slide_id == slide_id:
                return slide
        return None

    def add_slides(self, images: Iterable[SlideImage]) -> list[Slide]:
        """Append one slide per image, keeping upload order."""
        new_slides = [Slide(image=image) for image in images]
        self._slides = self._slides + tuple(new_slides)
        logger.info(f"Added {len(new_slides)} slides ({len(self._slides)} total)")
        return new_slides

    def remove_slide(self, slide_id: str) -> bool:
        remaining = tuple(slide for slide in self._slides if slide.slide_id != slide_id)
        removed = len(remaining) != len(self._slides)
        self._slides = remaining
        return removed

    def update_script(self, slide_id: str, text: str) -> Slide | None:
        """Replace a slide's script; its audio no longer matches and is dropped."""
        return self._set_script(slide_id, text)

    def update_settings(self, **changes: Any) -> SessionSettings:
        """Change session options. Existing scripts are left as they are."""
        self.settings = SessionSettings(**{**self.settings.model_dump(), **changes})
        return self.settings

    def _update_slide(self, slide_id: str, **changes: Any) -> Slide | None:
        updated: Slide | None = None
        slides = []
        for slide in self._slides:
            if slide.slide_id == slide_id:
                slide = slide.model_copy(update=changes)
                updated = slide
            slides.append(slide)
        self._slides = tuple(slides)
        return updated

    def _set_script(self, slide_id: str, script: str) -> Slide | None:
        slide = self.get_slide(slide_id)
        if slide is None or slide.script == script:
            return slide
        return self._update_slide(slide_id, script=script, audio_bytes=None)

    def _store_audio(self, slide_id: str, source_text: str, audio_bytes: bytes) -> bool:
        slide = self.get_slide(slide_id)
        if slide is None:
            return False
        if slide.script != source_text:
            logger.info(f"Discarding audio for slide {slide_id}: script changed during synthesis")
            return False
        self._update_slide(slide_id, audio_bytes=audio_bytes)
        return True

    @property
    def scripts_ready(self) -> bool:
        return (
            bool(self._slides)
            and not self.is_generating_all_scripts
            and all(slide.script.strip() and not slide.is_generating_script for slide in self._slides)
        )

    @property
    def audio_ready(self) -> bool:
        return (
            bool(self._slides)
            and not self.is_generating_all_audios
            and all(slide.has_audio for slide in self._slides)
        )

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    def check_api_key(self) -> bool:
        return self.credentials.has_selected_api_key()

    def select_api_key(self) -> bool:
        self.credentials.open_select_key()
        return self.check_api_key()

    def handle_invalid_key(self) -> None:
        """Forget the rejected key and let the host ask for a new one."""
        self.credentials.invalidate()
        if self.on_invalid_key is not None:
            self.on_invalid_key()

    def _executor(self, attempts_key: str, default_attempts: int) -> BackoffExecutor:
        return BackoffExecutor(
            max_retries=int(config.get_pipeline_value(f"retry.{attempts_key}", default_attempts)),
            base_delay=float(config.get_pipeline_value("retry.base_delay", 1.0)),
            on_invalid_key=self.handle_invalid_key,
            sleep=self._sleep,
        )

    def _style_prompt(self) -> str:
        return self.catalog.style_prompt(self.settings.style_id)

    def _tone_label(self) -> str:
        return self.catalog.tone_label(self.settings.tone_id)

    # ------------------------------------------------------------------
    # Scripts
    # ------------------------------------------------------------------

    async def generate_single_script(self, slide_id: str) -> None:
        slide = self.get_slide(slide_id)
        if slide is None or slide.is_generating_script:
            return

        self._update_slide(slide_id, is_generating_script=True)
        try:
            await self._run_single_script(slide_id)
        finally:
            self._update_slide(slide_id, is_generating_script=False)

    async def _run_single_script(self, slide_id: str) -> None:
        slide = self.get_slide(slide_id)
        if slide is None:
            return

        image = slide.image
        style_prompt = self._style_prompt()
        tone_label = self._tone_label()
        executor = self._executor("single_script_attempts", 5)
        try:
            script = await executor.run(
                lambda: self.script_client.generate_script(image, style_prompt, tone_label)
            )
        except InvalidCredentialError:
            raise
        except Exception as exc:
            logger.warning(f"Script generation failed for slide {slide_id}: {exc}")
            return

        self._set_script(slide_id, script)

    async def generate_all_scripts(self) -> None:
        """Generate every script in one batch request, or slide by slide if that fails."""
        if self.is_generating_all_scripts:
            return

        # slides with a single generation in flight keep it; the batch covers the rest
        targets = [slide for slide in self._slides if not slide.is_generating_script]
        if not targets:
            return

        self.is_generating_all_scripts = True
        slide_ids = [slide.slide_id for slide in targets]
        images = [slide.image for slide in targets]
        for slide_id in slide_ids:
            self._update_slide(slide_id, is_generating_script=True)

        style_prompt = self._style_prompt()
        tone_label = self._tone_label()
        executor = self._executor("batch_script_attempts", 3)
        strategy = BatchScriptStrategy(
            slide_ids,
            batch_call=lambda: executor.run(
                lambda: self.script_client.generate_scripts_batch(images, style_prompt, tone_label)
            ),
            apply_results=self._apply_batch_scripts,
            single_call=self._run_single_script,
        )

        try:
            used_batch = await strategy.run()
            logger.info(
                f"Scripts generated for {len(slide_ids)} slides "
                f"({'batch' if used_batch else 'sequential fallback'})"
            )
        finally:
            self.is_generating_all_scripts = False
            for slide_id in slide_ids:
                self._update_slide(slide_id, is_generating_script=False)

    def _apply_batch_scripts(self, scripts: dict[str, str]) -> None:
        for slide_id, script in scripts.items():
            # an empty entry keeps whatever the slide already had
            if script and script.strip():
                self._set_script(slide_id, script)

    # ------------------------------------------------------------------
    # Audio
    # ------------------------------------------------------------------

    async def generate_all_audios(self) -> None:
        """Synthesize narration for every scripted slide that has no audio yet."""
        if self.is_generating_all_audios:
            return

        pending = [
            slide.slide_id
            for slide in self._slides
            if not slide.has_audio and slide.script.strip()
        ]
        if not pending:
            logger.info("No slides need audio")
            return

        self.is_generating_all_audios = True
        self.audio_progress = 0.0
        total = len(pending)
        completed = 0
        chunk_size = int(config.get_pipeline_value("audio.chunk_size", CHUNK_SIZE))
        executor = self._executor("audio_attempts", 5)

        async def synthesize(slide_id: str) -> None:
            nonlocal completed
            if await self._synthesize_slide(slide_id, executor):
                completed += 1
                self._report_audio_progress(completed, total, slide_id)

        try:
            for start in range(0, total, chunk_size):
                chunk = pending[start:start + chunk_size]
                results = await asyncio.gather(
                    *(synthesize(slide_id) for slide_id in chunk), return_exceptions=True
                )
                for slide_id, result in zip(chunk, results):
                    if isinstance(result, InvalidCredentialError):
                        raise result
                    if isinstance(result, Exception):
                        logger.warning(f"Audio generation failed for slide {slide_id}: {result}")
            logger.info(f"Generated audio for {completed}/{total} slides")
        finally:
            self.is_generating_all_audios = False
            for slide_id in pending:
                self._update_slide(slide_id, is_generating_audio=False)

    async def _synthesize_slide(self, slide_id: str, executor: BackoffExecutor) -> bool:
        slide = self.get_slide(slide_id)
        if slide is None or slide.is_generating_audio or not slide.script.strip():
            return False

        script = slide.script
        voice_id = self.settings.voice_id
        self._update_slide(slide_id, is_generating_audio=True)
        try:
            audio_bytes = await executor.run(
                lambda: self.speech_client.generate_speech(script, voice_id)
            )
        except InvalidCredentialError:
            raise
        except Exception as exc:
            logger.warning(f"Audio generation failed for slide {slide_id}: {exc}")
            return False
        finally:
            self._update_slide(slide_id, is_generating_audio=False)

        return self._store_audio(slide_id, script, audio_bytes)

    def _report_audio_progress(self, completed: int, total: int, slide_id: str) -> None:
        self.audio_progress = completed / total * 100
        if self.on_progress is not None:
            self.on_progress(
                ProgressUpdate(
                    operation=ProgressOperation.AUDIO,
                    progress=self.audio_progress,
                    completed=completed,
                    total=total,
                    slide_id=slide_id,
                )
            )

    async def handle_preview_audio(self, slide_id: str, text: str) -> Path | None:
        """Synthesize ``text`` and write a listenable preview; returns the WAV path."""
        if not text or not text.strip():
            return None

        slide = self.get_slide(slide_id)
        if slide is not None and slide.is_generating_audio:
            logger.info(f"Audio for slide {slide_id} is already being generated; preview skipped")
            return None

        voice_id = self.settings.voice_id
        executor = self._executor("preview_attempts", 3)
        self._update_slide(slide_id, is_generating_audio=True)
        try:
            audio_bytes = await executor.run(
                lambda: self.speech_client.generate_speech(text, voice_id)
            )
            self._store_audio(slide_id, text, audio_bytes)
            buffer = self.speech_client.decode(audio_bytes)
            return self.preview.render(slide_id, buffer, self.settings.voice_speed)
        except InvalidCredentialError:
            raise
        except Exception as exc:
            logger.warning(f"Audio preview failed for slide {slide_id}: {exc}")
            return None
        finally:
            self._update_slide(slide_id, is_generating_audio=False)
