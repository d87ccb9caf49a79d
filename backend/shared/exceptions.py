"""
Domain errors raised by the narration pipeline.
"""


class NarrationPipelineError(Exception):
    """Base class for all pipeline errors."""


class MissingCredentialError(NarrationPipelineError):
    """No API key has been selected in the credential provider."""


class InvalidCredentialError(NarrationPipelineError):
    """The generative service rejected the selected API key."""


class ScriptGenerationError(NarrationPipelineError):
    """Narration text could not be generated."""


class BatchGenerationError(ScriptGenerationError):
    """A batched script request failed or returned a misaligned result."""


class SpeechSynthesisError(NarrationPipelineError):
    """Speech audio could not be synthesized."""


class CompositionError(NarrationPipelineError):
    """The video could not be composed."""


class MissingAudioError(CompositionError):
    """A slide reached composition without synthesized audio."""

    def __init__(self, slide_id: str) -> None:
        super().__init__(f"Slide {slide_id} has no narration audio")
        self.slide_id = slide_id


class CompositionInProgressError(CompositionError):
    """A second composition was requested while one is running."""
