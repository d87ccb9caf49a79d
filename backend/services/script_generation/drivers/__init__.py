"""Script generation driver registry."""

from .base import ScriptGenerator
from .gemini import GeminiScriptGenerator
from .stub import StubScriptGenerator

__all__ = [
    "GeminiScriptGenerator",
    "ScriptGenerator",
    "StubScriptGenerator",
]
