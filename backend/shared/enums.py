"""
Enums and constants used across the application.
"""

from enum import Enum


class AspectRatio(str, Enum):
    """Output video orientation."""

    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"


class VoiceGender(str, Enum):
    """Available voice genders for TTS."""

    MALE = "male"
    FEMALE = "female"
    NEUTRAL = "neutral"


class ProgressOperation(str, Enum):
    """Bulk operations that report progress."""

    AUDIO = "audio"
    VIDEO = "video"
