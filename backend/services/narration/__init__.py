"""Slide narration pipeline.

Owns the session's slide collection and drives it through:
- script generation (batch first, per-slide fallback)
- speech synthesis in small concurrent chunks
- audio previews written as WAV files
"""
