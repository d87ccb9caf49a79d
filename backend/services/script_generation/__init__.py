"""Narration script generation from slide images."""
