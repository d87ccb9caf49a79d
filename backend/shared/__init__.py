"""Shared configuration, models and utilities for the narration pipeline."""
