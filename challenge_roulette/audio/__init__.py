"""Synthesized sound effects."""

from .tones import TonePlayer, slide_frequency, spin_schedule

__all__ = ["TonePlayer", "slide_frequency", "spin_schedule"]
