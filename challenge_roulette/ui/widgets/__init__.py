"""UI widgets."""

from .particles import ParticleField

__all__ = ["ParticleField"]
