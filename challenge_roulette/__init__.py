"""Challenge roulette: pick a random challenge, never one of the last three."""

__version__ = "0.1.0"
