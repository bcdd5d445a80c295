"""Runtime configuration."""

from .settings import RouletteConfig, load_config

__all__ = ["RouletteConfig", "load_config"]
