"""Configuration loading and validation.

Values come from, in increasing priority: field defaults, an optional YAML
file, ``ROULETTE_<FIELD>`` environment variables and explicit overrides
(usually CLI flags).
"""

import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from ..errors import ConfigError
from ..storage.database import DEFAULT_DATA_DIR

ENV_PREFIX = "ROULETTE_"
BUNDLED_DECK = Path(__file__).resolve().parent.parent / "data" / "challenges.json"


class RouletteConfig(BaseModel):
    """Runtime settings for the roulette."""

    data_source: str = Field(
        default=str(BUNDLED_DECK), description="Path or http(s) URL of the challenge deck"
    )
    db_path: Path = Field(default=DEFAULT_DATA_DIR / "data.db")
    language: str = Field(default="en", description="Preferred text language")
    fallback_language: str = Field(default="en")
    sound_enabled: bool = Field(default=True)
    spin_steps_min: int = Field(default=15, ge=1)
    spin_steps_max: int = Field(default=25, ge=1)
    step_ms: int = Field(default=150, ge=0, description="Delay between slide hops")
    fetch_timeout: float = Field(default=10.0, gt=0)
    log_level: str = Field(default="INFO")
    log_file: Optional[Path] = Field(
        default=DEFAULT_DATA_DIR / "roulette.log",
        description="JSON log file; None logs to stderr",
    )

    @model_validator(mode="after")
    def _check_ranges(self) -> "RouletteConfig":
        if self.spin_steps_max < self.spin_steps_min:
            raise ValueError("spin_steps_max must be >= spin_steps_min")
        return self


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _env_values(environ: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for name in RouletteConfig.model_fields:
        raw = environ.get(ENV_PREFIX + name.upper())
        if raw is None:
            continue
        # Empty log file means stderr
        values[name] = None if (name == "log_file" and raw == "") else raw
    return values


def load_config(
    path: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> RouletteConfig:
    """Load configuration.

    Args:
        path: Optional YAML config file. A missing file is an error.
        overrides: Values that win over everything else; None values are ignored
        environ: Environment mapping, ``os.environ`` by default

    Returns:
        The validated configuration

    Raises:
        ConfigError: on a missing/invalid file or invalid values
    """
    values: dict[str, Any] = {}
    if path:
        values.update(_load_yaml(Path(path)))
    values.update(_env_values(os.environ if environ is None else environ))
    if overrides:
        values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return RouletteConfig(**values)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
