"""Engine configuration: YAML schema validation and loading.

The curve engine itself takes every parameter explicitly (tolerance, hit
radius); this module holds the defaults a host application feeds into those
calls, validated with pydantic for fail-fast errors:

    - Tessellation: default flattening tolerance
    - Hit testing: default pick radius around knot anchors
    - Logging: level, optional file, JSON / colour switches

The subdivision depth cap is NOT configurable; it is a hard ceiling in
:mod:`spline_engine.geometry`.

Usage:
    from spline_engine import config

    cfg = config.load_engine_config()                  # bundled default
    cfg = config.load_engine_config("my_engine.yaml")  # explicit path
    config.apply_logging(cfg)
    points = curve.polyline(cfg.tessellation.tolerance)
"""

from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .logging_config import setup_logging

DEFAULT_CONFIG_PATH = Path(__file__).parent / "configs" / "engine.v1.yaml"


class ConfigError(ValueError):
    """Raised when an engine config file fails validation."""

    pass


# ============================================================================
# ENGINE SCHEMA V1
# ============================================================================

class TessellationConfig(BaseModel):
    """Polyline flattening defaults."""
    tolerance: float = Field(0.25, gt=0.0, description="Max midpoint-to-chord deviation")


class HitTestConfig(BaseModel):
    """Knot picking defaults."""
    radius: float = Field(8.0, gt=0.0, description="Pick radius around knot anchors")


class LoggingConfig(BaseModel):
    """Root logger settings passed to setup_logging()."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: Optional[str] = Field(None, description="Log file path; None for console only")
    json_lines: bool = Field(False, alias="json", description="JSON lines in the log file")
    color: bool = True

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('level', mode='before')
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class EngineConfigV1(BaseModel):
    """engine.v1.yaml schema."""
    schema_version: str = Field("engine.v1", alias="schema", description="Schema version")
    tessellation: TessellationConfig = Field(default_factory=TessellationConfig)
    hit_test: HitTestConfig = Field(default_factory=HitTestConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "engine.v1":
            raise ValueError(f"Expected schema 'engine.v1', got '{v}'")
        return v


# ============================================================================
# LOADERS
# ============================================================================

def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a YAML file with ``yaml.safe_load``.

    Raises
    ------
    FileNotFoundError
        If the file doesn't exist
    yaml.YAMLError
        If parsing fails
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e


def load_engine_config(path: Optional[Union[str, Path]] = None) -> EngineConfigV1:
    """Load and validate an engine config.

    Parameters
    ----------
    path : Union[str, Path], optional
        Path to an engine.v1 YAML file; the bundled default when omitted

    Returns
    -------
    EngineConfigV1
        Validated configuration

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ConfigError
        If validation fails (message names the file and offending keys)
    """
    path = DEFAULT_CONFIG_PATH if path is None else Path(path)
    data = load_yaml(path)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Engine config at {path} must be a mapping, got {type(data).__name__}")
    try:
        return EngineConfigV1(**data)
    except Exception as e:
        raise ConfigError(f"Engine config validation failed at {path}: {e}") from e


def apply_logging(cfg: EngineConfigV1, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Configure the root logger from ``cfg.logging``."""
    log = cfg.logging
    return setup_logging(
        log.level,
        log.file,
        json=log.json_lines,
        color=log.color,
        context=context,
    )
