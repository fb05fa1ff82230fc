"""
Device Simulator Utils - Configuration Management
=================================================

Configuration loading, validation, and merging utilities.

Features:
---------
1. YAML Loading
   - Load configuration from YAML files
   - Environment variable substitution (${VAR:default})

2. Validation
   - Type and bounds checking
   - Required field checking (persistence directory)

3. Merging
   - Override defaults with file and command-line values
   - Deep merge of nested sections

Configuration Structure:
-----------------------
batch_size: 100
tick_interval_ms: 100
persist_enabled: false
persist_directory: null
connection_target: "tcp://${INGEST_HOST:127.0.0.1}:9000"

signal:
  step: 0.01
  initial_phases:
    x: [-1.0, 1.0]     # [value, direction]
    y: [1.0, -1.0]
    z: [0.0, 1.0]

compression:
  level: 6

logging:
  level: INFO
  dir: logs
  file_output: false

Example:
--------
>>> from utils import load_config, SimulatorConfig
>>>
>>> raw = load_config("config/simulator.yaml")
>>> config = SimulatorConfig.from_dict(raw)
>>> config.batch_size
100

Author: Device Simulator Team
"""

import copy
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional, Tuple
import logging

import yaml

logger = logging.getLogger(__name__)


AXES = ("x", "y", "z")

DEFAULT_CONFIG: Dict[str, Any] = {
    "batch_size": 100,
    "tick_interval_ms": 100,
    "persist_enabled": False,
    "persist_directory": None,
    "connection_target": "memory://",
    "signal": {
        "step": 0.01,
        "initial_phases": {
            "x": [-1.0, 1.0],
            "y": [1.0, -1.0],
            "z": [0.0, 1.0],
        },
    },
    "compression": {
        "level": 6,
    },
    "logging": {
        "level": "INFO",
        "dir": "logs",
        "file_output": False,
    },
}


class ConfigError(Exception):
    """Configuration error."""
    pass


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML config file

    Returns:
        Configuration dictionary

    Raises:
        ConfigError: If file not found or invalid YAML
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Error loading config: {e}")

    if config is None:
        raise ConfigError(f"Empty config file: {config_path}")
    if not isinstance(config, dict):
        raise ConfigError(f"Config root must be a mapping: {config_path}")

    config = _substitute_env_vars(config)

    logger.info(f"Loaded config from {config_path}")

    return config


def _substitute_env_vars(obj: Any) -> Any:
    """
    Recursively substitute environment variables in config.

    Supports format: ${VAR_NAME:default_value}
    """
    if isinstance(obj, dict):
        return {k: _substitute_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_substitute_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        pattern = r'\$\{(\w+)(?::([^}]*))?\}'

        def replace_var(match):
            var_name = match.group(1)
            default = match.group(2) or ""
            return os.environ.get(var_name, default)

        return re.sub(pattern, replace_var, obj)
    else:
        return obj


def merge_configs(base: Dict[str, Any],
                 override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge override config into base config.

    Args:
        base: Base configuration
        override: Configuration to merge in (overrides base)

    Returns:
        Merged configuration

    Example:
        >>> merge_configs({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}})
        {'a': 1, 'b': {'c': 2, 'd': 3}}
    """
    result = copy.deepcopy(base)

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)

    return result


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary (defaults already merged in)

    Returns:
        True if valid

    Raises:
        ConfigError: If validation fails
    """
    batch_size = config.get("batch_size")
    if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size <= 0:
        raise ConfigError(f"batch_size must be a positive integer, got {batch_size!r}")

    interval = config.get("tick_interval_ms")
    if isinstance(interval, bool) or not isinstance(interval, (int, float)) or interval < 0:
        raise ConfigError(f"tick_interval_ms must be >= 0, got {interval!r}")

    if config.get("persist_enabled") and not config.get("persist_directory"):
        raise ConfigError("persist_directory is required when persist_enabled is true")

    target = config.get("connection_target")
    if not isinstance(target, str) or not target:
        raise ConfigError("connection_target must be a non-empty string")

    _validate_signal(config.get("signal", {}))
    _validate_compression(config.get("compression", {}))

    logger.debug("Configuration validation passed")
    return True


def _validate_signal(signal: Dict[str, Any]) -> None:
    """Validate oscillator parameters."""
    if not isinstance(signal, dict):
        raise ConfigError("signal config must be a dictionary")

    step = signal.get("step")
    if isinstance(step, bool) or not isinstance(step, (int, float)) or step <= 0:
        raise ConfigError(f"signal.step must be positive, got {step!r}")

    phases = signal.get("initial_phases", {})
    for axis in AXES:
        phase = phases.get(axis)
        if not isinstance(phase, (list, tuple)) or len(phase) != 2:
            raise ConfigError(f"signal.initial_phases.{axis} must be [value, direction]")
        value, direction = phase
        if not all(isinstance(v, (int, float)) for v in phase):
            raise ConfigError(f"signal.initial_phases.{axis} must be numeric")
        if not -1.0 <= float(value) <= 1.0:
            raise ConfigError(f"signal.initial_phases.{axis} value must be in [-1, 1]")
        if float(direction) not in (-1.0, 1.0):
            raise ConfigError(f"signal.initial_phases.{axis} direction must be +1 or -1")


def _validate_compression(compression: Dict[str, Any]) -> None:
    """Validate gzip parameters."""
    level = compression.get("level")
    if isinstance(level, bool) or not isinstance(level, int) or not 0 <= level <= 9:
        raise ConfigError(f"compression.level must be in 0-9, got {level!r}")


@dataclass
class SimulatorConfig:
    """Typed view of the simulator configuration."""
    batch_size: int = 100
    tick_interval_ms: float = 100
    persist_enabled: bool = False
    persist_directory: Optional[Path] = None
    connection_target: str = "memory://"
    signal_step: float = 0.01
    initial_phases: Dict[str, Tuple[float, float]] = field(default_factory=lambda: {
        axis: tuple(DEFAULT_CONFIG["signal"]["initial_phases"][axis]) for axis in AXES
    })
    compression_level: int = 6

    @classmethod
    def from_dict(cls, config: Optional[Dict[str, Any]] = None) -> "SimulatorConfig":
        """
        Build a validated config from a (partial) configuration dictionary.

        Args:
            config: Values overriding DEFAULT_CONFIG

        Returns:
            SimulatorConfig

        Raises:
            ConfigError: If the merged configuration is invalid
        """
        merged = merge_configs(DEFAULT_CONFIG, config or {})
        validate_config(merged)

        persist_directory = merged.get("persist_directory")
        phases = merged["signal"]["initial_phases"]

        return cls(
            batch_size=merged["batch_size"],
            tick_interval_ms=merged["tick_interval_ms"],
            persist_enabled=bool(merged["persist_enabled"]),
            persist_directory=Path(persist_directory) if persist_directory else None,
            connection_target=merged["connection_target"],
            signal_step=float(merged["signal"]["step"]),
            initial_phases={
                axis: (float(phases[axis][0]), float(phases[axis][1])) for axis in AXES
            },
            compression_level=merged["compression"]["level"],
        )

    @property
    def tick_interval(self) -> float:
        """Tick delay in seconds."""
        return self.tick_interval_ms / 1000.0
