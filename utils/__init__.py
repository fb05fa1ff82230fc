"""
Device Simulator Utils Module - Initialization
==============================================

Utility functions and helpers shared by the telemetry pipeline.

Submodules:
-----------
1. config.py   - Configuration loading and validation
2. logging.py  - Logging setup and diagnostics
3. errors.py   - Pipeline error taxonomy

Usage:
------
from utils import load_config, setup_logging, SimulatorConfig

setup_logging("logs/", level="INFO")
config = SimulatorConfig.from_dict(load_config("config/simulator.yaml"))

Version: 1.0.0
Author: Device Simulator Team
"""

from .config import (
    load_config,
    validate_config,
    merge_configs,
    ConfigError,
    SimulatorConfig,
    DEFAULT_CONFIG,
)

from .logging import (
    setup_logging,
    get_logger,
    log_error,
    log_statistics,
)

from .errors import (
    PipelineError,
    DeviceConnectionError,
    CompressionError,
    PersistenceError,
    FrameFormatError,
    SimulationCancelled,
)

__all__ = [
    # Config
    "load_config",
    "validate_config",
    "merge_configs",
    "ConfigError",
    "SimulatorConfig",
    "DEFAULT_CONFIG",
    # Logging
    "setup_logging",
    "get_logger",
    "log_error",
    "log_statistics",
    # Errors
    "PipelineError",
    "DeviceConnectionError",
    "CompressionError",
    "PersistenceError",
    "FrameFormatError",
    "SimulationCancelled",
]

__version__ = "1.0.0"
