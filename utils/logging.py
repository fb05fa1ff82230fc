"""
Device Simulator Utils - Logging & Diagnostics
==============================================

Logging setup and diagnostic helpers.

Features:
---------
1. Logging Setup
   - Console and rotating file handlers
   - Structured log format

2. Module Loggers
   - Consistent naming (logger per module)

3. Run Diagnostics
   - Error logging with context
   - Run statistics summary

Log Format:
-----------
[2026-10-19 12:30:45.123] [INFO    ] [pipeline.simulation] Send - 1712 bytes
[TIMESTAMP] [LEVEL] [MODULE] Message

Example:
--------
>>> from utils import setup_logging, get_logger
>>>
>>> setup_logging("logs/", level="DEBUG", file_output=False)
>>> logger = get_logger(__name__)
>>> logger.info("Simulator started")

Author: Device Simulator Team
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Dict, Any
from datetime import datetime


_loggers = {}


class StructuredFormatter(logging.Formatter):
    """Structured logging formatter."""

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record with structure.

        Args:
            record: Log record

        Returns:
            Formatted string
        """
        timestamp = datetime.fromtimestamp(record.created).strftime(
            "%Y-%m-%d %H:%M:%S.%f"
        )[:-3]

        message = (
            f"[{timestamp}] [{record.levelname:8}] "
            f"[{record.name}] {record.getMessage()}"
        )
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def setup_logging(log_dir: str = "logs",
                 level: str = "INFO",
                 console_output: bool = True,
                 file_output: bool = True) -> None:
    """
    Set up logging configuration.

    Args:
        log_dir: Directory for log files
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console_output: Enable console output
        file_output: Enable file output
    """
    log_level = getattr(logging, level.upper(), None)
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = StructuredFormatter()

    if console_output:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if file_output:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"device_simulator_{timestamp}.log"

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10*1024*1024,  # 10 MB
            backupCount=5,
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.info(f"Logging configured: level={level}, dir={log_dir}")


def get_logger(name: str) -> logging.Logger:
    """
    Get logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance
    """
    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)

    return _loggers[name]


def log_error(error: Exception,
             context: str = "") -> None:
    """
    Log an error with context.

    Args:
        error: Exception that occurred
        context: Context information
    """
    logger = get_logger(__name__)

    if context:
        logger.error(f"{context}: {error}")
    else:
        logger.error(f"Error: {error}")

    logger.debug("", exc_info=error)


def log_statistics(stats: Dict[str, Any]) -> None:
    """
    Log statistics summary.

    Args:
        stats: Statistics dictionary
    """
    logger = get_logger(__name__)

    logger.info("=== Run Summary ===")
    for key, value in stats.items():
        if isinstance(value, float):
            logger.info(f"{key}: {value:.4f}")
        else:
            logger.info(f"{key}: {value}")
