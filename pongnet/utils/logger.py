"""
Centralized logging infrastructure for PongNet.

Usage:
    from pongnet.utils.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Training started")
    logger.debug("Predicted: 212 Label: 205")
    logger.warning("NaN loss")

Configuration:
    Set LOG_LEVEL in config.py (or --log-level) to control verbosity:
    - DEBUG: Per-frame predictions and labels
    - INFO: Fit results and state transitions (default)
    - WARNING: Numeric anomalies and skipped fits
    - ERROR: Errors only
"""

import logging
import math
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional


class LogLevel(Enum):
    """Log levels for configuration."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


# Module-level state
_initialized = False
_auto_initialized = False
_file_handler: Optional[logging.FileHandler] = None

ROOT_LOGGER_NAME = 'pongnet'
LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to console output."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m',
    }

    def __init__(self, fmt: str):
        super().__init__(fmt)
        self.use_colors = sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if self.use_colors:
            # Color a copy so other handlers still see the plain level name
            record = logging.makeLogRecord(record.__dict__)
            color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
            record.levelname = f"{color}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)


def setup_logging(
    log_dir: str = 'logs',
    level: LogLevel = LogLevel.INFO,
    file_output: bool = True,
    log_filename: Optional[str] = None,
) -> None:
    """
    Initialize the logging system.

    Args:
        log_dir: Directory for log files
        level: Minimum log level to capture
        file_output: Whether to output to file
        log_filename: Custom log filename (default: pongnet_YYYYMMDD_HHMMSS.log)
    """
    global _initialized, _auto_initialized, _file_handler

    # An explicit call replaces the console-only defaults installed by get_logger()
    if _initialized and not _auto_initialized:
        return

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level.value)
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()
    _file_handler = None

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level.value)
    console_handler.setFormatter(ColoredFormatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)

    # File handler without colors
    if file_output:
        log_root = Path(log_dir)
        log_root.mkdir(parents=True, exist_ok=True)

        if log_filename is None:
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            log_filename = f'pongnet_{timestamp}.log'

        log_path = log_root / log_filename
        _file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
        _file_handler.setLevel(logging.DEBUG)  # Capture everything in file
        _file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(_file_handler)

    _initialized = True
    _auto_initialized = False
    root_logger.info(f"Logging initialized (level={level.name}, file={file_output})")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance configured with project settings

    Example:
        logger = get_logger(__name__)
        logger.info("Message")
    """
    # Auto-initialize with defaults if not already done (console only, no stray log files)
    global _auto_initialized
    if not _initialized:
        setup_logging(file_output=False)
        _auto_initialized = True

    # Strip package prefix for cleaner names
    if name.startswith(ROOT_LOGGER_NAME + '.'):
        name = name[len(ROOT_LOGGER_NAME) + 1:]

    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')


def get_log_path() -> Optional[Path]:
    """Get the current log file path."""
    if _file_handler is not None:
        return Path(_file_handler.baseFilename)
    return None


def log_fit_result(
    generation: int,
    loss: float,
    epochs: int,
    samples: int,
    version: Optional[int] = None,
) -> None:
    """
    Log the outcome of one fit pass in a consistent format.

    Args:
        generation: Number of completed fits so far
        loss: First-epoch loss (may be NaN)
        epochs: Epochs actually run
        samples: Samples consumed by the fit
        version: Model version after the fit (if available)
    """
    logger = get_logger('training')

    metrics = [
        f"gen={generation}",
        f"loss={loss:.6f}",
        f"epochs={epochs}",
        f"samples={samples}",
    ]
    if version is not None:
        metrics.append(f"version={version}")

    if math.isfinite(loss):
        logger.info(" | ".join(metrics))
    else:
        logger.warning(" | ".join(metrics) + " | non-finite loss")
