"""
UWV Dynamics Logging Configuration
==================================

This module provides the logging setup shared by the dynamics model and the
configuration loader: a colored console handler, optional timestamped log
files, and a global logger instance that modules bind at import time.

Features:
- Structured logging with timestamps and log levels
- Optional log file per process run
- Console output with color coding
- Parameter-set summaries for tracing model reconfiguration
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import numpy as np


class ColoredFormatter(logging.Formatter):
    """Formatter that adds color codes to the level name of console output."""

    # Color codes for different log levels
    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m'   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        # Other handlers see the same record, restore the plain level name
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


class DynamicsLogger:
    """
    Main logging class for the dynamics package.

    Wraps a standard library logger with a console handler and, when a log
    directory is given, a file handler writing to a timestamped file.
    """

    def __init__(self,
                 name: str = "UWV_DYNAMICS",
                 log_dir: Optional[Path] = None,
                 log_level: str = "WARNING",
                 console_output: bool = True):
        """
        Initialize dynamics logger.

        Args:
            name: Logger name identifier
            log_dir: Directory for log files (no file output when None)
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
            console_output: Enable console output
        """
        self.name = name
        self.log_file: Optional[Path] = None

        # Setup logger
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, log_level.upper()))

        # Clear existing handlers
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        # File handler (optional)
        if log_dir is not None:
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.log_file = log_dir / f"{name}_{timestamp}.log"

            file_handler = logging.FileHandler(self.log_file)
            file_formatter = logging.Formatter(
                '%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

        # Console handler (optional)
        if console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_formatter = ColoredFormatter(
                '%(asctime)s | %(levelname)-8s | %(message)s',
                datefmt='%H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if self.log_file is not None:
            self.logger.info(f"Dynamics logger initialized: {self.log_file}")

    def log_parameter_summary(self, parameters) -> None:
        """Log the main figures of a vehicle parameter set."""
        if not self.logger.isEnabledFor(logging.INFO):
            return

        W = parameters.weight
        B = parameters.buoyancy
        buoyancy_percent = (B / W - 1.0) * 100
        self.logger.info(f"Vehicle parameters: fidelity={parameters.model_fidelity.name}, "
                         f"{len(parameters.damping_matrices)} damping matrices")
        self.logger.info(f"  Buoyancy: W={W:.1f}N, B={B:.1f}N ({buoyancy_percent:+.1f}% buoyancy)")
        self.logger.info(f"  Inertia diagonal: {np.array2string(np.diag(parameters.inertia_matrix), precision=2)}")
        self.logger.debug(f"  CG={parameters.center_of_gravity}, CB={parameters.center_of_buoyancy}")

    # Standard logging interface methods
    def debug(self, message: str) -> None:
        """Log debug message."""
        self.logger.debug(message)

    def info(self, message: str) -> None:
        """Log info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log error message."""
        self.logger.error(message)

    def critical(self, message: str) -> None:
        """Log critical message."""
        self.logger.critical(message)


# Global logger instance
_global_logger: Optional[DynamicsLogger] = None


def get_logger() -> DynamicsLogger:
    """Get the global dynamics logger instance ('UWV_DYNAMICS')."""
    global _global_logger
    if _global_logger is None:
        _global_logger = DynamicsLogger()
    return _global_logger


def setup_logging(log_level: str = "INFO", console_output: bool = True,
                  log_dir: Optional[Path] = None) -> DynamicsLogger:
    """Setup global logging configuration.

    The logger object bound by modules at import time is reconfigured in
    place, so later messages follow the new settings.

    Args:
        log_level: Logging level for the global logger
        console_output: Whether to enable console output
        log_dir: Optional directory to write log files to
    """
    global _global_logger
    _global_logger = DynamicsLogger("UWV_DYNAMICS", log_dir=log_dir, log_level=log_level,
                                    console_output=console_output)
    return _global_logger
