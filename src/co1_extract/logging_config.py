"""Logging configuration and utilities."""

import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .config import LoggingConfig


class ColoredFormatter(logging.Formatter):
    """Formatter adding ANSI colors to the level name on a terminal."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if self.use_colors and levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


class ProgressLogger:
    """Progress reporting while working through taxonomy IDs."""

    def __init__(self, logger: logging.Logger, total: int, operation: str = "Processing"):
        self.logger = logger
        self.total = total
        self.operation = operation
        self.processed = 0
        self.failed = 0
        self.start_time = datetime.now()

    def update(self, item: str, success: bool = True, detail: str = ""):
        """Record one finished item."""
        self.processed += 1
        if not success:
            self.failed += 1

        status = "✓" if success else "✗"
        message = f"{self.operation}: {status} {item} [{self.processed}/{self.total}]"
        if detail:
            message += f" - {detail}"
        self.logger.info(message)

    def complete(self):
        """Log completion summary."""
        elapsed = (datetime.now() - self.start_time).total_seconds()
        self.logger.info(
            f"{self.operation} complete: {self.processed} items in {elapsed:.1f}s "
            f"({self.failed} failed)"
        )


def setup_logging(
    config: Optional[LoggingConfig] = None,
    log_file: Optional[str] = None,
    console: bool = True,
    quiet: bool = False,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5
) -> logging.Logger:
    """
    Configure root logging with a rotating file and a console handler.

    Args:
        config: Logging settings (level, directory, colors)
        log_file: Custom log file name inside the log directory
        console: Enable console output
        quiet: Only errors reach the console
        max_bytes: Maximum log file size before rotation
        backup_count: Number of rotated files to keep

    Returns:
        The package logger
    """
    config = config or LoggingConfig()
    level = getattr(logging, config.level.upper())

    log_path = Path(config.directory)
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = log_path / (log_file or f"co1_extract_{datetime.now().strftime('%Y%m%d')}.log")

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.DEBUG)

    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=max_bytes,
        backupCount=backup_count
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    root_logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.ERROR if quiet else level)
        console_handler.setFormatter(ColoredFormatter('%(levelname)s - %(message)s', use_colors=config.colors))
        root_logger.addHandler(console_handler)

    logger = logging.getLogger('co1_extract')
    logger.info(f"Logging initialized - Level: {config.level}, File: {log_file}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(f"co1_extract.{name}")


def log_api_call(api_name: str, endpoint: str, params: Dict[str, Any], response_time: float, success: bool):
    """Log API call details."""
    logger = logging.getLogger('co1_extract.api')

    if success:
        logger.debug(f"API call: {api_name} - {endpoint} (params: {params}, response_time: {response_time:.2f}s)")
    else:
        logger.warning(f"API call failed: {api_name} - {endpoint} (params: {params}, response_time: {response_time:.2f}s)")


class LogTimer:
    """Context manager timing an operation."""

    def __init__(self, operation: str, logger: Optional[logging.Logger] = None):
        self.operation = operation
        self.logger = logger or logging.getLogger('co1_extract.performance')
        self.start_time = None
        self.elapsed = 0.0

    def __enter__(self):
        self.start_time = datetime.now()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = (datetime.now() - self.start_time).total_seconds()
        if exc_type is None:
            self.logger.debug(f"{self.operation} completed in {self.elapsed:.2f}s")
        else:
            self.logger.debug(f"{self.operation} failed after {self.elapsed:.2f}s")
