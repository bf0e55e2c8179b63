"""
Unified Logging Configuration for the Batch Summarizer

This module provides a centralized logging system that combines:
- Console output through the standard logging framework
- The append-only processing log (one "[ISO-8601 timestamp] message" line per event)
- Performance timing via Timer context manager

All modules should import logging functions from this module:
    from batch_summarizer.logging_config import debug_log, info, warning, error, Timer

The module respects DEBUG_MODE from config:
- DEBUG_MODE=True: debug messages shown on console and written to the processing log
- DEBUG_MODE=False: only info, warnings and errors are shown and recorded

The processing log is disabled until configure_processing_log() is called,
so importing the package never creates files.
"""

import logging
import sys
import threading
import time
from datetime import datetime, timezone
from pathlib import Path

from batch_summarizer.config import APP_NAME, DEBUG_MODE

LOG_FORMAT = "%(message)s"
DEBUG_LOG_FORMAT = "[%(levelname)s %(asctime)s] %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


# =============================================================================
# Processing Log (append-only, write-only)
# =============================================================================

def iso_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision (e.g. 2024-01-31T12:00:00.000Z)."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class _ProcessingLogWriter:
    """
    Appends timestamped lines to the processing log.

    Writes are serialized with a lock because several documents can log
    from worker threads at the same time. The log is never read back.
    """

    def __init__(self):
        self._log_file = None
        self._path: Path | None = None
        self._lock = threading.Lock()

    @property
    def path(self) -> Path | None:
        return self._path

    def open(self, path: Path):
        """Open (or switch to) the given log file in append mode."""
        with self._lock:
            if self._log_file:
                self._log_file.close()
            path = Path(path)
            path.parent.mkdir(parents=True, exist_ok=True)
            self._log_file = open(path, 'a', encoding='utf-8')
            self._path = path

    def write(self, message: str):
        """Append one line per message line; no-op while disabled."""
        with self._lock:
            if not self._log_file:
                return
            timestamp = iso_timestamp()
            for line in message.splitlines() or ['']:
                self._log_file.write(f"[{timestamp}] {line}\n")
            self._log_file.flush()

    def close(self):
        with self._lock:
            if self._log_file:
                self._log_file.close()
            self._log_file = None
            self._path = None


# Global processing log instance
_processing_log = _ProcessingLogWriter()


# =============================================================================
# Standard Python Logging Setup
# =============================================================================

def _setup_standard_logging() -> logging.Logger:
    """
    Configure the standard Python logging framework.

    Returns:
        Configured logger instance for the batch summarizer
    """
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(logging.DEBUG if DEBUG_MODE else logging.INFO)

    # Prevent duplicate handlers if called multiple times
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if DEBUG_MODE else logging.INFO)
    if DEBUG_MODE:
        console_handler.setFormatter(logging.Formatter(DEBUG_LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    else:
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)

    return logger


# Global standard logger instance
_logger = _setup_standard_logging()


def configure_processing_log(path: Path | str | None):
    """
    Enable the append-only processing log at the given path.

    Args:
        path: Log file location. None leaves the processing log disabled.
    """
    if path is None:
        return
    _processing_log.open(Path(path))
    debug_log(f"[LOG] Processing log: {_processing_log.path}")


def close_processing_log():
    """
    Close the processing log gracefully.

    Call this at application shutdown to ensure all logs are flushed.
    """
    _processing_log.close()


# =============================================================================
# Timer Context Manager
# =============================================================================

class Timer:
    """
    Measures a block and logs the elapsed time in debug mode.

    Usage:
        with Timer("PDF text extraction") as timer:
            text = extract(path)
        print(timer.elapsed_seconds)
    """

    def __init__(self, label: str, auto_log: bool = True):
        self.label = label
        self.auto_log = auto_log
        self._started: float | None = None
        self.elapsed_seconds: float | None = None

    def __enter__(self):
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_seconds = time.perf_counter() - self._started
        if self.auto_log:
            outcome = "failed after" if exc_type else "took"
            debug_log(f"[TIMER] {self.label} {outcome} {_short_duration(self.elapsed_seconds)}")
        return False

    def get_duration_ms(self) -> float:
        """Elapsed milliseconds; ValueError while the block is still running."""
        if self.elapsed_seconds is None:
            raise ValueError(f"Timer '{self.label}' has not finished")
        return self.elapsed_seconds * 1000


# =============================================================================
# Public Logging Functions
# =============================================================================

def debug_log(message: str):
    """
    Log a debug message.

    Shown on console and written to the processing log only in DEBUG_MODE.

    Args:
        message: The message to log (prefix with [MODULE] for clarity)

    Example:
        debug_log("[OLLAMA] Prompt length: 1200 chars")
    """
    if DEBUG_MODE:
        _processing_log.write(f"[DEBUG] {message}")
    _logger.debug(message)


def debug(message: str):
    """Alias for debug_log."""
    debug_log(message)


def info(message: str):
    """
    Log an informational message.

    Info messages are the regular processing events: they go to the console
    and to the processing log.
    """
    _processing_log.write(message)
    _logger.info(message)


def warning(message: str):
    """Log a warning message (console and processing log)."""
    _processing_log.write(message)
    _logger.warning(message)


def error(message: str, exc_info: bool = False):
    """
    Log an error message with optional exception traceback.

    Args:
        message: The error message to log
        exc_info: If True, include exception traceback (only in DEBUG_MODE)
    """
    _processing_log.write(message)
    _logger.error(message, exc_info=exc_info and DEBUG_MODE)


def format_duration(elapsed_seconds: float) -> str:
    """
    Format a run duration as hours, minutes and seconds.

    Example:
        >>> format_duration(3725.4)
        '1h 2m 5s'
    """
    total = int(elapsed_seconds)
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours}h {minutes}m {seconds}s"


def _short_duration(elapsed_seconds: float) -> str:
    if elapsed_seconds < 1:
        return f"{elapsed_seconds * 1000:.0f} ms"
    if elapsed_seconds < 60:
        return f"{elapsed_seconds:.2f}s"
    return format_duration(elapsed_seconds)


__all__ = [
    'debug_log',
    'debug',
    'info',
    'warning',
    'error',
    'format_duration',
    'iso_timestamp',
    'configure_processing_log',
    'close_processing_log',
    'Timer',
    'DEBUG_MODE',
]
