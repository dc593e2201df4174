"""Logging configuration for podman-doctor."""

import logging
import os
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

__all__ = ["get_logger", "set_log_level"]

_init_lock = threading.Lock()
_default_handler: logging.Handler | None = None
_file_handler: logging.Handler | None = None

LOG_FILE_ENV = "PODMAN_DOCTOR_LOG_FILE"
LOG_LEVEL_ENV = "PODMAN_DOCTOR_LOG_LEVEL"
LOG_MAX_BYTES_ENV = "PODMAN_DOCTOR_LOG_MAX_BYTES"
LOG_BACKUP_COUNT_ENV = "PODMAN_DOCTOR_LOG_BACKUP_COUNT"
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 3


class _Ansi:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    YELLOW = "\033[33m"
    GREEN = "\033[32m"
    CYAN = "\033[36m"
    MAGENTA = "\033[35m"


_LEVEL_COLOR = {
    "DEBUG": _Ansi.CYAN,
    "INFO": _Ansi.GREEN,
    "WARNING": _Ansi.YELLOW,
    "ERROR": _Ansi.RED,
    "CRITICAL": _Ansi.MAGENTA,
}


class CustomFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        levelname = record.levelname.upper()
        record.levelcolor = _LEVEL_COLOR.get(levelname, "")
        record.bold = _Ansi.BOLD
        record.reset = _Ansi.RESET

        # caller_block: file name + line no, on both path separators
        pathname = record.pathname.replace("\\", "/").rsplit("/", 1)[-1]
        record.caller_block = f"{pathname}:{record.lineno}"

        return super().format(record)


class _PrefixFilter(logging.Filter):
    def __init__(self, prefixes):
        super().__init__()
        self._prefixes = (prefixes,) if isinstance(prefixes, str) else tuple(prefixes)

    def filter(self, rec: logging.LogRecord) -> bool:
        return any(rec.name.startswith(p) for p in self._prefixes)


def _safe_int_from_env(var_name: str, default: int) -> int:
    raw_value = os.getenv(var_name)
    if raw_value is None:
        return default
    try:
        parsed = int(raw_value)
        return parsed if parsed > 0 else default
    except (TypeError, ValueError):
        return default


def _create_file_handler(formatter: logging.Formatter) -> logging.Handler | None:
    """Build a rotating file handler, only when a log file was requested."""
    env_file = os.getenv(LOG_FILE_ENV)
    if not env_file:
        return None

    max_bytes = _safe_int_from_env(LOG_MAX_BYTES_ENV, DEFAULT_LOG_MAX_BYTES)
    backup_count = _safe_int_from_env(LOG_BACKUP_COUNT_ENV, DEFAULT_LOG_BACKUP_COUNT)
    try:
        path = Path(env_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count)
        handler.setFormatter(formatter)
        return handler
    except OSError:
        return None


def _initialize_if_necessary():
    global _default_handler, _file_handler

    with _init_lock:
        if _default_handler is not None:
            return

        fmt = (
            "{asctime}.{msecs:03.0f} "
            "[{bold}{levelcolor}{levelname:<8}{reset}] "
            "{caller_block:<20} {message}"
        )
        formatter = CustomFormatter(fmt=fmt, style="{", datefmt="%b %d %H:%M:%S")
        # stdout carries the report itself
        _default_handler = logging.StreamHandler(stream=sys.stderr)
        _default_handler.setFormatter(formatter)
        _file_handler = _create_file_handler(formatter)

        logger = logging.getLogger("podman_doctor")
        try:
            logger.setLevel(os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper())
        except ValueError:
            logger.setLevel(DEFAULT_LOG_LEVEL)
        for handler in (_default_handler, _file_handler):
            if handler is None:
                continue
            handler.addFilter(_PrefixFilter(("podman_doctor",)))
            logger.addHandler(handler)
        logger.propagate = False


def set_log_level(level_name: str):
    """Set the package logger level."""
    _initialize_if_necessary()
    logging.getLogger("podman_doctor").setLevel(level_name.upper())


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Grab a logger under the podman_doctor namespace with the default handler attached.
    Call this in every module instead of logging.getLogger().
    """
    _initialize_if_necessary()
    if not name:
        return logging.getLogger("podman_doctor")
    if not name.startswith("podman_doctor"):
        name = f"podman_doctor.{name}"
    return logging.getLogger(name)
