"""
Run log.

Every generator run appends to one log file, opened with an `[INIT]` record and
closed with an `[EXIT]` record carrying the exit code. Records in between are
tagged by what they report:

    INFO   progress and the resolved parameter summary
    READ   a file could not be read
    PARSE  a config value could not be understood
    ARG    a value was understood but is out of range
    FATAL  the run failed

Pass the tag as `extra=PARSE` (etc.); untagged records are tagged from their level.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

LOG_DIR_ENV = "WAVGEN_LOG_DIR"
DEBUG_ENV = "WAVGEN_DEBUG"
_LOG_FILE = "wavgen.log"
_ROOT_LOGGER = "wavgen"
_FILE_FORMAT = "[%(tag)s] %(message)s"
_DEBUG_FORMAT = "[%(tag)s] %(name)s: %(message)s"

INIT: Mapping[str, str] = MappingProxyType({"tag": "INIT"})
INFO: Mapping[str, str] = MappingProxyType({"tag": "INFO"})
READ: Mapping[str, str] = MappingProxyType({"tag": "READ"})
PARSE: Mapping[str, str] = MappingProxyType({"tag": "PARSE"})
ARG: Mapping[str, str] = MappingProxyType({"tag": "ARG"})
FATAL: Mapping[str, str] = MappingProxyType({"tag": "FATAL"})
EXIT: Mapping[str, str] = MappingProxyType({"tag": "EXIT"})

_LOGGER = logging.getLogger("wavgen.run")
_configured = False


def tag_for_level(levelno: int) -> str:
    if levelno >= logging.ERROR:
        return "FATAL"
    if levelno >= logging.WARNING:
        return "ARG"
    return "INFO"


class _TagFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        if not getattr(record, "tag", None):
            record.tag = tag_for_level(record.levelno)
        return super().format(record)


def debug_enabled() -> bool:
    return bool(os.environ.get(DEBUG_ENV))


def get_log_dir() -> Path:
    configured = os.environ.get(LOG_DIR_ENV)
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".cache" / "wavgen" / "logs"


def get_log_path() -> Path:
    return get_log_dir() / _LOG_FILE


def configure_logging(*, force: bool = False) -> None:
    """Attach the append-only run log (and a stderr mirror when debugging)."""
    global _configured
    if _configured and not force:
        return

    logger = logging.getLogger(_ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    debugging = debug_enabled()
    logger.setLevel(logging.DEBUG if debugging else logging.INFO)

    if debugging:
        mirror = logging.StreamHandler(stream=sys.stderr)
        mirror.setFormatter(_TagFormatter(_DEBUG_FORMAT))
        logger.addHandler(mirror)

    try:
        get_log_dir().mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(get_log_path(), mode="a", encoding="utf-8")
    except OSError as exc:
        print(f"unable to open log file '{get_log_path()}' for writing: {exc}", file=sys.stderr)
    else:
        file_handler.setFormatter(_TagFormatter(_FILE_FORMAT))
        logger.addHandler(file_handler)
    _configured = True


def log_init() -> None:
    stamp = datetime.now().strftime("%Y-%m-%d @ %H:%M:%S")
    _LOGGER.info("WAVE generator initialized: [%s]", stamp, extra=INIT)


def log_exit(code: int) -> None:
    status = "abnormally" if code else "normally"
    _LOGGER.info("generator terminated %s with exit code: %d", status, code, extra=EXIT)


def log_exception(context: str, exc: BaseException) -> None:
    """Record a failed run as a FATAL line followed by its traceback."""
    _LOGGER.critical(
        "%s failed: %s: %s", context, type(exc).__name__, exc, exc_info=exc, extra=FATAL
    )
