from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from wavgen.logging_utils import (
    DEBUG_ENV,
    LOG_DIR_ENV,
    PARSE,
    configure_logging,
    get_log_dir,
    get_log_path,
    log_exception,
    log_exit,
    log_init,
    tag_for_level,
)


@pytest.fixture
def run_log(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    monkeypatch.delenv(DEBUG_ENV, raising=False)
    configure_logging(force=True)
    yield tmp_path / "wavgen.log"
    logger = logging.getLogger("wavgen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_log_dir_uses_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    assert get_log_dir() == tmp_path
    assert get_log_path() == tmp_path / "wavgen.log"


def test_configure_logging_writes_only_to_file(run_log: Path) -> None:
    handlers = logging.getLogger("wavgen").handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0], logging.FileHandler)


def test_debug_mirrors_to_stderr(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    monkeypatch.setenv(DEBUG_ENV, "1")
    configure_logging(force=True)
    try:
        logger = logging.getLogger("wavgen")
        assert logger.level == logging.DEBUG
        assert sum(type(handler) is logging.StreamHandler for handler in logger.handlers) == 1
    finally:
        monkeypatch.delenv(DEBUG_ENV)
        configure_logging(force=True)


def test_run_is_bracketed_by_init_and_exit(run_log: Path) -> None:
    log_init()
    logging.getLogger("wavgen.config").warning("unrecognized wave type: 'noise'", extra=PARSE)
    log_exit(0)

    lines = run_log.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("[INIT] WAVE generator initialized: [")
    assert lines[1] == "[PARSE] unrecognized wave type: 'noise'"
    assert lines[2] == "[EXIT] generator terminated normally with exit code: 0"


def test_log_is_append_only(run_log: Path) -> None:
    log_init()
    log_exit(1)
    configure_logging(force=True)
    log_init()
    log_exit(0)

    text = run_log.read_text(encoding="utf-8")
    assert text.count("[INIT]") == 2
    assert "terminated abnormally with exit code: 1" in text


def test_untagged_records_are_tagged_by_level(run_log: Path) -> None:
    logger = logging.getLogger("wavgen.engine")
    logger.info("chunk ready")
    logger.warning("clipped")
    logger.debug("not written")

    lines = run_log.read_text(encoding="utf-8").splitlines()
    assert lines == ["[INFO] chunk ready", "[ARG] clipped"]
    assert tag_for_level(logging.ERROR) == "FATAL"


def test_log_exception_writes_fatal_record(run_log: Path) -> None:
    try:
        raise ValueError("bad tone")
    except ValueError as exc:
        log_exception("generate", exc)

    text = run_log.read_text(encoding="utf-8")
    assert "[FATAL] generate failed: ValueError: bad tone" in text
    assert "Traceback" in text
