# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from procsim.logging_setup import _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield root
    # Drop only what setup_logging installed; pytest manages its own capture handlers.
    for h in list(root.handlers):
        if type(h) in (logging.FileHandler, logging.StreamHandler):
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


def test_console_filter_hides_bookkeeping_below_warning() -> None:
    f = _ConsoleNoiseFilter()

    assert not f.filter(_record("procsim.core.registry", logging.INFO))
    assert not f.filter(_record("procsim.tasks.runner", logging.DEBUG))
    assert f.filter(_record("procsim.tasks.launcher", logging.WARNING))
    assert f.filter(_record("procsim.core.scheduler", logging.ERROR))
    assert f.filter(_record("procsim.cli.main", logging.INFO))
    assert f.filter(_record("procsim.connectors.console_connector", logging.DEBUG))


def test_setup_logging_writes_everything_to_file(tmp_path: Path, restore_root_logger) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs", console_level=logging.WARNING)

    assert log_file == tmp_path / "logs" / "procsim.log"
    logging.getLogger("procsim.core.registry").debug("Task %s created", 7)
    for h in restore_root_logger.handlers:
        h.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "DEBUG procsim.core.registry [MainThread]: Task 7 created" in text


def test_setup_logging_replaces_existing_handlers(tmp_path: Path, restore_root_logger) -> None:
    setup_logging(log_dir=tmp_path)
    setup_logging(log_dir=tmp_path)

    kinds = sorted(type(h).__name__ for h in restore_root_logger.handlers)
    assert kinds == ["FileHandler", "StreamHandler"]
