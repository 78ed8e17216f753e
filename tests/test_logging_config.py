from __future__ import annotations

import logging
from pathlib import Path

import pytest

from user_api.app.core.logging_config import setup_logging


@pytest.fixture
def bare_root(monkeypatch: pytest.MonkeyPatch) -> logging.Logger:
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    yield root
    for handler in root.handlers:
        handler.close()


def test_setup_logging_writes_to_log_file(bare_root: logging.Logger, tmp_path: Path) -> None:
    # pytest's logging plugin attaches its capture handlers for the call phase.
    bare_root.handlers.clear()
    logfile = tmp_path / "logs" / "user_api.log"

    setup_logging("debug", str(logfile))
    logging.getLogger("user_api.test").debug("Created user %s", 7)
    for handler in bare_root.handlers:
        handler.flush()

    assert bare_root.level == logging.DEBUG
    assert len(bare_root.handlers) == 2
    assert "[DEBUG] user_api.test: Created user 7" in logfile.read_text(encoding="utf-8")


def test_setup_logging_unknown_level_falls_back_to_info(bare_root: logging.Logger) -> None:
    # pytest's logging plugin attaches its capture handlers for the call phase.
    bare_root.handlers.clear()
    setup_logging("chatty")

    assert bare_root.level == logging.INFO
    assert len(bare_root.handlers) == 1


def test_setup_logging_keeps_existing_handlers(bare_root: logging.Logger) -> None:
    # pytest's logging plugin attaches its capture handlers for the call phase.
    bare_root.handlers.clear()
    existing = logging.NullHandler()
    bare_root.addHandler(existing)

    setup_logging("debug")

    assert bare_root.handlers == [existing]


def test_setup_logging_quiets_uvicorn_access_log(
    bare_root: logging.Logger, monkeypatch: pytest.MonkeyPatch
) -> None:
    access = logging.getLogger("uvicorn.access")
    monkeypatch.setattr(access, "level", logging.NOTSET)

    setup_logging()

    assert access.level == logging.WARNING
