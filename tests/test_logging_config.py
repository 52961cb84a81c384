# tests/test_logging_config.py

from __future__ import annotations

import logging

import pytest

from task_list_api.app.core.logging_config import (
    CONSOLE_HANDLER_NAME,
    FILE_HANDLER_NAME,
    setup_logging,
)

OWN_HANDLERS = {CONSOLE_HANDLER_NAME, FILE_HANDLER_NAME}


def _own_handlers(root: logging.Logger) -> list[logging.Handler]:
    return [h for h in root.handlers if h.get_name() in OWN_HANDLERS]


@pytest.fixture()
def root_logger():
    """
    Detach the handlers installed when the app was imported, so
    setup_logging runs from scratch, and put them back afterwards.
    """
    root = logging.getLogger()
    level = root.level
    saved = _own_handlers(root)
    for handler in saved:
        root.removeHandler(handler)
    yield root
    for handler in _own_handlers(root):
        root.removeHandler(handler)
        handler.close()
    for handler in saved:
        root.addHandler(handler)
    root.setLevel(level)


def test_setup_logging_writes_to_file(root_logger, tmp_path) -> None:
    logfile = tmp_path / "logs" / "app.log"

    setup_logging("debug", str(logfile))
    logging.getLogger("task_list_api.test").debug("hello from test")

    assert root_logger.level == logging.DEBUG
    assert {h.get_name() for h in _own_handlers(root_logger)} == OWN_HANDLERS
    assert "[DEBUG] task_list_api.test: hello from test" in logfile.read_text(encoding="utf-8")


def test_setup_logging_is_configured_once(root_logger) -> None:
    setup_logging("INFO")
    setup_logging("DEBUG")

    assert len(_own_handlers(root_logger)) == 1
    assert root_logger.level == logging.INFO


def test_unknown_level_falls_back_to_info(root_logger) -> None:
    setup_logging("chatty")

    assert root_logger.level == logging.INFO
