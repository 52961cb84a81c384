"""
Logging setup for the Task List API.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger the first time it is called; later calls
leave the existing configuration alone, so repeated ``create_app()``
calls do not duplicate output.  Only the handlers installed here count;
others, such as pytest's log capture, do not prevent setup.  Modules
log through ``logging.getLogger(__name__)``.
"""

import logging
from pathlib import Path
from typing import Optional


CONSOLE_HANDLER_NAME = "task_list_api.console"
FILE_HANDLER_NAME = "task_list_api.file"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger once.

    Parameters
    ----------
    level : str
        Logging level name such as ``"DEBUG"`` or ``"info"``.  An
        unknown name falls back to ``INFO`` and is reported as a
        warning.
    logfile : Optional[str]
        File to append log records to, in addition to the console.
        Missing parent directories are created.
    """
    root = logging.getLogger()
    if any(h.get_name() == CONSOLE_HANDLER_NAME for h in root.handlers):
        return

    numeric_level = logging.getLevelName(level.upper())
    unknown_level = not isinstance(numeric_level, int)
    root.setLevel(logging.INFO if unknown_level else numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.set_name(CONSOLE_HANDLER_NAME)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.set_name(FILE_HANDLER_NAME)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    if unknown_level:
        logging.getLogger(__name__).warning("Unknown log level %r, using INFO", level)
