# File: src/mstair/reflection/xlogging/logger_factory.py
"""
Logger factory for creating CoreLogger instances.

Every module in the package obtains its logger with `create_logger(__name__)`.
Loggers are created through `logging.getLogger()` so they join the standard
hierarchy (parents, propagation, pytest's caplog).
"""

import inspect
import logging
import sys
from pathlib import Path

from mstair.reflection.xlogging.core_logger import CoreLogger


def create_logger(
    name: str | None,
    *,
    level: int | str | None = None,
) -> CoreLogger:
    """
    Return a CoreLogger with a consistent name.

    Handles:
    - Normal imports (uses given name)
    - Direct script execution (__main__ becomes the script stem)
    - Anonymous loggers (uses the calling module's name)
    """
    logger_name: str = name or ""
    if logger_name == "__main__":
        arg0 = Path(sys.argv[0]) if sys.argv and sys.argv[0] else None
        logger_name = arg0.stem if arg0 and arg0.exists() else "embedded_main"
    if not logger_name:
        logger_name = get_caller_logger_name()

    existing = logging.Logger.manager.loggerDict.get(logger_name)
    if isinstance(existing, CoreLogger):
        if level is not None:
            existing.setLevel(level)
        return existing

    logger = _get_core_logger_from_logging(logger_name)
    if level is not None:
        logger.setLevel(level)
    return logger


def _get_core_logger_from_logging(name: str) -> CoreLogger:
    """
    Create a CoreLogger through logging.getLogger().

    Temporarily sets CoreLogger as the logger class so the new logger gets a
    proper parent.

    :raises TypeError: If a plain Logger was already registered under `name`.
    """
    logging_class = logging.getLoggerClass()
    logging.setLoggerClass(CoreLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        logging.setLoggerClass(logging_class)
    if not isinstance(logger, CoreLogger):
        raise TypeError(f"Failed to create CoreLogger: {logger!r}")
    return logger


def get_caller_logger_name() -> str:
    """Resolve a logger name from the module that called create_logger()."""
    frame = inspect.currentframe()
    try:
        caller = frame.f_back.f_back if frame and frame.f_back else None
        module = inspect.getmodule(caller) if caller else None
        name = module.__name__ if module else ""
    finally:
        del frame
    if not name or name == "__main__":
        executable = sys.argv[0] if sys.argv and sys.argv[0] else sys.executable
        name = Path(executable).stem
    return name


# End of file: src/mstair/reflection/xlogging/logger_factory.py
