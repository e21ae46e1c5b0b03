# File: src/mstair/reflection/xlogging/logger_formatter.py
"""
Colored, timezone-aware formatter used by the root stderr handler.

Adds the record attributes `levelName` (colored level), `fileAndLine` and
`klassAndMethod` so format strings can refer to them. Timestamps are rendered
in LOG_TIMEZONE (default UTC).
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Literal

import pytz
from colorama import Fore, Style

import mstair.reflection.base.config as cfg

from .logger_constants import K_KLASS_NAME, TRACE


__all__ = ["CoreFormatter", "get_color_code"]


FormatStyle = Literal["%", "{", "$"]

DEFAULT_TIMEZONE = "UTC"

COLOR_MAP: dict[Any, str] = {
    "fileAndLine": Fore.CYAN,
    "klassAndMethod": Fore.BLUE,
    "TRACE": Fore.MAGENTA,
    "DEBUG": Style.DIM,
    "INFO": Fore.WHITE,
    "WARNING": Fore.YELLOW,
    "ERROR": Fore.LIGHTRED_EX,
    "CRITICAL": Fore.RED + Style.BRIGHT,
    None: Style.RESET_ALL,
}


def get_color_code(key: Any = None) -> str:
    """Return the ANSI code for `key`, or "" when output is not interactive."""
    if not cfg.in_desktop_mode():
        return ""
    if key in {"", "RESET"} or key is None:
        return Style.RESET_ALL
    return COLOR_MAP.get(key, Style.RESET_ALL)


class CoreFormatter(logging.Formatter):
    """
    Formatter for CoreLogger records: colored level names, short file paths,
    `Klass.method()` labels and timestamps in a configurable timezone.
    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: FormatStyle = "%",
        validate: bool = True,
        *,
        timezone: str | None = None,
    ) -> None:
        """
        :param fmt: The format string for log messages.
        :param datefmt: The date format string for log timestamps.
        :param style: The style for the format string (default is "%").
        :param validate: Whether to validate the format string.
        :param timezone: pytz zone name; defaults to LOG_TIMEZONE or UTC.
        """
        super().__init__(fmt=fmt, datefmt=datefmt, style=style, validate=validate)
        self.tz = pytz.timezone(timezone or os.environ.get("LOG_TIMEZONE", DEFAULT_TIMEZONE))

    def format(self, record: logging.LogRecord) -> str:
        record.fileAndLine = self.format_fileAndLine(record.pathname, record.lineno)
        record.klassAndMethod = self.format_klassAndMethod(record)
        record.levelName = self.format_levelName(record.levelname)
        if record.levelno == TRACE:
            record.levelName = self.format_levelName("TRACE")
        return super().format(record)

    @staticmethod
    def format_file(file: str) -> str:
        """Return `file` relative to the working directory when possible."""
        if not file:
            return "<unknown file>"
        path = Path(file)
        try:
            return path.resolve().relative_to(Path.cwd()).as_posix()
        except ValueError:
            return path.as_posix()

    def format_fileAndLine(self, file: str, lineno: int) -> str:
        fileAndLine = f"{self.format_file(file)}:{lineno}"
        return get_color_code("fileAndLine") + fileAndLine + get_color_code()

    @staticmethod
    def format_klassAndMethod(record: logging.LogRecord) -> str:
        klass_name = getattr(record, K_KLASS_NAME, "")
        if not klass_name:
            klassAndMethod = (
                record.funcName if record.funcName == "<module>" else f"{record.funcName}()"
            )
        else:
            klassAndMethod = f"{klass_name}.{record.funcName}()"
        return get_color_code("klassAndMethod") + klassAndMethod + get_color_code()

    @staticmethod
    def format_levelName(levelname: str) -> str:
        return get_color_code(levelname) + levelname + get_color_code()

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        stamp = datetime.fromtimestamp(record.created, self.tz)
        if datefmt:
            return stamp.strftime(datefmt)
        return stamp.isoformat(timespec="milliseconds")


# End of file: src/mstair/reflection/xlogging/logger_formatter.py
