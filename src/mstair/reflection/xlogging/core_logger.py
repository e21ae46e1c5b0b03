# File: src/mstair/reflection/xlogging/core_logger.py
"""
Structured logging with environment-driven levels.

Example:
    >>> from mstair.reflection.xlogging.logger_factory import create_logger
    >>> LOG = create_logger(__name__)
    >>> with LOG.prefix_with("find_field '__secret'"):
    ...     LOG.trace("searching %s", "Derived")
    ...     LOG.trace("searching %s", "Base")

Features:
- Custom TRACE level below DEBUG
- Class name of the calling method recorded on each record
- Context-local message prefixes

Design:
- Only the root logger owns handlers/formatters; CoreLogger instances propagate.
- Log levels are controlled per-logger (via environment and LogLevelConfig).
- initialize_root() is the only entry point for root setup and is idempotent.
"""

from __future__ import annotations

import contextvars
import inspect
import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from types import FrameType
from typing import Any, ClassVar, TextIO

from .logger_constants import K_KLASS_NAME, TRACE, initialize_logger_constants
from .logger_formatter import CoreFormatter
from .logger_util import LogLevelConfig


__all__: list[str] = [
    "CoreLogger",
    "initialize_root",
]

_LOG_ROOT_ATTR_NAME = "_mstair_reflection_corelogger_initialized"
_DEFAULT_FORMAT = r"%(levelName)s %(asctime)s %(fileAndLine)s %(klassAndMethod)s %(message)s"

_log_prefix: contextvars.ContextVar[str] = contextvars.ContextVar("log_prefix", default="")


class CoreLogger(logging.Logger):
    """
    Application logger that extends logging.Logger with:

    - A TRACE level for fine-grained steps.
    - Accurate caller info (wrapper frames are skipped).
    - The calling class name under the record attribute `klass_name`.
    - A prefix context manager for scoped message prefixes.
    """

    _INTERNAL_FRAME_OFFSET: ClassVar[int] = 2  # _emit() + wrapper method (debug/info/etc)

    def __init__(
        self,
        name: str,
        level: int | str | None = logging.NOTSET,
    ) -> None:
        """
        :param name: The name of the logger, typically the module name.
        :param level: Initial level; NOTSET resolves the level from the environment.
        """
        initialize_logger_constants()
        if level in {logging.NOTSET, "NOTSET", "", None}:
            level = LogLevelConfig.get_instance().get_effective_level(name)
        super().__init__(name, level)

    def __repr__(self) -> str:
        level = self.getEffectiveLevel()
        return f"<{type(self).__name__} '{self.name}' {logging.getLevelName(level)}={level}>"

    def log(self, level: int, msg: object, *args: Any, **kwargs: Any) -> None:
        """Emit at `level`, applying the active prefix."""
        self._emit(level, msg, args, kwargs)

    def trace(self, msg: object, *args: Any, **kwargs: Any) -> None:
        """Log a message at TRACE level (below DEBUG)."""
        self._emit(TRACE, msg, args, kwargs)

    def debug(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.DEBUG, msg, args, kwargs)

    def info(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.INFO, msg, args, kwargs)

    def warning(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.WARNING, msg, args, kwargs)

    def error(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.ERROR, msg, args, kwargs)

    def critical(self, msg: object, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("stack_info", True)
        self._emit(logging.CRITICAL, msg, args, kwargs)

    def exception(self, msg: object, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self._emit(logging.ERROR, msg, args, kwargs)

    def _emit(self, level: int, msg: object, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        initialize_root()
        if not self.isEnabledFor(level):
            return

        stacklevel: int = kwargs.pop("stacklevel", 1) + self._INTERNAL_FRAME_OFFSET
        extra: dict[str, Any] = dict(kwargs.pop("extra", None) or {})
        klass_name = _caller_class_name(stacklevel)
        if klass_name:
            extra.setdefault(K_KLASS_NAME, klass_name)

        prefix = _log_prefix.get()
        if prefix:
            msg = f"{prefix}{msg}"

        super().log(level, msg, *args, stacklevel=stacklevel, extra=extra, **kwargs)

    @contextmanager
    def prefix_with(self, prefix: str) -> Iterator[None]:
        """
        Prefix all log messages emitted within the current context.

        Nested prefixes accumulate. Uses contextvars, so threads and tasks keep
        their own prefixes.
        """
        current_prefix = _log_prefix.get()
        token = _log_prefix.set(f"{current_prefix}{prefix} > ")
        try:
            yield
        finally:
            _log_prefix.reset(token)


def initialize_root(
    fmt: str | None = None,
    datefmt: str | None = None,
    level: int | str | None = None,
    force: bool = False,
) -> None:
    """
    Idempotently configure the root logger for CoreLogger.

    - Ensures exactly one stderr StreamHandler with CoreFormatter exists.
    - If `force=True`, removes and recreates that handler.
    - Sets the root level to `level`, else LOG_ROOT_LEVEL, else WARNING if unset.
    - Never touches handlers owned by the host application.

    :param fmt: Format string. Defaults to LOG_FORMAT or the package default.
    :param datefmt: Date format. Defaults to LOG_DATEFMT; ISO-8601 when unset.
    :param level: Root logger level (int or name).
    :param force: Reinitialize even if already initialized.
    """
    root = logging.getLogger()
    if getattr(root, _LOG_ROOT_ATTR_NAME, False) and not force:
        return
    setattr(root, _LOG_ROOT_ATTR_NAME, True)
    initialize_logger_constants()

    stderr_handlers: list[logging.StreamHandler[TextIO]] = [
        h for h in root.handlers if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr
    ]
    if force:
        for h in stderr_handlers:
            root.removeHandler(h)
        stderr_handlers = []

    formatter = CoreFormatter(
        fmt or os.environ.get("LOG_FORMAT", _DEFAULT_FORMAT),
        datefmt if datefmt is not None else os.environ.get("LOG_DATEFMT"),
    )
    if not stderr_handlers:
        handler: logging.StreamHandler[TextIO] = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        root.addHandler(handler)
    elif not any(isinstance(h.formatter, CoreFormatter) for h in stderr_handlers):
        stderr_handlers[0].setFormatter(formatter)

    level = level if level is not None else os.environ.get("LOG_ROOT_LEVEL")
    if isinstance(level, str):
        level = logging.getLevelNamesMapping().get(level.strip().upper(), logging.WARNING)
    if level is not None:
        root.setLevel(level)
    elif root.level == logging.NOTSET:
        root.setLevel(logging.WARNING)


def _caller_class_name(stacklevel: int) -> str:
    """Return the class name of `self`/`cls` in the caller frame, or ""."""
    frame: FrameType | None = inspect.currentframe()
    try:
        # the first step back lands in _emit(), which stacklevel already counts
        for _ in range(stacklevel):
            if frame is None:
                return ""
            frame = frame.f_back
        if frame is None:
            return ""
        owner = frame.f_locals.get("self", frame.f_locals.get("cls"))
        if owner is None:
            return ""
        return owner.__name__ if isinstance(owner, type) else type(owner).__name__
    finally:
        del frame


# End of file: src/mstair/reflection/xlogging/core_logger.py
