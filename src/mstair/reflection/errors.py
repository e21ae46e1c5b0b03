# File: src/mstair/reflection/errors.py
"""
The single error kind raised by the accessor.

Every failure (member not found, immutability removal rejected, read/write
rejected, invocation failed) surfaces as a `ReflectionError`. Callers that need
to branch on the category use `ReflectionError.kind`; the message is meant for
humans.
"""

from __future__ import annotations

import enum


__all__ = [
    "ReflectionError",
    "ReflectionErrorKind",
]


class ReflectionErrorKind(enum.Enum):
    """Failure category carried by a `ReflectionError`."""

    NOT_FOUND = "not-found"
    MUTATION_FAILED = "mutation-failed"
    ACCESS_FAILED = "access-failed"
    INVOCATION_FAILED = "invocation-failed"


class ReflectionError(Exception):
    """
    Raised when a member cannot be found, overridden, read, written or invoked.

    The wrapped cause, when present, is kept on `cause` and is also chained as
    `__cause__` by the raising code (`raise ReflectionError(...) from exc`).

    Example:
        >>> err = ReflectionError(ReflectionErrorKind.INVOCATION_FAILED, "boom", ValueError("bad"))
        >>> str(err)
        'boom: bad'

    :param kind: The failure category.
    :param message: Human-readable description naming the member and type.
    :param cause: The underlying exception, if any.
    """

    def __init__(
        self,
        kind: ReflectionErrorKind,
        message: str,
        cause: BaseException | None = None,
    ) -> None:
        self.kind: ReflectionErrorKind = kind
        self.message: str = message
        self.cause: BaseException | None = cause
        super().__init__(self._compose(message, cause))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.name}, {self.message!r}, cause={self.cause!r})"

    @staticmethod
    def _compose(message: str, cause: BaseException | None) -> str:
        if cause is None:
            return message
        detail = str(cause) or type(cause).__name__
        return f"{message}: {detail}"


# End of file: src/mstair/reflection/errors.py
