# File: src/mstair/reflection/base/config.py
"""
Execution context detection for the reflection accessor.

The accessor is meant for test code. This module answers whether we are in a
test run, whether log output should be colored, and what to do when the
accessor is used outside of tests. Overrides are thread-local so one test can
force a mode without leaking it into others.

Exports:
- in_test_mode(): check or override whether code is in test mode.
- in_desktop_mode(): check or override whether log output is interactive.
- outside_tests_policy(): "warn" or "ignore", from MSTAIR_REFLECTION_OUTSIDE_TESTS.
"""

from __future__ import annotations

import os
import sys
import threading
from dataclasses import dataclass
from typing import Final, Literal


OutsideTestsPolicy = Literal["warn", "ignore"]

OUTSIDE_TESTS_ENV_VAR: Final[str] = "MSTAIR_REFLECTION_OUTSIDE_TESTS"
_OUTSIDE_TESTS_POLICIES: Final[frozenset[str]] = frozenset({"warn", "ignore"})

_tls = threading.local()


@dataclass
class TLSAttrs:
    """Thread-local flags for environment context."""

    in_test_mode_override: bool | None = None
    in_desktop_mode_override: bool | None = None


def _get_tls() -> TLSAttrs:
    """Return the current thread's TLSAttrs instance, initializing if needed."""
    try:
        return _tls.state
    except AttributeError:
        _tls.state = TLSAttrs()
        return _tls.state


def in_test_mode(
    *,
    unset_override: bool = False,
    override: bool | None = None,
) -> bool:
    """
    Check if running in test mode, with optional override.

    Detection order:
      1. Explicit override (thread-local).
      2. Presence of pytest/unittest in sys.modules.
      3. Known environment variables (PYTEST_CURRENT_TEST, CI, APP_TEST_MODE).

    :param unset_override: If True, clears any prior override for this thread.
    :param override: If True or False, sets the override for this thread.
    :return: True if test mode is active, False otherwise.
    """
    tls = _get_tls()
    if unset_override:
        tls.in_test_mode_override = None
    if override is not None:
        tls.in_test_mode_override = override
        return override
    if tls.in_test_mode_override is not None:
        return tls.in_test_mode_override
    if "pytest" in sys.modules or "unittest" in sys.modules:
        return True

    env = os.environ
    return bool(
        any(env.get(k) for k in ("PYTEST_CURRENT_TEST", "PYTEST_RUNNING", "UNITTEST_RUNNING"))
        or env.get("CI") == "true"
        or env.get("APP_TEST_MODE") == "1"
    )


def in_desktop_mode(
    *,
    unset_override: bool = False,
    override: bool | None = None,
) -> bool:
    """
    Determine if log output should be colored for an interactive terminal.

    Rules:
      - Explicit override wins.
      - NO_COLOR in the environment disables color.
      - Returns True in test mode.
      - Otherwise True only when stderr is a terminal.
    """
    tls = _get_tls()
    if unset_override:
        tls.in_desktop_mode_override = None
    if override is not None:
        tls.in_desktop_mode_override = override
        return override
    if tls.in_desktop_mode_override is not None:
        return tls.in_desktop_mode_override

    if os.environ.get("NO_COLOR"):
        return False
    if in_test_mode():
        return True
    return bool(getattr(sys.stderr, "isatty", lambda: False)())


def outside_tests_policy() -> OutsideTestsPolicy:
    """
    Return what the accessor does when it runs outside a test run.

    Reads MSTAIR_REFLECTION_OUTSIDE_TESTS; unknown or missing values mean "warn".
    """
    raw = os.environ.get(OUTSIDE_TESTS_ENV_VAR, "").strip().lower()
    if raw in _OUTSIDE_TESTS_POLICIES:
        return raw  # type: ignore[return-value]
    return "warn"


# End of file: src/mstair/reflection/base/config.py
