# File: src/mstair/reflection/xlogging/test_logger_util.py
"""
Tests for LogLevelConfig as the reflection package uses it.

Covers:
- LOG_LEVEL_<NAME> variable names mapped to dotted logger names
- LOG_LEVELS patterns for the lookup/accessor loggers, including TRACE
- exact > ancestor > glob > default precedence
- the cached instance and its reload
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

import pytest

from mstair.reflection.xlogging import logger_util as lu
from mstair.reflection.xlogging.logger_constants import TRACE
from mstair.reflection.xlogging.logger_util import LogEnvVar, LogLevelConfig


_LOOKUP = "mstair.reflection.lookup"
_ACCESSOR = "mstair.reflection.accessor"


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop LOG_LEVEL* variables, skip .env loading and reset the cached config."""
    monkeypatch.setattr(lu, "env_load_dotenv", lambda *a, **k: False)
    for key in [k for k in os.environ if k.startswith("LOG_LEVEL")]:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(lu, "_log_level_config_instance", None, raising=False)
    yield
    monkeypatch.setattr(lu, "_log_level_config_instance", None, raising=False)


# ---------- Variable names ----------


@pytest.mark.parametrize(
    ("name", "module"),
    [
        ("LOG_LEVELS", ""),
        ("LOG_LEVEL_ROOT", ""),
        ("LOG_LEVEL_MSTAIR_REFLECTION_LOOKUP", _LOOKUP),
        ("LOG_LEVEL_MSTAIR_REFLECTION_TEST__PROBE", "mstair.reflection.test_probe"),
    ],
)
def test_variable_name_to_logger(name: str, module: str) -> None:
    var = LogEnvVar.from_env_var(name, "DEBUG")
    assert var is not None
    assert var.module == module


@pytest.mark.parametrize("name", ["LOGLEVEL", "LOG_LEVEL_lookup", "APP_LOG_LEVEL"])
def test_unrelated_variable_names(name: str) -> None:
    assert LogEnvVar.from_env_var(name, "DEBUG") is None


# ---------- Resolution ----------


class TestReflectionLoggers:
    def test_trace_for_lookup_walk(self, monkeypatch: pytest.MonkeyPatch, clean_env: None) -> None:
        monkeypatch.setenv("LOG_LEVELS", f"{_LOOKUP}:TRACE")
        config = LogLevelConfig()
        assert config.get_effective_level(_LOOKUP) == TRACE
        assert config.get_effective_level(_ACCESSOR) == logging.WARNING

    def test_package_glob_with_per_logger_override(
        self, monkeypatch: pytest.MonkeyPatch, clean_env: None
    ) -> None:
        monkeypatch.setenv("LOG_LEVELS", "mstair.reflection.*=DEBUG")
        monkeypatch.setenv("LOG_LEVEL_MSTAIR_REFLECTION_ACCESSOR", "ERROR")
        config = LogLevelConfig()
        assert config.get_effective_level(_ACCESSOR) == logging.ERROR
        assert config.get_effective_level(_LOOKUP) == logging.DEBUG

    def test_package_ancestor_beats_glob(
        self, monkeypatch: pytest.MonkeyPatch, clean_env: None
    ) -> None:
        monkeypatch.setenv("LOG_LEVELS", "mstair.*:DEBUG, mstair.reflection:INFO")
        config = LogLevelConfig()
        assert config.get_effective_level(_LOOKUP) == logging.INFO
        assert config.get_effective_level("mstair.other") == logging.DEBUG

    def test_default_and_unknown_levels(
        self, monkeypatch: pytest.MonkeyPatch, clean_env: None
    ) -> None:
        monkeypatch.setenv("LOG_LEVELS", "root=ERROR; mstair.reflection:LOUD; other:10")
        config = LogLevelConfig()
        assert config.pattern_to_level == {"": logging.ERROR}
        assert config.get_effective_level(_LOOKUP) == logging.ERROR


def test_cached_instance_reloads_on_request(
    monkeypatch: pytest.MonkeyPatch, clean_env: None
) -> None:
    monkeypatch.setenv("LOG_LEVEL_MSTAIR_REFLECTION", "INFO")
    config = LogLevelConfig.get_instance()
    assert config.get_effective_level(_LOOKUP) == logging.INFO

    monkeypatch.setenv("LOG_LEVEL_MSTAIR_REFLECTION", "DEBUG")
    assert LogLevelConfig.get_instance() is config
    assert config.get_effective_level(_LOOKUP) == logging.INFO

    config.update_from_environment()
    assert config.get_effective_level(_LOOKUP) == logging.DEBUG


# End of file: src/mstair/reflection/xlogging/test_logger_util.py
