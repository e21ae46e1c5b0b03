# File: src/mstair/reflection/test_overrides.py
"""
Tests for make_accessible() and remove_immutability().
"""

from __future__ import annotations

from typing import ClassVar, Final

import pytest

from mstair.reflection import overrides
from mstair.reflection.errors import ReflectionError, ReflectionErrorKind
from mstair.reflection.lookup import find_field, find_method
from mstair.reflection.members import Modifier


class Limits:
    __ceiling: Final[int] = 100
    _floor: int = 0
    STEP: ClassVar[Final[int]] = 5

    def __reset(self) -> None:
        pass


# ---------- make_accessible ----------


def test_make_accessible_field_and_method() -> None:
    field = find_field(Limits, "_floor")
    method = find_method(Limits, "__reset", ())
    assert not field.accessible
    assert not method.accessible

    overrides.make_accessible(field)
    overrides.make_accessible(method)
    assert field.accessible
    assert method.accessible


def test_make_accessible_is_idempotent() -> None:
    field = find_field(Limits, "__ceiling")
    overrides.make_accessible(field)
    overrides.make_accessible(field)
    assert field.accessible
    assert field.modifiers == Modifier.PRIVATE | Modifier.FINAL


def test_make_accessible_only_changes_the_given_descriptor() -> None:
    first = find_field(Limits, "_floor")
    overrides.make_accessible(first)
    assert not find_field(Limits, "_floor").accessible


# ---------- remove_immutability ----------


class TestRemoveImmutability:
    def test_clears_final_and_keeps_other_bits(self) -> None:
        field = find_field(Limits, "STEP")
        assert field.modifiers == Modifier.PUBLIC | Modifier.STATIC | Modifier.FINAL
        overrides.remove_immutability(field)
        assert field.modifiers == Modifier.PUBLIC | Modifier.STATIC
        assert not field.is_final

    def test_is_idempotent(self) -> None:
        field = find_field(Limits, "__ceiling")
        overrides.remove_immutability(field)
        once = field.modifiers
        overrides.remove_immutability(field)
        assert field.modifiers == once == Modifier.PRIVATE

    def test_non_final_field_is_unchanged(self) -> None:
        field = find_field(Limits, "_floor")
        before = field.modifiers
        overrides.remove_immutability(field)
        assert field.modifiers == before

    def test_does_not_touch_the_stored_value(self) -> None:
        field = find_field(Limits, "__ceiling")
        overrides.remove_immutability(field)
        assert vars(Limits)["_Limits__ceiling"] == 100

    def test_failure_is_reported_as_mutation_failed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def refuse(type_: type, name: str) -> None:
            raise ReflectionError(ReflectionErrorKind.NOT_FOUND, f"no field '{name}'")

        monkeypatch.setattr(overrides, "find_field", refuse)
        field = find_field(Limits, "__ceiling")
        with pytest.raises(ReflectionError) as exc_info:
            overrides.remove_immutability(field)
        err = exc_info.value
        assert err.kind is ReflectionErrorKind.MUTATION_FAILED
        assert isinstance(err.cause, ReflectionError)
        assert field.is_final


# End of file: src/mstair/reflection/test_overrides.py
