# File: src/mstair/reflection/test_lookup.py
"""
Tests for member lookup along the primary base-class chain.

Covers:
- fields declared on the class, on an ancestor, or only in an instance __dict__
- name mangling of private members at every level of the chain
- mixins reached only through __mro__ are not searched
- exact parameter-type matching and singledispatchmethod overloads
- NOT_FOUND errors naming the originally requested type
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import ClassVar, Final

import pytest

from mstair.reflection.errors import ReflectionError, ReflectionErrorKind
from mstair.reflection.lookup import (
    find_field,
    find_instance_field,
    find_method,
    iter_type_chain,
    type_name,
)
from mstair.reflection.members import MethodKind, Modifier


# ---------- Fixtures ----------


class Base:
    __secret: Final[int] = 1
    _protected: int = 10
    counter: ClassVar[int] = 0
    label = "base"

    def __init__(self) -> None:
        self.__hidden = "hidden"
        self.plain = "plain"

    def __compute(self) -> int:
        return 42

    def _scale(self, factor: int) -> int:
        return 10 * factor

    @staticmethod
    def __helper(a: int, b: int) -> int:
        return a + b

    @classmethod
    def _create(cls) -> Base:
        return cls()


class Derived(Base):
    pass


class Mixin:
    mixed_in: int = 5

    def _mixin_method(self) -> str:
        return "mixin"


class WithMixin(Base, Mixin):
    pass


class Formatter:
    @functools.singledispatchmethod
    def _render(self, value: object) -> str:
        return f"object:{value}"

    @_render.register(int)
    def _render_int(self, value: int) -> str:
        return f"int:{value}"

    @_render.register(str)
    def _render_str(self, value: str) -> str:
        return f"str:{value}"


@dataclass(frozen=True)
class Point:
    x: int
    y: int = 0


# ---------- Hierarchy walk ----------


def test_type_chain_follows_primary_bases_to_object() -> None:
    assert list(iter_type_chain(WithMixin)) == [WithMixin, Base, object]


def test_type_chain_rejects_non_types() -> None:
    with pytest.raises(ReflectionError) as exc_info:
        list(iter_type_chain(Base()))  # type: ignore[arg-type]
    assert exc_info.value.kind is ReflectionErrorKind.NOT_FOUND


# ---------- Fields ----------


class TestFindField:
    def test_declared_on_requested_type(self) -> None:
        field = find_field(Base, "_protected")
        assert field.declaring_type is Base
        assert field.storage_name == "_protected"
        assert Modifier.PROTECTED in field.modifiers
        assert field.accessible is False

    def test_inherited_field_reports_ancestor(self) -> None:
        field = find_field(Derived, "_protected")
        assert field.declaring_type is Base

    def test_private_field_is_mangled_for_declaring_type(self) -> None:
        field = find_field(Derived, "__secret")
        assert field.declaring_type is Base
        assert field.storage_name == "_Base__secret"
        assert Modifier.PRIVATE in field.modifiers
        assert field.is_final

    def test_already_mangled_name_is_found(self) -> None:
        assert find_field(Base, "_Base__secret").declaring_type is Base

    def test_classvar_and_plain_class_attribute_are_static(self) -> None:
        assert find_field(Base, "counter").is_static
        assert find_field(Base, "label").is_static
        assert not find_field(Base, "_protected").is_static

    def test_public_field_starts_accessible(self) -> None:
        assert find_field(Base, "label").accessible is True

    def test_frozen_dataclass_fields_are_final(self) -> None:
        assert find_field(Point, "x").is_final
        assert find_field(Point, "y").is_final

    def test_methods_are_not_fields(self) -> None:
        with pytest.raises(ReflectionError) as exc_info:
            find_field(Base, "_scale")
        assert exc_info.value.kind is ReflectionErrorKind.NOT_FOUND

    def test_mixin_fields_are_not_searched(self) -> None:
        with pytest.raises(ReflectionError):
            find_field(WithMixin, "mixed_in")

    def test_not_found_names_requested_type_not_object(self) -> None:
        with pytest.raises(ReflectionError) as exc_info:
            find_field(Derived, "nonexistent")
        err = exc_info.value
        assert err.kind is ReflectionErrorKind.NOT_FOUND
        assert "'nonexistent'" in str(err)
        assert f"'{type_name(Derived)}'" in str(err)
        assert "'object'" not in str(err)

    def test_lookups_are_not_cached(self) -> None:
        first = find_field(Base, "_protected")
        second = find_field(Base, "_protected")
        assert first == second
        assert first is not second


class TestFindInstanceField:
    def test_class_declaration_wins(self) -> None:
        assert find_instance_field(Derived(), "_protected").declaring_type is Base

    def test_unannotated_instance_attribute(self) -> None:
        field = find_instance_field(Base(), "plain")
        assert field.declaring_type is Base
        assert field.accessible is True

    def test_private_instance_attribute_resolves_to_assigning_class(self) -> None:
        field = find_instance_field(Derived(), "__hidden")
        assert field.declaring_type is Base
        assert field.storage_name == "_Base__hidden"
        assert field.accessible is False

    def test_missing_attribute_names_runtime_type(self) -> None:
        with pytest.raises(ReflectionError) as exc_info:
            find_instance_field(Derived(), "missing")
        assert f"'{type_name(Derived)}'" in str(exc_info.value)


# ---------- Methods ----------


class TestFindMethod:
    def test_zero_parameter_private_method(self) -> None:
        method = find_method(Base, "__compute", ())
        assert method.declaring_type is Base
        assert method.storage_name == "_Base__compute"
        assert method.kind is MethodKind.INSTANCE
        assert method.param_types == ()
        assert method.accessible is False

    def test_inherited_method_with_parameters(self) -> None:
        method = find_method(Derived, "_scale", (int,))
        assert method.declaring_type is Base

    def test_static_and_class_methods(self) -> None:
        helper = find_method(Derived, "__helper", (int, int))
        assert helper.kind is MethodKind.STATIC
        assert helper.is_static
        create = find_method(Derived, "_create", [])
        assert create.kind is MethodKind.CLASS

    def test_signature_must_match_exactly(self) -> None:
        with pytest.raises(ReflectionError):
            find_method(Base, "_scale", (str,))
        with pytest.raises(ReflectionError):
            find_method(Base, "_scale", ())
        with pytest.raises(ReflectionError):
            find_method(Base, "_scale", (bool,))

    def test_parameter_types_are_mandatory(self) -> None:
        with pytest.raises(ReflectionError) as exc_info:
            find_method(Base, "__compute", None)  # type: ignore[arg-type]
        assert exc_info.value.kind is ReflectionErrorKind.NOT_FOUND
        assert "use ()" in str(exc_info.value)

    def test_walk_reaches_object(self) -> None:
        method = find_method(Derived, "__eq__", (object,))
        assert method.declaring_type is object

    def test_mixin_methods_are_not_searched(self) -> None:
        with pytest.raises(ReflectionError):
            find_method(WithMixin, "_mixin_method", ())

    def test_overloads_resolve_to_distinct_descriptors(self) -> None:
        as_int = find_method(Formatter, "_render", [int])
        as_str = find_method(Formatter, "_render", [str])
        fallback = find_method(Formatter, "_render", [object])
        assert as_int != as_str
        assert as_int.param_types == (int,)
        assert as_str.param_types == (str,)
        assert fallback.function is not as_int.function

    def test_overloads_do_not_dispatch_on_subclasses(self) -> None:
        with pytest.raises(ReflectionError):
            find_method(Formatter, "_render", [bool])

    def test_not_found_message_names_signature_and_type(self) -> None:
        with pytest.raises(ReflectionError) as exc_info:
            find_method(Derived, "missing", (int, str))
        message = str(exc_info.value)
        assert "missing(int, str)" in message
        assert f"'{type_name(Derived)}'" in message


# End of file: src/mstair/reflection/test_lookup.py
