# File: src/mstair/reflection/accessor.py
"""
Read, write and invoke members that normal attribute access would not allow.

Makes it easier to do what you really shouldn't have to do. Use it in tests of
older code that offers no public seam; if new code needs it, something is
probably wrong, and if production code needs it, something is probably
horribly wrong. A warning is logged once per process when these functions run
outside a test run (see `mstair.reflection.base.config.outside_tests_policy`).

Every public entry point takes either a class (static form) or any other object
(instance form) as its target:

Example:
    >>> class Vault:
    ...     __secret: int = 1
    ...     def __open(self, code: int) -> str:
    ...         return f"opened with {code}"
    >>> vault = Vault()
    >>> get(vault, "__secret")
    1
    >>> set(vault, "__secret", 2)
    >>> get(vault, "__secret")
    2
    >>> invoke(vault, "__open", type_array(int), value_array(7))
    'opened with 7'

The lower-level `get_value`, `set_value` and `invoke_method` operate on
descriptors that were already resolved and overridden; they refuse
non-accessible members instead of overriding them.
"""

from __future__ import annotations

import functools
import types
from collections.abc import Sequence
from typing import Any

from mstair.reflection.base import config as cfg
from mstair.reflection.errors import ReflectionError, ReflectionErrorKind
from mstair.reflection.lookup import find_field, find_instance_field, find_method, type_name
from mstair.reflection.members import FieldDescriptor, MethodDescriptor, MethodKind
from mstair.reflection.overrides import make_accessible, remove_immutability
from mstair.reflection.xlogging.logger_factory import create_logger


__all__ = [
    "get",
    "get_value",
    "invoke",
    "invoke_method",
    "set",
    "set_value",
    "type_array",
    "value_array",
]

_LOG = create_logger(__name__)


# ---------- Read ----------


@functools.singledispatch
def get(target: object, name: str) -> Any:
    """
    Return the value of a field, bypassing visibility and attribute hooks.

    With an instance, the field is resolved on the instance's runtime type (then
    its own `__dict__`) and read with `object.__getattribute__`. With a class,
    the raw value stored in the declaring class is returned.

    :param target: An instance, or a class for the static form.
    :param name: The field name as written in source, e.g. `"__secret"`.
    :raises ReflectionError: NOT_FOUND or ACCESS_FAILED.
    """
    _check_usage_context()
    field = find_instance_field(target, name)
    make_accessible(field)
    return get_value(field, target)


@get.register(type)
def _get_static(target: type, name: str) -> Any:
    _check_usage_context()
    field = find_field(target, name)
    make_accessible(field)
    return get_value(field)


def get_value(field: FieldDescriptor, target: object | None = None) -> Any:
    """
    Read a resolved field; `target=None` or a STATIC field reads the class-level value.

    :raises ReflectionError: ACCESS_FAILED if the field is not accessible or the read fails.
    """
    if not field.accessible:
        raise ReflectionError(
            ReflectionErrorKind.ACCESS_FAILED,
            f"field '{field}' is not accessible; call make_accessible() first",
        )
    try:
        if target is None or field.is_static:
            return _read_class_value(field)
        return object.__getattribute__(target, field.storage_name)
    except (AttributeError, TypeError) as e:
        raise ReflectionError(
            ReflectionErrorKind.ACCESS_FAILED,
            f"couldn't read the value of the field '{field.name}' from {_describe(target, field)}",
            e,
        ) from e


def _read_class_value(field: FieldDescriptor) -> Any:
    namespace = vars(field.declaring_type)
    if isinstance(namespace.get(field.storage_name), types.MemberDescriptorType):
        raise TypeError(f"slot '{field.storage_name}' belongs to instances; a target is required")
    if field.storage_name not in namespace:
        raise AttributeError(
            f"type '{type_name(field.declaring_type)}' declares '{field.storage_name}' without a value"
        )
    return namespace[field.storage_name]


# ---------- Write ----------


@functools.singledispatch
def set(target: object, name: str, value: Any) -> None:
    """
    Assign a field, bypassing visibility, FINAL and `__setattr__` guards.

    With an instance, `object.__setattr__` writes the instance (frozen
    dataclasses included). With a class, or for a STATIC field reached through
    an instance, `type.__setattr__` writes the class that declares the field,
    so metaclass guards are bypassed too.

    :param target: An instance, or a class for the static form.
    :param name: The field name as written in source.
    :param value: The value to store.
    :raises ReflectionError: NOT_FOUND, MUTATION_FAILED or ACCESS_FAILED.
    """
    _check_usage_context()
    field = find_instance_field(target, name)
    remove_immutability(field)
    make_accessible(field)
    set_value(field, value, target)


@set.register(type)
def _set_static(target: type, name: str, value: Any) -> None:
    _check_usage_context()
    field = find_field(target, name)
    remove_immutability(field)
    make_accessible(field)
    set_value(field, value)


def set_value(field: FieldDescriptor, value: Any, target: object | None = None) -> None:
    """
    Write a resolved field; `target=None` or a STATIC field writes the declaring class.

    :raises ReflectionError: ACCESS_FAILED if the field is not accessible, still
        FINAL, needs an instance, or the write is rejected.
    """
    if not field.accessible:
        raise ReflectionError(
            ReflectionErrorKind.ACCESS_FAILED,
            f"field '{field}' is not accessible; call make_accessible() first",
        )
    if field.is_final:
        raise ReflectionError(
            ReflectionErrorKind.ACCESS_FAILED,
            f"can not set final field '{field}'; call remove_immutability() first",
        )
    try:
        if target is None or field.is_static:
            _write_class_value(field, value)
        else:
            object.__setattr__(target, field.storage_name, value)
    except (AttributeError, TypeError) as e:
        raise ReflectionError(
            ReflectionErrorKind.ACCESS_FAILED,
            f"was unable to set value of field '{field.name}' on {_describe(target, field)}",
            e,
        ) from e
    _LOG.debug("set %s", field)


def _write_class_value(field: FieldDescriptor, value: Any) -> None:
    raw = vars(field.declaring_type).get(field.storage_name)
    if isinstance(raw, types.MemberDescriptorType):
        raise TypeError(f"slot '{field.storage_name}' belongs to instances; a target is required")
    type.__setattr__(field.declaring_type, field.storage_name, value)


# ---------- Invoke ----------


@functools.singledispatch
def invoke(
    target: object,
    method_name: str,
    arg_types: Sequence[Any] = (),
    arg_values: Sequence[Any] = (),
) -> Any:
    """
    Call a method, bypassing visibility, and return its result.

    The method is resolved by name and the exact `arg_types` signature, then
    called with `arg_values` in order. Anything the call raises, including the
    method's own exceptions, is re-raised as INVOCATION_FAILED with the original
    exception as its cause.

    :param target: An instance, or a class for the static form.
    :param method_name: The method name as written in source.
    :param arg_types: Parameter types after `self`/`cls`; empty for none.
    :param arg_values: Arguments matching `arg_types` positionally.
    :raises ReflectionError: NOT_FOUND or INVOCATION_FAILED.
    """
    _check_usage_context()
    method = find_method(type(target), method_name, arg_types)
    make_accessible(method)
    return invoke_method(method, arg_values, target)


@invoke.register(type)
def _invoke_static(
    target: type,
    method_name: str,
    arg_types: Sequence[Any] = (),
    arg_values: Sequence[Any] = (),
) -> Any:
    _check_usage_context()
    method = find_method(target, method_name, arg_types)
    make_accessible(method)
    return _call(method, arg_values, instance=None, owner=target)


def invoke_method(
    method: MethodDescriptor,
    arg_values: Sequence[Any],
    target: object | None = None,
) -> Any:
    """
    Call a resolved method on `target`, or without an instance when `target` is None.

    Class methods receive `type(target)`, or the declaring class when there is
    no target.

    :raises ReflectionError: INVOCATION_FAILED.
    """
    owner = method.declaring_type if target is None else type(target)
    return _call(method, arg_values, instance=target, owner=owner)


def _call(
    method: MethodDescriptor,
    arg_values: Sequence[Any],
    *,
    instance: object | None,
    owner: type,
) -> Any:
    if not method.accessible:
        raise ReflectionError(
            ReflectionErrorKind.INVOCATION_FAILED,
            f"unable to invoke method '{method}': not accessible; call make_accessible() first",
        )
    if method.kind is MethodKind.INSTANCE and instance is None:
        raise ReflectionError(
            ReflectionErrorKind.INVOCATION_FAILED,
            f"unable to invoke method '{method}': an instance is required",
        )

    args = tuple(arg_values)
    try:
        if method.kind is MethodKind.STATIC:
            return method.function(*args)
        if method.kind is MethodKind.CLASS:
            return method.function(owner, *args)
        return method.function(instance, *args)
    except Exception as e:
        raise ReflectionError(
            ReflectionErrorKind.INVOCATION_FAILED,
            f"unable to invoke method '{method}'",
            e,
        ) from e


# ---------- Argument builders ----------


def type_array(*classes: Any) -> tuple[Any, ...]:
    """Return the given parameter types as an ordered tuple, e.g. `type_array(int, str)`."""
    return classes


def value_array(*values: Any) -> tuple[Any, ...]:
    """Return the given argument values as an ordered tuple."""
    return values


# ---------- Usage context ----------


def _check_usage_context() -> None:
    if cfg.in_test_mode() or cfg.outside_tests_policy() == "ignore":
        return
    _warn_outside_tests()


@functools.cache
def _warn_outside_tests() -> None:
    """Log, once per process, that the accessor is running outside a test run."""
    _LOG.warning(
        "mstair.reflection accessor used outside of a test run; "
        "set MSTAIR_REFLECTION_OUTSIDE_TESTS=ignore to silence this warning"
    )


def _describe(target: object | None, field: FieldDescriptor) -> str:
    if target is None:
        return f"type '{type_name(field.declaring_type)}'"
    return f"an object of type '{type_name(type(target))}'"


# End of file: src/mstair/reflection/accessor.py
