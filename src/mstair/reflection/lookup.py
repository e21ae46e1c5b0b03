# File: src/mstair/reflection/lookup.py
"""
Member lookup by walking the primary base-class chain.

Lookups inspect only what each class declares itself, then step to
`cls.__base__` and repeat until `object` has been searched. Mixins that appear
only in `__mro__` are not searched. Nothing is cached: every call reflects the
classes as they are at that moment.

Exports:
- iter_type_chain(): the linear chain searched by every lookup.
- find_field(): resolve a field declared by a class or one of its bases.
- find_instance_field(): like find_field(), falling back to the instance `__dict__`.
- find_method(): resolve a method by name and exact parameter-type list.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

from mstair.reflection.errors import ReflectionError, ReflectionErrorKind
from mstair.reflection.members import (
    FieldDescriptor,
    MethodCandidate,
    MethodDescriptor,
    MethodKind,
    Modifier,
    declared_field_modifiers,
    declared_method_candidates,
    declares_field,
    mangle_name,
    signature_matches,
    visibility_of,
)
from mstair.reflection.xlogging.logger_factory import create_logger


__all__ = [
    "find_field",
    "find_instance_field",
    "find_method",
    "iter_type_chain",
    "type_name",
]

_LOG = create_logger(__name__)


def type_name(type_: Any) -> str:
    """Return `module.qualname` for a class, as used in error messages."""
    if not isinstance(type_, type):
        return repr(type_)
    if type_.__module__ == "builtins":
        return type_.__qualname__
    return f"{type_.__module__}.{type_.__qualname__}"


def iter_type_chain(type_: type) -> Iterator[type]:
    """
    Yield `type_`, then its primary base, and so on up to and including `object`.

    Example:
        >>> class A: ...
        >>> class B(A): ...
        >>> [t.__name__ for t in iter_type_chain(B)]
        ['B', 'A', 'object']
    """
    if not isinstance(type_, type):
        raise ReflectionError(ReflectionErrorKind.NOT_FOUND, f"{type_!r} is not a type")
    current: type | None = type_
    while current is not None:
        yield current
        current = current.__base__


def find_field(type_: type, name: str) -> FieldDescriptor:
    """
    Return the field `name` declared by `type_` or the nearest base that declares it.

    Private names (`__x`) are matched in their mangled form for each class in
    the chain, so `find_field(Derived, "__x")` finds `Base.__x` stored as `_Base__x`.

    :param type_: The class to start from.
    :param name: The field name as written in source.
    :return: Descriptor whose `declaring_type` is `type_` or one of its bases.
    :raises ReflectionError: NOT_FOUND naming `name` and `type_` (never `object`).
    """
    with _LOG.prefix_with(f"find_field {name!r}"):
        for owner in iter_type_chain(type_):
            storage_name = mangle_name(owner, name)
            _LOG.trace("searching %s for %r", owner.__qualname__, storage_name)
            if declares_field(owner, storage_name):
                descriptor = _field_descriptor(owner, name, storage_name)
                _LOG.debug("resolved %s for %s", descriptor, type_name(type_))
                return descriptor
    raise ReflectionError(
        ReflectionErrorKind.NOT_FOUND,
        f"unable to find the field '{name}' in type '{type_name(type_)}'",
    )


def find_instance_field(instance: object, name: str) -> FieldDescriptor:
    """
    Return the field `name` for an instance target.

    Class declarations win. An attribute that no class declares but that the
    instance holds in its own `__dict__` (for example assigned in `__init__`
    without an annotation) resolves to the class in the chain whose mangled
    form of `name` is present there.

    :raises ReflectionError: NOT_FOUND naming the instance's runtime type.
    """
    runtime_type = type(instance)
    try:
        return find_field(runtime_type, name)
    except ReflectionError:
        instance_dict = getattr(instance, "__dict__", None)
        if not isinstance(instance_dict, dict):
            raise
        for owner in iter_type_chain(runtime_type):
            storage_name = mangle_name(owner, name)
            if storage_name in instance_dict:
                descriptor = FieldDescriptor(
                    declaring_type=owner,
                    name=name,
                    storage_name=storage_name,
                    modifiers=visibility_of(name),
                    accessible=visibility_of(name) is Modifier.PUBLIC,
                )
                _LOG.debug("resolved instance attribute %s for %s", descriptor, type_name(runtime_type))
                return descriptor
        raise


def find_method(type_: type, name: str, param_types: Sequence[Any]) -> MethodDescriptor:
    """
    Return the method `name` whose parameter types equal `param_types` exactly.

    `param_types` lists the positional parameters after `self`/`cls`. It must
    always be given; pass `()` for a method without parameters. Overloads
    (`functools.singledispatchmethod` registrations) are told apart only by
    the whole parameter-type list.

    Example:
        >>> class Greeter:
        ...     def _greet(self, who: str) -> str:
        ...         return f"hello {who}"
        >>> find_method(Greeter, "_greet", (str,)).declaring_type is Greeter
        True

    :raises ReflectionError: NOT_FOUND naming the method, its signature and `type_`.
    """
    if param_types is None:
        raise ReflectionError(
            ReflectionErrorKind.NOT_FOUND,
            f"parameter types for method '{name}' must be given; use () for no parameters",
        )
    requested = tuple(param_types)
    with _LOG.prefix_with(f"find_method {name!r}"):
        for owner in iter_type_chain(type_):
            storage_name = mangle_name(owner, name)
            _LOG.trace("searching %s for %r", owner.__qualname__, storage_name)
            for candidate in declared_method_candidates(owner, storage_name):
                if signature_matches(candidate.param_types, requested):
                    descriptor = _method_descriptor(owner, name, storage_name, candidate)
                    _LOG.debug("resolved %s for %s", descriptor, type_name(type_))
                    return descriptor
    signature = ", ".join(type_name(t) if isinstance(t, type) else str(t) for t in requested)
    raise ReflectionError(
        ReflectionErrorKind.NOT_FOUND,
        f"unable to find the method '{name}({signature})' in type '{type_name(type_)}'",
    )


def _field_descriptor(owner: type, name: str, storage_name: str) -> FieldDescriptor:
    modifiers, annotation = declared_field_modifiers(owner, name, storage_name)
    return FieldDescriptor(
        declaring_type=owner,
        name=name,
        storage_name=storage_name,
        modifiers=modifiers,
        accessible=Modifier.PUBLIC in modifiers,
        annotation=annotation,
    )


def _method_descriptor(
    owner: type, name: str, storage_name: str, candidate: MethodCandidate
) -> MethodDescriptor:
    modifiers = visibility_of(name)
    if candidate.kind is not MethodKind.INSTANCE:
        modifiers |= Modifier.STATIC
    return MethodDescriptor(
        declaring_type=owner,
        name=name,
        storage_name=storage_name,
        modifiers=modifiers,
        accessible=Modifier.PUBLIC in modifiers,
        function=candidate.function,
        kind=candidate.kind,
        param_types=candidate.param_types,
    )


# End of file: src/mstair/reflection/lookup.py
