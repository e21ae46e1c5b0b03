# File: src/mstair/reflection/members.py
"""
Member descriptors and the rules that classify a class's own namespace.

A class "declares" exactly what lives in its own `__dict__` plus its own
annotations; nothing inherited counts. This module answers, for one class and
one member name at a time:

- which storage name the member uses (private `__x` names are mangled),
- whether the entry is a field or a method,
- which modifiers (visibility, static, final) apply,
- for methods, which parameter-type signatures the entry can be called with.

The descriptors themselves are frozen, slotted dataclasses. The override
functions in `mstair.reflection.overrides` write their `accessible` and
`modifiers` slots directly, the same way the accessor writes any other
frozen object.
"""

from __future__ import annotations

import dataclasses
import enum
import functools
import inspect
import re
import types
import typing
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, Final, NamedTuple

from mstair.reflection.xlogging.logger_factory import create_logger


__all__ = [
    "FieldDescriptor",
    "MemberDescriptor",
    "MethodCandidate",
    "MethodDescriptor",
    "MethodKind",
    "Modifier",
    "annotation_is_final",
    "declared_field_modifiers",
    "declared_method_candidates",
    "declares_field",
    "mangle_name",
    "own_annotations",
    "signature_matches",
    "visibility_of",
]

_LOG = create_logger(__name__)

_FINAL_TEXT_RX: Final[re.Pattern[str]] = re.compile(
    r"^(?:typing\.|t\.)?(?:ClassVar\[\s*(?:typing\.|t\.)?)?Final\b"
)
_CLASSVAR_TEXT_RX: Final[re.Pattern[str]] = re.compile(r"^(?:typing\.|t\.)?ClassVar\b")

_BUILTIN_INSTANCE_METHOD_TYPES: Final = (
    types.MethodDescriptorType,
    types.WrapperDescriptorType,
)
_POSITIONAL_KINDS: Final = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


class Modifier(enum.Flag):
    """Modifier bits of a declared member."""

    NONE = 0
    PUBLIC = enum.auto()
    PROTECTED = enum.auto()  # _name
    PRIVATE = enum.auto()  # __name, stored mangled
    STATIC = enum.auto()
    FINAL = enum.auto()


class MethodKind(enum.Enum):
    """How a resolved method binds its first argument."""

    INSTANCE = "instance"
    STATIC = "static"
    CLASS = "class"


@dataclass(frozen=True, slots=True, kw_only=True)
class MemberDescriptor:
    """
    Handle to one member declared by one class.

    :param declaring_type: The class whose own namespace holds the member.
    :param name: The member name as the caller wrote it.
    :param storage_name: The key the member is stored under (mangled for `__x`).
    :param modifiers: Visibility, static and final bits.
    :param accessible: Whether access rules have been overridden for this handle.
    """

    declaring_type: type
    name: str
    storage_name: str
    modifiers: Modifier
    accessible: bool = field(default=False, compare=False)

    @property
    def is_public(self) -> bool:
        return Modifier.PUBLIC in self.modifiers

    @property
    def is_static(self) -> bool:
        return Modifier.STATIC in self.modifiers

    def __str__(self) -> str:
        return f"{self.declaring_type.__qualname__}.{self.name}"


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldDescriptor(MemberDescriptor):
    """A declared field; `annotation` is the raw annotation, if any."""

    annotation: Any = field(default=None, compare=False)

    @property
    def is_final(self) -> bool:
        return Modifier.FINAL in self.modifiers


@dataclass(frozen=True, slots=True, kw_only=True)
class MethodDescriptor(MemberDescriptor):
    """A declared method resolved to one concrete parameter-type signature."""

    function: Callable[..., Any]
    kind: MethodKind
    param_types: tuple[Any, ...]

    def __str__(self) -> str:
        params = ", ".join(_type_label(t) for t in self.param_types)
        return f"{self.declaring_type.__qualname__}.{self.name}({params})"


class MethodCandidate(NamedTuple):
    """One callable signature offered by a class namespace entry."""

    function: Callable[..., Any]
    kind: MethodKind
    param_types: tuple[Any, ...]


def mangle_name(owner: type, name: str) -> str:
    """
    Return the storage name Python uses for `name` inside the body of `owner`.

    Example:
        >>> class Base: ...
        >>> mangle_name(Base, "__secret")
        '_Base__secret'
        >>> mangle_name(Base, "__init__")
        '__init__'
    """
    if not name.startswith("__") or name.endswith("__") or "." in name:
        return name
    stripped = owner.__name__.lstrip("_")
    if not stripped:
        return name
    return f"_{stripped}{name}"


def visibility_of(name: str) -> Modifier:
    """Classify a member name as PUBLIC, PROTECTED or PRIVATE by its underscores."""
    if name.startswith("__") and name.endswith("__"):
        return Modifier.PUBLIC
    if name.startswith("__"):
        return Modifier.PRIVATE
    if name.startswith("_"):
        return Modifier.PROTECTED
    return Modifier.PUBLIC


def own_annotations(owner: type) -> dict[str, Any]:
    """Return the annotations `owner` itself declares, never inherited ones."""
    try:
        return dict(inspect.get_annotations(owner))
    except NameError:
        # Unresolvable forward references under lazily evaluated annotations.
        import annotationlib

        return dict(annotationlib.get_annotations(owner, format=annotationlib.Format.STRING))


def annotation_is_final(annotation: Any) -> bool:
    """Return True for `Final`, `Final[T]`, `ClassVar[Final[T]]` or their string forms."""
    if isinstance(annotation, str):
        return bool(_FINAL_TEXT_RX.match(annotation.strip()))
    if annotation is typing.Final:
        return True
    origin = typing.get_origin(annotation)
    if origin is typing.Final:
        return True
    if origin is typing.ClassVar:
        args = typing.get_args(annotation)
        return bool(args) and annotation_is_final(args[0])
    return False


def _annotation_is_classvar(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return bool(_CLASSVAR_TEXT_RX.match(annotation.strip()))
    return annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar


def _is_frozen_dataclass_field(owner: type, storage_name: str) -> bool:
    params = owner.__dict__.get("__dataclass_params__")
    if params is None or not params.frozen:
        return False
    return any(f.name == storage_name for f in dataclasses.fields(owner))


def _is_method_entry(raw: Any) -> bool:
    return isinstance(
        raw,
        (
            types.FunctionType,
            staticmethod,
            classmethod,
            functools.singledispatchmethod,
            types.BuiltinFunctionType,
            types.ClassMethodDescriptorType,
            *_BUILTIN_INSTANCE_METHOD_TYPES,
        ),
    )


def declares_field(owner: type, storage_name: str) -> bool:
    """Return True if `owner`'s own namespace declares a field under `storage_name`."""
    namespace = owner.__dict__
    if storage_name in namespace:
        return not _is_method_entry(namespace[storage_name])
    return storage_name in own_annotations(owner)


def declared_field_modifiers(owner: type, name: str, storage_name: str) -> tuple[Modifier, Any]:
    """
    Return `(modifiers, annotation)` for a field that `owner` declares.

    STATIC is set for `ClassVar` annotations and for unannotated plain class
    attributes. FINAL is set for `Final` annotations and frozen dataclass fields.
    """
    modifiers = visibility_of(name)
    annotation = own_annotations(owner).get(storage_name)
    raw = owner.__dict__.get(storage_name)

    if annotation is not None:
        if _annotation_is_classvar(annotation):
            modifiers |= Modifier.STATIC
        if annotation_is_final(annotation):
            modifiers |= Modifier.FINAL
    elif storage_name in owner.__dict__ and not _is_data_descriptor(raw):
        modifiers |= Modifier.STATIC

    if _is_frozen_dataclass_field(owner, storage_name):
        modifiers |= Modifier.FINAL
    return modifiers, annotation


def _is_data_descriptor(raw: Any) -> bool:
    return isinstance(raw, (property, types.MemberDescriptorType, types.GetSetDescriptorType))


def declared_method_candidates(owner: type, storage_name: str) -> list[MethodCandidate]:
    """
    Return every callable signature `owner`'s own namespace offers under `storage_name`.

    A plain function yields one candidate. A `singledispatchmethod` yields one per
    registered implementation, with the registry key as the first parameter type.
    Entries whose signature cannot be introspected yield nothing.
    """
    raw = owner.__dict__.get(storage_name)
    if raw is None or not _is_method_entry(raw):
        return []
    if isinstance(raw, functools.singledispatchmethod):
        return list(_dispatch_candidates(raw))
    candidate = _candidate_for(raw)
    return [candidate] if candidate is not None else []


def _dispatch_candidates(raw: functools.singledispatchmethod[Any]) -> Iterator[MethodCandidate]:
    default_kind = _unwrap(raw.func)[1]
    for key, impl in raw.dispatcher.registry.items():
        function, kind = _unwrap(impl)
        if kind is MethodKind.INSTANCE:
            kind = default_kind
        params = _positional_param_types(function, skip_first=kind is not MethodKind.STATIC)
        if not params:
            continue
        yield MethodCandidate(function, kind, (key, *params[1:]))


def _unwrap(raw: Any) -> tuple[Callable[..., Any], MethodKind]:
    if isinstance(raw, staticmethod):
        return raw.__func__, MethodKind.STATIC
    if isinstance(raw, (classmethod, types.ClassMethodDescriptorType)):
        return getattr(raw, "__func__", raw), MethodKind.CLASS
    if isinstance(raw, types.BuiltinFunctionType):
        return raw, MethodKind.STATIC
    return raw, MethodKind.INSTANCE


def _candidate_for(raw: Any) -> MethodCandidate | None:
    function, kind = _unwrap(raw)
    params = _positional_param_types(function, skip_first=kind is not MethodKind.STATIC)
    if params is None:
        return None
    return MethodCandidate(function, kind, params)


def _positional_param_types(function: Callable[..., Any], *, skip_first: bool) -> tuple[Any, ...] | None:
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError, NameError) as e:
        _LOG.debug("no introspectable signature for %r (%s)", function, e)
        return None
    params = [p for p in signature.parameters.values() if p.kind in _POSITIONAL_KINDS]
    if skip_first:
        params = params[1:]
    return tuple(object if p.annotation is p.empty else p.annotation for p in params)


def signature_matches(declared: Sequence[Any], requested: Sequence[Any]) -> bool:
    """
    Return True when both parameter-type lists are equal element by element.

    String annotations (postponed evaluation) match a requested class by its
    `__name__`, `__qualname__` or `module.qualname`.
    """
    if len(declared) != len(requested):
        return False
    return all(_type_matches(d, r) for d, r in zip(declared, requested, strict=True))


def _type_matches(declared: Any, requested: Any) -> bool:
    if declared is requested or declared == requested:
        return True
    if isinstance(declared, str) and isinstance(requested, type):
        return declared.strip() in {
            requested.__name__,
            requested.__qualname__,
            f"{requested.__module__}.{requested.__qualname__}",
        }
    return False


def _type_label(t: Any) -> str:
    if isinstance(t, type):
        return t.__qualname__
    return str(t)


# End of file: src/mstair/reflection/members.py
