# File: src/mstair/reflection/overrides.py
"""
Visibility and mutability overrides applied to member descriptors.

Both overrides mutate the descriptor, never the target object, and last for the
lifetime of the descriptor. Neither is ever undone.

Known limitation of `remove_immutability`: clearing FINAL lets the accessor
write the member again, but any value already copied elsewhere keeps the old
value. That includes names bound with `from module import CONSTANT` and
default-argument values evaluated when a function was defined.
"""

from __future__ import annotations

from mstair.reflection.errors import ReflectionError, ReflectionErrorKind
from mstair.reflection.lookup import find_field
from mstair.reflection.members import FieldDescriptor, MemberDescriptor, Modifier
from mstair.reflection.xlogging.logger_factory import create_logger


__all__ = [
    "make_accessible",
    "remove_immutability",
]

_LOG = create_logger(__name__)


def make_accessible(member: MemberDescriptor) -> None:
    """
    Mark a field or method descriptor as accessible regardless of its visibility.

    Calling it on an already accessible descriptor changes nothing.
    """
    if member.accessible:
        return
    object.__setattr__(member, "accessible", True)
    _LOG.debug("made %s accessible", member)


def remove_immutability(field: FieldDescriptor) -> None:
    """
    Clear the FINAL modifier of a field descriptor.

    No-op when the field is not FINAL. Otherwise the descriptor's own
    `modifiers` field is looked up through the accessor and rewritten, which is
    a change to the descriptor of a modifier, not to the field's value.

    :param field: The field descriptor to make writable.
    :raises ReflectionError: MUTATION_FAILED if the descriptor rejects the change.
    """
    if Modifier.FINAL not in field.modifiers:
        return

    try:
        modifiers = find_field(type(field), "modifiers")
        make_accessible(modifiers)
        object.__setattr__(field, modifiers.storage_name, field.modifiers & ~Modifier.FINAL)
    except (ReflectionError, AttributeError, TypeError) as e:
        raise ReflectionError(
            ReflectionErrorKind.MUTATION_FAILED,
            f"exception whilst attempting to remove the 'final' restriction from '{field}'",
            e,
        ) from e
    _LOG.debug("removed FINAL from %s", field)


# End of file: src/mstair/reflection/overrides.py
