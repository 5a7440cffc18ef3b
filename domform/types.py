"""Core type definitions for DOMForm.

This module defines the fundamental types shared by the population engine,
the validators and the serializer:
- ErrorKind: Categories of population errors
- Record / RecordValue: The flat key/value shape populated into a form
- Field type constants used to dispatch validation

A "field type" is the lower-cased ``type`` of an ``<input>`` (``text`` when
absent), ``select-one`` / ``select-multiple`` for ``<select>``, ``textarea``
for ``<textarea>`` and the tag name for any other element.
"""

from enum import Enum
from typing import Any, Dict, FrozenSet, List, Union

from typing_extensions import TypeAlias


class ErrorKind(str, Enum):
    """Population error categories.

    Validation kinds are routed through the error policy and may be
    suppressed. Structural kinds always abort the pass.
    """
    BAD_VALUE = "bad_value"
    VALUE_REQUIRED = "value_required"
    READONLY = "readonly"
    DISABLED = "disabled"
    CHECKBOX_REQUIRED = "checkbox_required"
    RADIO_REQUIRED = "radio_required"
    DATETIME_FORMAT = "datetime_format"
    INVALID_PATTERN = "invalid_pattern"
    NO_ELEMENTS_TO_POPULATE = "no_elements_to_populate"


STRUCTURAL_ERROR_KINDS: FrozenSet[ErrorKind] = frozenset({
    ErrorKind.INVALID_PATTERN,
    ErrorKind.NO_ELEMENTS_TO_POPULATE,
})


Scalar: TypeAlias = Union[str, int, float, None]
RecordValue: TypeAlias = Union[Scalar, List[Union[str, int, float]]]
Record: TypeAlias = Dict[str, RecordValue]
SerializedRecord: TypeAlias = Dict[str, Any]


DATETIME_INPUT_TYPES: FrozenSet[str] = frozenset({
    "datetime-local",
    "month",
    "week",
    "time",
})

# Field types that accept a list value
MULTI_VALUED_TYPES: FrozenSet[str] = frozenset({
    "select-multiple",
    "checkbox",
})

# Field types whose checked state is handled by the group passes
CHECKABLE_TYPES: FrozenSet[str] = frozenset({
    "checkbox",
    "radio",
})

FIELD_TAGS = ("input", "select", "textarea")

# Suffix marking a name that carries several values
MULTI_VALUE_SUFFIX = "[]"

# Value submitted by a checkbox or radio without a value attribute
DEFAULT_CHECKED_VALUE = "on"


__all__ = [
    "ErrorKind",
    "STRUCTURAL_ERROR_KINDS",
    "Scalar",
    "RecordValue",
    "Record",
    "SerializedRecord",
    "DATETIME_INPUT_TYPES",
    "MULTI_VALUED_TYPES",
    "CHECKABLE_TYPES",
    "FIELD_TAGS",
    "MULTI_VALUE_SUFFIX",
    "DEFAULT_CHECKED_VALUE",
]
