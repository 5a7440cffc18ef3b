"""Error types raised and reported while populating a form.

Two families of errors exist:

- Structural errors (NoElementsToPopulateError, InvalidRecordError,
  InvalidRegexError, NumberRangeError, ElementNotFormError) mean the record
  and the form cannot be reconciled at all. They are always raised directly
  and can never be suppressed.
- Population errors (PopulationError subclasses) describe a value that
  violates a field's constraints. They are handed to the error policy, which
  raises, collects or drops them depending on its configuration.

Every PopulationError keeps a reference to the offending field node so that
handlers can annotate the document next to it.
"""

from typing import Any, Dict, Optional

from bs4.element import Tag

from domform.types import ErrorKind


class DOMFormError(Exception):
    """Base class for all DOMForm errors."""


class ElementNotFormError(DOMFormError):
    """Raised when a Form is bound to something other than one <form> element."""


class InvalidRecordError(DOMFormError, TypeError):
    """Raised when the populated record is not a mapping of scalars or lists.

    Attributes:
        path: Key path of the offending value, empty for the record itself
    """

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(message)


class NoElementsToPopulateError(DOMFormError, LookupError):
    """Raised when a record key matches no element of the form.

    This is a problem with the underlying data (stored or user input): the
    record and the form have diverged and the form cannot be populated.

    Attributes:
        key: The record key that could not be resolved
    """
    kind = ErrorKind.NO_ELEMENTS_TO_POPULATE

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Failed to find element named '{key}'")


class InvalidRegexError(DOMFormError, ValueError):
    """Raised when a field's pattern attribute is not a valid regular expression.

    Attributes:
        element: The field carrying the pattern
        pattern: The pattern text that failed to compile
    """
    kind = ErrorKind.INVALID_PATTERN

    def __init__(self, element: Tag, pattern: str, reason: str = ""):
        self.element = element
        self.pattern = pattern
        message = f"Invalid pattern {pattern!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NumberRangeError(DOMFormError, OverflowError):
    """Raised when a stepped number is outside the processable integer range."""


class PopulationError(DOMFormError):
    """A value that violates one of a field's constraints.

    Attributes:
        element: The field node the value was written to
        message: Human-readable error description
        kind: Category of the error, used for suppression

    Examples:
        >>> from bs4 import BeautifulSoup
        >>> field = BeautifulSoup('<input name="age">', "html.parser").input
        >>> err = BadValueError(field, "Invalid number")
        >>> err.kind
        <ErrorKind.BAD_VALUE: 'bad_value'>
        >>> err.field_name
        'age'
    """
    kind: ErrorKind = ErrorKind.BAD_VALUE

    def __init__(self, element: Tag, message: str):
        self.element = element
        self.message = message
        super().__init__(message)

    @property
    def field_name(self) -> Optional[str]:
        """Identity of the offending field (name or data-name)."""
        return self.element.get("name") or self.element.get("data-name")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "field": self.field_name,
        }


class BadValueError(PopulationError):
    """The value is malformed or out of the field's accepted range."""
    kind = ErrorKind.BAD_VALUE


class ValueRequiredError(PopulationError):
    """An empty value was given to a required field."""
    kind = ErrorKind.VALUE_REQUIRED


class ReadonlyError(PopulationError):
    """A readonly field was given a value different from its current one."""
    kind = ErrorKind.READONLY


class DisabledError(PopulationError):
    """A value was given to a disabled field."""
    kind = ErrorKind.DISABLED


class CheckboxRequiredError(PopulationError):
    """A required checkbox was left unchecked."""
    kind = ErrorKind.CHECKBOX_REQUIRED


class RadioRequiredError(PopulationError):
    """No radio of a required group was selected."""
    kind = ErrorKind.RADIO_REQUIRED


class DatetimeFormatError(PopulationError):
    """A date or time value does not match the format of its input type."""
    kind = ErrorKind.DATETIME_FORMAT


__all__ = [
    "DOMFormError",
    "ElementNotFormError",
    "InvalidRecordError",
    "NoElementsToPopulateError",
    "InvalidRegexError",
    "NumberRangeError",
    "PopulationError",
    "BadValueError",
    "ValueRequiredError",
    "ReadonlyError",
    "DisabledError",
    "CheckboxRequiredError",
    "RadioRequiredError",
    "DatetimeFormatError",
]
