"""Field validators for DOMForm.

Each validator checks one category of HTML constraint. Validators take the
raw record value and the field node and return a list of PopulationError
instances describing every violation found (an empty list means the value is
acceptable). They never raise for a bad value: the error policy decides what
happens to the returned errors. Only engine faults, such as a malformed
``pattern`` attribute, are raised directly.

Type-specific validators are registered in VALIDATORS, keyed by field type
(see ``domform.locator.field_type``). The population engine looks the field
type up in the registry it was given, so new types can be supported without
touching the engine:

    >>> def validate_tel(value, element):
    ...     return []
    >>> registry = dict(VALIDATORS)
    >>> register_validator("tel", validate_tel, registry)
"""

import math
import re
from typing import Callable, Dict, List, Optional, Union
from urllib.parse import urlsplit

from bs4.element import Tag

from domform.datetimes import parse_datetime
from domform.errors import (
    BadValueError,
    DatetimeFormatError,
    DisabledError,
    InvalidRegexError,
    NumberRangeError,
    PopulationError,
    ReadonlyError,
    ValueRequiredError,
)
from domform.locator import field_type, find_option
from domform.types import RecordValue


Validator = Callable[[RecordValue, Tag], List[PopulationError]]
Number = Union[int, float]

# Smallest 64-bit signed integer, its absolute value is not representable
MIN_INTEGER = -(2 ** 63)

# Remainders closer than this to zero or to the step are floating point drift
STEP_TOLERANCE = 1e-15

NUMBER_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
INTEGER_RE = re.compile(r"^\s*[+-]?\d+\s*$")
COLOR_RE = re.compile(r"^#[0-9a-f]{6}$", re.IGNORECASE)
SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*$", re.IGNORECASE)

# WHATWG "valid e-mail address"
EMAIL_RE = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)

# Schemes whose URLs carry no host
HOSTLESS_SCHEMES = frozenset({"mailto", "news", "file"})


def as_text(value: RecordValue) -> str:
    """Render a scalar record value the way it is stored in the document."""
    if value is None:
        return ""
    return str(value)


def is_empty(value: RecordValue) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return as_text(value) == ""


def parse_number(value: RecordValue) -> Optional[Number]:
    """Parse a numeric record value.

    Integers stay integers so that arbitrarily large values compare exactly.

    Examples:
        >>> parse_number("64")
        64
        >>> parse_number(" 1.5e2 ")
        150.0
        >>> parse_number("string") is None
        True
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if not isinstance(value, str) or not NUMBER_RE.match(value):
        return None
    if INTEGER_RE.match(value):
        return int(value)
    return float(value)


def is_valid_url(value: str) -> bool:
    """Check that a value is an absolute URL.

    Examples:
        >>> is_valid_url("https://youtube.com")
        True
        >>> is_valid_url("*** Definitely not a valid URL ***")
        False
    """
    if not value or any(char.isspace() for char in value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    if not SCHEME_RE.match(parts.scheme):
        return False
    if parts.scheme.lower() in HOSTLESS_SCHEMES:
        return bool(parts.netloc or parts.path)
    return bool(parts.hostname)


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value))


# ---------------------------------------------------------------------------
# Constraint validators, applied to every field carrying the attribute
# ---------------------------------------------------------------------------


def validate_required(value: RecordValue, element: Tag) -> List[PopulationError]:
    if is_empty(value):
        return [ValueRequiredError(element, "Must be filled")]
    return []


def validate_readonly(
    value: RecordValue, element: Tag, current: RecordValue
) -> List[PopulationError]:
    """Reject changes to a readonly field.

    Browsers submit readonly fields, so resubmitting the current value is
    accepted.
    """
    if isinstance(value, (list, tuple)) or isinstance(current, list):
        unchanged = _as_text_list(value) == _as_text_list(current)
    else:
        unchanged = as_text(value) == as_text(current)

    if unchanged:
        return []
    return [ReadonlyError(element, "Field is read only")]


def validate_disabled(value: RecordValue, element: Tag) -> List[PopulationError]:
    return [DisabledError(element, "Field is disabled")]


def validate_pattern(value: RecordValue, element: Tag) -> List[PopulationError]:
    """Check the value against the field's pattern attribute.

    The whole value must match, as in HTML.

    Raises:
        InvalidRegexError: If the pattern does not compile
    """
    pattern = element.get("pattern", "")
    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        raise InvalidRegexError(element, pattern, str(exc)) from exc

    if compiled.fullmatch(as_text(value)) is None:
        return [BadValueError(element, "Value does not match specified pattern")]
    return []


# ---------------------------------------------------------------------------
# Type validators
# ---------------------------------------------------------------------------


def validate_url(value: RecordValue, element: Tag) -> List[PopulationError]:
    if not is_valid_url(as_text(value)):
        return [BadValueError(element, "Invalid URL")]
    return []


def validate_email(value: RecordValue, element: Tag) -> List[PopulationError]:
    text = as_text(value)

    if element.has_attr("multiple"):
        addresses = [address.strip() for address in text.split(",")]
        if not all(is_valid_email(address) for address in addresses):
            return [BadValueError(element, "One or more e-mail addresses are invalid")]
        return []

    if not is_valid_email(text):
        return [BadValueError(element, "Invalid email address")]
    return []


def validate_number(value: RecordValue, element: Tag) -> List[PopulationError]:
    """Validate number and range inputs against min, max and step.

    Malformed min, max and step attributes are ignored, as are ``step="any"``
    and non-positive steps.

    Raises:
        NumberRangeError: If an integer value equals MIN_INTEGER on an
            integer-stepped field
    """
    number = parse_number(value)
    if number is None:
        return [BadValueError(element, "Invalid number")]

    errors: List[PopulationError] = []

    minimum = parse_number(element.get("min"))
    if minimum is not None and number < minimum:
        errors.append(BadValueError(element, "Below minimum"))

    maximum = parse_number(element.get("max"))
    if maximum is not None and number > maximum:
        errors.append(BadValueError(element, "Above maximum"))

    step_attr = element.get("step")
    step = parse_number(step_attr)
    if step is not None and step > 0 and not _in_sequence(number, step, step_attr):
        errors.append(BadValueError(element, "Out of sequence"))

    return errors


def _in_sequence(number: Number, step: Number, step_attr: str) -> bool:
    if isinstance(number, int) and "." not in step_attr:
        if number == MIN_INTEGER:
            raise NumberRangeError(
                "Number out of processable range (must be greater than "
                f"{MIN_INTEGER})"
            )
        try:
            return abs(number) % step == 0
        except OverflowError as exc:
            raise NumberRangeError("Number out of processable range") from exc

    try:
        remainder = math.fmod(abs(number), step)
    except OverflowError as exc:
        raise NumberRangeError("Number out of processable range") from exc

    if "." in step_attr:
        return remainder < STEP_TOLERANCE or step - remainder < STEP_TOLERANCE
    return remainder == 0


def validate_color(value: RecordValue, element: Tag) -> List[PopulationError]:
    if not COLOR_RE.match(as_text(value)):
        return [BadValueError(element, "Not a valid color")]
    return []


def validate_datetime(value: RecordValue, element: Tag) -> List[PopulationError]:
    """Validate datetime-local, month, week and time inputs."""
    input_type = field_type(element)

    parsed = parse_datetime(as_text(value), input_type)
    if parsed is None:
        return [DatetimeFormatError(element, "Value does not match expected format")]

    errors: List[PopulationError] = []
    for attribute, message, out_of_range in (
        ("min", "Below minimum", lambda bound: parsed < bound),
        ("max", "Above maximum", lambda bound: parsed > bound),
    ):
        if not element.has_attr(attribute):
            continue

        bound = parse_datetime(element[attribute], input_type)
        if bound is None:
            errors.append(DatetimeFormatError(
                element, f"Attribute {attribute} does not match expected format"
            ))
        elif out_of_range(bound):
            errors.append(BadValueError(element, message))

    return errors


def validate_select(value: RecordValue, element: Tag) -> List[PopulationError]:
    if find_option(element, as_text(value)) is None:
        return [BadValueError(element, "Specified selection is invalid")]
    return []


def validate_multi_select(value: RecordValue, element: Tag) -> List[PopulationError]:
    """Validate every entry of a multi-select value.

    One error is returned per invalid entry.
    """
    if not isinstance(value, list):
        return [BadValueError(element, "Expected an array for multi-select")]

    return [
        BadValueError(element, "Specified selection is invalid")
        for entry in value
        if find_option(element, as_text(entry)) is None
    ]


def _as_text_list(value: RecordValue) -> List[str]:
    if isinstance(value, (list, tuple)):
        return [as_text(entry) for entry in value]
    return [as_text(value)]


VALIDATORS: Dict[str, Validator] = {
    "url": validate_url,
    "email": validate_email,
    "number": validate_number,
    "range": validate_number,
    "color": validate_color,
    "datetime-local": validate_datetime,
    "month": validate_datetime,
    "week": validate_datetime,
    "time": validate_datetime,
    "select-one": validate_select,
    "select-multiple": validate_multi_select,
}


def register_validator(
    type_name: str,
    validator: Validator,
    registry: Optional[Dict[str, Validator]] = None,
) -> None:
    """Register a validator for a field type.

    Args:
        type_name: Field type, e.g. an input type such as "tel"
        validator: Callable returning the list of errors for a value
        registry: Registry to update, defaults to VALIDATORS
    """
    target = VALIDATORS if registry is None else registry
    target[type_name.lower()] = validator


__all__ = [
    "Validator",
    "MIN_INTEGER",
    "STEP_TOLERANCE",
    "VALIDATORS",
    "as_text",
    "is_empty",
    "parse_number",
    "is_valid_url",
    "is_valid_email",
    "validate_required",
    "validate_readonly",
    "validate_disabled",
    "validate_pattern",
    "validate_url",
    "validate_email",
    "validate_number",
    "validate_color",
    "validate_datetime",
    "validate_select",
    "validate_multi_select",
    "register_validator",
]
