"""Population engine for DOMForm.

This module provides a PopulationEngine that writes a flat record into an
HTML form while enforcing the HTML5 constraint attributes of every field it
touches, and reports the outcome as a PopulationResult.

A pass runs in three steps:

1. Every record key is resolved to its field nodes. An unknown key aborts the
   pass with NoElementsToPopulateError. Each node is checked for required,
   readonly and disabled constraints, validated by the validator registered
   for its field type, then written (value attribute, text or selection).
   Checkboxes and radios are only checked for disabled here.
2. Checkboxes are checked or unchecked depending on whether their name is
   present in the record. An absent checkbox is meaningful (it means
   "unchecked"), so this runs over the whole form rather than per key.
   Groups (a ``[]`` name, several boxes or a list value) are checked by
   membership, and values matching no checkbox are reported.
3. Radio groups get the same whole-form treatment, once per group. An
   empty value counts as no selection.

Validation failures are routed through the pass's ErrorPolicy. The serialized
form is returned only when the pass recorded no error.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from bs4.element import Tag
from jsonschema import Draft7Validator

from domform.errors import (
    BadValueError,
    CheckboxRequiredError,
    InvalidRecordError,
    PopulationError,
    RadioRequiredError,
)
from domform.locator import (
    checked_value,
    clear_selection,
    field_type,
    find_option,
    resolve_fields,
)
from domform.policy import ErrorHandler, ErrorPolicy, PopulateOptions, RaiseErrorHandler
from domform.serializer import current_value, serialize
from domform.types import (
    CHECKABLE_TYPES,
    MULTI_VALUE_SUFFIX,
    MULTI_VALUED_TYPES,
    Record,
    RecordValue,
    SerializedRecord,
)
from domform.validators import (
    VALIDATORS,
    Validator,
    as_text,
    is_empty,
    validate_disabled,
    validate_pattern,
    validate_readonly,
    validate_required,
)


logger = logging.getLogger(__name__)


# Shape of a populated record: scalar values or lists of scalars
RECORD_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": {
        "anyOf": [
            {"type": ["string", "number", "null"]},
            {"type": "array", "items": {"type": ["string", "number"]}},
        ]
    },
}

_record_validator = Draft7Validator(RECORD_SCHEMA)


def normalize_record(record: Any) -> Record:
    """Check the shape of a record and return it as a plain dict.

    Tuples are accepted in place of lists.

    Raises:
        InvalidRecordError: If the record is not a mapping of string keys to
            scalars or lists of scalars

    Examples:
        >>> normalize_record({"cars[]": ("ford", "iveco")})
        {'cars[]': ['ford', 'iveco']}
        >>> normalize_record(["ford", "iveco"])
        Traceback (most recent call last):
        ...
        domform.errors.InvalidRecordError: Expected a mapping of field names to values, got list
    """
    if not isinstance(record, Mapping):
        raise InvalidRecordError(
            f"Expected a mapping of field names to values, got {type(record).__name__}"
        )

    data: Record = {}
    for key, value in record.items():
        if not isinstance(key, str):
            raise InvalidRecordError(f"Field names must be strings, got {key!r}", path=str(key))
        data[key] = list(value) if isinstance(value, tuple) else value

    error = next(iter(_record_validator.iter_errors(data)), None)
    if error is not None:
        path = ".".join(str(part) for part in error.path)
        raise InvalidRecordError(
            f"Invalid value for '{path}': expected a string, a number or a list of them, "
            f"got {error.instance!r}",
            path=path,
        )

    return data


@dataclass(frozen=True)
class PopulationResult:
    """Result of populating a form with a record.

    Attributes:
        is_valid: Whether the pass recorded no (unsuppressed) error
        errors: Population errors recorded during the pass
        data: The serialized form on success, None on failure
    """
    is_valid: bool
    errors: List[PopulationError] = field(default_factory=list)
    data: Optional[SerializedRecord] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "isValid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
        }
        if self.data is not None:
            result["data"] = self.data
        return result


class PopulationEngine:
    """Writes records into forms, validating every written field.

    Attributes:
        error_handler: Sink for the errors of every pass; RaiseErrorHandler
            (fail fast) by default
        validators: Field type to validator registry

    Examples:
        >>> from bs4 import BeautifulSoup
        >>> soup = BeautifulSoup(
        ...     '<form><input type="number" name="age" min="18"></form>', "html.parser"
        ... )
        >>> engine = PopulationEngine()
        >>> engine.populate(soup.form, {"age": "30"}).data
        {'age': '30'}
    """

    def __init__(
        self,
        error_handler: Optional[ErrorHandler] = None,
        validators: Optional[Dict[str, Validator]] = None,
    ) -> None:
        self.error_handler = error_handler if error_handler is not None else RaiseErrorHandler()
        self.validators = VALIDATORS if validators is None else validators

    def populate(
        self,
        form: Tag,
        record: Record,
        options: Optional[PopulateOptions] = None,
    ) -> PopulationResult:
        """Populate a form with a record.

        Args:
            form: The form element to write into
            record: Mapping of field names to values
            options: Suppression settings for this pass

        Returns:
            PopulationResult with the serialized form on success

        Raises:
            InvalidRecordError: If the record is not a mapping of scalars/lists
            NoElementsToPopulateError: If a key matches no element
            InvalidRegexError: If a field's pattern is malformed
            NumberRangeError: If a stepped number cannot be processed
            PopulationError: The first error, when the handler fails fast
        """
        data = normalize_record(record)
        policy = ErrorPolicy(self.error_handler, options)
        logger.debug("Populating form with %d field(s)", len(data))

        for key, value in data.items():
            for element in resolve_fields(form, key):
                self._populate_field(element, value, policy)

        self._populate_checkboxes(form, data, policy)
        self._populate_radios(form, data, policy)

        if policy.failed:
            logger.debug("Population failed with %d error(s)", len(policy.errors))
            return PopulationResult(is_valid=False, errors=list(policy.errors))

        return PopulationResult(is_valid=True, errors=[], data=serialize(form))

    def _populate_field(self, element: Tag, value: RecordValue, policy: ErrorPolicy) -> None:
        control_type = field_type(element)
        checkable = control_type in CHECKABLE_TYPES

        # Required and readonly are enforced per group for checkboxes and radios
        if element.has_attr("required") and not checkable:
            policy.report_all(validate_required(value, element))

        if element.has_attr("readonly") and not checkable:
            policy.report_all(validate_readonly(value, element, current_value(element)))

        if element.has_attr("disabled"):
            policy.report_all(validate_disabled(value, element))

        # Checked state is decided by _populate_checkboxes and _populate_radios
        if checkable:
            return

        if isinstance(value, list) and control_type not in MULTI_VALUED_TYPES:
            policy.report(BadValueError(element, "Expected a single value"))
            return

        tag_name = element.name.lower()
        if tag_name == "input":
            self._populate_input(element, control_type, value, policy)
        elif tag_name == "select":
            self._populate_select(element, control_type, value, policy)
        else:
            element.string = as_text(value)

    def _populate_input(
        self,
        element: Tag,
        control_type: str,
        value: RecordValue,
        policy: ErrorPolicy,
    ) -> None:
        errors: List[PopulationError] = []
        if element.has_attr("pattern"):
            errors.extend(validate_pattern(value, element))

        validator = self.validators.get(control_type)
        if validator is not None:
            errors.extend(validator(value, element))

        policy.report_all(errors)
        element["value"] = as_text(value)

    def _populate_select(
        self,
        element: Tag,
        control_type: str,
        value: RecordValue,
        policy: ErrorPolicy,
    ) -> None:
        validator = self.validators.get(control_type)
        if validator is not None:
            policy.report_all(validator(value, element))

        if control_type == "select-multiple":
            if not element.get("name", "").endswith(MULTI_VALUE_SUFFIX):
                logger.warning(
                    "Expected multi-select %r to have array brackets at end of name",
                    element.get("name"),
                )
            if not isinstance(value, list):
                return

            # Options keep stale selected markers across passes
            clear_selection(element)
            for entry in value:
                option = find_option(element, as_text(entry))
                if option is not None:
                    option["selected"] = "selected"
            return

        option = find_option(element, as_text(value))
        if option is None:
            return
        clear_selection(element)
        option["selected"] = "selected"

    def _populate_checkboxes(self, form: Tag, data: Record, policy: ErrorPolicy) -> None:
        for name, checkboxes in _group_by_name(form, "checkbox").items():
            value = data.get(name)

            if is_empty(value):
                checked = []
            elif _is_group(name, checkboxes, value):
                wanted = [as_text(entry) for entry in _as_list(value)]
                checked = [checkbox for checkbox in checkboxes if checked_value(checkbox) in wanted]

                available = {checked_value(checkbox) for checkbox in checkboxes}
                for entry in wanted:
                    if entry not in available:
                        policy.report(BadValueError(checkboxes[0], "Specified selection is invalid"))
            else:
                checked = checkboxes

            for checkbox in checkboxes:
                if any(checkbox is selected for selected in checked):
                    checkbox["checked"] = "checked"
                    continue

                if checkbox.has_attr("required"):
                    policy.report(CheckboxRequiredError(checkbox, "Must be checked"))
                _uncheck([checkbox])

    def _populate_radios(self, form: Tag, data: Record, policy: ErrorPolicy) -> None:
        for name, radios in _group_by_name(form, "radio").items():
            value = data.get(name)

            if isinstance(value, list):
                policy.report(BadValueError(radios[0], "Expected a single value"))
                continue

            # An empty value leaves the group without selection, like an absent key
            if is_empty(value):
                _uncheck(radios)
                required = next((radio for radio in radios if radio.has_attr("required")), None)
                if required is not None:
                    policy.report(RadioRequiredError(required, "Selection required"))
                continue

            selected = next(
                (radio for radio in radios if checked_value(radio) == as_text(value)),
                None,
            )
            if selected is None:
                policy.report(BadValueError(radios[0], "Specified selection is invalid"))
                continue

            _uncheck(radio for radio in radios if radio is not selected)
            selected["checked"] = "checked"


def _is_group(name: str, checkboxes: List[Tag], value: RecordValue) -> bool:
    # Groups are checked by membership of each checkbox's value
    return isinstance(value, list) or name.endswith(MULTI_VALUE_SUFFIX) or len(checkboxes) > 1


def _as_list(value: RecordValue) -> List[RecordValue]:
    return value if isinstance(value, list) else [value]


def _group_by_name(form: Tag, control_type: str) -> Dict[str, List[Tag]]:
    groups: Dict[str, List[Tag]] = {}
    for element in form.select("input[type][name]"):
        if field_type(element) == control_type:
            groups.setdefault(element["name"], []).append(element)
    return groups



def _uncheck(elements) -> None:
    for element in elements:
        if element.has_attr("checked"):
            del element["checked"]


__all__ = [
    "RECORD_SCHEMA",
    "normalize_record",
    "PopulationResult",
    "PopulationEngine",
]
