"""Serialization of a form's current state into a flat record.

Serialization is the inverse of population. It walks the named ``input``,
``select`` and ``textarea`` elements of the form in document order:

- Checkboxes and radios contribute only when checked. Checkboxes whose name
  ends with ``[]`` accumulate their values into a list.
- A single select yields its selected option, or its first option when none
  is selected. A select without options is left out.
- A multi-select always yields a list, empty when nothing is selected.
- Any other control yields its value attribute or text.

Serializing a form and populating another copy of it with the result
reproduces the same serialization.
"""

import logging
from typing import Any, Dict, List

from bs4.element import Tag

from domform.locator import (
    checked_value,
    field_type,
    find_options,
    option_value,
)
from domform.types import (
    CHECKABLE_TYPES,
    FIELD_TAGS,
    MULTI_VALUE_SUFFIX,
    RecordValue,
    SerializedRecord,
)


logger = logging.getLogger(__name__)


def selected_options(select: Tag) -> List[Tag]:
    return [option for option in find_options(select) if option.has_attr("selected")]


def select_value(select: Tag) -> RecordValue:
    """Current value of a select element.

    Returns:
        A list of values for multi-selects, the selected (or first) option's
        value for single selects, or None for a select without options
    """
    selected = selected_options(select)

    if select.has_attr("multiple"):
        if not select.get("name", "").endswith(MULTI_VALUE_SUFFIX):
            logger.warning(
                "Expected multi-select %r to have array brackets at end of name",
                select.get("name"),
            )
        return [option_value(option) for option in selected]

    options = selected or find_options(select)
    if not options:
        return None
    return option_value(options[0])


def current_value(element: Tag) -> RecordValue:
    """Current value of one field node, as serialization would report it.

    Checkboxes and radios report the value they submit when checked.
    """
    name = element.name.lower()
    if name == "select":
        return select_value(element)
    if name == "input":
        if field_type(element) in CHECKABLE_TYPES:
            return checked_value(element)
        return element.get("value", "")
    return element.get_text()


def serialize(form: Tag) -> SerializedRecord:
    """Read every named control of a form into a flat record.

    Args:
        form: The form element

    Returns:
        Mapping of control names to values, in document order

    Examples:
        >>> from bs4 import BeautifulSoup
        >>> soup = BeautifulSoup(
        ...     '<form><input name="animal" value="Lion">'
        ...     '<input type="checkbox" name="news"></form>',
        ...     "html.parser",
        ... )
        >>> serialize(soup.form)
        {'animal': 'Lion'}
    """
    result: Dict[str, Any] = {}

    for element in form.select(", ".join(f"{tag}[name]" for tag in FIELD_TAGS)):
        name = element["name"]
        control_type = field_type(element)

        if control_type in CHECKABLE_TYPES:
            if not element.has_attr("checked"):
                continue
            value = checked_value(element)
            if control_type == "checkbox" and name.endswith(MULTI_VALUE_SUFFIX):
                values = result.get(name)
                if not isinstance(values, list):
                    values = result[name] = []
                values.append(value)
            else:
                result[name] = value
            continue

        value = current_value(element)
        if value is None:
            continue
        result[name] = value

    return result


__all__ = [
    "selected_options",
    "select_value",
    "current_value",
    "serialize",
]
