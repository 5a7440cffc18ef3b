"""Field resolution for DOMForm.

A record key is resolved to every element of the form whose ``name`` or
``data-name`` attribute equals the key. Several elements may share one key
(radio groups, checkbox groups), so lookups always return a list in document
order.

The module also hosts the small helpers that classify a field node (its
field type) and read the options of a ``<select>``, which both the
validators and the serializer rely on.
"""

from typing import List, Optional

from bs4.element import Tag

from domform.errors import NoElementsToPopulateError
from domform.types import DEFAULT_CHECKED_VALUE


def quote_css_string(value: str) -> str:
    """Quote a value for use inside a CSS attribute selector.

    Examples:
        >>> quote_css_string('multi-select[]')
        '"multi-select[]"'
        >>> quote_css_string('say "hi"')
        '"say \\\\"hi\\\\""'
    """
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\a ")
    )
    return f'"{escaped}"'


def find_fields(root: Tag, key: Optional[str] = None) -> List[Tag]:
    """Find the elements identified by a record key.

    Args:
        root: The form (or any container) to search
        key: Record key to resolve; None returns every identified element

    Returns:
        Matching elements in document order, possibly empty
    """
    if key is None:
        return root.select("[name], [data-name]")

    quoted = quote_css_string(key)
    return root.select(f"[name={quoted}], [data-name={quoted}]")


def resolve_fields(root: Tag, key: str) -> List[Tag]:
    """Find the elements identified by a record key, failing if there are none.

    Raises:
        NoElementsToPopulateError: If no element carries the key
    """
    fields = find_fields(root, key)
    if not fields:
        raise NoElementsToPopulateError(key)
    return fields


def field_type(element: Tag) -> str:
    """Classify a field node for validator dispatch.

    Examples:
        >>> from bs4 import BeautifulSoup
        >>> soup = BeautifulSoup(
        ...     '<input type="Email"><input><select multiple></select><span></span>',
        ...     "html.parser",
        ... )
        >>> [field_type(tag) for tag in soup.find_all(True)]
        ['email', 'text', 'select-multiple', 'span']
    """
    name = element.name.lower()
    if name == "input":
        return (element.get("type") or "text").strip().lower()
    if name == "select":
        return "select-multiple" if element.has_attr("multiple") else "select-one"
    return name


def checked_value(element: Tag) -> str:
    """Value submitted by a checkbox or radio when it is checked."""
    value = element.get("value")
    return DEFAULT_CHECKED_VALUE if value is None else value


def find_options(select: Tag) -> List[Tag]:
    """All options of a select, including those inside optgroups."""
    return select.find_all("option")


def option_value(option: Tag) -> str:
    # Without a value attribute an option submits its whitespace-collapsed text
    value = option.get("value")
    if value is not None:
        return value
    return " ".join(option.get_text().split())


def find_option(select: Tag, value: str) -> Optional[Tag]:
    """Find the first option of a select submitting the given value."""
    for option in find_options(select):
        if option_value(option) == value:
            return option
    return None


def clear_selection(select: Tag) -> None:
    for option in find_options(select):
        if option.has_attr("selected"):
            del option["selected"]


__all__ = [
    "quote_css_string",
    "find_fields",
    "resolve_fields",
    "field_type",
    "checked_value",
    "find_options",
    "option_value",
    "find_option",
    "clear_selection",
]
