"""DOMForm: HTML form population and validation.

DOMForm writes flat records (for example submitted form data) into HTML
forms held in BeautifulSoup documents, and reads them back:
- Population validates every written field against its HTML5 constraint
  attributes (required, readonly, disabled, pattern, min/max/step, url,
  email, color, date and time types, select options)
- Errors either abort the pass immediately or are collected (and optionally
  displayed next to the fields), with per-kind suppression
- Serialization reads the current state of the form into a flat record

Basic usage:
    >>> from domform import load_form
    >>> form = load_form(
    ...     '<form><input type="number" name="age" min="18" required></form>'
    ... )
    >>> form.submit({"age": "30"})
    {'age': '30'}
"""

__version__ = "0.1.0"
__author__ = "DOMForm Team"

# Version info
VERSION = (0, 1, 0)

# Core exports
from domform.errors import (
    BadValueError,
    CheckboxRequiredError,
    DatetimeFormatError,
    DisabledError,
    DOMFormError,
    ElementNotFormError,
    InvalidRecordError,
    InvalidRegexError,
    NoElementsToPopulateError,
    NumberRangeError,
    PopulationError,
    RadioRequiredError,
    ReadonlyError,
    ValueRequiredError,
)
from domform.form import Form, find_forms, load_form
from domform.policy import (
    CallbackErrorHandler,
    CollectErrorHandler,
    DisplayHtmlErrorHandler,
    ErrorHandler,
    PopulateOptions,
    RaiseErrorHandler,
)
from domform.population import PopulationEngine, PopulationResult
from domform.serializer import serialize
from domform.types import ErrorKind

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "Form",
    "load_form",
    "find_forms",
    "PopulationEngine",
    "PopulationResult",
    "PopulateOptions",
    "ErrorHandler",
    "RaiseErrorHandler",
    "CollectErrorHandler",
    "CallbackErrorHandler",
    "DisplayHtmlErrorHandler",
    "ErrorKind",
    "serialize",
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
