"""Form facade for DOMForm.

This module provides the Form class, which binds a ``<form>`` element of a
BeautifulSoup document to a PopulationEngine. It is the main entry point of
the package: populate the form from submitted data, read it back, and
optionally hydrate it from stored state when it is created.

Usage:
    >>> from domform.form import load_form
    >>> form = load_form('<form><input name="animal" value="Cat"></form>')
    >>> form.serialize()
    {'animal': 'Cat'}
    >>> form.submit({"animal": "Lion"})
    {'animal': 'Lion'}
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from bs4 import BeautifulSoup
from bs4.element import Tag

from domform.errors import ElementNotFormError
from domform.locator import find_fields
from domform.policy import ErrorHandler, PopulateOptions
from domform.population import PopulationEngine, PopulationResult
from domform.serializer import serialize
from domform.types import Record, SerializedRecord
from domform.validators import VALIDATORS, Validator


logger = logging.getLogger(__name__)


class Form:
    """A form element bound to a population engine.

    Attributes:
        element: The bound ``<form>`` element
        engine: Engine used for every population pass

    Examples:
        >>> from bs4 import BeautifulSoup
        >>> soup = BeautifulSoup(
        ...     '<form><input name="id" value="" readonly></form>', "html.parser"
        ... )
        >>> form = Form(soup.form, initial_state={"id": "42"})
        >>> form.serialize()
        {'id': '42'}
    """

    def __init__(
        self,
        target: Union[Tag, Iterable[Tag]],
        initial_state: Optional[Record] = None,
        error_handler: Optional[ErrorHandler] = None,
        validators: Optional[Dict[str, Validator]] = None,
    ):
        """Bind a form element.

        Args:
            target: The form element, or a selection holding exactly one
            initial_state: Optional record hydrated into the form; readonly and
                disabled errors are suppressed while doing so
            error_handler: Sink for population errors, fails fast by default
            validators: Optional field type to validator registry

        Raises:
            ElementNotFormError: If target is not exactly one form element
        """
        self.element = self._resolve_target(target)
        self.engine = PopulationEngine(error_handler=error_handler, validators=validators)

        if initial_state is not None:
            logger.debug("Hydrating form with initial state")
            self.populate(initial_state, PopulateOptions.hydration())

    @staticmethod
    def _resolve_target(target: Union[Tag, Iterable[Tag]]) -> Tag:
        if target is None:
            raise ElementNotFormError("No element found")
        if not isinstance(target, Tag):
            elements = list(target)
            if not elements:
                raise ElementNotFormError("No element found")
            if len(elements) > 1:
                raise ElementNotFormError("Element is ambiguous")
            target = elements[0]

        if not isinstance(target, Tag) or (target.name or "").lower() != "form":
            raise ElementNotFormError("Failed to assert element is a form")
        return target

    @property
    def error_handler(self) -> ErrorHandler:
        return self.engine.error_handler

    def populate(
        self,
        data: Record,
        options: Optional[PopulateOptions] = None,
    ) -> PopulationResult:
        """Populate the form, validating with its HTML5 constraint attributes.

        Args:
            data: The input data, for example submitted form fields
            options: Suppression settings for this pass

        Returns:
            PopulationResult with the serialized form when validation passed
        """
        return self.engine.populate(self.element, data, options)

    def submit(self, data: Record) -> Optional[SerializedRecord]:
        """Populate the form and return the validated data.

        Returns:
            The validated, serialized data on success, or None if validation
            failed (only possible with a collecting error handler)
        """
        return self.populate(data).data

    def serialize(self) -> SerializedRecord:
        """Serialize the current state of the form.

        Useful for reading the defaults of the markup. After a failed
        population the form may hold invalid values; prefer the data returned
        by ``submit`` to obtain validated data.
        """
        return serialize(self.element)

    def get_inputs(self, name: Optional[str] = None) -> List[Tag]:
        """Elements identified by ``name`` or ``data-name``.

        Args:
            name: Identity to look for; None returns every identified element
        """
        return find_fields(self.element, name)

    def register_validator(self, type_name: str, validator: Validator) -> None:
        """Register a validator for this form only."""
        if self.engine.validators is VALIDATORS:
            self.engine.validators = dict(self.engine.validators)
        self.engine.validators[type_name.lower()] = validator


def load_form(
    markup: Union[str, bytes],
    selector: str = "form",
    **kwargs: Any,
) -> Form:
    """Parse markup and bind its form.

    Args:
        markup: HTML document or fragment
        selector: CSS selector of the form to bind
        **kwargs: Passed on to Form (initial_state, error_handler, validators)

    Raises:
        ElementNotFormError: If the selector does not match exactly one form
    """
    soup = BeautifulSoup(markup, "html.parser")
    return Form(soup.select(selector), **kwargs)


def find_forms(
    document: Tag,
    error_handler_factory: Optional[Callable[[], ErrorHandler]] = None,
    **kwargs: Any,
) -> List[Form]:
    """Bind every form of a document.

    Handlers keep per-pass state, so every form gets its own handler built by
    ``error_handler_factory`` instead of sharing one instance.

    Args:
        document: Document to search for forms
        error_handler_factory: Callable returning a new handler for each form;
            forms fail fast when omitted
        **kwargs: Passed on to Form (initial_state, validators)

    Raises:
        TypeError: If a single error_handler instance is passed
    """
    if "error_handler" in kwargs:
        raise TypeError("find_forms() takes error_handler_factory, not a shared error_handler")

    return [
        Form(
            element,
            error_handler=error_handler_factory() if error_handler_factory else None,
            **kwargs,
        )
        for element in document.find_all("form")
    ]


__all__ = [
    "Form",
    "load_form",
    "find_forms",
]
