"""Error policy for population passes.

Every population pass owns one ErrorPolicy. Each PopulationError found while
writing the record goes through ``ErrorPolicy.report``:

1. Errors whose kind is listed in ``PopulateOptions.suppress`` are dropped.
   The value is still written, which is how existing state is hydrated into
   a fresh form without tripping readonly or disabled checks.
2. Other errors are recorded and handed to the pass's ErrorHandler.

The handler decides how the pass proceeds. RaiseErrorHandler (the default)
raises the error and aborts the pass on the first failure. Any handler that
returns normally puts the pass in collect mode: population continues over the
remaining fields and the pass succeeds only if no error was recorded.

Usage:
    >>> from bs4 import BeautifulSoup
    >>> from domform.errors import ReadonlyError
    >>> element = BeautifulSoup('<input name="id" readonly>', "html.parser").input
    >>> policy = ErrorPolicy(CollectErrorHandler(), PopulateOptions.hydration())
    >>> policy.report(ReadonlyError(element, "Field is read only"))
    >>> policy.errors
    []
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from domform.errors import PopulationError
from domform.types import STRUCTURAL_ERROR_KINDS, ErrorKind


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PopulateOptions:
    """Per-pass population settings.

    Attributes:
        suppress: Error kinds that are silently ignored during the pass

    Examples:
        >>> options = PopulateOptions.from_dict({"suppress": ["readonly"]})
        >>> ErrorKind.READONLY in options.suppress
        True
        >>> options.to_dict()
        {'suppress': ['readonly']}
    """
    suppress: FrozenSet[ErrorKind] = field(default_factory=frozenset)

    def __post_init__(self):
        """Normalize suppressed kinds and reject structural ones."""
        kinds = frozenset(ErrorKind(kind) for kind in self.suppress)
        structural = kinds & STRUCTURAL_ERROR_KINDS
        if structural:
            names = ", ".join(sorted(kind.value for kind in structural))
            raise ValueError(f"Structural errors cannot be suppressed: {names}")
        object.__setattr__(self, "suppress", kinds)

    @classmethod
    def hydration(cls) -> "PopulateOptions":
        """Options used to load existing state into readonly and disabled fields."""
        return cls(suppress=frozenset({ErrorKind.READONLY, ErrorKind.DISABLED}))

    def is_suppressed(self, kind: ErrorKind) -> bool:
        return kind in self.suppress

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"suppress": sorted(kind.value for kind in self.suppress)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PopulateOptions":
        """Create PopulateOptions from dict."""
        return cls(suppress=frozenset(data.get("suppress", ())))


class ErrorHandler(ABC):
    """Sink for the population errors of a pass.

    ``begin`` is called once at the start of every pass, ``handle`` once per
    unsuppressed error. Raising from ``handle`` aborts the pass.
    """

    def begin(self) -> None:
        """Prepare for a new population pass."""

    @abstractmethod
    def handle(self, error: PopulationError) -> None:
        """Handle one population error."""


class RaiseErrorHandler(ErrorHandler):
    """Fail fast: raise the first population error."""

    def handle(self, error: PopulationError) -> None:
        raise error


class CollectErrorHandler(ErrorHandler):
    """Collect mode without side effects.

    The errors are available on the pass result.
    """

    def handle(self, error: PopulationError) -> None:
        logger.debug("Collected %s on field %r: %s", error.kind.value, error.field_name, error.message)


class CallbackErrorHandler(ErrorHandler):
    """Collect mode calling a function for every error."""

    def __init__(self, callback: Callable[[PopulationError], None]):
        self.callback = callback

    def handle(self, error: PopulationError) -> None:
        self.callback(error)


class DisplayHtmlErrorHandler(ErrorHandler):
    """Collect mode that shows each error next to its field.

    A ``<span class="error">`` holding the message is appended to the parent
    of the offending field. The first span of a pass gets an id so that a page
    can link or scroll to it. Spans added by a previous pass are removed when
    a new pass begins.

    Attributes:
        css_class: Class of the inserted spans
        first_error_id: Id given to the first span of a pass
    """

    def __init__(self, css_class: str = "error", first_error_id: str = "first-error"):
        self.css_class = css_class
        self.first_error_id = first_error_id
        self._spans: List[Tag] = []

    def begin(self) -> None:
        for span in self._spans:
            span.decompose()
        self._spans = []

    def handle(self, error: PopulationError) -> None:
        element = error.element
        parent = element.parent
        if parent is None:
            logger.warning("Cannot display error for detached field %r", error.field_name)
            return

        span = self._new_tag(element, "span")
        span["class"] = [self.css_class]
        if not self._spans:
            span["id"] = self.first_error_id
        span.string = error.message

        parent.append(span)
        self._spans.append(span)

    @staticmethod
    def _new_tag(element: Tag, name: str) -> Tag:
        document = element
        while document.parent is not None:
            document = document.parent
        if isinstance(document, BeautifulSoup):
            return document.new_tag(name)
        return Tag(name=name)


class ErrorPolicy:
    """Error accumulator of a single population pass.

    Attributes:
        handler: Sink for unsuppressed errors
        options: Suppression settings for the pass
        errors: Unsuppressed errors recorded so far
    """

    def __init__(self, handler: ErrorHandler, options: Optional[PopulateOptions] = None):
        self.handler = handler
        self.options = options or PopulateOptions()
        self.errors: List[PopulationError] = []
        self.handler.begin()

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    def report(self, error: PopulationError) -> None:
        """Route one error according to the pass's settings."""
        if self.options.is_suppressed(error.kind):
            logger.debug(
                "Suppressed %s on field %r: %s",
                error.kind.value,
                error.field_name,
                error.message,
            )
            return

        self.errors.append(error)
        self.handler.handle(error)

    def report_all(self, errors: Iterable[PopulationError]) -> None:
        for error in errors:
            self.report(error)


__all__ = [
    "PopulateOptions",
    "ErrorHandler",
    "RaiseErrorHandler",
    "CollectErrorHandler",
    "CallbackErrorHandler",
    "DisplayHtmlErrorHandler",
    "ErrorPolicy",
]
