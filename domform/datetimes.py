"""Parsing of the date and time input types.

HTML date-like inputs submit values in fixed textual formats:

    datetime-local  YYYY-MM-DDThh:mm
    month           YYYY-MM
    week            YYYY-Www
    time            hh:mm

``datetime.strptime`` handles all of them except weeks, which are parsed by
hand: the year and week number are extracted with a fixed-width regular
expression, then the first Monday of the year is advanced by that many whole
weeks. Every format is parsed into a ``datetime`` so that ``min`` / ``max``
constraints compare instants rather than strings.
"""

import re
from datetime import datetime
from typing import Dict, Optional, Pattern, Tuple

from dateutil.relativedelta import MO, relativedelta

from domform.types import DATETIME_INPUT_TYPES


# Shape of each format, checked before strptime since strptime accepts
# single digit months, days and hours
DATETIME_FORMATS: Dict[str, Tuple[Pattern[str], str]] = {
    "datetime-local": (re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}$"), "%Y-%m-%dT%H:%M"),
    "month": (re.compile(r"^\d{4}-\d{2}$"), "%Y-%m"),
    "time": (re.compile(r"^\d{2}:\d{2}$"), "%H:%M"),
}

WEEK_RE = re.compile(r"^(\d{4})-W(\d{1,2})$")

MAX_WEEK = 53


def parse_week(raw: str) -> Optional[datetime]:
    """Parse a ``YYYY-Www`` week value.

    Returns:
        The first Monday of the year advanced by ``week`` weeks, or None if
        the value is not a valid week

    Examples:
        >>> parse_week("2013-W29")
        datetime.datetime(2013, 7, 29, 0, 0)
        >>> parse_week("2013-W54") is None
        True
    """
    match = WEEK_RE.match(raw)
    if not match:
        return None

    year = int(match.group(1))
    week = int(match.group(2))
    if not 1 <= week <= MAX_WEEK:
        return None

    try:
        first_monday = datetime(year, 1, 1) + relativedelta(weekday=MO(+1))
        return first_monday + relativedelta(weeks=week)
    except (ValueError, OverflowError):
        return None


def parse_datetime(raw: str, input_type: str) -> Optional[datetime]:
    """Parse a value submitted by a date-like input.

    Args:
        raw: The submitted text
        input_type: One of datetime-local, month, week or time

    Returns:
        The parsed instant, or None if the value does not match the format

    Raises:
        ValueError: If input_type is not a date-like input type

    Examples:
        >>> parse_datetime("2023-11-10T09:00", "datetime-local")
        datetime.datetime(2023, 11, 10, 9, 0)
        >>> parse_datetime("2023-10", "month")
        datetime.datetime(2023, 10, 1, 0, 0)
        >>> parse_datetime("Invalid", "time") is None
        True
    """
    input_type = input_type.lower()
    if input_type not in DATETIME_INPUT_TYPES:
        raise ValueError(f"Unknown datetime element type: {input_type!r}")

    if not isinstance(raw, str):
        return None

    if input_type == "week":
        return parse_week(raw)

    shape, fmt = DATETIME_FORMATS[input_type]
    if not shape.match(raw):
        return None

    try:
        return datetime.strptime(raw, fmt)
    except ValueError:
        return None


__all__ = [
    "DATETIME_FORMATS",
    "parse_week",
    "parse_datetime",
]
