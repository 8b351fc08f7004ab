"""Value coercion helpers used by the rule library."""

import re
import typing
from datetime import date, datetime

import dateutil.parser  # type: ignore[import-untyped]

from . import record as _record

_NON_DIGIT_RE = re.compile(r"\D")


def is_empty(value: typing.Any) -> bool:
    """Check whether a value counts as absent.

    ``None`` and the empty string are empty. A zero-byte file is *not*
    empty here; only the ``required`` rule treats it as missing.

    Args:
        value: Field value

    Returns:
        True if the value is absent
    """
    return value is None or value == ""


def is_missing(value: typing.Any) -> bool:
    """Check whether a value fails the ``required`` rule."""
    if is_empty(value):
        return True
    return isinstance(value, _record.FileHandle) and value.size == 0


def as_text(value: typing.Any) -> str:
    """Coerce a scalar field value to the string the user sees.

    Args:
        value: Field value

    Returns:
        String form of the value, ``""`` for None
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def digits_only(value: str) -> str:
    """Strip every non-digit character."""
    return _NON_DIGIT_RE.sub("", value)


def parse_date(value: typing.Any) -> date | None:
    """Parse a field value to a calendar date.

    Args:
        value: ``date``, ``datetime`` or a string dateutil understands

    Returns:
        The date part of the value, or None if it cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return dateutil.parser.isoparse(str(value)).date()
    except (ValueError, OverflowError):
        pass
    try:
        return dateutil.parser.parse(str(value)).date()
    except (ValueError, OverflowError, dateutil.parser.ParserError):
        return None
