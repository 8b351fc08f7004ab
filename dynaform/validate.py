"""Validation engine.

The engine is stateless. It is driven by three triggers, each with its own
scope:

* keystroke: :func:`admit_keystroke` decides whether a character may enter
  the value at all;
* input: :func:`live_check` refines an existing outcome with cheap,
  type-specific checks, keeping unrelated error kinds;
* change and blur: :func:`evaluate` runs the full rule list and its result
  replaces whatever the field held before.
"""

import re
import typing

from . import cast as _cast
from . import rules as _rules
from . import schema as _schema
from .options import FieldType
from .result import VALID, ErrorKind, ValidationOutcome

CONTROL_KEYS = frozenset(
    {
        "Backspace",
        "Delete",
        "Tab",
        "Enter",
        "ArrowLeft",
        "ArrowRight",
        "ArrowUp",
        "ArrowDown",
    }
)
"""Keys that are never filtered."""

_TEXT_KEY_RE = re.compile(r"[A-Za-zÀ-ÿ\s\-'.]+")
_EMAIL_KEY_RE = re.compile(r"[A-Za-z0-9@.\-_]+")
_PHONE_KEY_RE = re.compile(r"[0-9\s\-()+]+")
_DIGIT_RE = re.compile(r"[0-9]")
_LIVE_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def evaluate(descriptor: _schema.FieldDescriptor, value: typing.Any) -> ValidationOutcome:
    """Run the complete rule list of a field against a value.

    ``required`` runs first and short-circuits: a missing value reports
    ``required`` and nothing else. Otherwise every type rule runs and the
    failing kinds are unioned.

    Args:
        descriptor: Field descriptor
        value: Candidate value

    Returns:
        ValidationOutcome
    """
    if descriptor.required:
        presence = _rules.required(value)
        if not presence.is_valid:
            return presence

    outcome = VALID
    for rule in descriptor.rules:
        outcome = outcome.merge(rule(value))
    return outcome


def evaluate_all(
    descriptors: typing.Iterable[_schema.FieldDescriptor],
    values: typing.Mapping[str, typing.Any],
) -> dict[str, ValidationOutcome]:
    """Evaluate several fields at once.

    Args:
        descriptors: Field descriptors
        values: Field key to value; missing keys evaluate as None

    Returns:
        Field key to outcome, in descriptor order
    """
    return {d.key: evaluate(d, values.get(d.key)) for d in descriptors}


def admit_keystroke(
    descriptor: _schema.FieldDescriptor, key: str, current_value: str = ""
) -> bool:
    """Decide whether a keystroke may enter the field's value.

    Args:
        descriptor: Field being typed into
        key: Key name as reported by the client ("a", "Backspace", ...)
        current_value: Value before the keystroke

    Returns:
        True to admit the keystroke, False to discard it silently
    """
    if key in CONTROL_KEYS:
        return True

    field_type = descriptor.type
    if field_type is FieldType.TEXT:
        return bool(_TEXT_KEY_RE.fullmatch(key))
    if field_type is FieldType.EMAIL:
        return bool(_EMAIL_KEY_RE.fullmatch(key))
    if field_type.is_phone:
        return bool(_PHONE_KEY_RE.fullmatch(key))
    if field_type is FieldType.NUMBER:
        current = current_value or ""
        if not _DIGIT_RE.search(key) and key not in (".", "-"):
            return False
        if key == "." and "." in current:
            return False
        if key == "-" and current:
            return False
        return True
    return True


def live_check(
    descriptor: _schema.FieldDescriptor,
    value: typing.Any,
    current: ValidationOutcome,
) -> ValidationOutcome:
    """Refine an outcome with the live checks of the field type.

    Only the kind a live check owns is added or cleared; every other kind
    in ``current`` is kept.

    Args:
        descriptor: Field being edited
        value: Value just committed
        current: Outcome the field holds

    Returns:
        Updated outcome
    """
    if descriptor.type is FieldType.EMAIL:
        if _cast.is_empty(value):
            return current
        if _LIVE_EMAIL_RE.fullmatch(_cast.as_text(value)):
            return current.without(ErrorKind.EMAIL)
        return current.with_error(ErrorKind.EMAIL)

    if descriptor.type is FieldType.TEXT:
        constraints = descriptor.effective_constraints
        low = constraints.min_length or 0
        high = constraints.max_length
        if not _cast.is_empty(value):
            length = len(_cast.as_text(value))
            if length < low or (high is not None and length > high):
                return current.with_error(ErrorKind.INVALID_LENGTH)
        return current.without(ErrorKind.INVALID_LENGTH)

    return current
