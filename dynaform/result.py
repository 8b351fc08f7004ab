"""Result types for validation operations."""

import typing as _t
from enum import Enum

from . import record as _record

if _t.TYPE_CHECKING:
    from .errors import TransportError
    from .stats import ValidationSummary


class ErrorKind(str, Enum):
    """Named reason a field value was rejected."""

    REQUIRED = "required"
    PATTERN = "pattern"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    MIN = "min"
    MAX = "max"
    EMAIL = "email"
    MIN_DATE = "minDate"
    INVALID_PHONE = "invalidPhone"
    INVALID_URL = "invalidUrl"
    INVALID_FILE = "invalidFile"
    MAX_SIZE = "maxSize"
    EMPTY_FILE = "emptyFile"
    INVALID_TYPE = "invalidType"
    MISSING_LOWERCASE = "missingLowercase"
    MISSING_UPPERCASE = "missingUppercase"
    MISSING_NUMBER = "missingNumber"
    MISSING_SPECIAL_CHAR = "missingSpecialChar"
    INVALID_LENGTH = "invalidLength"
    PASSWORD_MISMATCH = "passwordMismatch"


class ValidationOutcome(_t.NamedTuple):
    """Outcome of validating one field value.

    An outcome is Valid exactly when ``errors`` is empty. There is no other
    representation of validity: clearing the last error kind of an Invalid
    outcome yields a Valid one.

    Attributes:
        errors: Error kinds the value failed
    """

    errors: frozenset[ErrorKind] = frozenset()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def __contains__(self, kind: object) -> bool:  # type: ignore[override]
        return kind in self.errors

    def merge(self, other: "ValidationOutcome") -> "ValidationOutcome":
        """Union of both error sets."""
        if not other.errors:
            return self
        return ValidationOutcome(self.errors | other.errors)

    def with_error(self, kind: ErrorKind) -> "ValidationOutcome":
        return ValidationOutcome(self.errors | {kind})

    def without(self, kind: ErrorKind) -> "ValidationOutcome":
        """Drop one error kind, leaving the others untouched."""
        if kind not in self.errors:
            return self
        return ValidationOutcome(self.errors - {kind})

    def __repr__(self) -> str:
        if self.is_valid:
            return "Valid"
        kinds = ", ".join(sorted(k.value for k in self.errors))
        return f"Invalid({{{kinds}}})"


VALID = ValidationOutcome()
"""The canonical Valid outcome."""


def invalid(*kinds: ErrorKind) -> ValidationOutcome:
    """Build an Invalid outcome.

    Args:
        kinds: One or more error kinds

    Returns:
        ValidationOutcome carrying the given kinds

    Raises:
        ValueError: If no kind is given
    """
    if not kinds:
        raise ValueError("an Invalid outcome needs at least one error kind")
    return ValidationOutcome(frozenset(kinds))


class SubmitResult(_t.NamedTuple):
    """Result of submitting a form session.

    Attributes:
        payload: Field key to value mapping if the submit was accepted, None otherwise
        summary: Ordered field errors if validation refused the submit, None otherwise
        error: TransportError if delivery failed, None otherwise
    """

    payload: _record.Payload | None
    summary: "ValidationSummary | None"
    error: "TransportError | None" = None

    @property
    def ok(self) -> bool:
        return self.summary is None and self.error is None
