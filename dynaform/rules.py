"""Rule library: per-type validation rules and cross-field rules.

Each rule is a callable with the signature::

    def rule(value) -> ValidationOutcome:
        '''Return VALID, or an Invalid outcome naming what failed.'''

Rules are built by factories that receive the field's effective
constraints and return a rule, or None when the constraint is not set::

    def max_length(constraints) -> Rule | None:
        ...

:data:`RULE_SETS` maps every :class:`FieldType` to its ordered factories.
Every rule here skips empty values; presence is the job of :func:`required`.
"""

import re
import typing
from datetime import date
from urllib.parse import urlsplit

from . import cast as _cast
from . import record as _record
from .options import FieldType
from .result import VALID, ErrorKind, ValidationOutcome, invalid

if typing.TYPE_CHECKING:
    from .schema import Constraints

Rule = typing.Callable[[typing.Any], ValidationOutcome]
RuleFactory = typing.Callable[["Constraints"], Rule | None]

MEBIBYTE = 1024 * 1024

TYPE_DEFAULTS: dict[FieldType, dict[str, typing.Any]] = {
    FieldType.TEXT: {"min_length": 2, "max_length": 100},
    FieldType.PASSWORD: {"min_length": 8, "max_length": 128},
    FieldType.NUMBER: {"min": -999999, "max": 999999},
    FieldType.FILE: {"max_file_size_bytes": 5 * MEBIBYTE},
}
"""Constraints each type carries unless the descriptor overrides them."""


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def required(value: typing.Any) -> ValidationOutcome:
    """Value must be present: not None, not ``""``, not a zero-byte file."""
    if _cast.is_missing(value):
        return invalid(ErrorKind.REQUIRED)
    return VALID


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------


def min_length(constraints: "Constraints") -> Rule | None:
    """Text must be at least ``min_length`` characters."""
    n = constraints.min_length
    if n is None:
        return None

    def check(value: typing.Any) -> ValidationOutcome:
        if _cast.is_empty(value) or len(_cast.as_text(value)) >= n:
            return VALID
        return invalid(ErrorKind.MIN_LENGTH)

    return check


def max_length(constraints: "Constraints") -> Rule | None:
    """Text must be at most ``max_length`` characters."""
    n = constraints.max_length
    if n is None:
        return None

    def check(value: typing.Any) -> ValidationOutcome:
        if _cast.is_empty(value) or len(_cast.as_text(value)) <= n:
            return VALID
        return invalid(ErrorKind.MAX_LENGTH)

    return check


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

LETTERS_RE = re.compile(r"[A-Za-zÀ-ÿ\s\-'.]+")
EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
NUMBER_RE = re.compile(r"-?[0-9]*\.?[0-9]+")
PHONE_RE = re.compile(
    r"\+?[1-9][0-9]{0,3}?[-.\s]?\(?[0-9]{3}\)?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}",
    re.ASCII,
)
LOWERCASE_RE = re.compile(r"[a-z]")
UPPERCASE_RE = re.compile(r"[A-Z]")
DIGIT_RE = re.compile(r"[0-9]")
SPECIAL_CHAR_RE = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")

PHONE_DIGITS = (10, 15)
EMAIL_DOMAIN_LENGTH = (3, 255)


def letters_only(constraints: "Constraints") -> Rule | None:
    """Letters (accented included), whitespace, hyphen, apostrophe and period."""

    def check(value: typing.Any) -> ValidationOutcome:
        if _cast.is_empty(value) or LETTERS_RE.fullmatch(_cast.as_text(value)):
            return VALID
        return invalid(ErrorKind.PATTERN)

    return check


def email_address(constraints: "Constraints") -> Rule | None:
    """Basic structural email check plus a domain length bound."""

    def check(value: typing.Any) -> ValidationOutcome:
        if _cast.is_empty(value):
            return VALID
        text = _cast.as_text(value)
        if not EMAIL_RE.fullmatch(text):
            return invalid(ErrorKind.EMAIL)
        domain = text.split("@")[1]
        low, high = EMAIL_DOMAIN_LENGTH
        if not low <= len(domain) <= high:
            return invalid(ErrorKind.EMAIL)
        return VALID

    return check


def password_strength(constraints: "Constraints") -> Rule | None:
    """Each missing character class is reported as its own error kind."""
    classes = (
        (LOWERCASE_RE, ErrorKind.MISSING_LOWERCASE),
        (UPPERCASE_RE, ErrorKind.MISSING_UPPERCASE),
        (DIGIT_RE, ErrorKind.MISSING_NUMBER),
        (SPECIAL_CHAR_RE, ErrorKind.MISSING_SPECIAL_CHAR),
    )

    def check(value: typing.Any) -> ValidationOutcome:
        if _cast.is_empty(value):
            return VALID
        text = _cast.as_text(value)
        missing = [kind for regex, kind in classes if not regex.search(text)]
        return invalid(*missing) if missing else VALID

    return check


def phone_number(constraints: "Constraints") -> Rule | None:
    """10 to 15 digits and an international phone layout."""

    def check(value: typing.Any) -> ValidationOutcome:
        if _cast.is_empty(value):
            return VALID
        text = _cast.as_text(value)
        low, high = PHONE_DIGITS
        if not low <= len(_cast.digits_only(text)) <= high:
            return invalid(ErrorKind.INVALID_PHONE)
        if not PHONE_RE.fullmatch(text):
            return invalid(ErrorKind.INVALID_PHONE)
        return VALID

    return check


def http_url(constraints: "Constraints") -> Rule | None:
    """Value must be an absolute http or https URL."""

    def check(value: typing.Any) -> ValidationOutcome:
        if _cast.is_empty(value):
            return VALID
        try:
            parts = urlsplit(_cast.as_text(value).strip())
        except ValueError:
            return invalid(ErrorKind.INVALID_URL)
        if parts.scheme.lower() in ("http", "https") and parts.netloc:
            return VALID
        return invalid(ErrorKind.INVALID_URL)

    return check


def matches(constraints: "Constraints") -> Rule | None:
    """Whole value must match the descriptor's ``pattern`` constraint."""
    if constraints.pattern is None:
        return None
    compiled = re.compile(constraints.pattern)

    def check(value: typing.Any) -> ValidationOutcome:
        if _cast.is_empty(value) or compiled.fullmatch(_cast.as_text(value)):
            return VALID
        return invalid(ErrorKind.PATTERN)

    return check


# ---------------------------------------------------------------------------
# Numbers and dates
# ---------------------------------------------------------------------------


def numeric(constraints: "Constraints") -> Rule | None:
    """Optional minus sign, digits, at most one decimal point."""

    def check(value: typing.Any) -> ValidationOutcome:
        if _cast.is_empty(value) or NUMBER_RE.fullmatch(_cast.as_text(value)):
            return VALID
        return invalid(ErrorKind.PATTERN)

    return check


def _number_or_none(value: typing.Any) -> float | None:
    text = _cast.as_text(value)
    if not NUMBER_RE.fullmatch(text):
        return None
    return float(text)


def min_value(constraints: "Constraints") -> Rule | None:
    """Numeric value must be at least ``min``; non-numbers are left to :func:`numeric`."""
    bound = constraints.min
    if bound is None:
        return None

    def check(value: typing.Any) -> ValidationOutcome:
        if _cast.is_empty(value):
            return VALID
        number = _number_or_none(value)
        if number is None or number >= bound:
            return VALID
        return invalid(ErrorKind.MIN)

    return check


def max_value(constraints: "Constraints") -> Rule | None:
    """Numeric value must be at most ``max``."""
    bound = constraints.max
    if bound is None:
        return None

    def check(value: typing.Any) -> ValidationOutcome:
        if _cast.is_empty(value):
            return VALID
        number = _number_or_none(value)
        if number is None or number <= bound:
            return VALID
        return invalid(ErrorKind.MAX)

    return check


def not_before_today(constraints: "Constraints") -> Rule | None:
    """Date must be today or later, compared at day granularity."""

    def check(value: typing.Any) -> ValidationOutcome:
        if _cast.is_empty(value):
            return VALID
        parsed = _cast.parse_date(value)
        if parsed is not None and parsed >= date.today():
            return VALID
        return invalid(ErrorKind.MIN_DATE)

    return check


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------

FILE_CATEGORIES: dict[str, tuple[str, ...]] = {
    "image": (
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        ".jpg",
        ".jpeg",
        ".png",
        ".gif",
        ".webp",
    ),
    "document": (
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain",
        ".pdf",
        ".doc",
        ".docx",
        ".txt",
    ),
    "spreadsheet": (
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "text/csv",
        ".xls",
        ".xlsx",
        ".csv",
    ),
}
"""Allow-lists of MIME types and extensions per file category."""


def parse_accept(accept: str | None) -> tuple[str, ...] | None:
    """Expand an ``accept`` constraint to its allow-list.

    Args:
        accept: Category name, or comma list of MIME types and ``.ext`` entries

    Returns:
        Lower-cased allow-list, or None when any type is accepted
    """
    if accept is None:
        return None
    accept = accept.strip().lower()
    if accept in ("", "any", "*/*", "*"):
        return None
    if accept in FILE_CATEGORIES:
        return FILE_CATEGORIES[accept]
    tokens = tuple(token.strip() for token in accept.split(",") if token.strip())
    if "*/*" in tokens:
        return None
    return tokens or None


def file_type_allowed(handle: _record.FileHandle, allowed: typing.Iterable[str]) -> bool:
    """Check a file against an allow-list by MIME type or extension."""
    content_type = handle.content_type.lower()
    extension = handle.extension
    for token in allowed:
        if token.startswith("."):
            if extension == token:
                return True
        elif token.endswith("/*"):
            if content_type.startswith(token[:-1]):
                return True
        elif content_type == token:
            return True
    return False


def file_handle(constraints: "Constraints") -> Rule | None:
    """Value must be a file handle."""

    def check(value: typing.Any) -> ValidationOutcome:
        if _cast.is_empty(value) or isinstance(value, _record.FileHandle):
            return VALID
        return invalid(ErrorKind.INVALID_FILE)

    return check


def non_empty_file(constraints: "Constraints") -> Rule | None:
    """File must hold at least one byte."""

    def check(value: typing.Any) -> ValidationOutcome:
        if isinstance(value, _record.FileHandle) and value.size == 0:
            return invalid(ErrorKind.EMPTY_FILE)
        return VALID

    return check


def max_file_size(constraints: "Constraints") -> Rule | None:
    """File must not exceed ``max_file_size_bytes``."""
    limit = constraints.max_file_size_bytes
    if limit is None:
        return None

    def check(value: typing.Any) -> ValidationOutcome:
        if isinstance(value, _record.FileHandle) and value.size > limit:
            return invalid(ErrorKind.MAX_SIZE)
        return VALID

    return check


def allowed_file_type(constraints: "Constraints") -> Rule | None:
    """File MIME type or extension must be in the ``accept`` allow-list."""
    allowed = parse_accept(constraints.accept)
    if allowed is None:
        return None

    def check(value: typing.Any) -> ValidationOutcome:
        if not isinstance(value, _record.FileHandle) or file_type_allowed(value, allowed):
            return VALID
        return invalid(ErrorKind.INVALID_TYPE)

    return check


# ---------------------------------------------------------------------------
# Rule sets
# ---------------------------------------------------------------------------

RULE_SETS: dict[FieldType, tuple[RuleFactory, ...]] = {
    FieldType.TEXT: (letters_only, min_length, max_length),
    FieldType.EMAIL: (email_address,),
    FieldType.PASSWORD: (min_length, max_length, password_strength),
    FieldType.NUMBER: (numeric, min_value, max_value),
    FieldType.PHONE: (phone_number,),
    FieldType.TEL: (phone_number,),
    FieldType.DATE: (not_before_today,),
    FieldType.URL: (http_url,),
    FieldType.FILE: (file_handle, non_empty_file, max_file_size, allowed_file_type),
    FieldType.RADIO: (),
    FieldType.SELECT: (),
    FieldType.CHECKBOX: (),
    FieldType.TEXTAREA: (min_length, max_length),
}
"""Ordered rule factories per field type. ``required`` is not listed: it always runs first."""


def resolve_rules(field_type: FieldType, constraints: "Constraints") -> tuple[Rule, ...]:
    """Instantiate the rule list of a field type.

    Args:
        field_type: Type of the field
        constraints: Effective constraints of the field

    Returns:
        Rules in evaluation order

    Raises:
        KeyError: If the type has no rule set
    """
    factories = RULE_SETS[field_type] + (matches,)
    built = (factory(constraints) for factory in factories)
    return tuple(rule for rule in built if rule is not None)


# ---------------------------------------------------------------------------
# Cross-field rules
# ---------------------------------------------------------------------------


class CrossFieldRule:
    """A rule that looks at several fields and reports on one of them.

    Attributes:
        field: Key of the field the error is attached to
        check: Function(values) -> ErrorKind or None
        when: Optional predicate(values); the rule is skipped when it returns False
        priority: Execution order (lower numbers execute first)
    """

    def __init__(
        self,
        field: str,
        check: typing.Callable[[typing.Mapping[str, typing.Any]], ErrorKind | None],
        *,
        when: typing.Callable[[typing.Mapping[str, typing.Any]], bool] | None = None,
        priority: int = 0,
    ) -> None:
        self.field = field
        self.check = check
        self.when = when
        self.priority = priority

    def validate(self, values: typing.Mapping[str, typing.Any]) -> ValidationOutcome:
        """Validate the current form values.

        Args:
            values: Field key to current value

        Returns:
            Outcome to merge into the target field
        """
        if self.when is not None and not self.when(values):
            return VALID
        kind = self.check(values)
        return VALID if kind is None else invalid(kind)


def passwords_match(field: str = "confirmPassword", other: str = "password") -> CrossFieldRule:
    """Confirmation field must repeat the password field."""

    def check(values: typing.Mapping[str, typing.Any]) -> ErrorKind | None:
        if values.get(field) != values.get(other):
            return ErrorKind.PASSWORD_MISMATCH
        return None

    return CrossFieldRule(field, check)


class CrossFieldValidator:
    """Runs a collection of cross-field rules over form values."""

    def __init__(self, rules: typing.Iterable[CrossFieldRule]) -> None:
        self.rules = sorted(rules, key=lambda r: r.priority)

    @property
    def fields(self) -> set[str]:
        return {rule.field for rule in self.rules}

    def validate(
        self, values: typing.Mapping[str, typing.Any]
    ) -> dict[str, ValidationOutcome]:
        """Validate values against every rule.

        Args:
            values: Field key to current value

        Returns:
            Field key to merged outcome, for every field a rule targets
        """
        outcomes: dict[str, ValidationOutcome] = {field: VALID for field in self.fields}
        for rule in self.rules:
            outcomes[rule.field] = outcomes[rule.field].merge(rule.validate(values))
        return outcomes
