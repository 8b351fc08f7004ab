"""Field descriptors and field-set construction.

A descriptor is an immutable description of one input. Its rule list is
resolved from :data:`dynaform.rules.RULE_SETS` when the descriptor is built,
so an unknown field type or an impossible constraint fails here rather than
when the user starts typing.
"""

import logging
import re
import typing

import pydantic
from pydantic.alias_generators import to_camel

from . import errors as _errors
from . import rules as _rules
from .options import FieldType

logger = logging.getLogger(__name__)


class Option(pydantic.BaseModel):
    """One choice of a radio or select field."""

    model_config = pydantic.ConfigDict(frozen=True)

    key: str
    value: str


class Constraints(pydantic.BaseModel):
    """Optional per-field limits overriding the type defaults.

    Attributes:
        min_length: Minimum text length
        max_length: Maximum text length
        min: Minimum numeric value
        max: Maximum numeric value
        pattern: Regular expression the whole value must match
        accept: File category or comma list of MIME types and extensions
        max_file_size_bytes: Maximum file size
    """

    model_config = pydantic.ConfigDict(
        frozen=True, extra="forbid", alias_generator=to_camel, populate_by_name=True
    )

    min_length: int | None = pydantic.Field(default=None, ge=0)
    max_length: int | None = pydantic.Field(default=None, ge=0)
    min: float | None = None
    max: float | None = None
    pattern: str | None = None
    accept: str | None = None
    max_file_size_bytes: int | None = pydantic.Field(default=None, gt=0)

    @pydantic.field_validator("pattern")
    @classmethod
    def _check_pattern(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                re.compile(value)
            except re.error as e:
                raise ValueError(f"invalid regular expression: {e}") from e
        return value

    @pydantic.model_validator(mode="after")
    def _check_bounds(self) -> "Constraints":
        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            raise ValueError("minLength must not exceed maxLength")
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError("min must not exceed max")
        return self

    def overlay(self, defaults: typing.Mapping[str, typing.Any]) -> "Constraints":
        """Return these constraints with unset entries filled from ``defaults``."""
        explicit = self.model_dump(exclude_none=True)
        return Constraints.model_validate({**defaults, **explicit})


class FieldDescriptor(pydantic.BaseModel):
    """Immutable schema unit describing one input.

    Attributes:
        key: Unique, stable identity of the field
        type: Field type, selects the rule set
        label: Human label used in messages
        required: Whether an empty value is an error
        order: Display order; ties keep insertion order
        value: Initial value
        constraints: Limits overriding the type defaults
        options: Choices for radio and select fields
    """

    model_config = pydantic.ConfigDict(
        frozen=True, extra="forbid", alias_generator=to_camel, populate_by_name=True
    )

    key: str = pydantic.Field(min_length=1)
    type: FieldType
    label: str = ""
    required: bool = False
    order: int = 1
    value: typing.Any = None
    constraints: Constraints = Constraints()
    options: tuple[Option, ...] = ()
    placeholder: str | None = None
    help_text: str | None = None
    disabled: bool = False
    readonly: bool = False
    multiple: bool = False
    step: float | None = None
    rows: int | None = None
    cols: int | None = None

    _rule_list: tuple[_rules.Rule, ...] = pydantic.PrivateAttr(default=())

    @pydantic.field_validator("key")
    @classmethod
    def _check_key(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("key must not be blank")
        return value

    @pydantic.field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: typing.Any) -> typing.Any:
        if isinstance(value, str) and not isinstance(value, FieldType):
            return value.strip().lower()
        return value

    @pydantic.model_validator(mode="after")
    def _check_options(self) -> "FieldDescriptor":
        if self.options and not self.type.is_choice:
            raise ValueError(
                f"options are only allowed on radio and select fields, not {self.type.value}"
            )
        return self

    def model_post_init(self, __context: typing.Any) -> None:
        self._rule_list = _rules.resolve_rules(self.type, self.effective_constraints)

    @property
    def effective_constraints(self) -> Constraints:
        """Type defaults overlaid with the explicit constraints."""
        return self.constraints.overlay(_rules.TYPE_DEFAULTS.get(self.type, {}))

    @property
    def rules(self) -> tuple[_rules.Rule, ...]:
        """Type-specific rules, in evaluation order, excluding ``required``."""
        return self._rule_list

    @property
    def label_or_key(self) -> str:
        return self.label or self.key


FieldSource = typing.Iterable[FieldDescriptor | typing.Mapping[str, typing.Any]]


def build_descriptor(
    field: FieldDescriptor | typing.Mapping[str, typing.Any],
) -> FieldDescriptor:
    """Build one descriptor, failing fast on a malformed definition.

    Args:
        field: Descriptor instance or mapping (snake_case or camelCase keys)

    Returns:
        FieldDescriptor

    Raises:
        SchemaError: If the definition is invalid
    """
    if isinstance(field, FieldDescriptor):
        return field
    if not isinstance(field, typing.Mapping):
        raise _errors.SchemaError(
            [{"loc": (), "msg": f"expected a mapping, got {type(field).__name__}"}]
        )
    try:
        return FieldDescriptor.model_validate(dict(field))
    except pydantic.ValidationError as e:
        raise _errors.SchemaError.from_pydantic(e) from e
    except ValueError as e:
        # constraints that only conflict once merged with the type defaults
        raise _errors.SchemaError([{"loc": ("constraints",), "msg": str(e)}]) from e


def build_schema(fields: FieldSource) -> tuple[FieldDescriptor, ...]:
    """Build an ordered field set.

    Args:
        fields: Descriptors or mappings, in insertion order

    Returns:
        Descriptors sorted by ``order``, ties kept in insertion order

    Raises:
        SchemaError: If any descriptor is invalid or a key is repeated
    """
    descriptors: list[FieldDescriptor] = []
    seen: set[str] = set()
    for index, field in enumerate(fields):
        try:
            descriptor = build_descriptor(field)
        except _errors.SchemaError as e:
            raise _errors.SchemaError(
                [{**err, "loc": (index, *err.get("loc", ()))} for err in e.errors]
            ) from e
        if descriptor.key in seen:
            raise _errors.SchemaError(
                [{"loc": (index, "key"), "msg": f"duplicate field key {descriptor.key!r}"}]
            )
        seen.add(descriptor.key)
        descriptors.append(descriptor)

    ordered = tuple(sorted(descriptors, key=lambda d: d.order))
    logger.debug("Built schema with %d fields: %s", len(ordered), [d.key for d in ordered])
    return ordered
