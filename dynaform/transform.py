"""Display transforms applied to a field value as it is typed.

Transforms change how a value is shown back to the user, never the value
that is validated and submitted.
"""

import re
import typing

from . import cast as _cast
from .options import FieldType


class Transform:
    """A transformation applied to a value before it is displayed.

    Attributes:
        func: Transformation function
        field_types: Field types the transform applies to
    """

    def __init__(
        self,
        func: typing.Callable[[typing.Any], typing.Any],
        field_types: typing.Iterable[FieldType],
    ) -> None:
        """Initialize Transform.

        Args:
            func: Function(value) -> new value
            field_types: Types of field the transform is attached to
        """
        self.func = func
        self.field_types = frozenset(field_types)

    def applies_to(self, field_type: FieldType) -> bool:
        return field_type in self.field_types

    def __call__(self, value: typing.Any) -> typing.Any:
        return self.func(value)


_THREE_THREE_FOUR = re.compile(r"(\d{3})(\d{3})(\d{4})")


def format_phone_number(value: typing.Any) -> typing.Any:
    """Reduce a phone number to digits and group them with dashes.

    Inputs with ten or more digits get ``ddd-ddd-dddd`` grouping on their
    first ten digits. Shorter inputs come back as bare digits.

    Args:
        value: Raw phone input

    Returns:
        Formatted string, or the value unchanged if it is empty
    """
    if _cast.is_empty(value):
        return value
    digits = _cast.digits_only(_cast.as_text(value))
    return _THREE_THREE_FOUR.sub(r"\1-\2-\3", digits, count=1)


DEFAULT_TRANSFORMS: tuple[Transform, ...] = (
    Transform(format_phone_number, (FieldType.PHONE, FieldType.TEL)),
)


def apply_transforms(
    field_type: FieldType,
    value: typing.Any,
    transforms: typing.Iterable[Transform] | None = DEFAULT_TRANSFORMS,
) -> typing.Any:
    """Apply every transform attached to a field type, in order.

    Args:
        field_type: Type of the field
        value: Current value
        transforms: Transforms to consider (None for none)

    Returns:
        Transformed value
    """
    if transforms is None:
        return value
    for transform in transforms:
        if transform.applies_to(field_type):
            value = transform(value)
    return value
