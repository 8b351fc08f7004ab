"""Aggregate views of a form session: refused-submit summary and statistics."""

import json
import typing
from collections import Counter
from dataclasses import asdict, dataclass, field

from . import result as _result


@dataclass(frozen=True)
class ValidationSummary:
    """Why a submit was refused.

    Attributes:
        errors: (field key, message) for every invalid field, in descriptor order
        first_invalid: Key of the first invalid field, to move focus to
    """

    errors: tuple[tuple[str, str], ...]
    first_invalid: str | None = field(default=None)

    def __post_init__(self) -> None:
        if self.first_invalid is None and self.errors:
            object.__setattr__(self, "first_invalid", self.errors[0][0])

    def __bool__(self) -> bool:
        return bool(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    @property
    def keys(self) -> list[str]:
        return [key for key, _ in self.errors]

    def message_for(self, key: str) -> str | None:
        for field_key, message in self.errors:
            if field_key == key:
                return message
        return None

    def to_dict(self) -> dict[str, typing.Any]:
        return {
            "errors": [{"field": key, "message": message} for key, message in self.errors],
            "firstInvalid": self.first_invalid,
        }


@dataclass
class FormStats:
    """Statistics about the fields of a form session.

    Attributes:
        total: Number of fields
        valid_count: Fields whose latest outcome is Valid
        invalid_count: Fields whose latest outcome is Invalid
        touched_count: Fields that lost focus at least once
        dirty_count: Fields whose value differs from the initial one
        required_count: Required fields
        completed_required_count: Required fields with a value and a Valid outcome
        progress: Completion percentage of required fields
        error_counts: Frequency of each error kind across fields
    """

    total: int
    valid_count: int
    invalid_count: int
    touched_count: int
    dirty_count: int
    required_count: int
    completed_required_count: int
    progress: int
    error_counts: dict[str, int]

    @classmethod
    def from_outcomes(
        cls,
        outcomes: typing.Mapping[str, _result.ValidationOutcome],
        *,
        touched: typing.Iterable[str] = (),
        dirty: typing.Iterable[str] = (),
        required: typing.Iterable[str] = (),
        completed: typing.Iterable[str] = (),
    ) -> "FormStats":
        """Create FormStats from per-field outcomes and interaction flags.

        Args:
            outcomes: Field key to latest outcome
            touched: Keys of touched fields
            dirty: Keys of dirty fields
            required: Keys of required fields
            completed: Keys of completed required fields

        Returns:
            FormStats instance with computed statistics
        """
        total = len(outcomes)
        valid_count = sum(1 for o in outcomes.values() if o.is_valid)
        error_counter: Counter[str] = Counter()
        for outcome in outcomes.values():
            for kind in outcome.errors:
                error_counter[kind.value] += 1

        required_count = len(set(required))
        completed_count = len(set(completed))
        return cls(
            total=total,
            valid_count=valid_count,
            invalid_count=total - valid_count,
            touched_count=len(set(touched)),
            dirty_count=len(set(dirty)),
            required_count=required_count,
            completed_required_count=completed_count,
            progress=progress_percentage(completed_count, required_count),
            error_counts=dict(error_counter),
        )

    def top_errors(self, n: int = 10) -> list[tuple[str, int]]:
        """Get the N most frequent error kinds.

        Args:
            n: Number of error kinds to return

        Returns:
            List of (error_kind, count) tuples, sorted by count descending
        """
        sorted_errors = sorted(
            self.error_counts.items(), key=lambda x: x[1], reverse=True
        )
        return sorted_errors[:n]

    def to_dict(self) -> dict[str, typing.Any]:
        return asdict(self)

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        return (
            f"FormStats(total={self.total}, valid={self.valid_count}, "
            f"invalid={self.invalid_count}, progress={self.progress}%)"
        )


def progress_percentage(completed: int, total: int) -> int:
    """Completion percentage rounded half up; 0 when there is nothing to complete."""
    if total <= 0:
        return 0
    return int(100 * completed / total + 0.5)
