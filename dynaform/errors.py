"""Exception taxonomy for the form engine.

Field validation failures are never raised: they travel as
:class:`~dynaform.result.ValidationOutcome` values. Exceptions are reserved
for broken schemas, misuse of a session and the simulated transport.
"""

import typing

import pydantic


class DynaformError(Exception):
    """Base class for every error raised by dynaform."""


class SchemaError(DynaformError, ValueError):
    """Raised when a field descriptor or field set is malformed.

    Attributes:
        errors: List of error details, one per problem found
    """

    def __init__(self, errors: list[dict[str, typing.Any]]) -> None:
        """Initialize SchemaError with error details.

        Args:
            errors: Error dicts each holding at least 'loc' and 'msg'
        """
        self.errors = errors
        error_msg = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ())) or '<schema>'}: {err['msg']}"
            for err in errors
        )
        super().__init__(f"Invalid form schema: {error_msg}")

    @classmethod
    def from_pydantic(cls, error: pydantic.ValidationError) -> "SchemaError":
        """Convert a pydantic ValidationError raised while building a descriptor."""
        return cls(
            [
                {
                    "loc": tuple(detail.get("loc", ())),
                    "msg": detail.get("msg", ""),
                    "input": detail.get("input"),
                }
                for detail in error.errors()
            ]
        )


class UnknownFieldError(DynaformError, KeyError):
    """Raised when a session event names a field that is not in the schema."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Unknown field {self.key!r}"


class TransportError(DynaformError):
    """Raised by a transport when the submission round-trip fails."""


class SubmissionInProgressError(DynaformError, RuntimeError):
    """Raised when a submit is attempted while another one is in flight."""
