"""Session configuration."""

import os
import typing

import pydantic


class FormConfig(pydantic.BaseModel):
    """Tunable timings and limits for a form session.

    Attributes:
        cooldown_ms: Minimum time between two error notifications for one field
        success_timeout_ms: Auto-dismiss delay of the success shown on blur
        change_success_timeout_ms: Auto-dismiss delay of the success shown on change
        error_timeout_ms: Auto-dismiss delay of field error notifications
        submit_success_timeout_ms: Auto-dismiss delay after a successful submit
        submit_error_timeout_ms: Auto-dismiss delay after a failed submit
        submit_latency_ms: (min, max) latency of the simulated submission
        submit_failure_rate: Probability in [0, 1] that a simulated submission fails
    """

    model_config = pydantic.ConfigDict(frozen=True, extra="forbid")

    cooldown_ms: int = pydantic.Field(default=3000, ge=0)
    success_timeout_ms: int = pydantic.Field(default=3000, ge=0)
    change_success_timeout_ms: int = pydantic.Field(default=2500, ge=0)
    error_timeout_ms: int = pydantic.Field(default=5000, ge=0)
    submit_success_timeout_ms: int = pydantic.Field(default=4000, ge=0)
    submit_error_timeout_ms: int = pydantic.Field(default=6000, ge=0)
    submit_latency_ms: tuple[int, int] = (500, 1500)
    submit_failure_rate: float = pydantic.Field(default=0.0, ge=0.0, le=1.0)

    @pydantic.field_validator("submit_latency_ms")
    @classmethod
    def _check_latency(cls, value: tuple[int, int]) -> tuple[int, int]:
        low, high = value
        if low < 0 or high < low:
            raise ValueError("latency must satisfy 0 <= min <= max")
        return value

    @classmethod
    def from_env(
        cls,
        prefix: str = "DYNAFORM_",
        environ: typing.Mapping[str, str] | None = None,
    ) -> "FormConfig":
        """Build a config from environment variables.

        ``DYNAFORM_COOLDOWN_MS=1000`` overrides ``cooldown_ms``. The latency
        range is given as two comma-separated integers.

        Args:
            prefix: Variable name prefix
            environ: Mapping to read instead of ``os.environ``

        Returns:
            FormConfig with overrides applied

        Raises:
            pydantic.ValidationError: If a value does not parse
        """
        source = os.environ if environ is None else environ
        overrides: dict[str, typing.Any] = {}
        for name in cls.model_fields:
            raw = source.get(f"{prefix}{name.upper()}")
            if raw is None:
                continue
            if name == "submit_latency_ms":
                overrides[name] = tuple(part.strip() for part in raw.split(","))
            else:
                overrides[name] = raw
        return cls.model_validate(overrides)


DEFAULT_CONFIG = FormConfig()
