"""Form session: live state of one form being filled in.

A session owns one :class:`FieldState` per descriptor, one notification
throttle and, unless given one, its own notification channel. Nothing is
shared between sessions, so cooldown timers of two forms never interfere.

Usage::

    session = FormSession([
        {"key": "email", "type": "email", "required": True, "label": "Email"},
    ])
    session.input("email", "ana@example.com")
    session.blur("email")
    result = session.submit()
    if result.ok:
        send(result.payload)
    for event in session.channel.drain():
        render(event)
"""

import logging
import typing
from dataclasses import dataclass

from . import cast as _cast
from . import config as _config
from . import errors as _errors
from . import hooks as _hooks
from . import messages as _messages
from . import notifications as _notifications
from . import record as _record
from . import rules as _rules
from . import schema as _schema
from . import stats as _stats
from . import transform as _transform
from . import transport as _transport
from . import validate as _validate
from .result import VALID, ErrorKind, SubmitResult, ValidationOutcome

logger = logging.getLogger(__name__)

_UNSET: typing.Any = object()


@dataclass
class FieldState:
    """Mutable interaction state of one field.

    Attributes:
        value: Current value
        initial_value: Value the session started with
        touched: The field lost focus at least once, or a submit was refused
        dirty: The value has changed from the initial one at least once;
               only reset clears it
        own_outcome: Outcome of the field's own rules
        cross_outcome: Outcome of cross-field rules targeting the field
    """

    value: typing.Any
    initial_value: typing.Any
    touched: bool = False
    dirty: bool = False
    own_outcome: ValidationOutcome = VALID
    cross_outcome: ValidationOutcome = VALID

    @property
    def last_outcome(self) -> ValidationOutcome:
        """Latest outcome of the field. A missing required value hides cross-field errors."""
        if ErrorKind.REQUIRED in self.own_outcome.errors:
            return self.own_outcome
        return self.own_outcome.merge(self.cross_outcome)


class FormSession:
    """Orchestrates validation, notifications and submission for one form."""

    def __init__(
        self,
        fields: _schema.FieldSource = (),
        *,
        config: _config.FormConfig | None = None,
        cross_field_rules: typing.Iterable[_rules.CrossFieldRule] = (),
        channel: _notifications.NotificationChannel | None = None,
        hooks: _hooks.SessionHooks | None = None,
        transport: _transport.Transport | None = None,
        transforms: typing.Iterable[_transform.Transform] | None = _transform.DEFAULT_TRANSFORMS,
        clock: _notifications.Clock | None = None,
    ) -> None:
        """Initialize FormSession.

        Args:
            fields: Field descriptors or mappings; may be empty
            config: Timings and limits
            cross_field_rules: Rules spanning several fields
            channel: Notification channel, a private one by default
            hooks: Renderer callbacks
            transport: Used by :meth:`submit_async`, simulated by default
            transforms: Display transforms, see :meth:`display_value`
            clock: Time source in epoch milliseconds

        Raises:
            SchemaError: If a descriptor is invalid, a key is repeated, or a
                cross-field rule targets an unknown field
        """
        self.config = config or _config.DEFAULT_CONFIG
        self.descriptors = _schema.build_schema(fields)
        self._by_key = {d.key: d for d in self.descriptors}

        self._cross = _rules.CrossFieldValidator(cross_field_rules)
        unknown = sorted(self._cross.fields - self._by_key.keys())
        if unknown:
            raise _errors.SchemaError(
                [
                    {"loc": ("cross_field_rules",), "msg": f"unknown field {key!r}"}
                    for key in unknown
                ]
            )

        self._clock = clock or _notifications.now_ms
        self.channel = channel or _notifications.NotificationChannel(clock=self._clock)
        self.throttle = _notifications.NotificationThrottle(self.config.cooldown_ms)
        self.hooks = hooks or _hooks.SessionHooks()
        self.transport: _transport.Transport = transport or _transport.SimulatedTransport(
            self.config.submit_latency_ms, self.config.submit_failure_rate
        )
        self.transforms = tuple(transforms) if transforms is not None else None
        self.is_submitting = False
        self._states: dict[str, FieldState] = {}
        self._init_states()

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    def _init_states(self) -> None:
        self._states = {
            d.key: FieldState(
                value=d.value,
                initial_value=d.value,
                own_outcome=_validate.evaluate(d, d.value),
            )
            for d in self.descriptors
        }
        self._refresh_cross_field()

    def descriptor(self, key: str) -> _schema.FieldDescriptor:
        try:
            return self._by_key[key]
        except KeyError:
            raise _errors.UnknownFieldError(key) from None

    def state(self, key: str) -> FieldState:
        self.descriptor(key)
        return self._states[key]

    @property
    def values(self) -> _record.Payload:
        """Field key to current value, in descriptor order."""
        return {d.key: self._states[d.key].value for d in self.descriptors}

    @property
    def is_valid(self) -> bool:
        return all(s.last_outcome.is_valid for s in self._states.values())

    def outcome(self, key: str) -> ValidationOutcome:
        return self.state(key).last_outcome

    def error_message(self, key: str) -> str:
        """Message for the field's latest outcome, ``""`` when valid."""
        return _messages.get_error_message(self.outcome(key), self.descriptor(key))

    def display_value(self, key: str) -> typing.Any:
        """Current value as it should be shown, after display transforms."""
        descriptor = self.descriptor(key)
        return _transform.apply_transforms(
            descriptor.type, self._states[key].value, self.transforms
        )

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def key_press(self, key: str, char: str) -> bool:
        """Keystroke in a field: True if the character may enter the value."""
        state = self.state(key)
        admitted = _validate.admit_keystroke(
            self.descriptor(key), char, _cast.as_text(state.value)
        )
        if not admitted:
            logger.debug("Rejected keystroke %r in field %r", char, key)
        return admitted

    def input(self, key: str, value: typing.Any) -> ValidationOutcome:
        """Value committed while typing: full rules plus live checks, no notification.

        Args:
            key: Field key
            value: New value

        Returns:
            The field's latest outcome
        """
        descriptor = self.descriptor(key)
        state = self._set_value(key, value)
        state.own_outcome = _validate.live_check(
            descriptor, value, _validate.evaluate(descriptor, value)
        )
        return self._after_evaluation(key)

    def change(self, key: str, value: typing.Any = _UNSET) -> ValidationOutcome:
        """Change event: full rules; success or throttled error notification.

        Args:
            key: Field key
            value: New value, or omitted to revalidate the current one

        Returns:
            The field's latest outcome
        """
        descriptor = self.descriptor(key)
        state = self._states[key]
        if value is not _UNSET:
            self._set_value(key, value)
        state.own_outcome = _validate.evaluate(descriptor, state.value)
        outcome = self._after_evaluation(key)

        if outcome.is_valid:
            self.channel.show_success(
                _messages.SUCCESS_MESSAGE, self.config.change_success_timeout_ms
            )
        elif state.touched:
            self._notify_error(key, outcome)
        return outcome

    def blur(self, key: str) -> ValidationOutcome:
        """Field lost focus: marks it touched, full rules, notification.

        Args:
            key: Field key

        Returns:
            The field's latest outcome
        """
        descriptor = self.descriptor(key)
        state = self._states[key]
        state.touched = True
        state.own_outcome = _validate.evaluate(descriptor, state.value)
        outcome = self._after_evaluation(key)

        if outcome.is_valid:
            if not _cast.is_empty(state.value):
                self.channel.show_success(
                    _messages.SUCCESS_MESSAGE, self.config.success_timeout_ms
                )
        else:
            self._notify_error(key, outcome)
        return outcome

    def _set_value(self, key: str, value: typing.Any) -> FieldState:
        state = self._states[key]
        state.value = value
        if not (_cast.is_empty(value) and _cast.is_empty(state.initial_value)):
            state.dirty = state.dirty or value != state.initial_value
        return state

    def _after_evaluation(self, key: str) -> ValidationOutcome:
        self._refresh_cross_field()
        outcome = self._states[key].last_outcome
        message = _messages.get_error_message(outcome, self._by_key[key])
        logger.debug("Field %r -> %r", key, outcome)
        self.hooks.call_on_outcome(key, outcome, message)
        return outcome

    def _refresh_cross_field(self) -> None:
        if not self._cross.rules:
            return
        for key, outcome in self._cross.validate(self.values).items():
            self._states[key].cross_outcome = outcome

    def _notify_error(self, key: str, outcome: ValidationOutcome) -> None:
        if not self.throttle.should_notify(key, self._clock()):
            return
        message = _messages.get_error_message(outcome, self._by_key[key])
        if message:
            self.channel.show_error(message, self.config.error_timeout_ms)

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def _is_completed(self, key: str) -> bool:
        state = self._states[key]
        return not _cast.is_missing(state.value) and state.last_outcome.is_valid

    def progress(self) -> int:
        """Percentage of required fields holding a valid, non-empty value.

        Returns:
            Integer percentage; 0 when the form has no required fields
        """
        required = [d.key for d in self.descriptors if d.required]
        completed = sum(1 for key in required if self._is_completed(key))
        return _stats.progress_percentage(completed, len(required))

    def summary(self) -> _stats.ValidationSummary:
        """Ordered (key, message) pairs for every invalid field."""
        return _stats.ValidationSummary(
            tuple(
                (d.key, self.error_message(d.key))
                for d in self.descriptors
                if not self._states[d.key].last_outcome.is_valid
            )
        )

    def stats(self) -> _stats.FormStats:
        required = [d.key for d in self.descriptors if d.required]
        return _stats.FormStats.from_outcomes(
            {key: s.last_outcome for key, s in self._states.items()},
            touched=[key for key, s in self._states.items() if s.touched],
            dirty=[key for key, s in self._states.items() if s.dirty],
            required=required,
            completed=[key for key in required if self._is_completed(key)],
        )

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def submit(self) -> SubmitResult:
        """Validate the whole form for submission.

        On success the payload maps every key to its value in descriptor
        order. On failure every field becomes touched so hidden errors show
        up, and no value changes.

        Returns:
            SubmitResult with either a payload or a summary
        """
        summary = self.summary()
        if summary:
            for state in self._states.values():
                state.touched = True
            logger.info(
                "Submit refused: %d invalid field(s), first %r",
                len(summary),
                summary.first_invalid,
            )
            self.hooks.call_on_submit_error(summary)
            return SubmitResult(None, summary)

        payload = self.values
        logger.info("Submit accepted with %d field(s)", len(payload))
        self.hooks.call_on_submit_success(payload)
        return SubmitResult(payload, None)

    async def submit_async(self) -> SubmitResult:
        """Validate, then deliver the payload through the transport.

        Only one submission may be in flight. A transport failure shows one
        error notification and leaves the form as it was; there is no
        automatic retry.

        Returns:
            SubmitResult; ``error`` is set when the transport failed

        Raises:
            SubmissionInProgressError: If a submission is already in flight
        """
        if self.is_submitting:
            logger.warning("Submit ignored: a submission is already in flight")
            raise _errors.SubmissionInProgressError("a submission is already in flight")

        result = self.submit()
        if not result.ok:
            return result

        self.is_submitting = True
        try:
            await self.transport.send(typing.cast(_record.Payload, result.payload))
        except _errors.TransportError as e:
            logger.warning("Submission failed: %s", e)
            self.channel.show_error(
                _messages.SUBMIT_ERROR_MESSAGE, self.config.submit_error_timeout_ms
            )
            return SubmitResult(None, None, e)
        finally:
            self.is_submitting = False

        logger.info("Submission delivered")
        self.channel.show_success(
            _messages.SUBMIT_SUCCESS_MESSAGE, self.config.submit_success_timeout_ms
        )
        return result

    def reset(self) -> None:
        """Restore every field to its initial value and forget all history.

        Flags are cleared, outcomes are recomputed from the initial values
        and the throttle forgets every field, so a fresh attempt is not
        suppressed.
        """
        self._init_states()
        self.throttle.clear()
        logger.debug("Session reset (%d fields)", len(self.descriptors))

    def __iter__(self) -> typing.Iterator[tuple[_schema.FieldDescriptor, FieldState]]:
        for descriptor in self.descriptors:
            yield descriptor, self._states[descriptor.key]

    def __len__(self) -> int:
        return len(self.descriptors)
