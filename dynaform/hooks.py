"""Renderer callbacks for form session events."""

import logging
import typing

from . import record as _record
from . import result as _result

if typing.TYPE_CHECKING:
    from .stats import ValidationSummary

logger = logging.getLogger(__name__)


class SessionHooks:
    """Hooks for form session events.

    All callbacks are optional. A callback that raises is logged and does
    not interrupt validation.

    Attributes:
        on_outcome: Called after every field evaluation with the key, the
                    outcome and its resolved message
        on_submit_success: Called with the payload when a submit is accepted
        on_submit_error: Called with the summary when a submit is refused
    """

    def __init__(
        self,
        *,
        on_outcome: typing.Callable[[str, _result.ValidationOutcome, str], None]
        | None = None,
        on_submit_success: typing.Callable[[_record.Payload], None] | None = None,
        on_submit_error: typing.Callable[["ValidationSummary"], None] | None = None,
    ) -> None:
        """Initialize SessionHooks.

        Args:
            on_outcome: Callback(key, outcome, message)
            on_submit_success: Callback(payload)
            on_submit_error: Callback(summary)
        """
        self.on_outcome = on_outcome
        self.on_submit_success = on_submit_success
        self.on_submit_error = on_submit_error

    def call_on_outcome(
        self, key: str, outcome: _result.ValidationOutcome, message: str
    ) -> None:
        """Call on_outcome hook if set.

        Args:
            key: Field key
            outcome: The field's new outcome
            message: Resolved error message, ``""`` when valid
        """
        if self.on_outcome is not None:
            try:
                self.on_outcome(key, outcome, message)
            except Exception:
                logger.exception("on_outcome hook failed for field %r", key)

    def call_on_submit_success(self, payload: _record.Payload) -> None:
        if self.on_submit_success is not None:
            try:
                self.on_submit_success(payload)
            except Exception:
                logger.exception("on_submit_success hook failed")

    def call_on_submit_error(self, summary: "ValidationSummary") -> None:
        if self.on_submit_error is not None:
            try:
                self.on_submit_error(summary)
            except Exception:
                logger.exception("on_submit_error hook failed")
