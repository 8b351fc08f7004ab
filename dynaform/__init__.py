"""Schema-driven form validation.

A Python package that turns a declarative list of field descriptors into
composable validation rules, evaluates them against live input, and turns
the results into rate-limited user notifications.
"""

import logging

__version__ = "0.1.0"

from dynaform.config import FormConfig
from dynaform.errors import (
    DynaformError,
    SchemaError,
    SubmissionInProgressError,
    TransportError,
    UnknownFieldError,
)
from dynaform.export import render_payload, serialize_payload
from dynaform.hooks import SessionHooks
from dynaform.messages import get_error_message
from dynaform.notifications import (
    Notification,
    NotificationChannel,
    NotificationEvent,
    NotificationThrottle,
)
from dynaform.options import FieldType, NotificationType
from dynaform.record import FileHandle
from dynaform.result import VALID, ErrorKind, SubmitResult, ValidationOutcome, invalid
from dynaform.rules import CrossFieldRule, passwords_match
from dynaform.schema import Constraints, FieldDescriptor, Option, build_schema
from dynaform.session import FieldState, FormSession
from dynaform.stats import FormStats, ValidationSummary
from dynaform.transform import Transform, format_phone_number
from dynaform.transport import SimulatedTransport
from dynaform.validate import admit_keystroke, evaluate, live_check

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "FormConfig",
    "DynaformError",
    "SchemaError",
    "SubmissionInProgressError",
    "TransportError",
    "UnknownFieldError",
    "render_payload",
    "serialize_payload",
    "SessionHooks",
    "get_error_message",
    "Notification",
    "NotificationChannel",
    "NotificationEvent",
    "NotificationThrottle",
    "FieldType",
    "NotificationType",
    "FileHandle",
    "VALID",
    "ErrorKind",
    "SubmitResult",
    "ValidationOutcome",
    "invalid",
    "CrossFieldRule",
    "passwords_match",
    "Constraints",
    "FieldDescriptor",
    "Option",
    "build_schema",
    "FieldState",
    "FormSession",
    "FormStats",
    "ValidationSummary",
    "Transform",
    "format_phone_number",
    "SimulatedTransport",
    "admit_keystroke",
    "evaluate",
    "live_check",
]
