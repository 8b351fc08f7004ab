"""Closed enumerations shared across the form engine."""

from enum import Enum


class FieldType(str, Enum):
    """Input types a field descriptor may declare.

    Attributes:
        TEXT: Free text restricted to letters and light punctuation
        EMAIL: Email address
        PASSWORD: Password with character class requirements
        NUMBER: Signed decimal number
        PHONE: International phone number
        TEL: Alias of PHONE
        DATE: Calendar date, today or later
        URL: http/https URL
        FILE: Uploaded file handle
        RADIO: Single choice among options
        SELECT: Single choice among options
        CHECKBOX: Boolean toggle
        TEXTAREA: Multi-line free text
    """

    TEXT = "text"
    EMAIL = "email"
    PASSWORD = "password"
    NUMBER = "number"
    PHONE = "phone"
    TEL = "tel"
    DATE = "date"
    URL = "url"
    FILE = "file"
    RADIO = "radio"
    SELECT = "select"
    CHECKBOX = "checkbox"
    TEXTAREA = "textarea"

    @property
    def is_choice(self) -> bool:
        """True for types whose value is picked from ``options``."""
        return self in (FieldType.RADIO, FieldType.SELECT)

    @property
    def is_phone(self) -> bool:
        return self in (FieldType.PHONE, FieldType.TEL)


class NotificationType(str, Enum):
    """Kinds of user-visible notification.

    Attributes:
        SUCCESS: A field or the form was completed correctly
        ERROR: A field is invalid or submission failed
        INFO: Neutral information
    """

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
