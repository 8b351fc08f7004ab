"""Type aliases for field values and submitted payloads."""

import typing
from dataclasses import dataclass
from pathlib import PurePath


@dataclass(frozen=True)
class FileHandle:
    """Opaque handle to a file picked by the user.

    Only metadata travels through the engine; the content is never read.

    Attributes:
        filename: Name of the file as picked by the user
        content_type: MIME type reported by the client (may be empty)
        size: Size in bytes
    """

    filename: str
    content_type: str = ""
    size: int = 0

    @property
    def extension(self) -> str:
        """Lower-cased extension including the dot, or ``""``."""
        return PurePath(self.filename).suffix.lower()

    def to_dict(self) -> dict[str, typing.Any]:
        return {
            "filename": self.filename,
            "contentType": self.content_type,
            "size": self.size,
        }


FieldValue = typing.Union[str, int, float, bool, FileHandle, None]
"""Type alias for the value held by a single field.

Text-like inputs hold strings, checkboxes hold booleans, file inputs hold a
:class:`FileHandle`. ``None`` means the field has no value.
"""

Payload = dict[str, FieldValue]
"""Type alias for a submitted form: field key to current value, in descriptor order."""
