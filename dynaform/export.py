"""Serialize submitted payloads."""

import csv
import io
import json
import typing

from . import record as _record


def _serialize_value(value: typing.Any) -> typing.Any:
    """Serialize a field value for export.

    File handles are exported as their metadata; content is never inlined.

    Args:
        value: Value to serialize

    Returns:
        Serializable value
    """
    if isinstance(value, (str, int, float, bool, type(None))):
        return value
    if isinstance(value, _record.FileHandle):
        return value.to_dict()
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize_value(v) for v in value]
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def serialize_payload(payload: _record.Payload, indent: int | None = None) -> str:
    """Render a payload as JSON, keys kept in descriptor order.

    Args:
        payload: Field key to value
        indent: JSON indentation level (None for compact)

    Returns:
        JSON string
    """
    return json.dumps(
        {key: _serialize_value(value) for key, value in payload.items()},
        indent=indent,
        ensure_ascii=False,
    )


def payload_to_csv(payload: _record.Payload) -> str:
    """Render a payload as a two-row CSV: header of keys, row of values."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(list(payload.keys()))
    row = []
    for value in payload.values():
        serialized = _serialize_value(value)
        if isinstance(serialized, dict):
            serialized = serialized.get("filename", json.dumps(serialized))
        row.append("" if serialized is None else serialized)
    writer.writerow(row)
    return buffer.getvalue()


def render_payload(
    payload: _record.Payload, format: str = "json", *, indent: int | None = None
) -> str:
    """Render a payload in the requested format for handing to a caller.

    Nothing is written anywhere; storing the result is up to the caller.

    Args:
        payload: Field key to value
        format: 'json' or 'csv'
        indent: JSON indentation level

    Returns:
        Rendered payload

    Raises:
        ValueError: If format is not supported
    """
    if format == "json":
        return serialize_payload(payload, indent=indent)
    if format == "csv":
        return payload_to_csv(payload)
    raise ValueError(f"Unsupported format: {format}. Use 'json' or 'csv'")
