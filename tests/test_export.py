"""Tests for dynaform.export module."""

import json
from datetime import date

import pytest

from dynaform import FileHandle, render_payload, serialize_payload
from dynaform.export import payload_to_csv


@pytest.fixture
def payload():
    """Fixture providing a submitted payload."""
    return {
        "name": "Ana María",
        "cv": FileHandle("cv.pdf", "application/pdf", 2048),
        "start": date(2030, 1, 15),
        "terms": True,
        "age": None,
    }


def test_serialize_payload_keeps_order(payload):
    """Test JSON keeps descriptor order and file metadata only."""
    data = json.loads(serialize_payload(payload))

    assert list(data) == ["name", "cv", "start", "terms", "age"]
    assert data["cv"] == {"filename": "cv.pdf", "contentType": "application/pdf", "size": 2048}
    assert data["start"] == "2030-01-15"
    assert "Ana María" in serialize_payload(payload)


def test_payload_to_csv(payload):
    """Test CSV has a header row and a value row."""
    lines = payload_to_csv(payload).splitlines()

    assert lines == ["name,cv,start,terms,age", "Ana María,cv.pdf,2030-01-15,True,"]


def test_render_payload_json(payload):
    """Test rendering a payload as indented JSON."""
    text = render_payload(payload, indent=2)

    assert json.loads(text)["name"] == "Ana María"
    assert "\n  \"name\"" in text


def test_render_payload_csv(payload):
    """Test rendering a payload as CSV."""
    assert render_payload(payload, "csv") == payload_to_csv(payload)


def test_render_payload_unknown_format(payload):
    """Test unsupported formats are rejected."""
    with pytest.raises(ValueError, match="Unsupported format"):
        render_payload(payload, "excel")
