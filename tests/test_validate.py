"""Tests for dynaform.validate module."""

import pytest

from dynaform import VALID, ErrorKind, invalid
from dynaform.validate import admit_keystroke, evaluate, evaluate_all, live_check


def test_required_short_circuits(make_field):
    """Test a missing required value reports only required."""
    descriptor = make_field("email", required=True)

    assert evaluate(descriptor, "") == invalid(ErrorKind.REQUIRED)
    assert evaluate(descriptor, None) == invalid(ErrorKind.REQUIRED)


def test_optional_empty_is_valid(make_field):
    """Test every type accepts an empty optional value."""
    for field_type in ("text", "email", "password", "number", "phone", "date", "url", "file"):
        assert evaluate(make_field(field_type), "") == VALID


def test_all_failures_are_unioned(make_field):
    """Test evaluation does not stop at the first failing rule."""
    outcome = evaluate(make_field("text", required=True), "9" * 101)

    assert outcome.errors == {ErrorKind.PATTERN, ErrorKind.MAX_LENGTH}


def test_evaluate_all(make_field):
    """Test several fields evaluate at once, missing keys as None."""
    name = make_field("text", key="name", required=True)
    email = make_field("email", key="email")

    outcomes = evaluate_all([name, email], {"email": "bad"})

    assert list(outcomes) == ["name", "email"]
    assert outcomes["name"] == invalid(ErrorKind.REQUIRED)
    assert outcomes["email"] == invalid(ErrorKind.EMAIL)


@pytest.mark.parametrize(
    "key,admitted",
    [("a", True), ("Ñ", True), (" ", True), ("-", True), ("1", False), ("@", False)],
)
def test_text_keystrokes(make_field, key, admitted):
    """Test text fields admit letters and light punctuation only."""
    assert admit_keystroke(make_field("text"), key) is admitted


@pytest.mark.parametrize("key,admitted", [("a", True), ("@", True), ("_", True), (" ", False), ("!", False)])
def test_email_keystrokes(make_field, key, admitted):
    """Test email fields admit address characters."""
    assert admit_keystroke(make_field("email"), key) is admitted


@pytest.mark.parametrize("key,admitted", [("5", True), ("+", True), ("(", True), ("a", False)])
def test_phone_keystrokes(make_field, key, admitted):
    """Test phone fields admit digits and phone punctuation."""
    assert admit_keystroke(make_field("phone"), key) is admitted
    assert admit_keystroke(make_field("tel"), key) is admitted


def test_number_keystrokes(make_field):
    """Test number fields admit one decimal point and a leading minus."""
    descriptor = make_field("number")

    assert admit_keystroke(descriptor, "7", "12")
    assert not admit_keystroke(descriptor, "e", "12")
    assert admit_keystroke(descriptor, ".", "12")
    assert not admit_keystroke(descriptor, ".", "1.2")
    assert admit_keystroke(descriptor, "-", "")
    assert not admit_keystroke(descriptor, "-", "12")


def test_control_keys_always_admitted(make_field):
    """Test navigation and editing keys pass every filter."""
    for field_type in ("text", "email", "phone", "number"):
        assert admit_keystroke(make_field(field_type), "Backspace")
        assert admit_keystroke(make_field(field_type), "ArrowLeft")


def test_unfiltered_types(make_field):
    """Test types without a keystroke filter admit anything."""
    assert admit_keystroke(make_field("password"), "!")
    assert admit_keystroke(make_field("url"), ":")


def test_live_email_adds_and_clears(make_field):
    """Test the live email check owns only the email kind."""
    descriptor = make_field("email")
    current = invalid(ErrorKind.REQUIRED)

    assert live_check(descriptor, "ana@", current).errors == {
        ErrorKind.REQUIRED,
        ErrorKind.EMAIL,
    }
    assert live_check(descriptor, "ana@x.io", invalid(ErrorKind.EMAIL)) == VALID


def test_live_email_ignores_empty(make_field):
    """Test an empty value leaves the outcome untouched."""
    current = invalid(ErrorKind.REQUIRED)

    assert live_check(make_field("email"), "", current) is current


def test_live_text_length(make_field):
    """Test the live text check adds invalidLength outside the bounds."""
    descriptor = make_field("text")

    assert ErrorKind.INVALID_LENGTH in live_check(descriptor, "A", VALID)
    assert ErrorKind.INVALID_LENGTH in live_check(descriptor, "a" * 101, VALID)
    assert live_check(descriptor, "Ana", invalid(ErrorKind.INVALID_LENGTH)) == VALID
    assert live_check(descriptor, "", invalid(ErrorKind.INVALID_LENGTH)) == VALID


def test_live_check_other_types_unchanged(make_field):
    """Test types without live checks return the outcome as is."""
    current = invalid(ErrorKind.PATTERN)

    assert live_check(make_field("number"), "abc", current) is current
