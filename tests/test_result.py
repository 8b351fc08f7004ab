"""Tests for dynaform.result module."""

import pytest

from dynaform import VALID, ErrorKind, SubmitResult, TransportError, ValidationOutcome, invalid
from dynaform.stats import ValidationSummary


def test_empty_error_set_is_valid():
    """Test validity is exactly an empty error set."""
    assert VALID.is_valid
    assert ValidationOutcome(frozenset()) == VALID
    assert invalid(ErrorKind.EMAIL).without(ErrorKind.EMAIL) == VALID


def test_invalid_needs_a_kind():
    """Test an Invalid outcome cannot be empty."""
    with pytest.raises(ValueError):
        invalid()


def test_merge_and_with_error():
    """Test outcomes combine by union."""
    outcome = invalid(ErrorKind.MIN_LENGTH).merge(invalid(ErrorKind.PATTERN))

    assert outcome.errors == {ErrorKind.MIN_LENGTH, ErrorKind.PATTERN}
    assert VALID.merge(VALID) == VALID
    assert VALID.with_error(ErrorKind.EMAIL) == invalid(ErrorKind.EMAIL)
    assert ErrorKind.PATTERN in outcome
    assert outcome.without(ErrorKind.MAX) is outcome


def test_repr():
    """Test outcomes render their kinds sorted."""
    assert repr(VALID) == "Valid"
    assert repr(invalid(ErrorKind.PATTERN, ErrorKind.EMAIL)) == "Invalid({email, pattern})"


def test_error_kind_values():
    """Test kinds compare equal to their wire names."""
    assert ErrorKind.MIN_LENGTH == "minLength"
    assert ErrorKind("passwordMismatch") is ErrorKind.PASSWORD_MISMATCH


def test_submit_result_ok():
    """Test ok is set only without summary and error."""
    assert SubmitResult({"a": "b"}, None).ok
    assert not SubmitResult(None, ValidationSummary((("a", "x"),))).ok
    assert not SubmitResult(None, None, TransportError("boom")).ok
