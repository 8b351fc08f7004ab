"""Shared pytest fixtures for dynaform tests."""

import typing

import pytest

from dynaform import FormSession
from dynaform.schema import FieldDescriptor, build_descriptor


class FakeClock:
    """Manually advanced clock in epoch milliseconds."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def make_field() -> typing.Callable[..., FieldDescriptor]:
    """Fixture providing a descriptor factory with a default key."""

    def _make(type: str, **kwargs: typing.Any) -> FieldDescriptor:
        kwargs.setdefault("key", f"{type}_field")
        return build_descriptor({"type": type, **kwargs})

    return _make


@pytest.fixture
def clock() -> FakeClock:
    """Fixture providing a manually advanced clock."""
    return FakeClock()


@pytest.fixture
def signup_fields() -> list[dict[str, typing.Any]]:
    """Fixture providing a small sign-up form definition."""
    return [
        {"key": "name", "type": "text", "label": "Nombre", "required": True, "order": 1},
        {"key": "email", "type": "email", "label": "Email", "required": True, "order": 2},
        {"key": "age", "type": "number", "label": "Edad", "order": 3},
        {"key": "website", "type": "url", "label": "Sitio web", "order": 4},
    ]


@pytest.fixture
def signup_session(signup_fields, clock) -> FormSession:
    """Fixture providing a session over the sign-up form."""
    return FormSession(signup_fields, clock=clock)


@pytest.fixture
def email_session(clock) -> FormSession:
    """Fixture providing a session with a single required email field."""
    return FormSession(
        [{"key": "email", "type": "email", "required": True, "label": "Email"}],
        clock=clock,
    )
