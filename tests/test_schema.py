"""Tests for dynaform.schema module."""

import pytest

from dynaform import FieldType, SchemaError
from dynaform.schema import Constraints, FieldDescriptor, build_descriptor, build_schema


def test_build_descriptor_from_mapping():
    """Test a mapping becomes an immutable descriptor."""
    descriptor = build_descriptor({"key": "email", "type": "email", "required": True})

    assert descriptor.key == "email"
    assert descriptor.type is FieldType.EMAIL
    assert descriptor.required is True
    assert descriptor.order == 1
    assert descriptor.value is None


def test_type_is_case_insensitive():
    """Test type names are normalized."""
    descriptor = build_descriptor({"key": "e", "type": " EMAIL "})

    assert descriptor.type is FieldType.EMAIL


def test_unknown_type_fails_fast():
    """Test an unknown field type is rejected at construction."""
    with pytest.raises(SchemaError) as exc_info:
        build_descriptor({"key": "c", "type": "color"})

    assert "type" in str(exc_info.value)


def test_schema_error_is_value_error():
    """Test SchemaError can be caught as ValueError."""
    with pytest.raises(ValueError):
        build_descriptor({"key": "c", "type": "colour"})


@pytest.mark.parametrize("key", ["", "   "])
def test_empty_key_rejected(key):
    """Test an empty or blank key is rejected."""
    with pytest.raises(SchemaError):
        build_descriptor({"key": key, "type": "text"})


def test_missing_type_rejected():
    """Test a descriptor must declare its type."""
    with pytest.raises(SchemaError):
        build_descriptor({"key": "name"})


def test_non_mapping_rejected():
    """Test a field definition must be a mapping."""
    with pytest.raises(SchemaError):
        build_descriptor(["key", "text"])  # type: ignore[arg-type]


def test_options_only_for_choice_types():
    """Test options are refused on a non-choice field."""
    with pytest.raises(SchemaError):
        build_descriptor(
            {"key": "name", "type": "text", "options": [{"key": "a", "value": "A"}]}
        )

    radio = build_descriptor(
        {
            "key": "color",
            "type": "radio",
            "options": [{"key": "r", "value": "Rojo"}, {"key": "v", "value": "Verde"}],
        }
    )
    assert [o.key for o in radio.options] == ["r", "v"]


def test_camel_case_constraints():
    """Test constraints accept camelCase keys."""
    descriptor = build_descriptor(
        {"key": "bio", "type": "textarea", "constraints": {"minLength": 5, "maxLength": 10}}
    )

    assert descriptor.constraints.min_length == 5
    assert descriptor.constraints.max_length == 10


def test_conflicting_constraints_rejected():
    """Test min greater than max is rejected."""
    with pytest.raises(SchemaError):
        build_descriptor(
            {"key": "bio", "type": "textarea", "constraints": {"minLength": 5, "maxLength": 2}}
        )


def test_constraint_conflicting_with_type_default_rejected():
    """Test an explicit bound that contradicts the type default is rejected."""
    with pytest.raises(SchemaError):
        build_descriptor({"key": "name", "type": "text", "constraints": {"maxLength": 1}})


def test_invalid_pattern_rejected():
    """Test an uncompilable pattern is rejected."""
    with pytest.raises(SchemaError):
        build_descriptor({"key": "code", "type": "text", "constraints": {"pattern": "("}})


def test_effective_constraints_overlay_defaults():
    """Test explicit constraints override type defaults, others are kept."""
    descriptor = build_descriptor(
        {"key": "name", "type": "text", "constraints": {"maxLength": 20}}
    )

    effective = descriptor.effective_constraints
    assert effective.min_length == 2
    assert effective.max_length == 20


def test_rules_resolved_at_construction():
    """Test the rule list is resolved from the type and constraints."""
    text = build_descriptor({"key": "name", "type": "text"})
    radio = build_descriptor({"key": "choice", "type": "radio"})
    patterned = build_descriptor(
        {"key": "code", "type": "radio", "constraints": {"pattern": "[A-Z]{3}"}}
    )

    assert len(text.rules) == 3
    assert radio.rules == ()
    assert len(patterned.rules) == 1


def test_descriptor_is_frozen():
    """Test descriptors cannot be mutated."""
    descriptor = build_descriptor({"key": "name", "type": "text"})

    with pytest.raises(Exception):
        descriptor.required = True  # type: ignore[misc]


def test_build_schema_orders_by_order_then_insertion():
    """Test fields sort by order with ties kept in insertion order."""
    schema = build_schema(
        [
            {"key": "c", "type": "text", "order": 2},
            {"key": "a", "type": "text", "order": 1},
            {"key": "d", "type": "text", "order": 2},
            {"key": "b", "type": "text", "order": 1},
        ]
    )

    assert [d.key for d in schema] == ["a", "b", "c", "d"]


def test_build_schema_duplicate_key():
    """Test repeated keys are rejected."""
    with pytest.raises(SchemaError) as exc_info:
        build_schema(
            [{"key": "a", "type": "text"}, {"key": "a", "type": "email"}]
        )

    assert "duplicate" in str(exc_info.value)
    assert exc_info.value.errors[0]["loc"] == (1, "key")


def test_build_schema_error_location_includes_index():
    """Test errors point at the offending descriptor."""
    with pytest.raises(SchemaError) as exc_info:
        build_schema([{"key": "a", "type": "text"}, {"key": "b", "type": "nope"}])

    assert exc_info.value.errors[0]["loc"][0] == 1


def test_build_schema_accepts_descriptors_and_empty_list():
    """Test instances pass through and an empty field set is allowed."""
    descriptor = FieldDescriptor(key="a", type=FieldType.TEXT)

    assert build_schema([descriptor]) == (descriptor,)
    assert build_schema([]) == ()


def test_constraints_overlay():
    """Test overlay keeps explicit values."""
    constraints = Constraints(min=1)

    merged = constraints.overlay({"min": -5, "max": 10})

    assert merged.min == 1
    assert merged.max == 10
