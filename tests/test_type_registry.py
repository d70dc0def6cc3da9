"""Test type registries and descriptor files."""

import json

import pytest
import yaml

from dataobject_seed.catalog import BOOKING_TYPES, booking_registry
from dataobject_seed.models import FieldSpec, TypeSchema
from dataobject_seed.type_registry import StaticTypeRegistry

DESCRIPTOR = """
types:
  Invoice:
    class_id: invoice
    fields:
      number: text
      total: number
      issued: date
    relations: [customer]
  Customer:
    fields:
      email: email
unavailable: [LegacyInvoice]
"""


def test_booking_registry_lists_catalog():
    registry = booking_registry()

    assert sorted(registry.list_types()) == sorted(s.name for s in BOOKING_TYPES)
    assert registry.has_field("Customer", "email")
    assert registry.has_field("Unit", "accommodation")
    assert not registry.has_field("Customer", "company")
    assert not registry.has_field("Missing", "email")


def test_unavailable_types_are_listed_without_schema():
    registry = StaticTypeRegistry(unavailable=["Legacy"])

    assert registry.list_types() == ["Legacy"]
    assert registry.get_schema("Legacy") is None


def test_register_replaces_unavailable():
    registry = StaticTypeRegistry(unavailable=["Legacy"])
    registry.register(TypeSchema("Legacy", fields=(FieldSpec("name"),)))

    assert registry.list_types() == ["Legacy"]
    assert registry.get_schema("Legacy").has_field("name")


def test_from_yaml(tmp_path):
    """Test loading descriptors with pyyaml."""
    path = tmp_path / "types.yaml"
    path.write_text(DESCRIPTOR)

    registry = StaticTypeRegistry.from_file(path)

    invoice = registry.get_schema("Invoice")
    assert invoice.store_id == "invoice"
    assert invoice.get_field("total").kind == "number"
    assert invoice.has_relation("customer")
    assert registry.get_schema("Customer").store_id == "Customer"
    assert registry.list_types() == ["Invoice", "Customer", "LegacyInvoice"]
    assert registry.get_schema("LegacyInvoice") is None


def test_from_json_round_trip(tmp_path):
    path = tmp_path / "types.json"
    path.write_text(json.dumps(booking_registry().to_dict()))

    registry = StaticTypeRegistry.from_file(path)

    assert registry.get_schema("UnitUtilities") == booking_registry().get_schema(
        "UnitUtilities"
    )


def test_to_dict_is_valid_yaml(tmp_path):
    path = tmp_path / "types.yaml"
    path.write_text(yaml.safe_dump(booking_registry().to_dict()))

    registry = StaticTypeRegistry.from_yaml(path)

    assert len(registry.list_types()) == len(BOOKING_TYPES)


def test_malformed_descriptor():
    with pytest.raises(ValueError, match="'types' mapping"):
        StaticTypeRegistry.from_dict({"types": ["Invoice"]})

    with pytest.raises(ValueError, match="'fields' must map"):
        StaticTypeRegistry.from_dict({"types": {"Invoice": {"fields": ["number"]}}})


def test_unknown_kind_in_descriptor():
    with pytest.raises(ValueError, match="Unknown field kind"):
        StaticTypeRegistry.from_dict({"types": {"Invoice": {"fields": {"a": "blob"}}}})
