"""Test data models: schemas, created registry and the seeding report."""

import json

import pytest

from dataobject_seed.models import (
    FAILURE_INSTANCE_PERSIST,
    FAILURE_TYPE_UNAVAILABLE,
    Container,
    CreatedRegistry,
    FieldSpec,
    Instance,
    RelationSpec,
    SeedingReport,
    TypeSchema,
)


def test_field_spec_rejects_unknown_kind():
    """Test FieldSpec only accepts known kinds."""
    with pytest.raises(ValueError, match="Unknown field kind 'money'"):
        FieldSpec("price", "money")


def test_relation_spec_validation():
    """Test RelationSpec validates cardinality and max_targets."""
    with pytest.raises(ValueError, match="unknown cardinality"):
        RelationSpec("unit", "Unit", cardinality="several")
    with pytest.raises(ValueError, match="max_targets"):
        RelationSpec("unit", "Unit", cardinality="many", max_targets=0)

    assert RelationSpec("unit", "Unit", cardinality="many", max_targets=3).is_many
    assert not RelationSpec("customer", "Customer").is_many


def test_type_schema_capabilities():
    """Test capability lookups replace setter probing."""
    schema = TypeSchema(
        "Unit",
        fields=(FieldSpec("number", "integer"),),
        relations=("accommodation",),
    )

    assert schema.has_field("number")
    assert not schema.has_field("accommodation")
    assert schema.has_relation("accommodation")
    assert not schema.has_relation("number")
    assert schema.get_field("number").kind == "integer"
    assert schema.get_field("missing") is None
    assert schema.store_id == "Unit"
    assert TypeSchema("Unit", class_id="unit").store_id == "unit"


def test_container_full_path():
    """Test children of the root live under '/'."""
    root = Container(id=1, parent_id=0, key="", path="/")
    folder = Container(id=2, parent_id=1, key="SampleData_Customer", path="/")

    assert root.full_path == "/"
    assert folder.full_path == "/SampleData_Customer/"


def test_created_registry_is_read_only_after_freeze():
    """Test the registry rejects writes once wiring starts."""
    registry = CreatedRegistry()
    registry.start_type("Customer")
    registry.add("Customer", 1, Instance("Customer", "customer", key="Customer_001"))
    registry.freeze()

    assert registry.frozen
    with pytest.raises(RuntimeError, match="read-only"):
        registry.add("Customer", 2, Instance("Customer", "customer"))
    with pytest.raises(RuntimeError):
        registry.start_type("Company")


def test_created_registry_lookup():
    """Test count, get and iteration follow insertion order."""
    registry = CreatedRegistry()
    registry.start_type("Company")
    registry.start_type("Customer")
    for index in (1, 2, 4):
        registry.add("Customer", index, Instance("Customer", "customer", key=f"c{index}"))

    assert "Company" in registry
    assert registry.count("Company") == 0
    assert registry.count("Customer") == 3
    assert registry.get("Customer", 3) is None
    assert registry.get("Customer", 4).key == "c4"
    assert len(registry) == 3
    assert [(t, i) for t, i, _ in registry.items()] == [
        ("Customer", 1),
        ("Customer", 2),
        ("Customer", 4),
    ]

    with pytest.raises(TypeError):
        registry.instances("Customer")[5] = Instance("Customer", "customer")


def test_created_registry_rejects_zero_index():
    registry = CreatedRegistry()
    with pytest.raises(ValueError, match=">= 1"):
        registry.add("Customer", 0, Instance("Customer", "customer"))


def test_seeding_report_totals_and_export():
    """Test report aggregates counters and exports JSON."""
    report = SeedingReport()
    report.for_type("Customer").created = 9
    report.for_type("Customer").failed = 1
    report.for_type("Customer").relation_failures = 2
    report.for_type("Company").reused = 10
    report.for_type("Legacy").skipped = True
    report.record_failure(FAILURE_INSTANCE_PERSIST, "Customer", 3, "boom")
    report.record_failure(FAILURE_TYPE_UNAVAILABLE, "Legacy", None, "missing")

    assert report.total_created == 9
    assert report.total_reused == 10
    assert report.total_failed == 3
    assert report.skipped_types == ["Legacy"]
    assert report.has_failures
    assert [f.type_name for f in report.failures_of(FAILURE_INSTANCE_PERSIST)] == [
        "Customer"
    ]

    data = json.loads(report.to_json())
    assert data["totals"] == {"created": 9, "reused": 10, "failed": 3}
    assert data["types"]["Customer"]["relation_failures"] == 2
    assert data["failures"][1] == {
        "kind": "type_unavailable",
        "type_name": "Legacy",
        "index": None,
        "message": "missing",
    }


def test_empty_report_has_no_failures():
    report = SeedingReport()

    assert not report.has_failures
    assert report.total_created == 0
