"""Test deterministic round-robin relation wiring."""

import pytest

from dataobject_seed.catalog import BOOKING_TYPES
from dataobject_seed.models import CreatedRegistry, Instance, TypeSchema
from dataobject_seed.wiring import RelationWiringEngine, round_robin_indices

SCHEMAS = {schema.name: schema for schema in BOOKING_TYPES}


def make_registry(counts: dict[str, int], missing: dict[str, set] | None = None):
    """Registry with ``counts[type]`` saved instances per type."""
    missing = missing or {}
    registry = CreatedRegistry()
    next_id = 100
    for type_name, count in counts.items():
        registry.start_type(type_name)
        for index in range(1, count + 1):
            if index in missing.get(type_name, set()):
                continue
            registry.add(
                type_name,
                index,
                Instance(
                    type_name,
                    type_name.lower(),
                    key=f"{type_name}_{index:03d}",
                    id=next_id,
                ),
            )
            next_id += 1
    registry.freeze()
    return registry


@pytest.mark.parametrize(
    "index,size,limit,expected",
    [
        (1, 10, 1, [1]),
        (10, 10, 1, [10]),
        (11, 10, 1, [1]),
        (7, 3, 1, [1]),
        (9, 10, 3, [9, 10, 1]),
        (9, 2, 3, [1, 2]),
        (1, 1, 3, [1]),
        (5, 0, 3, []),
    ],
)
def test_round_robin_indices(index, size, limit, expected):
    """Test the round-robin formula wraps within the target set."""
    assert round_robin_indices(index, size, limit) == expected


def test_round_robin_indices_stay_in_range():
    """Test every index maps into [1, N] with no duplicates."""
    for size in range(1, 6):
        for index in range(1, 25):
            picked = round_robin_indices(index, size, limit=3)
            assert len(picked) == min(3, size)
            assert len(set(picked)) == len(picked)
            assert all(1 <= i <= size for i in picked)


def test_booked_reservation_links_same_index(strategies):
    """Test CustomerBookedReservations #7 links Customer #7 and Reservation #7."""
    registry = make_registry({"Customer": 10, "Reservation": 10})
    engine = RelationWiringEngine(strategies)

    plan = engine.plan(
        "CustomerBookedReservations",
        7,
        registry,
        SCHEMAS["CustomerBookedReservations"],
    )

    assert plan["customer"] is registry.get("Customer", 7)
    assert plan["reservation"] is registry.get("Reservation", 7)


def test_unit_utilities_get_three_units_wrapping(strategies):
    """Test UnitUtilities #9 with 10 units links units 9, 10, 1 in order."""
    registry = make_registry({"Unit": 10})
    engine = RelationWiringEngine(strategies)

    plan = engine.plan("UnitUtilities", 9, registry, SCHEMAS["UnitUtilities"])

    assert [u.key for u in plan["unit"]] == ["Unit_009", "Unit_010", "Unit_001"]


def test_unit_utilities_with_two_units(strategies):
    """Test a target set smaller than the limit gives each target once."""
    registry = make_registry({"Unit": 2})
    engine = RelationWiringEngine(strategies)

    plan = engine.plan("UnitUtilities", 9, registry, SCHEMAS["UnitUtilities"])

    assert [u.key for u in plan["unit"]] == ["Unit_001", "Unit_002"]


def test_single_relation_wraps_when_target_set_is_smaller(strategies):
    registry = make_registry({"Company": 3})
    engine = RelationWiringEngine(strategies)

    plan = engine.plan("Reservation", 8, registry, SCHEMAS["Reservation"])

    assert plan["company"].key == "Company_002"


def test_empty_target_type_is_skipped(strategies):
    """Test relations to types without instances are left out silently."""
    registry = make_registry({"Customer": 10, "Reservation": 0})
    engine = RelationWiringEngine(strategies)

    plan = engine.plan(
        "CustomerBookedReservations",
        3,
        registry,
        SCHEMAS["CustomerBookedReservations"],
    )

    assert list(plan) == ["customer"]


def test_missing_target_index_is_skipped(strategies):
    """Test a target index that failed in pass 1 is skipped, not retried."""
    # Customer #2 failed: N is 9 and index 2 resolves to the gap
    registry = make_registry({"Customer": 10}, missing={"Customer": {2}})
    engine = RelationWiringEngine(strategies)

    plan = engine.plan("CustomerInstalments", 2, registry, SCHEMAS["CustomerInstalments"])
    assert "customer" not in plan

    plan = engine.plan("CustomerInstalments", 10, registry, SCHEMAS["CustomerInstalments"])
    assert plan["customer"].key == "Customer_001"


def test_undeclared_relation_is_skipped(strategies):
    """Test a relation the schema does not declare is not planned."""
    registry = make_registry({"Company": 5})
    engine = RelationWiringEngine(strategies)
    schema = TypeSchema("Reservation", relations=())

    assert engine.plan("Reservation", 1, registry, schema) == {}


def test_type_without_relations(strategies):
    registry = make_registry({"Company": 5})
    engine = RelationWiringEngine(strategies)

    assert engine.plan("Customer", 1, registry, SCHEMAS["Customer"]) == {}


def test_wire_assigns_relations_on_store(store, strategies):
    """Test wire() assigns the planned relations through the store."""
    registry = make_registry({"Unit": 10})
    engine = RelationWiringEngine(strategies)
    schema = SCHEMAS["UnitUtilities"]

    instance = store.create_instance(schema)
    instance.key = "UnitUtilities_004"
    instance.parent_id = store.root_id

    plan = engine.wire(store, instance, schema, 4, registry)

    assert [u.key for u in instance.relations["unit"]] == [
        "Unit_004",
        "Unit_005",
        "Unit_006",
    ]
    assert plan == instance.relations


def test_plan_is_deterministic(strategies):
    registry = make_registry({"Reservation": 10, "Customer": 10})
    engine = RelationWiringEngine(strategies)
    schema = SCHEMAS["ReservationReviews"]

    first = engine.plan("ReservationReviews", 6, registry, schema)
    second = engine.plan("ReservationReviews", 6, registry, schema)

    assert first == second
