"""Test the reset plan and its execution on the in-memory store."""

import pytest

from dataobject_seed.backends.base import ResetStatement, SchemaResetAdapter
from dataobject_seed.backends.staging import StagingSchemaAdapter
from dataobject_seed.config import ResetConfig, SeedingConfig
from dataobject_seed.exceptions import SchemaResetError
from dataobject_seed.orchestrator import SeedOrchestrator
from dataobject_seed.reset import StoreReset, build_reset_plan

TABLES = [
    "classes",
    "dependencies",
    "object_query_customer",
    "object_relations_unit",
    "object_store_customer",
    "objects",
    "tree_locks",
    "users",
]


class RecordingAdapter(SchemaResetAdapter):
    """Adapter that records calls and fails at a chosen step."""

    def __init__(self, fail_step=None):
        self.calls = []
        self.fail_step = fail_step

    def list_table_names(self):
        return list(TABLES)

    def truncate(self, table):
        self.calls.append(("truncate", table))

    def execute(self, statement: ResetStatement):
        if statement.step == self.fail_step:
            raise SchemaResetError(statement.step, "simulated failure")
        self.calls.append((statement.step, None))


def test_plan_order():
    """Test statements follow the documented order."""
    plan = build_reset_plan(TABLES, timestamp=1700000000)

    assert [s.step for s in plan] == [
        "disable_integrity",
        "truncate",
        "truncate",
        "truncate",
        "truncate",
        "delete_dependencies",
        "delete_tree_locks",
        "insert_root",
        "resync_ids",
        "enable_integrity",
    ]


def test_plan_truncates_objects_and_class_tables_only():
    plan = build_reset_plan(TABLES, timestamp=0)

    assert [s.table for s in plan if s.step == "truncate"] == [
        "objects",
        "object_query_customer",
        "object_relations_unit",
        "object_store_customer",
    ]


def test_plan_root_row():
    """Test the root folder is reinserted with fixed values."""
    plan = build_reset_plan(TABLES, timestamp=1700000000)
    [insert] = [s for s in plan if s.step == "insert_root"]

    assert insert.params == {
        "id": 1,
        "parent_id": 0,
        "type": "folder",
        "key": "",
        "path": "/",
        "index": 999999,
        "published": True,
        "creation_date": 1700000000,
        "modification_date": 1700000000,
        "user_owner": 1,
        "user_modification": 1,
        "version_count": 0,
    }


def test_plan_without_integrity_toggle():
    plan = build_reset_plan(TABLES, timestamp=0, disable_integrity=False)

    steps = [s.step for s in plan]
    assert "disable_integrity" not in steps
    assert "enable_integrity" not in steps


def test_plan_custom_prefixes():
    plan = build_reset_plan(TABLES, timestamp=0, prefixes=["object_store_"])

    assert [s.table for s in plan if s.step == "truncate"] == [
        "objects",
        "object_store_customer",
    ]


def test_reset_stops_at_first_failure():
    """Test a failing step raises and earlier steps stay applied."""
    adapter = RecordingAdapter(fail_step="insert_root")

    with pytest.raises(SchemaResetError, match="insert_root"):
        StoreReset(adapter).reset()

    assert adapter.calls[-1] == ("delete_tree_locks", None)
    assert ("resync_ids", None) not in adapter.calls
    assert ("truncate", "objects") in adapter.calls


def test_reset_clears_seeded_store(store, type_registry, strategies):
    """Test reset leaves only the root folder with empty key and path '/'."""
    SeedOrchestrator(
        type_registry, store, strategies, SeedingConfig(instances_per_type=3)
    ).run()
    assert len(store.get_data("objects")) > 1

    adapter = StagingSchemaAdapter(store)
    StoreReset(adapter).reset()

    [root] = store.get_data("objects")
    assert (root["id"], root["parent_id"], root["key"], root["path"]) == (1, 0, "", "/")
    assert root["index"] == 999999
    assert root["type"] == "folder"
    assert store.get_data("object_store_customer") == []
    assert store.get_data("object_relations_unit_utilities") == []
    assert store.get_data("dependencies") == []
    assert store.integrity_enforced


def test_seed_after_reset_starts_from_scratch(store, type_registry, strategies):
    config = SeedingConfig(instances_per_type=2)
    SeedOrchestrator(type_registry, store, strategies, config).run()
    StoreReset(StagingSchemaAdapter(store)).reset()

    report = SeedOrchestrator(type_registry, store, strategies, config).run()

    assert report.total_reused == 0
    assert report.total_created == 2 * len(type_registry.list_types())
    assert store.get_container(report.types["Customer"].container_id).key == (
        "SampleData_Customer"
    )


def test_staging_adapter_reports_duplicate_root(store):
    """Test inserting the root twice fails with SchemaResetError."""
    adapter = StagingSchemaAdapter(store)
    plan = build_reset_plan(adapter.list_table_names(), timestamp=0)
    [insert] = [s for s in plan if s.step == "insert_root"]

    with pytest.raises(SchemaResetError, match="already exists"):
        adapter.execute(insert)


def test_reset_config_prefixes():
    adapter = RecordingAdapter()
    StoreReset(adapter, ResetConfig(table_prefixes=["object_query_"])).reset()

    assert [table for step, table in adapter.calls if step == "truncate"] == [
        "objects",
        "object_query_customer",
    ]
