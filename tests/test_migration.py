"""Test the migration entry points."""

from dataobject_seed import SampleDataMigration, reset, seed
from dataobject_seed.backends.staging import StagingObjectStore, StagingSchemaAdapter
from dataobject_seed.catalog import booking_registry
from dataobject_seed.config import Config, SeedingConfig


def make_migration(count=2):
    store = StagingObjectStore()
    config = Config(seeding=SeedingConfig(instances_per_type=count))
    migration = SampleDataMigration(
        store, booking_registry(), StagingSchemaAdapter(store), config=config
    )
    return store, migration


def test_up_then_down():
    """Test up() seeds and down() restores the empty root."""
    store, migration = make_migration()

    report = migration.up()
    assert report.total_created == 22
    assert not migration.is_transactional()

    migration.down()
    assert [row["id"] for row in store.get_data("objects")] == [1]


def test_up_twice_reuses_objects():
    store, migration = make_migration()

    migration.up()
    report = migration.up()

    assert report.total_created == 0
    assert report.total_reused == 22


def test_module_functions(store, type_registry):
    report = seed(store, type_registry, Config(seeding=SeedingConfig(instances_per_type=1)))
    assert report.total_created == 11

    reset(StagingSchemaAdapter(store))
    assert store.objects_of("Customer") == []
