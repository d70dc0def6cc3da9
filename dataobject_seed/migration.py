"""
Migration entry points.

``seed()`` and ``reset()`` are what a migration runner calls;
``SampleDataMigration`` bundles both as ``up()``/``down()``.
"""

import logging

from psycopg import Connection

from dataobject_seed.backends.base import ObjectStore, SchemaResetAdapter
from dataobject_seed.backends.direct import PostgresObjectStore, PostgresSchemaAdapter
from dataobject_seed.config import Config
from dataobject_seed.generators.registry import StrategyRegistry
from dataobject_seed.introspection import PostgresTypeRegistry
from dataobject_seed.models import SeedingReport
from dataobject_seed.orchestrator import SeedOrchestrator
from dataobject_seed.reset import StoreReset
from dataobject_seed.type_registry import TypeRegistry

logger = logging.getLogger(__name__)


def seed(
    store: ObjectStore,
    type_registry: TypeRegistry,
    config: Config | None = None,
    strategies: StrategyRegistry | None = None,
) -> SeedingReport:
    """
    Create the sample objects of every known type.

    Args:
        store: Object store to write to
        type_registry: Source of type names and capabilities
        config: Configuration (defaults apply when omitted)
        strategies: Per-type strategies (defaults to the global registry)

    Returns:
        Report of the run
    """
    config = config or Config()
    orchestrator = SeedOrchestrator(
        type_registry, store, strategies=strategies, config=config.seeding
    )
    return orchestrator.run()


def reset(adapter: SchemaResetAdapter, config: Config | None = None) -> None:
    """
    Remove all objects and restore the root folder.

    Raises:
        SchemaResetError: If a reset statement fails
    """
    config = config or Config()
    StoreReset(adapter, config.reset, root_id=config.seeding.root_id).reset()


class SampleDataMigration:
    """
    Sample data as a reversible migration.

    Example:
        >>> with psycopg.connect(dsn) as conn:
        ...     report = SampleDataMigration.for_connection(conn).up()
    """

    description = "Creates sample objects for all classes"

    def __init__(
        self,
        store: ObjectStore,
        type_registry: TypeRegistry,
        reset_adapter: SchemaResetAdapter,
        config: Config | None = None,
        strategies: StrategyRegistry | None = None,
    ):
        self.store = store
        self.type_registry = type_registry
        self.reset_adapter = reset_adapter
        self.config = config or Config()
        self.strategies = strategies

    @classmethod
    def for_connection(
        cls, conn: Connection, config: Config | None = None
    ) -> "SampleDataMigration":
        """Migration wired to the PostgreSQL adapters of one connection."""
        return cls(
            PostgresObjectStore(conn),
            PostgresTypeRegistry(conn),
            PostgresSchemaAdapter(conn),
            config=config,
        )

    def is_transactional(self) -> bool:
        # Every save commits on its own
        return False

    def up(self) -> SeedingReport:
        logger.info(f"Running migration: {self.description}")
        return seed(self.store, self.type_registry, self.config, self.strategies)

    def down(self) -> None:
        logger.info("Reverting migration: removing sample objects")
        reset(self.reset_adapter, self.config)
