"""Seeding orchestrator: the two-pass sample data run."""

import logging

from dataobject_seed.backends.base import ObjectStore
from dataobject_seed.config import SeedingConfig
from dataobject_seed.exceptions import RelationPersistError, TypeUnavailableError
from dataobject_seed.folders import FolderAllocator
from dataobject_seed.generators.registry import StrategyRegistry, default_registry
from dataobject_seed.models import (
    FAILURE_CONTAINER_ALLOCATION,
    FAILURE_INSTANCE_PERSIST,
    FAILURE_RELATION_PERSIST,
    FAILURE_TYPE_UNAVAILABLE,
    CreatedRegistry,
    Instance,
    SeedingReport,
    SeedPhase,
    TypeSchema,
)
from dataobject_seed.populator import AttributePopulator
from dataobject_seed.type_registry import TypeRegistry
from dataobject_seed.wiring import RelationWiringEngine

logger = logging.getLogger(__name__)


class SeedOrchestrator:
    """
    Create sample objects for every known type, then wire their relations.

    Pass 1 creates ``instances_per_type`` objects per type with scalar
    fields only. Pass 2 wires relations using the objects created in
    pass 1, so a type may reference types enumerated after it.

    No single failure aborts the run: failed objects are recorded in
    the report and left out of relation wiring.

    Example:
        >>> orchestrator = SeedOrchestrator(booking_registry(), StagingObjectStore())
        >>> report = orchestrator.run()
        >>> report.total_created
        110
    """

    def __init__(
        self,
        type_registry: TypeRegistry,
        store: ObjectStore,
        strategies: StrategyRegistry | None = None,
        config: SeedingConfig | None = None,
    ):
        """
        Initialize orchestrator.

        Args:
            type_registry: Source of type names and capabilities
            store: Object store to write to
            strategies: Per-type strategies (defaults to the global registry)
            config: Seeding configuration
        """
        self.type_registry = type_registry
        self.store = store
        self.strategies = strategies or default_registry()
        self.config = config or SeedingConfig()
        self.phase = SeedPhase.NOT_STARTED
        self.registry = CreatedRegistry()

        self.allocator = FolderAllocator(
            store, root_id=self.config.root_id, prefix=self.config.folder_prefix
        )
        self.populator = AttributePopulator(
            self.strategies,
            reference_date=self.config.reference_date,
            fill_unmapped=self.config.fill_unmapped_fields,
        )
        self.wiring = RelationWiringEngine(self.strategies)

    def instance_key(self, type_name: str, index: int) -> str:
        return f"{type_name}_{index:0{self.config.key_padding}d}"

    def run(self) -> SeedingReport:
        """
        Execute both passes and return the report.

        Raises:
            RuntimeError: If the orchestrator already ran
        """
        if self.phase is not SeedPhase.NOT_STARTED:
            raise RuntimeError(
                f"Seeding run already {self.phase.value}; create a new orchestrator"
            )

        report = SeedingReport()

        self.phase = SeedPhase.ENUMERATING_TYPES
        type_names = sorted(self.type_registry.list_types())
        logger.info(f"Starting to create sample objects for {len(type_names)} classes")

        self.phase = SeedPhase.PASS1
        schemas: dict[str, TypeSchema] = {}
        for type_name in type_names:
            schema = self.type_registry.get_schema(type_name)
            if schema is None:
                error = TypeUnavailableError(type_name)
                logger.info(f"Skipping class {type_name} - class not found")
                report.for_type(type_name).skipped = True
                report.record_failure(
                    FAILURE_TYPE_UNAVAILABLE, type_name, None, str(error)
                )
                continue
            schemas[type_name] = schema
            self._create_objects(schema, report)

        self.registry.freeze()

        self.phase = SeedPhase.PASS2
        logger.info("Adding relations between objects")
        for type_name, index, instance in self.registry.items():
            self._wire_object(schemas[type_name], index, instance, report)

        self.phase = SeedPhase.DONE
        logger.info(
            f"Finished creating sample objects: {report.total_created} created, "
            f"{report.total_reused} reused, {report.total_failed} failed"
        )
        return report

    def _create_objects(self, schema: TypeSchema, report: SeedingReport) -> None:
        type_name = schema.name
        type_report = report.for_type(type_name)
        count = self.config.instances_per_type
        logger.info(f"Creating {count} objects for class: {type_name}")

        warnings_before = len(self.allocator.warnings)
        container_id = self.allocator.allocate(type_name)
        for warning in self.allocator.warnings[warnings_before:]:
            report.warnings.append(warning)
            report.record_failure(FAILURE_CONTAINER_ALLOCATION, type_name, None, warning)
        type_report.container_id = container_id

        self.registry.start_type(type_name)
        for index in range(1, count + 1):
            key = self.instance_key(type_name, index)
            try:
                instance, reused = self._new_or_existing(schema, container_id, key)
                instance.published = True
                self.populator.populate(self.store, instance, schema, index)
                self.store.save(instance)
            except Exception as e:
                # Populators and stores are pluggable; any error stays per object.
                logger.warning(f"Error creating {type_name} #{index}: {e}")
                type_report.failed += 1
                report.record_failure(FAILURE_INSTANCE_PERSIST, type_name, index, str(e))
                continue

            self.registry.add(type_name, index, instance)
            if reused:
                type_report.reused += 1
            else:
                type_report.created += 1

        logger.info(f"Completed creating objects for class: {type_name}")

    def _new_or_existing(
        self, schema: TypeSchema, container_id: int, key: str
    ) -> tuple[Instance, bool]:
        if self.config.reuse_existing:
            existing = self.store.find_instance(container_id, key, schema)
            if existing is not None:
                logger.debug(f"Reusing existing object {key} (#{existing.id})")
                return existing, True

        instance = self.store.create_instance(schema)
        instance.key = key
        instance.parent_id = container_id
        return instance, False

    def _wire_object(
        self,
        schema: TypeSchema,
        index: int,
        instance: Instance,
        report: SeedingReport,
    ) -> None:
        try:
            self.wiring.wire(self.store, instance, schema, index, self.registry)
            self.store.save(instance)
        except Exception as e:
            if isinstance(e, RelationPersistError):
                error = e
            else:
                error = RelationPersistError(instance.key, str(e))
            logger.warning(f"Error adding relations to {schema.name} #{index}: {error}")
            report.for_type(schema.name).relation_failures += 1
            report.record_failure(
                FAILURE_RELATION_PERSIST, schema.name, index, str(error)
            )
