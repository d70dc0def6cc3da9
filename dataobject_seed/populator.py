"""Attribute populator: scalar field values for the first seeding pass."""

import logging
from datetime import datetime
from typing import Any

from dataobject_seed.backends.base import ObjectStore
from dataobject_seed.generators.base import NamePopulator
from dataobject_seed.generators.faker_fill import FakerFiller
from dataobject_seed.generators.registry import StrategyRegistry
from dataobject_seed.models import Instance, TypeSchema

logger = logging.getLogger(__name__)


class AttributePopulator:
    """
    Assign deterministic scalar values to new instances.

    Values come from the populator registered for the type (or the
    name fallback). Only fields declared by the type schema are kept;
    relation fields are never touched here.
    """

    def __init__(
        self,
        strategies: StrategyRegistry,
        reference_date: datetime | None = None,
        fill_unmapped: bool = False,
    ):
        """
        Initialize populator.

        Args:
            strategies: Registry of per-type strategies
            reference_date: Anchor for date fields (defaults to now)
            fill_unmapped: Fill declared fields without a value using Faker
        """
        self.strategies = strategies
        self.reference_date = reference_date or datetime.now()
        self.filler = FakerFiller() if fill_unmapped else None
        self._fallback = NamePopulator()

    def assignments(
        self, type_name: str, index: int, schema: TypeSchema
    ) -> dict[str, Any]:
        """
        Compute field assignments for one instance without touching the store.

        Args:
            type_name: Type being populated
            index: Instance index (1-based)
            schema: Capability descriptor of the type

        Returns:
            Mapping of declared field name to value
        """
        pair = self.strategies.get(type_name)
        populator = pair.populator if pair else self._fallback
        values = populator.populate(
            index, type_name=type_name, reference_date=self.reference_date
        )

        assigned = {}
        for name, value in values.items():
            if schema.has_field(name):
                assigned[name] = value
            else:
                logger.debug(f"{type_name} does not declare '{name}', skipping")

        if self.filler is not None:
            assigned.update(
                self.filler.fill(schema, index, assigned, self.reference_date)
            )
        return assigned

    def populate(
        self,
        store: ObjectStore,
        instance: Instance,
        schema: TypeSchema,
        index: int,
    ) -> None:
        """Apply the assignments of ``index`` to ``instance``."""
        for name, value in self.assignments(schema.name, index, schema).items():
            store.set_field(instance, name, value)
