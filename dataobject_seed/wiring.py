"""Relation wiring engine: deterministic round-robin relations (second pass).

Targets are picked from the objects created earlier in the same run,
using only the source index and the size of the target set:

    single-valued:  ((i - 1) mod N) + 1
    multi-valued:   ((i + k - 1) mod N) + 1   for k = 0 .. min(max, N) - 1

Nothing is read from the store, so wiring has to wait until every type
finished its first pass.
"""

import logging
from typing import Any

from dataobject_seed.backends.base import ObjectStore
from dataobject_seed.generators.registry import StrategyRegistry
from dataobject_seed.models import CreatedRegistry, Instance, RelationSpec, TypeSchema

logger = logging.getLogger(__name__)


def round_robin_indices(index: int, size: int, limit: int = 1) -> list[int]:
    """
    Target indices for a source index over a target set of ``size``.

    Args:
        index: Source instance index (1-based)
        size: Number of created target instances
        limit: Maximum number of targets

    Returns:
        Up to ``min(limit, size)`` indices in [1, size]; empty when size is 0

    Example:
        >>> round_robin_indices(9, 10, limit=3)
        [9, 10, 1]
    """
    if size <= 0:
        return []
    return [((index + k - 1) % size) + 1 for k in range(min(limit, size))]


class RelationWiringEngine:
    """Compute and apply relation assignments from the run registry."""

    def __init__(self, strategies: StrategyRegistry):
        self.strategies = strategies

    def plan(
        self,
        type_name: str,
        index: int,
        registry: CreatedRegistry,
        schema: TypeSchema | None = None,
    ) -> dict[str, Any]:
        """
        Select relation targets for one instance.

        Relations whose target type has no created instances, or which
        the source schema does not declare, are left out.

        Args:
            type_name: Source type
            index: Source instance index (1-based)
            registry: Objects created in this run
            schema: Source type descriptor (skips the capability check if None)

        Returns:
            Mapping of relation field to an Instance (single-valued) or a
            list of Instances (multi-valued)
        """
        selections: dict[str, Any] = {}
        for relation in self.strategies.relations_for(type_name):
            if schema is not None and not schema.has_relation(relation.field):
                continue
            targets = self._select(relation, index, registry)
            if not targets:
                continue
            selections[relation.field] = targets if relation.is_many else targets[0]
        return selections

    def wire(
        self,
        store: ObjectStore,
        instance: Instance,
        schema: TypeSchema,
        index: int,
        registry: CreatedRegistry,
    ) -> dict[str, Any]:
        """Apply the planned relations to ``instance``; returns the plan."""
        selections = self.plan(schema.name, index, registry, schema)
        for field, value in selections.items():
            store.set_relation(instance, field, value)
        if selections:
            logger.debug(
                f"Wired {instance.key}: "
                + ", ".join(f"{field}={_describe(v)}" for field, v in selections.items())
            )
        return selections

    def _select(
        self, relation: RelationSpec, index: int, registry: CreatedRegistry
    ) -> list[Instance]:
        size = registry.count(relation.target)
        limit = relation.max_targets if relation.is_many else 1
        targets = []
        for target_index in round_robin_indices(index, size, limit):
            # Indices of instances that failed to persist are absent
            target = registry.get(relation.target, target_index)
            if target is not None:
                targets.append(target)
        return targets


def _describe(value: Any) -> str:
    if isinstance(value, list):
        return "[" + ", ".join(v.key for v in value) + "]"
    return value.key
