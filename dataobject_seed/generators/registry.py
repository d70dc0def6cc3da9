"""Strategy registry: type name → (populator, relation table)."""

from typing import NamedTuple

from dataobject_seed.generators.base import BasePopulator
from dataobject_seed.models import RelationSpec


class StrategyPair(NamedTuple):
    """Population strategy and outgoing relation table of one type."""

    populator: BasePopulator
    relations: tuple[RelationSpec, ...] = ()


class StrategyRegistry:
    """Registry of per-type seeding strategies."""

    def __init__(self):
        self._strategies: dict[str, StrategyPair] = {}

    @classmethod
    def with_builtin(cls) -> "StrategyRegistry":
        """Registry preloaded with the booking catalog strategies."""
        from dataobject_seed.generators.booking import (
            BOOKING_POPULATORS,
            BOOKING_RELATIONS,
        )

        registry = cls()
        for type_name, populator_class in BOOKING_POPULATORS.items():
            registry.register(
                type_name,
                populator_class(),
                BOOKING_RELATIONS.get(type_name, ()),
            )
        return registry

    def register(
        self,
        type_name: str,
        populator: BasePopulator,
        relations: tuple[RelationSpec, ...] | list[RelationSpec] = (),
    ) -> None:
        """
        Register the strategy pair of a type.

        Args:
            type_name: Type name (e.g. "Customer")
            populator: Populator instance (must have populate method)
            relations: Outgoing relation table

        Raises:
            ValueError: If populator doesn't have populate method
        """
        if not hasattr(populator, "populate"):
            raise ValueError(
                f"Populator must have 'populate' method. "
                f"{type(populator).__name__} is missing it."
            )
        self._strategies[type_name] = StrategyPair(populator, tuple(relations))

    def get(self, type_name: str) -> StrategyPair | None:
        return self._strategies.get(type_name)

    def relations_for(self, type_name: str) -> tuple[RelationSpec, ...]:
        pair = self._strategies.get(type_name)
        return pair.relations if pair else ()

    def list_types(self) -> list[str]:
        return list(self._strategies.keys())

    def clear(self) -> None:
        """Clear all registered strategies (for testing)."""
        self._strategies.clear()


# Global registry instance
_registry = StrategyRegistry.with_builtin()


def default_registry() -> StrategyRegistry:
    """The process-wide registry used when none is passed explicitly."""
    return _registry


def register_strategy(
    type_name: str,
    populator: BasePopulator,
    relations: tuple[RelationSpec, ...] | list[RelationSpec] = (),
) -> None:
    """
    Register a strategy pair (user-facing API).

    Example:
        >>> from dataobject_seed import BasePopulator, RelationSpec, register_strategy
        >>>
        >>> class InvoicePopulator(BasePopulator):
        ...     def populate(self, index, **context):
        ...         return {"number": f"INV-{index:05d}"}
        >>>
        >>> register_strategy(
        ...     "Invoice", InvoicePopulator(), [RelationSpec("customer", "Customer")]
        ... )
    """
    _registry.register(type_name, populator, relations)


def get_strategy(type_name: str) -> StrategyPair | None:
    return _registry.get(type_name)


def list_strategies() -> list[str]:
    return _registry.list_types()


def reset_strategies() -> None:
    """Drop custom registrations and restore the builtin strategies."""
    builtin = StrategyRegistry.with_builtin()
    _registry.clear()
    for type_name in builtin.list_types():
        pair = builtin.get(type_name)
        _registry.register(type_name, pair.populator, pair.relations)
