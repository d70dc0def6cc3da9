"""Base populator interface."""

from abc import ABC, abstractmethod
from typing import Any


class BasePopulator(ABC):
    """
    Base class for per-type attribute populators.

    A populator maps a 1-based instance index to scalar field values.
    It must be pure: the same index and context always give the same
    values, and no other instances are consulted. Values for fields the
    target type does not declare are dropped by the caller.

    Example:
        >>> class SKUPopulator(BasePopulator):
        ...     def populate(self, index, **context):
        ...         return {"sku": f"SKU-{index:06d}"}
        >>>
        >>> register_strategy("Product", SKUPopulator())
    """

    @abstractmethod
    def populate(self, index: int, **context: Any) -> dict[str, Any]:
        """
        Compute field values for one instance.

        Args:
            index: Instance index (1-based)
            **context: Additional context:
                - type_name: Type being populated
                - reference_date: Datetime anchoring date fields

        Returns:
            Mapping of field name to value
        """
        pass


class NamePopulator(BasePopulator):
    """Fallback for types without a dedicated populator."""

    def populate(self, index: int, **context: Any) -> dict[str, Any]:
        return {"name": f"{context.get('type_name', 'Object')} {index}"}
