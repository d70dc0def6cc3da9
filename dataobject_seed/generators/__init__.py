"""Per-type populators and the strategy registry."""

from dataobject_seed.generators.base import BasePopulator, NamePopulator
from dataobject_seed.generators.faker_fill import FakerFiller
from dataobject_seed.generators.registry import StrategyPair, StrategyRegistry

__all__ = [
    "BasePopulator",
    "FakerFiller",
    "NamePopulator",
    "StrategyPair",
    "StrategyRegistry",
]
