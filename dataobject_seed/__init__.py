"""
dataobject-seed - Sample data for hierarchical object stores.

This package provides tools for:
- Creating cross-referenced sample objects for every class of a store
- Wiring relations deterministically between the created objects
- Resetting the store to an empty root folder
"""

__version__ = "0.1.0"

from dataobject_seed.config import Config
from dataobject_seed.generators.base import BasePopulator
from dataobject_seed.generators.registry import register_strategy
from dataobject_seed.migration import SampleDataMigration, reset, seed
from dataobject_seed.models import (
    CreatedRegistry,
    FieldSpec,
    Instance,
    RelationSpec,
    SeedingReport,
    TypeSchema,
)
from dataobject_seed.orchestrator import SeedOrchestrator

__all__ = [
    "BasePopulator",
    "Config",
    "CreatedRegistry",
    "FieldSpec",
    "Instance",
    "RelationSpec",
    "SampleDataMigration",
    "SeedOrchestrator",
    "SeedingReport",
    "TypeSchema",
    "__version__",
    "register_strategy",
    "reset",
    "seed",
]
