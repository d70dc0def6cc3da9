"""Backend implementations of the object store and reset adapters."""

from dataobject_seed.backends.base import ObjectStore, ResetStatement, SchemaResetAdapter
from dataobject_seed.backends.direct import PostgresObjectStore, PostgresSchemaAdapter
from dataobject_seed.backends.staging import StagingObjectStore, StagingSchemaAdapter

__all__ = [
    "ObjectStore",
    "PostgresObjectStore",
    "PostgresSchemaAdapter",
    "ResetStatement",
    "SchemaResetAdapter",
    "StagingObjectStore",
    "StagingSchemaAdapter",
]
