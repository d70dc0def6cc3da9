"""Adapter interfaces for the object store and schema reset."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from dataobject_seed.exceptions import RelationPersistError, UnknownFieldError
from dataobject_seed.models import Container, Instance, TypeSchema

OBJECT_TYPE = "object"
FOLDER_TYPE = "folder"


class ObjectStore(ABC):
    """
    Create, find and save typed objects and folders.

    Field and relation assignment is validated against the type schema
    the instance was created from.
    """

    def __init__(self):
        self._schemas: dict[str, TypeSchema] = {}

    def create_instance(self, schema: TypeSchema) -> Instance:
        """New, unsaved instance of a type."""
        self._schemas[schema.name] = schema
        return Instance(type_name=schema.name, class_id=schema.store_id)

    def set_field(self, instance: Instance, name: str, value: Any) -> None:
        schema = self._schemas.get(instance.type_name)
        if schema is None or not schema.has_field(name):
            raise UnknownFieldError(name, instance.type_name)
        instance.fields[name] = value

    def set_relation(
        self, instance: Instance, name: str, value: Instance | list[Instance]
    ) -> None:
        """
        Assign a relation field.

        Raises:
            UnknownFieldError: If the type does not declare the relation
            RelationPersistError: If a target has not been saved yet
        """
        schema = self._schemas.get(instance.type_name)
        if schema is None or not schema.has_relation(name):
            raise UnknownFieldError(name, instance.type_name)
        targets = value if isinstance(value, list) else [value]
        for target in targets:
            if target.id is None:
                raise RelationPersistError(
                    instance.key,
                    f"relation '{name}' targets unsaved object '{target.key}'",
                )
        instance.relations[name] = list(value) if isinstance(value, list) else value

    @abstractmethod
    def save(self, instance: Instance) -> Instance:
        """
        Insert or update an instance with its fields and relations.

        Raises:
            InstancePersistError: If the store rejects the object
        """

    @abstractmethod
    def find_instance(
        self, parent_id: int, key: str, schema: TypeSchema
    ) -> Instance | None:
        """Existing object of ``schema`` with ``key`` directly under ``parent_id``."""

    @abstractmethod
    def find_container(self, parent_id: int, key: str) -> Container | None:
        """
        Folder with ``key`` directly under ``parent_id``.

        Raises:
            ContainerAllocationError: If the lookup fails
        """

    @abstractmethod
    def create_container(self, parent_id: int, key: str) -> Container:
        """
        Create a folder under ``parent_id``.

        Raises:
            ContainerAllocationError: If the folder cannot be created
        """

    @abstractmethod
    def get_container(self, container_id: int) -> Container | None:
        """Folder by id."""


@dataclass(frozen=True)
class ResetStatement:
    """
    One statement of a reset plan.

    Attributes:
        step: Step name (disable_integrity, truncate, delete_dependencies,
            delete_tree_locks, insert_root, resync_ids, enable_integrity)
        sql: Raw SQL text
        params: Query parameters
        table: Target table of truncate steps
    """

    step: str
    sql: str
    params: dict[str, Any] = field(default_factory=dict)
    table: str | None = None


class SchemaResetAdapter(ABC):
    """Low-level storage access used by the reset operation."""

    @abstractmethod
    def list_table_names(self) -> list[str]:
        """All table names of the store."""

    @abstractmethod
    def truncate(self, table: str) -> None:
        """Remove every row of ``table``."""

    @abstractmethod
    def execute(self, statement: ResetStatement) -> None:
        """Run one raw statement."""
