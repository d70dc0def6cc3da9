"""Type registry adapters: enumerate entity types and their capabilities."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable

from dataobject_seed.models import FieldSpec, TypeSchema

logger = logging.getLogger(__name__)


class TypeRegistry(ABC):
    """
    Runtime registry of entity type definitions.

    A type may be listed but have no runtime definition (``get_schema``
    returns None); the orchestrator skips such types.
    """

    @abstractmethod
    def list_types(self) -> list[str]:
        """Names of all known types."""

    @abstractmethod
    def get_schema(self, type_name: str) -> TypeSchema | None:
        """Capability descriptor for a type, or None if unavailable."""

    def has_field(self, type_name: str, field_name: str) -> bool:
        """Check whether a type declares a scalar field or relation."""
        schema = self.get_schema(type_name)
        if schema is None:
            return False
        return schema.has_field(field_name) or schema.has_relation(field_name)


class StaticTypeRegistry(TypeRegistry):
    """
    Registry backed by an in-memory descriptor table.

    Example:
        >>> registry = StaticTypeRegistry([
        ...     TypeSchema("Customer", fields=(FieldSpec("firstname"),)),
        ... ])
        >>> registry.has_field("Customer", "firstname")
        True
    """

    def __init__(
        self,
        schemas: Iterable[TypeSchema] = (),
        unavailable: Iterable[str] = (),
    ):
        self._schemas: dict[str, TypeSchema] = {}
        self._unavailable: list[str] = []
        for schema in schemas:
            self.register(schema)
        for name in unavailable:
            self.register_unavailable(name)

    def register(self, schema: TypeSchema) -> None:
        self._schemas[schema.name] = schema
        if schema.name in self._unavailable:
            self._unavailable.remove(schema.name)

    def register_unavailable(self, type_name: str) -> None:
        """List a type without a runtime definition."""
        if type_name not in self._schemas and type_name not in self._unavailable:
            self._unavailable.append(type_name)

    def list_types(self) -> list[str]:
        return list(self._schemas) + list(self._unavailable)

    def get_schema(self, type_name: str) -> TypeSchema | None:
        return self._schemas.get(type_name)

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "StaticTypeRegistry":
        """
        Build a registry from a descriptor mapping.

        Format:
            types:
              Customer:
                class_id: customer
                fields: {firstname: text, email: email}
                relations: [company]
            unavailable: [LegacyType]

        Args:
            config: Parsed descriptor mapping

        Returns:
            StaticTypeRegistry instance

        Raises:
            ValueError: If the descriptor is malformed
        """
        types = config.get("types")
        if not isinstance(types, dict):
            raise ValueError("Type descriptor needs a 'types' mapping")

        schemas = []
        for name, body in types.items():
            body = body or {}
            fields = body.get("fields") or {}
            if not isinstance(fields, dict):
                raise ValueError(
                    f"Type '{name}': 'fields' must map field names to kinds"
                )
            schemas.append(
                TypeSchema(
                    name=name,
                    class_id=body.get("class_id"),
                    fields=tuple(
                        FieldSpec(field_name, kind or "text")
                        for field_name, kind in fields.items()
                    ),
                    relations=tuple(body.get("relations") or ()),
                )
            )

        return cls(schemas, unavailable=config.get("unavailable") or ())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "StaticTypeRegistry":
        """
        Load a descriptor table from a YAML file.

        Example:
            >>> registry = StaticTypeRegistry.from_yaml("types.yaml")
        """
        import yaml

        path = Path(path)
        with open(path) as f:
            config = yaml.safe_load(f) or {}

        logger.info(f"Loaded type descriptors from {path}")
        return cls.from_dict(config)

    @classmethod
    def from_json(cls, path: str | Path) -> "StaticTypeRegistry":
        """Load a descriptor table from a JSON file."""
        path = Path(path)
        with open(path) as f:
            config = json.load(f)

        logger.info(f"Loaded type descriptors from {path}")
        return cls.from_dict(config)

    @classmethod
    def from_file(cls, path: str | Path) -> "StaticTypeRegistry":
        """Load from YAML or JSON, chosen by file suffix."""
        path = Path(path)
        if path.suffix == ".json":
            return cls.from_json(path)
        return cls.from_yaml(path)

    def to_dict(self) -> dict[str, Any]:
        """Descriptor mapping accepted by from_dict()."""
        types = {}
        for schema in self._schemas.values():
            body: dict[str, Any] = {
                "fields": {f.name: f.kind for f in schema.fields},
                "relations": list(schema.relations),
            }
            if schema.class_id:
                body["class_id"] = schema.class_id
            types[schema.name] = body
        return {"types": types, "unavailable": list(self._unavailable)}
