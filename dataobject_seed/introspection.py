"""Type registry backed by class definitions stored in PostgreSQL."""

import json
import logging

from psycopg import Connection

from dataobject_seed.models import FieldSpec, TypeSchema
from dataobject_seed.type_registry import TypeRegistry

logger = logging.getLogger(__name__)


class PostgresTypeRegistry(TypeRegistry):
    """
    Read type definitions from the ``classes`` table (cached).

    A class whose ``object_store_<id>`` table is missing is listed but
    reported as unavailable.
    """

    def __init__(self, conn: Connection):
        self.conn = conn
        self._schema_cache: dict[str, TypeSchema | None] = {}
        self._class_ids: dict[str, str] | None = None

    def list_types(self) -> list[str]:
        return list(self._load_class_ids())

    def get_schema(self, type_name: str) -> TypeSchema | None:
        if type_name in self._schema_cache:
            return self._schema_cache[type_name]

        class_id = self._load_class_ids().get(type_name)
        schema = None
        if class_id is not None and self._store_table_exists(class_id):
            schema = self._load_schema(type_name, class_id)
        elif class_id is not None:
            logger.warning(
                f"Class '{type_name}' has no table object_store_{class_id}"
            )

        self._schema_cache[type_name] = schema
        return schema

    def clear_cache(self) -> None:
        """Clear cached class definitions."""
        self._schema_cache.clear()
        self._class_ids = None

    def _load_class_ids(self) -> dict[str, str]:
        if self._class_ids is None:
            with self.conn.cursor() as cur:
                cur.execute("SELECT name, id FROM classes ORDER BY name")
                self._class_ids = {name: class_id for name, class_id in cur.fetchall()}
        return self._class_ids

    def _store_table_exists(self, class_id: str) -> bool:
        with self.conn.cursor() as cur:
            cur.execute(
                """
                SELECT EXISTS(
                    SELECT 1 FROM information_schema.tables
                    WHERE table_schema = current_schema() AND table_name = %s
                )
                """,
                (f"object_store_{class_id}",),
            )
            return cur.fetchone()[0]

    def _load_schema(self, type_name: str, class_id: str) -> TypeSchema:
        with self.conn.cursor() as cur:
            cur.execute("SELECT definition FROM classes WHERE id = %s", (class_id,))
            definition = cur.fetchone()[0]

        # JSONB comes back decoded; TEXT columns need parsing
        if isinstance(definition, str):
            definition = json.loads(definition)

        fields = definition.get("fields") or {}
        return TypeSchema(
            name=type_name,
            class_id=class_id,
            fields=tuple(FieldSpec(name, kind) for name, kind in fields.items()),
            relations=tuple(definition.get("relations") or ()),
        )
