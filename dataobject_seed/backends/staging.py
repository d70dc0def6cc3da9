"""Staging backend - in-memory object store for testing without database."""

import time
from typing import Any

from dataobject_seed.backends.base import (
    FOLDER_TYPE,
    OBJECT_TYPE,
    ObjectStore,
    ResetStatement,
    SchemaResetAdapter,
)
from dataobject_seed.exceptions import (
    ContainerAllocationError,
    InstancePersistError,
    SchemaResetError,
)
from dataobject_seed.models import Container, Instance, TypeSchema

ROOT_INDEX = 999999


class StagingObjectStore(ObjectStore):
    """
    In-memory object store for testing seeding without database.

    Simulates the relational store layout:
    - ``objects`` holds the tree (folders and objects, sequential ids)
    - ``object_store_<class>`` / ``object_query_<class>`` hold field values
    - ``object_relations_<class>`` holds relation rows
    - ``dependencies`` and ``tree_locks`` hold bookkeeping rows
    - duplicate keys under the same parent are rejected

    Use case: fast unit tests, offline dry runs, prototyping strategies.
    """

    def __init__(self, root_id: int = 1):
        """Initialize store with only the root folder."""
        super().__init__()
        self.root_id = root_id
        self.integrity_enforced = True
        self._tables: dict[str, list[dict[str, Any]]] = {}
        self._next_id = root_id
        self.clear()

    # -- ObjectStore -----------------------------------------------------

    def save(self, instance: Instance) -> Instance:
        label = instance.key or "<unkeyed>"
        if not instance.key:
            raise InstancePersistError(label, "object has no key")
        if instance.parent_id is None:
            raise InstancePersistError(label, "object has no parent")

        parent = self._row(instance.parent_id)
        if parent is None:
            raise InstancePersistError(
                label, f"parent #{instance.parent_id} does not exist"
            )

        clash = self._child_row(instance.parent_id, instance.key)
        if clash is not None and clash["id"] != instance.id:
            raise InstancePersistError(
                label, f"key already exists under {self._full_path(parent)}"
            )

        now = int(time.time())
        if instance.id is None:
            row = self._insert_object_row(
                parent=parent,
                key=instance.key,
                type_=OBJECT_TYPE,
                published=instance.published,
                class_id=instance.class_id,
                class_name=instance.type_name,
                timestamp=now,
            )
            instance.id = row["id"]
        else:
            row = self._row(instance.id)
            if row is None:
                raise InstancePersistError(
                    label, f"object #{instance.id} no longer exists"
                )
            row.update(
                parent_id=instance.parent_id,
                key=instance.key,
                path=self._full_path(parent),
                published=instance.published,
                modification_date=now,
                version_count=row["version_count"] + 1,
            )

        self._store_fields(instance)
        self._store_relations(instance)
        return instance

    def find_instance(
        self, parent_id: int, key: str, schema: TypeSchema
    ) -> Instance | None:
        self._schemas[schema.name] = schema
        row = self._child_row(parent_id, key)
        if row is None or row["type"] != OBJECT_TYPE:
            return None
        if row["class_id"] != schema.store_id:
            return None

        stored = self._by_oo_id(f"object_store_{schema.store_id}", row["id"])
        fields = {k: v for k, v in (stored or {}).items() if k != "oo_id"}
        return Instance(
            type_name=schema.name,
            class_id=schema.store_id,
            key=row["key"],
            parent_id=row["parent_id"],
            published=row["published"],
            id=row["id"],
            fields=fields,
        )

    def find_container(self, parent_id: int, key: str) -> Container | None:
        row = self._child_row(parent_id, key)
        if row is None or row["type"] != FOLDER_TYPE:
            return None
        return self._container(row)

    def create_container(self, parent_id: int, key: str) -> Container:
        parent = self._row(parent_id)
        if parent is None:
            raise ContainerAllocationError(key, parent_id, "parent does not exist")
        if self._child_row(parent_id, key) is not None:
            raise ContainerAllocationError(key, parent_id, "key already exists")

        row = self._insert_object_row(
            parent=parent,
            key=key,
            type_=FOLDER_TYPE,
            published=True,
            timestamp=int(time.time()),
        )
        return self._container(row)

    def get_container(self, container_id: int) -> Container | None:
        row = self._row(container_id)
        if row is None or row["type"] != FOLDER_TYPE:
            return None
        return self._container(row)

    # -- Inspection ------------------------------------------------------

    def get_data(self, table: str) -> list[dict[str, Any]]:
        """
        Get in-memory rows for inspection.

        Args:
            table: Table name

        Returns:
            List of row dicts for the table
        """
        return self._tables.get(table, [])

    def get_object(self, object_id: int) -> dict[str, Any] | None:
        return self._row(object_id)

    def objects_of(self, type_name: str) -> list[dict[str, Any]]:
        """Object rows of a type, in id order."""
        return [
            row
            for row in self._tables["objects"]
            if row["type"] == OBJECT_TYPE and row["class_name"] == type_name
        ]

    def relation_targets(self, instance: Instance, field: str) -> list[int]:
        """Target ids stored for a relation field, in position order."""
        rows = [
            row
            for row in self.get_data(f"object_relations_{instance.class_id}")
            if row["src_id"] == instance.id and row["fieldname"] == field
        ]
        return [row["dest_id"] for row in sorted(rows, key=lambda r: r["index"])]

    def clear(self) -> None:
        """Drop all data and recreate the root folder."""
        self._tables = {"objects": [], "dependencies": [], "tree_locks": []}
        self.insert_root(
            id=self.root_id,
            creation_date=int(time.time()),
            modification_date=int(time.time()),
        )
        self.resync_ids()

    # -- Low-level table access (used by StagingSchemaAdapter) -----------

    def table_names(self) -> list[str]:
        return sorted(self._tables)

    def truncate_table(self, table: str) -> None:
        if table not in self._tables:
            raise ValueError(f"Table '{table}' does not exist")
        self._tables[table] = []

    def delete_rows(self, table: str, predicate) -> int:
        rows = self._tables.get(table, [])
        kept = [row for row in rows if not predicate(row)]
        self._tables[table] = kept
        return len(rows) - len(kept)

    def insert_root(self, **values: Any) -> None:
        row = {
            "id": self.root_id,
            "parent_id": 0,
            "type": FOLDER_TYPE,
            "key": "",
            "path": "/",
            "index": ROOT_INDEX,
            "published": True,
            "creation_date": 0,
            "modification_date": 0,
            "user_owner": 1,
            "user_modification": 1,
            "class_id": None,
            "class_name": None,
            "children_sort_by": None,
            "children_sort_order": None,
            "version_count": 0,
        }
        row.update(values)
        if self._row(row["id"]) is not None:
            raise ValueError(f"Object #{row['id']} already exists")
        self._tables["objects"].append(row)

    def resync_ids(self) -> None:
        """Continue the id sequence after the highest stored id."""
        ids = [row["id"] for row in self._tables["objects"]]
        self._next_id = max(ids, default=0) + 1

    # -- Internals -------------------------------------------------------

    def _row(self, object_id: int) -> dict[str, Any] | None:
        for row in self._tables["objects"]:
            if row["id"] == object_id:
                return row
        return None

    def _child_row(self, parent_id: int, key: str) -> dict[str, Any] | None:
        for row in self._tables["objects"]:
            if row["parent_id"] == parent_id and row["key"] == key:
                return row
        return None

    def _full_path(self, row: dict[str, Any]) -> str:
        if not row["key"]:
            return row["path"]
        return f"{row['path']}{row['key']}/"

    def _container(self, row: dict[str, Any]) -> Container:
        return Container(
            id=row["id"], parent_id=row["parent_id"], key=row["key"], path=row["path"]
        )

    def _insert_object_row(
        self,
        parent: dict[str, Any],
        key: str,
        type_: str,
        published: bool,
        timestamp: int,
        class_id: str | None = None,
        class_name: str | None = None,
    ) -> dict[str, Any]:
        row = {
            "id": self._next_id,
            "parent_id": parent["id"],
            "type": type_,
            "key": key,
            "path": self._full_path(parent),
            "index": 0,
            "published": published,
            "creation_date": timestamp,
            "modification_date": timestamp,
            "user_owner": 0,
            "user_modification": 0,
            "class_id": class_id,
            "class_name": class_name,
            "children_sort_by": None,
            "children_sort_order": None,
            "version_count": 1,
        }
        self._next_id += 1
        self._tables["objects"].append(row)
        return row

    def _by_oo_id(self, table: str, object_id: int) -> dict[str, Any] | None:
        for row in self._tables.get(table, []):
            if row["oo_id"] == object_id:
                return row
        return None

    def _store_fields(self, instance: Instance) -> None:
        for prefix in ("object_store_", "object_query_"):
            table = f"{prefix}{instance.class_id}"
            self.delete_rows(table, lambda row: row["oo_id"] == instance.id)
            self._tables.setdefault(table, []).append(
                {"oo_id": instance.id, **instance.fields}
            )

    def _store_relations(self, instance: Instance) -> None:
        if not instance.relations:
            return

        table = f"object_relations_{instance.class_id}"
        fields = set(instance.relations)
        self.delete_rows(
            table,
            lambda row: row["src_id"] == instance.id and row["fieldname"] in fields,
        )
        self.delete_rows(
            "dependencies",
            lambda row: row["sourcetype"] == OBJECT_TYPE
            and row["sourceid"] == instance.id,
        )

        rows = self._tables.setdefault(table, [])
        target_ids: list[int] = []
        for field, value in instance.relations.items():
            targets = value if isinstance(value, list) else [value]
            for position, target in enumerate(targets, start=1):
                rows.append(
                    {
                        "src_id": instance.id,
                        "dest_id": target.id,
                        "type": OBJECT_TYPE,
                        "fieldname": field,
                        "index": position,
                    }
                )
                if target.id not in target_ids:
                    target_ids.append(target.id)

        for target_id in target_ids:
            self._tables["dependencies"].append(
                {
                    "sourcetype": OBJECT_TYPE,
                    "sourceid": instance.id,
                    "targettype": OBJECT_TYPE,
                    "targetid": target_id,
                }
            )


class StagingSchemaAdapter(SchemaResetAdapter):
    """Reset adapter over a StagingObjectStore."""

    def __init__(self, store: StagingObjectStore):
        self.store = store
        self.executed: list[ResetStatement] = []

    def list_table_names(self) -> list[str]:
        return self.store.table_names()

    def truncate(self, table: str) -> None:
        try:
            self.store.truncate_table(table)
        except ValueError as e:
            raise SchemaResetError(f"truncate {table}", str(e)) from e

    def execute(self, statement: ResetStatement) -> None:
        self.executed.append(statement)
        step = statement.step

        if step == "disable_integrity":
            self.store.integrity_enforced = False
        elif step == "enable_integrity":
            self.store.integrity_enforced = True
        elif step == "delete_dependencies":
            self.store.delete_rows(
                "dependencies",
                lambda row: row["sourcetype"] == OBJECT_TYPE
                or row["targettype"] == OBJECT_TYPE,
            )
        elif step == "delete_tree_locks":
            self.store.delete_rows(
                "tree_locks", lambda row: row.get("type") == OBJECT_TYPE
            )
        elif step == "insert_root":
            try:
                self.store.insert_root(**statement.params)
            except ValueError as e:
                raise SchemaResetError(step, str(e)) from e
        elif step == "resync_ids":
            self.store.resync_ids()
        else:
            raise SchemaResetError(step, "unsupported reset step")
