"""Direct backend - object store and reset adapter on PostgreSQL."""

import logging
import time
from typing import Any

import psycopg
from psycopg import Connection, sql

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

logger = logging.getLogger(__name__)

CONTAINER_COLUMNS = 'id, parent_id, "key", path'


class PostgresObjectStore(ObjectStore):
    """
    Object store over the ``objects`` tree table and per-class tables.

    Every save runs in its own transaction: committed on success, rolled
    back on failure so one rejected object leaves no partial rows.
    """

    def __init__(self, conn: Connection):
        """
        Initialize store.

        Args:
            conn: PostgreSQL connection (autocommit off)
        """
        super().__init__()
        self.conn = conn

    def save(self, instance: Instance) -> Instance:
        is_new = instance.id is None
        try:
            with self.conn.cursor() as cur:
                parent_path = self._parent_path(cur, instance.parent_id)
                now = int(time.time())
                if is_new:
                    cur.execute(
                        """
                        INSERT INTO objects (
                            parent_id, type, "key", path, "index", published,
                            creation_date, modification_date, user_owner,
                            user_modification, class_id, class_name, version_count
                        )
                        VALUES (%s, %s, %s, %s, 0, %s, %s, %s, 0, 0, %s, %s, 1)
                        RETURNING id
                        """,
                        (
                            instance.parent_id,
                            OBJECT_TYPE,
                            instance.key,
                            parent_path,
                            instance.published,
                            now,
                            now,
                            instance.class_id,
                            instance.type_name,
                        ),
                    )
                    instance.id = cur.fetchone()[0]
                else:
                    cur.execute(
                        """
                        UPDATE objects
                        SET parent_id = %s, "key" = %s, path = %s, published = %s,
                            modification_date = %s, version_count = version_count + 1
                        WHERE id = %s
                        """,
                        (
                            instance.parent_id,
                            instance.key,
                            parent_path,
                            instance.published,
                            now,
                            instance.id,
                        ),
                    )
                self._write_fields(cur, instance)
                self._write_relations(cur, instance)
            self.conn.commit()
        except (psycopg.Error, LookupError) as e:
            self.conn.rollback()
            if is_new:
                instance.id = None
            raise InstancePersistError(instance.key, str(e).strip()) from e
        return instance

    def find_instance(
        self, parent_id: int, key: str, schema: TypeSchema
    ) -> Instance | None:
        self._schemas[schema.name] = schema
        try:
            with self.conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT id, published FROM objects
                    WHERE type = %s AND parent_id = %s AND "key" = %s AND class_id = %s
                    LIMIT 1
                    """,
                    (OBJECT_TYPE, parent_id, key, schema.store_id),
                )
                row = cur.fetchone()
        except psycopg.Error as e:
            self.conn.rollback()
            raise InstancePersistError(key, f"lookup failed: {e}") from e

        if row is None:
            return None
        return Instance(
            type_name=schema.name,
            class_id=schema.store_id,
            key=key,
            parent_id=parent_id,
            published=row[1],
            id=row[0],
        )

    def find_container(self, parent_id: int, key: str) -> Container | None:
        try:
            with self.conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT {CONTAINER_COLUMNS} FROM objects
                    WHERE type = %s AND parent_id = %s AND "key" = %s
                    LIMIT 1
                    """,
                    (FOLDER_TYPE, parent_id, key),
                )
                row = cur.fetchone()
        except psycopg.Error as e:
            self.conn.rollback()
            raise ContainerAllocationError(key, parent_id, str(e).strip()) from e
        return Container(*row) if row else None

    def create_container(self, parent_id: int, key: str) -> Container:
        now = int(time.time())
        try:
            with self.conn.cursor() as cur:
                parent_path = self._parent_path(cur, parent_id)
                cur.execute(
                    f"""
                    INSERT INTO objects (
                        parent_id, type, "key", path, "index", published,
                        creation_date, modification_date, user_owner,
                        user_modification, version_count
                    )
                    VALUES (%s, %s, %s, %s, 0, true, %s, %s, 0, 0, 1)
                    RETURNING {CONTAINER_COLUMNS}
                    """,
                    (parent_id, FOLDER_TYPE, key, parent_path, now, now),
                )
                row = cur.fetchone()
            self.conn.commit()
        except (psycopg.Error, LookupError) as e:
            self.conn.rollback()
            raise ContainerAllocationError(key, parent_id, str(e).strip()) from e
        return Container(*row)

    def get_container(self, container_id: int) -> Container | None:
        with self.conn.cursor() as cur:
            cur.execute(
                f"SELECT {CONTAINER_COLUMNS} FROM objects WHERE id = %s AND type = %s",
                (container_id, FOLDER_TYPE),
            )
            row = cur.fetchone()
        return Container(*row) if row else None

    def _parent_path(self, cur: psycopg.Cursor, parent_id: int | None) -> str:
        """Full path of the parent, used as the child's path column."""
        cur.execute('SELECT path, "key" FROM objects WHERE id = %s', (parent_id,))
        row = cur.fetchone()
        if row is None:
            raise LookupError(f"parent #{parent_id} does not exist")
        path, key = row
        return f"{path}{key}/" if key else path

    def _write_fields(self, cur: psycopg.Cursor, instance: Instance) -> None:
        columns = ["oo_id", *instance.fields]
        values = [instance.id, *instance.fields.values()]
        updates = [
            sql.SQL("{} = EXCLUDED.{}").format(sql.Identifier(c), sql.Identifier(c))
            for c in instance.fields
        ]
        conflict = (
            sql.SQL("DO UPDATE SET {}").format(sql.SQL(", ").join(updates))
            if updates
            else sql.SQL("DO NOTHING")
        )
        for prefix in ("object_store_", "object_query_"):
            cur.execute(
                sql.SQL(
                    "INSERT INTO {} ({}) VALUES ({}) ON CONFLICT (oo_id) {}"
                ).format(
                    sql.Identifier(f"{prefix}{instance.class_id}"),
                    sql.SQL(", ").join(map(sql.Identifier, columns)),
                    sql.SQL(", ").join(sql.Placeholder() * len(columns)),
                    conflict,
                ),
                values,
            )

    def _write_relations(self, cur: psycopg.Cursor, instance: Instance) -> None:
        if not instance.relations:
            return

        table = sql.Identifier(f"object_relations_{instance.class_id}")
        rows: list[tuple[Any, ...]] = []
        target_ids: list[int] = []
        for field, value in instance.relations.items():
            cur.execute(
                sql.SQL("DELETE FROM {} WHERE src_id = %s AND fieldname = %s").format(
                    table
                ),
                (instance.id, field),
            )
            targets = value if isinstance(value, list) else [value]
            for position, target in enumerate(targets, start=1):
                rows.append((instance.id, target.id, OBJECT_TYPE, field, position))
                if target.id not in target_ids:
                    target_ids.append(target.id)

        cur.executemany(
            sql.SQL(
                'INSERT INTO {} (src_id, dest_id, type, fieldname, "index") '
                "VALUES (%s, %s, %s, %s, %s)"
            ).format(table),
            rows,
        )
        cur.execute(
            "DELETE FROM dependencies WHERE sourcetype = %s AND sourceid = %s",
            (OBJECT_TYPE, instance.id),
        )
        cur.executemany(
            "INSERT INTO dependencies (sourcetype, sourceid, targettype, targetid) "
            "VALUES (%s, %s, %s, %s)",
            [(OBJECT_TYPE, instance.id, OBJECT_TYPE, t) for t in target_ids],
        )


class PostgresSchemaAdapter(SchemaResetAdapter):
    """Reset adapter executing raw statements; each statement is committed."""

    def __init__(self, conn: Connection):
        self.conn = conn

    def list_table_names(self) -> list[str]:
        with self.conn.cursor() as cur:
            cur.execute(
                """
                SELECT table_name
                FROM information_schema.tables
                WHERE table_schema = current_schema()
                  AND table_type = 'BASE TABLE'
                ORDER BY table_name
                """
            )
            return [row[0] for row in cur.fetchall()]

    def truncate(self, table: str) -> None:
        try:
            with self.conn.cursor() as cur:
                cur.execute(sql.SQL("TRUNCATE TABLE {}").format(sql.Identifier(table)))
            self.conn.commit()
        except psycopg.Error as e:
            self.conn.rollback()
            raise SchemaResetError(f"truncate {table}", str(e).strip()) from e

    def execute(self, statement: ResetStatement) -> None:
        logger.debug(f"Executing reset step {statement.step}")
        try:
            with self.conn.cursor() as cur:
                cur.execute(statement.sql, statement.params or None)
            self.conn.commit()
        except psycopg.Error as e:
            self.conn.rollback()
            raise SchemaResetError(statement.step, str(e).strip()) from e
