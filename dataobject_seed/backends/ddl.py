"""Table layout of the PostgreSQL object store."""

import json
import logging
import time
from typing import Iterable

from psycopg import Connection, sql

from dataobject_seed.backends.staging import ROOT_INDEX
from dataobject_seed.models import TypeSchema

logger = logging.getLogger(__name__)

# Field kind → PostgreSQL column type
KIND_TYPES = {
    "text": "TEXT",
    "email": "TEXT",
    "password": "TEXT",
    "select": "TEXT",
    "integer": "BIGINT",
    "number": "NUMERIC",
    "boolean": "BOOLEAN",
    "date": "DATE",
    "datetime": "TIMESTAMP",
}

BASE_TABLES = (
    """
    CREATE TABLE IF NOT EXISTS objects (
        id INTEGER GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY,
        parent_id INTEGER NOT NULL,
        type TEXT NOT NULL,
        "key" TEXT NOT NULL DEFAULT '',
        path TEXT NOT NULL DEFAULT '/',
        "index" INTEGER NOT NULL DEFAULT 0,
        published BOOLEAN NOT NULL DEFAULT true,
        creation_date BIGINT NOT NULL DEFAULT 0,
        modification_date BIGINT NOT NULL DEFAULT 0,
        user_owner INTEGER,
        user_modification INTEGER,
        class_id TEXT,
        class_name TEXT,
        children_sort_by TEXT,
        children_sort_order TEXT,
        version_count INTEGER NOT NULL DEFAULT 0,
        UNIQUE (parent_id, "key")
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS classes (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL UNIQUE,
        definition JSONB NOT NULL DEFAULT '{}'::jsonb
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS dependencies (
        sourcetype TEXT NOT NULL,
        sourceid INTEGER NOT NULL,
        targettype TEXT NOT NULL,
        targetid INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tree_locks (
        id INTEGER NOT NULL,
        type TEXT NOT NULL,
        locked TEXT
    )
    """,
)


def class_definition(schema: TypeSchema) -> dict:
    """JSON definition stored in the ``classes`` table."""
    return {
        "fields": {f.name: f.kind for f in schema.fields},
        "relations": list(schema.relations),
    }


def install_store(
    conn: Connection,
    schemas: Iterable[TypeSchema],
    root_id: int = 1,
) -> list[str]:
    """
    Create store tables and class definitions, plus the root folder.

    Existing tables are kept; columns for new fields are added.

    Args:
        conn: PostgreSQL connection
        schemas: Type descriptors to install
        root_id: Id of the root folder

    Returns:
        Names of the installed classes
    """
    installed = []
    with conn.cursor() as cur:
        for statement in BASE_TABLES:
            cur.execute(statement)

        now = int(time.time())
        cur.execute(
            """
            INSERT INTO objects (
                id, parent_id, type, "key", path, "index", published,
                creation_date, modification_date, user_owner, user_modification,
                version_count
            )
            VALUES (%s, 0, 'folder', '', '/', %s, true, %s, %s, 1, 1, 0)
            ON CONFLICT (id) DO NOTHING
            """,
            (root_id, ROOT_INDEX, now, now),
        )
        cur.execute(
            "SELECT setval(pg_get_serial_sequence('objects', 'id'), "
            "(SELECT MAX(id) FROM objects))"
        )

        for schema in schemas:
            _install_class(cur, schema)
            installed.append(schema.name)

    conn.commit()
    logger.info(f"Installed {len(installed)} classes")
    return installed


def _install_class(cur, schema: TypeSchema) -> None:
    for prefix in ("object_store_", "object_query_"):
        table = sql.Identifier(f"{prefix}{schema.store_id}")
        cur.execute(
            sql.SQL("CREATE TABLE IF NOT EXISTS {} (oo_id INTEGER PRIMARY KEY)").format(
                table
            )
        )
        for spec in schema.fields:
            cur.execute(
                sql.SQL("ALTER TABLE {} ADD COLUMN IF NOT EXISTS {} {}").format(
                    table,
                    sql.Identifier(spec.name),
                    sql.SQL(KIND_TYPES[spec.kind]),
                )
            )

    cur.execute(
        sql.SQL(
            """
            CREATE TABLE IF NOT EXISTS {} (
                src_id INTEGER NOT NULL,
                dest_id INTEGER NOT NULL,
                type TEXT NOT NULL,
                fieldname TEXT NOT NULL,
                "index" INTEGER NOT NULL DEFAULT 0
            )
            """
        ).format(sql.Identifier(f"object_relations_{schema.store_id}"))
    )

    cur.execute(
        """
        INSERT INTO classes (id, name, definition)
        VALUES (%s, %s, %s)
        ON CONFLICT (id) DO UPDATE SET name = EXCLUDED.name,
            definition = EXCLUDED.definition
        """,
        (schema.store_id, schema.name, json.dumps(class_definition(schema))),
    )
