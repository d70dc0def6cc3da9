"""Reset operation: wipe generated objects and restore the root folder."""

import logging
import time
from typing import Iterable, Sequence

from dataobject_seed.backends.base import (
    FOLDER_TYPE,
    OBJECT_TYPE,
    ResetStatement,
    SchemaResetAdapter,
)
from dataobject_seed.config import DEFAULT_TABLE_PREFIXES, ResetConfig
from dataobject_seed.exceptions import SchemaResetError

logger = logging.getLogger(__name__)

OBJECTS_TABLE = "objects"


def build_reset_plan(
    table_names: Iterable[str],
    timestamp: int,
    prefixes: Sequence[str] = tuple(DEFAULT_TABLE_PREFIXES),
    root_index: int = 999999,
    disable_integrity: bool = True,
    root_id: int = 1,
) -> list[ResetStatement]:
    """
    Build the ordered statement list of a reset.

    Pure function: nothing is executed.

    Args:
        table_names: All table names of the store
        timestamp: Creation/modification time of the new root folder
        prefixes: Per-class table prefixes to truncate
        root_index: Index of the root folder
        disable_integrity: Wrap the plan in integrity disable/enable
        root_id: Id of the root folder

    Returns:
        Statements in execution order

    Example:
        >>> plan = build_reset_plan(["objects", "object_store_customer"], 0)
        >>> [s.table for s in plan if s.step == "truncate"]
        ['objects', 'object_store_customer']
    """
    plan: list[ResetStatement] = []

    if disable_integrity:
        plan.append(
            ResetStatement(
                step="disable_integrity",
                sql="SET session_replication_role = replica",
            )
        )

    class_tables = sorted(
        name
        for name in set(table_names)
        if name != OBJECTS_TABLE and name.startswith(tuple(prefixes))
    )
    for table in [OBJECTS_TABLE, *class_tables]:
        plan.append(
            ResetStatement(step="truncate", sql=f'TRUNCATE TABLE "{table}"', table=table)
        )

    plan.append(
        ResetStatement(
            step="delete_dependencies",
            sql="DELETE FROM dependencies "
            "WHERE sourcetype = %(type)s OR targettype = %(type)s",
            params={"type": OBJECT_TYPE},
        )
    )
    plan.append(
        ResetStatement(
            step="delete_tree_locks",
            sql="DELETE FROM tree_locks WHERE type = %(type)s",
            params={"type": OBJECT_TYPE},
        )
    )
    plan.append(
        ResetStatement(
            step="insert_root",
            sql="""
            INSERT INTO objects (
                id, parent_id, type, "key", path, "index", published,
                creation_date, modification_date, user_owner, user_modification,
                version_count
            )
            VALUES (
                %(id)s, %(parent_id)s, %(type)s, %(key)s, %(path)s, %(index)s,
                %(published)s, %(creation_date)s, %(modification_date)s,
                %(user_owner)s, %(user_modification)s, %(version_count)s
            )
            """,
            params={
                "id": root_id,
                "parent_id": 0,
                "type": FOLDER_TYPE,
                "key": "",
                "path": "/",
                "index": root_index,
                "published": True,
                "creation_date": timestamp,
                "modification_date": timestamp,
                "user_owner": 1,
                "user_modification": 1,
                "version_count": 0,
            },
        )
    )
    plan.append(
        ResetStatement(
            step="resync_ids",
            sql="SELECT setval(pg_get_serial_sequence('objects', 'id'), "
            "(SELECT MAX(id) FROM objects))",
        )
    )

    if disable_integrity:
        plan.append(
            ResetStatement(
                step="enable_integrity",
                sql="SET session_replication_role = DEFAULT",
            )
        )

    return plan


class StoreReset:
    """
    Run a reset plan against a schema reset adapter.

    Statements run one by one without rollback: when a statement fails,
    the steps before it stay applied and the error is raised.
    """

    def __init__(
        self,
        adapter: SchemaResetAdapter,
        config: ResetConfig | None = None,
        root_id: int = 1,
    ):
        self.adapter = adapter
        self.config = config or ResetConfig()
        self.root_id = root_id

    def plan(self, timestamp: int | None = None) -> list[ResetStatement]:
        return build_reset_plan(
            self.adapter.list_table_names(),
            int(time.time()) if timestamp is None else timestamp,
            prefixes=self.config.table_prefixes,
            root_index=self.config.root_index,
            disable_integrity=self.config.disable_integrity,
            root_id=self.root_id,
        )

    def reset(self) -> list[ResetStatement]:
        """
        Clear all sample data.

        Returns:
            The executed statements

        Raises:
            SchemaResetError: If a statement fails
        """
        plan = self.plan()
        logger.info(f"Resetting object store ({len(plan)} statements)")

        for statement in plan:
            try:
                if statement.step == "truncate":
                    self.adapter.truncate(statement.table)
                else:
                    self.adapter.execute(statement)
            except SchemaResetError as e:
                logger.error(f"Reset aborted at step {statement.step}: {e}")
                raise

        logger.info("Object store reset complete")
        return plan
