"""Folder allocator: one sample-data folder per type under the root."""

import logging

from dataobject_seed.backends.base import ObjectStore

logger = logging.getLogger(__name__)

DEFAULT_FOLDER_PREFIX = "SampleData_"


class FolderAllocator:
    """
    Find or create the folder that holds the sample objects of a type.

    Lookup runs before create, so repeated runs reuse the same folder.
    The pair is not atomic: two concurrent runs can both create it.
    """

    def __init__(
        self,
        store: ObjectStore,
        root_id: int = 1,
        prefix: str = DEFAULT_FOLDER_PREFIX,
    ):
        self.store = store
        self.root_id = root_id
        self.prefix = prefix
        self.warnings: list[str] = []

    def folder_key(self, type_name: str) -> str:
        return f"{self.prefix}{type_name}"

    def allocate(self, type_name: str) -> int:
        """
        Id of the folder for ``type_name``.

        Falls back to the root id (and records a warning) when the store
        fails, so seeding continues into the root.
        """
        key = self.folder_key(type_name)
        try:
            folder = self.store.find_container(self.root_id, key)
            if folder is None:
                folder = self.store.create_container(self.root_id, key)
                logger.info(f"Created folder {key} (#{folder.id})")
            return folder.id
        except Exception as e:
            message = (
                f"Could not create/find folder for {type_name}: {e}. Using root folder."
            )
            logger.warning(message)
            self.warnings.append(message)
            return self.root_id
