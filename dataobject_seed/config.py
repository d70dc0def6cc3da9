"""
Configuration management for dataobject-seed.

Loads and validates configuration from dataobject-seed.toml files using Pydantic.
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_FILENAME = "dataobject-seed.toml"

DEFAULT_TABLE_PREFIXES = [
    "object_store_",
    "object_query_",
    "object_localized_",
    "object_relations_",
    "object_collection_",
    "object_metadata_",
]


class DatabaseConfig(BaseSettings):
    """Database connection configuration."""

    model_config = SettingsConfigDict(env_prefix="DATAOBJECT_SEED_DATABASE_")

    url: str = Field(
        default="postgresql://localhost/dataobjects",
        description="PostgreSQL connection URL",
    )


class SeedingConfig(BaseSettings):
    """Sample data generation configuration."""

    model_config = SettingsConfigDict(env_prefix="DATAOBJECT_SEED_SEEDING_")

    instances_per_type: int = Field(
        default=10, ge=1, description="Objects created per type"
    )
    root_id: int = Field(default=1, description="Id of the root folder")
    folder_prefix: str = Field(
        default="SampleData_", description="Key prefix of per-type folders"
    )
    key_padding: int = Field(
        default=3, ge=1, description="Zero-padding of the index in object keys"
    )
    reuse_existing: bool = Field(
        default=True,
        description="Reuse objects whose key already exists instead of failing",
    )
    fill_unmapped_fields: bool = Field(
        default=False, description="Fill fields without a populator value using Faker"
    )
    reference_date: Optional[datetime] = Field(
        default=None,
        description="Anchor for generated dates (defaults to the run start)",
    )


class ResetConfig(BaseSettings):
    """Reset operation configuration."""

    model_config = SettingsConfigDict(env_prefix="DATAOBJECT_SEED_RESET_")

    table_prefixes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TABLE_PREFIXES),
        description="Per-class table prefixes truncated on reset",
    )
    root_index: int = Field(default=999999, description="Index of the root folder")
    disable_integrity: bool = Field(
        default=True,
        description="Disable foreign key enforcement while tables are cleared",
    )


class Config(BaseSettings):
    """Main configuration for dataobject-seed."""

    model_config = SettingsConfigDict(env_prefix="DATAOBJECT_SEED_")

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    seeding: SeedingConfig = Field(default_factory=SeedingConfig)
    reset: ResetConfig = Field(default_factory=ResetConfig)

    @classmethod
    def from_toml(cls, path: Path | str) -> Config:
        """
        Load configuration from TOML file.

        Args:
            path: Path to dataobject-seed.toml file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        return cls(**data)

    @classmethod
    def find_and_load(cls, start_dir: Optional[Path] = None) -> Config:
        """
        Find and load configuration from dataobject-seed.toml.

        Searches for dataobject-seed.toml starting from start_dir and walking up
        parent directories until found or reaching filesystem root.

        Args:
            start_dir: Directory to start search (defaults to current directory)

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If no config file found
        """
        if start_dir is None:
            start_dir = Path.cwd()

        current = Path(start_dir).resolve()

        # Walk up directory tree
        while True:
            config_path = current / CONFIG_FILENAME
            if config_path.exists():
                return cls.from_toml(config_path)

            parent = current.parent
            if parent == current:
                break
            current = parent

        raise FileNotFoundError(
            f"No {CONFIG_FILENAME} found in {start_dir} or parent directories. "
            f"Run 'dataobject-seed init' to create one."
        )

    def to_toml(self, path: Path | str) -> None:
        """
        Write configuration to TOML file.

        Args:
            path: Path to write dataobject-seed.toml
        """
        config_path = Path(path)

        reference_date = (
            f"reference_date = {self.seeding.reference_date.isoformat()}\n"
            if self.seeding.reference_date
            else "# reference_date = 2026-01-01T00:00:00\n"
        )
        prefixes = ", ".join(f'"{p}"' for p in self.reset.table_prefixes)

        # Build TOML content manually for better formatting
        toml_content = f"""# dataobject-seed configuration

[database]
url = "{self.database.url}"

[seeding]
instances_per_type = {self.seeding.instances_per_type}
root_id = {self.seeding.root_id}
folder_prefix = "{self.seeding.folder_prefix}"
key_padding = {self.seeding.key_padding}
reuse_existing = {str(self.seeding.reuse_existing).lower()}
fill_unmapped_fields = {str(self.seeding.fill_unmapped_fields).lower()}
{reference_date}
[reset]
table_prefixes = [{prefixes}]
root_index = {self.reset.root_index}
disable_integrity = {str(self.reset.disable_integrity).lower()}
"""

        config_path.write_text(toml_content)


# Default configuration instance
DEFAULT_CONFIG = Config()
