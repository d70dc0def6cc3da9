"""Test configuration loading."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from dataobject_seed.config import CONFIG_FILENAME, DEFAULT_TABLE_PREFIXES, Config


def test_defaults():
    config = Config()

    assert config.seeding.instances_per_type == 10
    assert config.seeding.root_id == 1
    assert config.seeding.folder_prefix == "SampleData_"
    assert config.seeding.reuse_existing is True
    assert config.reset.table_prefixes == DEFAULT_TABLE_PREFIXES
    assert config.reset.root_index == 999999


def test_from_toml(tmp_path):
    path = tmp_path / CONFIG_FILENAME
    path.write_text(
        """
[database]
url = "postgresql://localhost/booking"

[seeding]
instances_per_type = 4
reference_date = 2026-01-15T08:30:00

[reset]
table_prefixes = ["object_store_"]
"""
    )

    config = Config.from_toml(path)

    assert config.database.url == "postgresql://localhost/booking"
    assert config.seeding.instances_per_type == 4
    assert config.seeding.reference_date == datetime(2026, 1, 15, 8, 30)
    assert config.reset.table_prefixes == ["object_store_"]


def test_to_toml_round_trip(tmp_path):
    path = tmp_path / CONFIG_FILENAME
    config = Config()
    config.seeding.instances_per_type = 7
    config.seeding.reference_date = datetime(2026, 3, 1, 9, 0)

    config.to_toml(path)
    loaded = Config.from_toml(path)

    assert loaded.seeding.instances_per_type == 7
    assert loaded.seeding.reference_date == datetime(2026, 3, 1, 9, 0)
    assert loaded.reset.table_prefixes == DEFAULT_TABLE_PREFIXES


def test_find_and_load_walks_up(tmp_path):
    (tmp_path / CONFIG_FILENAME).write_text("[seeding]\ninstances_per_type = 2\n")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    config = Config.find_and_load(nested)

    assert config.seeding.instances_per_type == 2


def test_find_and_load_missing(tmp_path):
    with pytest.raises(FileNotFoundError, match="dataobject-seed init"):
        Config.find_and_load(tmp_path)


def test_from_toml_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config.from_toml(tmp_path / "nope.toml")


def test_invalid_count(tmp_path):
    path = tmp_path / CONFIG_FILENAME
    path.write_text("[seeding]\ninstances_per_type = 0\n")

    with pytest.raises(ValidationError):
        Config.from_toml(path)


def test_database_url_from_environment(monkeypatch):
    monkeypatch.setenv("DATAOBJECT_SEED_DATABASE_URL", "postgresql://env/db")

    assert Config().database.url == "postgresql://env/db"
