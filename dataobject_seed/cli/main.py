"""CLI commands for dataobject-seed."""

import logging
import sys
from pathlib import Path

import click
import psycopg

from dataobject_seed.backends.ddl import install_store
from dataobject_seed.backends.direct import PostgresObjectStore, PostgresSchemaAdapter
from dataobject_seed.backends.staging import StagingObjectStore
from dataobject_seed.catalog import booking_registry
from dataobject_seed.config import CONFIG_FILENAME, Config
from dataobject_seed.exceptions import SchemaResetError
from dataobject_seed.introspection import PostgresTypeRegistry
from dataobject_seed.migration import reset as reset_store
from dataobject_seed.migration import seed as seed_store
from dataobject_seed.models import SeedingReport
from dataobject_seed.type_registry import StaticTypeRegistry, TypeRegistry


def _load_config(path: str | None) -> Config:
    if path is not None:
        return Config.from_toml(path)
    try:
        return Config.find_and_load()
    except FileNotFoundError:
        return Config()


def _connect(config: Config, dsn: str | None) -> psycopg.Connection:
    url = dsn or config.database.url
    try:
        return psycopg.connect(url)
    except psycopg.OperationalError as e:
        click.echo(f"Error: could not connect to {url}: {e}", err=True)
        sys.exit(1)


def _static_registry(types_file: str | None) -> StaticTypeRegistry:
    if types_file is None:
        return booking_registry()
    return StaticTypeRegistry.from_file(types_file)


def _print_summary(report: SeedingReport) -> None:
    for name, result in report.types.items():
        if result.skipped:
            click.echo(f"  {name}: skipped (class not available)")
            continue
        line = f"  {name}: {result.created} created, {result.reused} reused"
        if result.failed:
            line += f", {result.failed} failed"
        if result.relation_failures:
            line += f", {result.relation_failures} relation failures"
        click.echo(line)

    for warning in report.warnings:
        click.echo(f"  warning: {warning}")

    click.echo(
        f"Total: {report.total_created} created, {report.total_reused} reused, "
        f"{report.total_failed} failed"
    )


def _print_types(registry: TypeRegistry) -> None:
    for name in registry.list_types():
        schema = registry.get_schema(name)
        if schema is None:
            click.echo(f"{name} (unavailable)")
            continue
        click.echo(f"{name} [{schema.store_id}]")
        for spec in schema.fields:
            click.echo(f"  {spec.name}: {spec.kind}")
        for relation in schema.relations:
            click.echo(f"  {relation}: relation")


@click.group()
@click.version_option(package_name="dataobject-seed")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help=f"Path to {CONFIG_FILENAME} (searched upwards by default)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """dataobject-seed - sample data for hierarchical object stores."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = _load_config(config_path)


@cli.command()
@click.option("--dsn", help="PostgreSQL connection URL (overrides config)")
@click.option("--count", type=click.IntRange(min=1), help="Objects per class")
@click.option("--dry-run", is_flag=True, help="Seed an in-memory store instead")
@click.option(
    "--types",
    "types_file",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML/JSON class descriptors, --dry-run only (default: booking catalog)",
)
@click.option("--json", "output_json", is_flag=True, help="Output report as JSON")
@click.pass_obj
def seed(
    config: Config,
    dsn: str | None,
    count: int | None,
    dry_run: bool,
    types_file: str | None,
    output_json: bool,
) -> None:
    """Create sample objects for all classes."""
    if types_file is not None and not dry_run:
        raise click.UsageError(
            "--types can only be used with --dry-run; "
            "database runs read classes from the store"
        )
    if count is not None:
        config.seeding = config.seeding.model_copy(
            update={"instances_per_type": count}
        )

    if dry_run:
        store = StagingObjectStore(config.seeding.root_id)
        report = seed_store(store, _static_registry(types_file), config)
    else:
        with _connect(config, dsn) as conn:
            report = seed_store(
                PostgresObjectStore(conn), PostgresTypeRegistry(conn), config
            )

    if output_json:
        click.echo(report.to_json())
    else:
        click.echo("Dry run (in-memory store):" if dry_run else "Sample data created:")
        _print_summary(report)

    if report.has_failures:
        sys.exit(1)


@cli.command()
@click.option("--dsn", help="PostgreSQL connection URL (overrides config)")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_obj
def reset(config: Config, dsn: str | None, yes: bool) -> None:
    """Remove all objects and restore the root folder."""
    if not yes:
        click.confirm("This deletes every object in the store. Continue?", abort=True)

    with _connect(config, dsn) as conn:
        try:
            reset_store(PostgresSchemaAdapter(conn), config)
        except SchemaResetError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

    click.echo("✓ Object store reset")


@cli.command()
@click.option("--dsn", help="PostgreSQL connection URL (overrides config)")
@click.option(
    "--types",
    "types_file",
    type=click.Path(exists=True, dir_okay=False),
    help="List classes from a YAML/JSON descriptor file",
)
@click.option("--builtin", is_flag=True, help="List the built-in booking catalog")
@click.pass_obj
def types(
    config: Config, dsn: str | None, types_file: str | None, builtin: bool
) -> None:
    """List classes with their fields and relations."""
    if types_file is not None or builtin:
        _print_types(_static_registry(types_file))
        return

    with _connect(config, dsn) as conn:
        _print_types(PostgresTypeRegistry(conn))


@cli.command()
@click.option("--dsn", help="PostgreSQL connection URL (overrides config)")
@click.option(
    "--types",
    "types_file",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML/JSON class descriptors to install (default: booking catalog)",
)
@click.pass_obj
def install(config: Config, dsn: str | None, types_file: str | None) -> None:
    """Create store tables and class definitions."""
    registry = _static_registry(types_file)
    schemas = [
        schema
        for schema in (registry.get_schema(name) for name in registry.list_types())
        if schema is not None
    ]

    with _connect(config, dsn) as conn:
        try:
            installed = install_store(conn, schemas, root_id=config.seeding.root_id)
        except psycopg.Error as e:
            click.echo(f"Error: install failed: {e}", err=True)
            sys.exit(1)

    click.echo(f"✓ Installed {len(installed)} classes: {', '.join(installed)}")


@cli.command()
@click.argument("path", type=click.Path(), default=CONFIG_FILENAME)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init(path: str, force: bool) -> None:
    """Write a default configuration file."""
    target = Path(path)
    if target.exists() and not force:
        click.echo(f"Error: {target} already exists (use --force)", err=True)
        sys.exit(1)

    Config().to_toml(target)
    click.echo(f"✓ Wrote {target}")


if __name__ == "__main__":
    cli()
