"""
spawn-catalog: CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Open the content backend and build the catalog lazily.
  4. Report result to stdout.

Install and run::

    pip install -e .
    spawn-catalog --help
    spawn-catalog validate-config
    spawn-catalog list --type Object --type Ring --no-variants
    spawn-catalog search "roe"
    spawn-catalog stats
    spawn-catalog export --format parquet --out data/exports/catalog.parquet
"""

from __future__ import annotations

import json
from collections import Counter
from itertools import islice
from pathlib import Path
from typing import Optional

import typer

from spawn_catalog.taxonomy.item_taxonomy import EntityType

app = typer.Typer(
    name="spawn-catalog",
    help="Catalog of every spawnable item, built from the game content tables.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from spawn_catalog.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from spawn_catalog.utils.logging import configure_logging
    configure_logging(config.logging)


def _parse_types(values: Optional[list[str]]) -> list[EntityType]:
    """Map ``--type`` values (case-insensitive value or member name) to EntityTypes."""
    if not values:
        return []
    lookup: dict[str, EntityType] = {}
    for member in EntityType:
        lookup[member.value.lower()] = member
        lookup[member.name.lower()] = member

    types: list[EntityType] = []
    for value in values:
        member = lookup.get(value.strip().lower())
        if member is None:
            valid = ", ".join(m.value for m in EntityType)
            typer.echo(f"[ERROR] Unknown type '{value}'. Valid types: {valid}", err=True)
            raise typer.Exit(code=1)
        types.append(member)
    return types


def _builder_or_exit(config, content_dir: Optional[str]):
    """Open the content directory and return a ``CatalogBuilder``."""
    from spawn_catalog.catalog.backend import CatalogBackend
    from spawn_catalog.catalog.builder import CatalogBuilder
    from spawn_catalog.content.repository import ContentRepository

    path = Path(content_dir or config.content.content_dir)
    try:
        repo = ContentRepository.from_directory(path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    return CatalogBuilder(CatalogBackend.from_repository(repo), config.catalog)


def _format_row(record: dict) -> str:
    price = "" if record["price"] is None else record["price"]
    return f"{record['type']:<12} {record['key']:<20} {record['name']:<32} {price}"


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Content dir:        {config.content.content_dir}")
    typer.echo(f"  Custom id offset:   {config.catalog.custom_id_offset}")
    typer.echo(f"  Include variants:   {config.catalog.include_variants}")
    typer.echo(f"  Negated tag policy: {config.catalog.negated_tag_policy}")
    typer.echo(f"  Log level:          {config.logging.level}")
    typer.echo(f"  Debug mode:         {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("list")
def list_entities(
    types: Optional[list[str]] = typer.Option(
        None,
        "--type",
        "-t",
        help="Entity type to include (repeatable). Default: all types.",
    ),
    no_variants: bool = typer.Option(
        False,
        "--no-variants",
        help="Skip flavored variants (wine, jelly, honey, roe, ...).",
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        min=1,
        help="Stop after this many entities.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print one JSON record per line instead of a table.",
    ),
    content_dir: Optional[str] = typer.Option(
        None,
        "--content-dir",
        help="Override the content directory from config.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """List catalog entities in build order."""
    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    requested = _parse_types(types)

    builder = _builder_or_exit(config, content_dir)
    entities = builder.get_all(requested, include_variants=False if no_variants else None)

    for entity in islice(entities, limit):
        record = entity.to_record()
        typer.echo(json.dumps(record) if as_json else _format_row(record))


@app.command("search")
def search_entities(
    query: str = typer.Argument(..., help="Case-insensitive text to find in names or keys."),
    types: Optional[list[str]] = typer.Option(
        None,
        "--type",
        "-t",
        help="Entity type to include (repeatable). Default: all types.",
    ),
    no_variants: bool = typer.Option(
        False,
        "--no-variants",
        help="Skip flavored variants.",
    ),
    content_dir: Optional[str] = typer.Option(
        None,
        "--content-dir",
        help="Override the content directory from config.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Search the catalog by display name or key."""
    from spawn_catalog.catalog.search import search

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    requested = _parse_types(types)

    builder = _builder_or_exit(config, content_dir)
    entities = builder.get_all(requested, include_variants=False if no_variants else None)

    found = 0
    for entity in search(entities, query):
        typer.echo(_format_row(entity.to_record()))
        found += 1

    if not found:
        typer.echo(f"No entities match '{query}'.")


@app.command("stats")
def stats(
    no_variants: bool = typer.Option(
        False,
        "--no-variants",
        help="Skip flavored variants.",
    ),
    content_dir: Optional[str] = typer.Option(
        None,
        "--content-dir",
        help="Override the content directory from config.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Count catalog entities per type."""
    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    builder = _builder_or_exit(config, content_dir)
    counts = Counter(
        entity.entity_type
        for entity in builder.get_all(include_variants=False if no_variants else None)
    )

    for entity_type in EntityType:
        typer.echo(f"  {entity_type.value:<14} {counts.get(entity_type, 0)}")
    typer.echo(f"  {'Total':<14} {sum(counts.values())}")


@app.command("export")
def export(
    fmt: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="json, csv or parquet. Default: export.default_format from config.",
    ),
    out: Optional[str] = typer.Option(
        None,
        "--out",
        "-o",
        help="Output file. Default: <export.output_dir>/catalog.<format>.",
    ),
    types: Optional[list[str]] = typer.Option(
        None,
        "--type",
        "-t",
        help="Entity type to include (repeatable). Default: all types.",
    ),
    no_variants: bool = typer.Option(
        False,
        "--no-variants",
        help="Skip flavored variants.",
    ),
    content_dir: Optional[str] = typer.Option(
        None,
        "--content-dir",
        help="Override the content directory from config.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Export the catalog to a flat file."""
    from spawn_catalog.reporting.export import EXPORT_FORMATS, export_catalog

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    requested = _parse_types(types)

    fmt = (fmt or config.export.default_format).lower()
    if fmt not in EXPORT_FORMATS:
        typer.echo(f"[ERROR] Unknown format '{fmt}'. Use one of: {', '.join(EXPORT_FORMATS)}", err=True)
        raise typer.Exit(code=1)

    out_path = Path(out) if out else Path(config.export.output_dir) / f"catalog.{fmt}"

    builder = _builder_or_exit(config, content_dir)
    entities = builder.get_all(requested, include_variants=False if no_variants else None)
    path, rows = export_catalog(entities, out_path, fmt)

    typer.echo(f"  Wrote {rows} entities to {path}")
    typer.echo("[OK] Export complete.")


if __name__ == "__main__":
    app()
