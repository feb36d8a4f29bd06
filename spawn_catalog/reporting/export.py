"""
Catalog export helpers.

All writers take flat ``list[dict]`` records (see ``catalog_records``), write
to disk and return the written ``Path``. Records are flat so CSV and Parquet
outputs load directly in a spreadsheet or pandas with no pre-processing.

Parquet schema (catalog.parquet)
--------------------------------
  type      (string)
  key       (string)
  name      (string)
  price     (int64, nullable)
  category  (int64, nullable)
  kind      (string)
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Iterable

import pyarrow as pa
import pyarrow.parquet as pq

from spawn_catalog.models.entity import CatalogEntity

CATALOG_FIELDS: list[str] = ["type", "key", "name", "price", "category", "kind"]

EXPORT_FORMATS = ("json", "csv", "parquet")

_CATALOG_PA_SCHEMA = pa.schema([
    pa.field("type",     pa.string(), nullable=False),
    pa.field("key",      pa.string(), nullable=False),
    pa.field("name",     pa.string(), nullable=False),
    pa.field("price",    pa.int64(),  nullable=True),
    pa.field("category", pa.int64(),  nullable=True),
    pa.field("kind",     pa.string(), nullable=False),
])


def catalog_records(entities: Iterable[CatalogEntity]) -> list[dict]:
    """Flatten entities into one record per entity, in catalog order."""
    return [entity.to_record() for entity in entities]


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order. Defaults to ``CATALOG_FIELDS``.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    cols = fieldnames or CATALOG_FIELDS
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(data: dict | list, path: Path) -> Path:
    """Write ``data`` to a pretty-printed JSON file (parent dirs created)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


def export_to_parquet(records: list[dict], path: Path) -> Path:
    """Write catalog records to a Parquet file using the catalog schema."""
    path.parent.mkdir(parents=True, exist_ok=True)
    columns = {
        field.name: [rec.get(field.name) for rec in records]
        for field in _CATALOG_PA_SCHEMA
    }
    table = pa.Table.from_pydict(columns, schema=_CATALOG_PA_SCHEMA)
    pq.write_table(table, path)
    return path


def export_catalog(entities: Iterable[CatalogEntity], path: Path, fmt: str) -> tuple[Path, int]:
    """Export a catalog in ``fmt`` (json, csv or parquet).

    Returns:
        Tuple of ``(path, rows_written)``.

    Raises:
        ValueError: If ``fmt`` is not a supported format.
    """
    fmt = fmt.lower()
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unknown export format '{fmt}'. Must be one of {list(EXPORT_FORMATS)}.")

    records = catalog_records(entities)
    if fmt == "json":
        export_to_json(records, path)
    elif fmt == "csv":
        export_to_csv(records, path)
    else:
        export_to_parquet(records, path)
    return path, len(records)
