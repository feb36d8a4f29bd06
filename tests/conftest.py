"""
Shared pytest fixtures for the spawn-catalog test suite.

Provides:
  - ``definition_tables`` / ``data_tables``: small in-memory content tables
    covering every derivation branch (fruit, vegetable, flower, roe, secret
    note, ring) plus one broken row.
  - ``repository``: a ``ContentRepository`` built from those tables.
  - ``backend`` / ``builder``: the catalog core wired to that repository.
  - ``content_dir``: the same tables written to a temporary directory.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from spawn_catalog.catalog.backend import FISH_POND_TABLE, SECRET_NOTES_TABLE, CatalogBackend
from spawn_catalog.catalog.builder import CatalogBuilder
from spawn_catalog.config import CatalogConfig
from spawn_catalog.content.repository import DATA_TABLE_FILES, DEFINITION_FILES, ContentRepository


def _row(name: str, price: int = 0, category: int = 0, tags: tuple[str, ...] = (), **extra: Any) -> dict:
    row = {
        "name": name,
        "price": price,
        "category": category,
        "description": f"{name} description.",
        "context_tags": list(tags),
    }
    row.update(extra)
    return row


OBJECTS: dict[str, dict] = {
    "79":  _row("Secret Note", 1),
    "128": _row("Pufferfish", 200, -4, ("fish_ocean", "color_yellow")),
    "145": _row("Sunfish", 30, -4, ("fish_river",)),
    "162": _row("Lava Eel", 700, -4, ("fish_lava", "fish_legendary")),
    "164": _row("Sandfish", 75, -4, ("fish_desert", "color_sand")),
    "190": _row("Cauliflower", 175, -75),
    "192": _row("Potato", 81, -75),
    "254": _row("Melon", 250, -79),
    "421": _row("Sunflower", 80, -80),
    "340": _row("Honey", 100, -26),
    "342": _row("Pickles", 100, -26),
    "344": _row("Jelly", 160, -26),
    "348": _row("Wine", 400, -26),
    "350": _row("Juice", 150, -26),
    "447": _row("Aged Roe", 100, -26),
    "698": _row("Sturgeon", 200, -4, ("fish_lake",)),
    "812": _row("Roe", 30, -23),
    "516": _row("Small Glow Ring", 100, -96, kind="ring"),
    "999": _row("Broken Entry", 10, -4, ("fish_ocean",), description=None),
}

DEFINITIONS: dict[str, dict[str, dict]] = {
    "O": OBJECTS,
    "BC": {"12": _row("Keg", 50), "15": _row("Preserves Jar", 50)},
    "F": {"0": _row("Oak Chair", 350)},
    "H": {"0": _row("Cowboy Hat")},
    "B": {"504": _row("Sneakers", 100)},
    "W": {"0": _row("Rusty Sword", 50)},
    "P": {"0": _row("Farmer Pants", 50)},
    "S": {"1000": _row("Classic Overalls", 50), "1001": {"name": ""}},
}

POND_RULES: list[dict] = [
    {"required_tags": ["fish_ocean"], "produced_items": [{"item_id": "812"}]},
    {"required_tags": ["fish_river"], "produced_items": [{"item_id": "812"}]},
    {"required_tags": ["fish_lake", "!fish_legendary"], "produced_items": [{"item_id": "812"}]},
    {"required_tags": ["fish_lava", "!fish_legendary"], "produced_items": [{"item_id": "812"}]},
    {"required_tags": ["fish_desert"], "produced_items": [{"item_id": "164"}]},
]

SECRET_NOTES: dict[str, str] = {"1": "first", "2": "second", "3": "third"}


@pytest.fixture
def definition_tables() -> dict[str, dict[str, dict]]:
    return json.loads(json.dumps(DEFINITIONS))


@pytest.fixture
def data_tables() -> dict[str, Any]:
    return {
        SECRET_NOTES_TABLE: dict(SECRET_NOTES),
        FISH_POND_TABLE: json.loads(json.dumps(POND_RULES)),
    }


@pytest.fixture
def repository(definition_tables, data_tables) -> ContentRepository:
    return ContentRepository.from_tables(definition_tables, data_tables)


@pytest.fixture
def backend(repository) -> CatalogBackend:
    return CatalogBackend.from_repository(repository)


@pytest.fixture
def catalog_config() -> CatalogConfig:
    """Small wallpaper/flooring ranges keep the catalog easy to reason about."""
    return CatalogConfig(wallpaper_count=3, flooring_count=2)


@pytest.fixture
def builder(backend, catalog_config) -> CatalogBuilder:
    return CatalogBuilder(backend, catalog_config)


@pytest.fixture
def content_dir(tmp_path: Path, definition_tables, data_tables) -> Path:
    """The fixture tables written as a content directory."""
    root = tmp_path / "content"
    root.mkdir()
    for namespace, filename in DEFINITION_FILES.items():
        (root / filename).write_text(json.dumps(definition_tables[namespace]), encoding="utf-8")
    for table_name, filename in DATA_TABLE_FILES.items():
        (root / filename).write_text(json.dumps(data_tables[table_name]), encoding="utf-8")
    return root
