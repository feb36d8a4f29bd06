"""
Interfaces the catalog core needs from the content backend.

The core never touches game state directly. Everything it reads comes through
a ``CatalogBackend`` passed in at construction, which bundles:

  definitions  - per-namespace id listing and construction (``DefinitionTableService``)
  objects      - the full object table, used by the roe scan (``ObjectMetadataService``)
  tables       - raw data tables such as secret notes and pond rules (``TableLoader``)
  dyes         - dye color lookup for roe (``DyeColorLookup``)
  tools        - tool constructors (``ToolFactory``)

``spawn_catalog.content.repository.ContentRepository`` implements all five.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Protocol, TypeVar

from spawn_catalog.models.content import Color
from spawn_catalog.taxonomy.item_taxonomy import ItemKind, ToolKind

logger = logging.getLogger(__name__)

T = TypeVar("T")

SECRET_NOTES_TABLE = "Data/SecretNotes"
FISH_POND_TABLE = "Data/FishPondData"


class ContentLoadError(Exception):
    """A data table exists but could not be parsed."""


class GameItem(Protocol):
    """What the core reads from (and sets on) a constructed instance."""

    item_id: str
    name: str
    price: int
    category: int
    parent_sheet_index: int
    kind: ItemKind
    preserve: Optional[str]
    preserved_parent_sheet_index: Optional[str]

    def get_description(self) -> str: ...

    def get_context_tags(self) -> set[str]: ...


class DefinitionTableService(Protocol):
    def namespaces(self) -> Iterable[str]: ...

    def list_identifiers(self, namespace: str) -> Iterable[str]: ...

    def construct(self, namespace: str, identifier: str, quantity: int, quality: int) -> GameItem: ...


class ObjectMetadataService(Protocol):
    def object_ids(self) -> Iterable[str]: ...

    def construct_object(self, identifier: str, quantity: int = 1) -> GameItem: ...

    def construct_colored(self, identifier: str, quantity: int, color: Color) -> GameItem: ...


class TableLoader(Protocol):
    def load(self, table_name: str) -> Any: ...


class DyeColorLookup(Protocol):
    def color_for(self, item: GameItem) -> Optional[Color]: ...


class ToolFactory(Protocol):
    def create_tool(self, kind: ToolKind, quality: int) -> GameItem: ...

    def create_special_tool(self, name: str) -> GameItem: ...


@dataclass(frozen=True)
class CatalogBackend:
    """Read-only collaborators injected into the catalog builder."""

    definitions: DefinitionTableService
    objects: ObjectMetadataService
    tables: TableLoader
    dyes: DyeColorLookup
    tools: ToolFactory

    @classmethod
    def from_repository(cls, repo: Any) -> CatalogBackend:
        """Build a backend from one object implementing every protocol."""
        return cls(definitions=repo, objects=repo, tables=repo, dyes=repo, tools=repo)


def try_load(loader: TableLoader, table_name: str, default_factory: Callable[[], T]) -> T:
    """Load a data table, or return an empty default if it is malformed.

    Args:
        loader: Table loader to read from.
        table_name: Name of the data table, e.g. ``"Data/SecretNotes"``.
        default_factory: Builds the value returned when the table is invalid.
    """
    try:
        return loader.load(table_name)
    except ContentLoadError as exc:
        # generally a hand-edited data file that no longer parses
        logger.debug("Table %s is malformed; treating it as empty: %s", table_name, exc)
        return default_factory()
