"""
Reference content backend: JSON tables on disk (or in memory).

``ContentRepository`` implements every collaborator protocol the catalog core
needs (definitions, objects, tables, dyes, tools), so a directory of JSON files
is enough to build a full catalog.

Content directory layout
------------------------
  objects.json          (O)   {"<id>": ItemDefinition, ...}
  big_craftables.json   (BC)
  furniture.json        (F)
  hats.json             (H)
  boots.json            (B)
  weapons.json          (W)
  pants.json            (P)
  shirts.json           (S)
  secret_notes.json           {"<noteId>": "<text>", ...}
  fish_pond_data.json         [{"produced_items": [{"item_id": "812"}],
                                "required_tags": ["fish_ocean"]}, ...]

Any file may be missing. A definition file that fails to parse is skipped
(its namespace is treated as unknown). A data table that fails to parse raises
``ContentLoadError`` when it is loaded. Individual definition rows are only
validated when constructed, so one broken row fails one candidate.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from spawn_catalog.catalog.backend import FISH_POND_TABLE, SECRET_NOTES_TABLE, ContentLoadError
from spawn_catalog.content.items import ColoredObject, Item, ObjectItem, Ring, Tool, Wallpaper
from spawn_catalog.models.content import Color, ItemDefinition
from spawn_catalog.taxonomy.item_taxonomy import (
    FLOORING_NAMESPACE,
    LOW_QUALITY,
    SYNTHETIC_TOOLS,
    WALLPAPER_NAMESPACE,
    ItemKind,
    ToolKind,
    ToolQuality,
)

logger = logging.getLogger(__name__)

DEFINITION_FILES: dict[str, str] = {
    "O":  "objects.json",
    "BC": "big_craftables.json",
    "F":  "furniture.json",
    "H":  "hats.json",
    "B":  "boots.json",
    "W":  "weapons.json",
    "P":  "pants.json",
    "S":  "shirts.json",
}

DATA_TABLE_FILES: dict[str, str] = {
    SECRET_NOTES_TABLE: "secret_notes.json",
    FISH_POND_TABLE:    "fish_pond_data.json",
}

# Expected container type and empty value for each data table.
_DATA_TABLE_TYPES: dict[str, type] = {
    SECRET_NOTES_TABLE: dict,
    FISH_POND_TABLE:    list,
}

# ``color_*`` context tags → dye color.
DYE_COLORS: dict[str, Color] = {
    "color_black":       Color(r=45, g=45, b=45),
    "color_gray":        Color(r=128, g=128, b=128),
    "color_white":       Color(r=255, g=255, b=255),
    "color_pink":        Color(r=255, g=163, b=186),
    "color_red":         Color(r=220, g=0, b=0),
    "color_orange":      Color(r=255, g=128, b=0),
    "color_yellow":      Color(r=255, g=230, b=0),
    "color_green":       Color(r=10, g=143, b=0),
    "color_dark_green":  Color(r=0, g=90, b=0),
    "color_blue":        Color(r=46, g=85, b=183),
    "color_aquamarine":  Color(r=0, g=250, b=154),
    "color_purple":      Color(r=115, g=41, b=181),
    "color_brown":       Color(r=130, g=73, b=37),
    "color_sand":        Color(r=219, g=186, b=121),
    "color_gold":        Color(r=255, g=215, b=0),
    "color_iridium":     Color(r=151, g=84, b=255),
}

_TOOL_NAMES: dict[ToolKind, str] = {
    ToolKind.AXE:          "Axe",
    ToolKind.HOE:          "Hoe",
    ToolKind.PICKAXE:      "Pickaxe",
    ToolKind.WATERING_CAN: "Watering Can",
}

_FISHING_ROD_NAMES: tuple[str, ...] = ("Bamboo Pole", "Training Rod", "Fiberglass Rod", "Iridium Rod")

_TIER_PREFIXES: dict[ToolQuality, str] = {
    ToolQuality.STONE:   "",
    ToolQuality.COPPER:  "Copper ",
    ToolQuality.STEEL:   "Steel ",
    ToolQuality.GOLD:    "Gold ",
    ToolQuality.IRIDIUM: "Iridium ",
}


class ContentRepository:
    """Content backend over in-memory tables.

    Args:
        definitions: Namespace → {id → raw definition row}.
        data_tables: Table name → parsed table (secret notes, pond rules).
        broken_tables: Table name → parse error, for tables that failed to load.
    """

    def __init__(
        self,
        definitions: Mapping[str, Mapping[str, Any]],
        data_tables: Optional[Mapping[str, Any]] = None,
        broken_tables: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._definitions = {ns: dict(rows) for ns, rows in definitions.items()}
        self._data_tables = dict(data_tables or {})
        self._broken_tables = dict(broken_tables or {})

    # ── Constructors ──────────────────────────────────────────────────────────

    @classmethod
    def from_tables(
        cls,
        definitions: Mapping[str, Mapping[str, Any]],
        data_tables: Optional[Mapping[str, Any]] = None,
    ) -> ContentRepository:
        return cls(definitions, data_tables)

    @classmethod
    def from_directory(cls, content_dir: Path) -> ContentRepository:
        """Load every known table file from ``content_dir``.

        Raises:
            FileNotFoundError: If ``content_dir`` does not exist.
        """
        content_dir = Path(content_dir)
        if not content_dir.is_dir():
            raise FileNotFoundError(f"Content directory not found: {content_dir}")

        definitions: dict[str, dict[str, Any]] = {}
        for namespace, filename in DEFINITION_FILES.items():
            path = content_dir / filename
            if not path.exists():
                continue
            try:
                rows = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning("Skipping unreadable definition file %s: %s", path, exc)
                continue
            if not isinstance(rows, dict):
                logger.warning("Skipping definition file %s: expected an object of id → row", path)
                continue
            definitions[namespace] = {str(k): v for k, v in rows.items()}

        data_tables: dict[str, Any] = {}
        broken: dict[str, str] = {}
        for table_name, filename in DATA_TABLE_FILES.items():
            path = content_dir / filename
            if not path.exists():
                continue
            try:
                data_tables[table_name] = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                broken[table_name] = str(exc)

        logger.info(
            "Loaded content from %s: %d namespaces, %d data tables (%d broken)",
            content_dir, len(definitions), len(data_tables), len(broken),
        )
        return cls(definitions, data_tables, broken)

    # ── TableLoader ───────────────────────────────────────────────────────────

    def load(self, table_name: str) -> Any:
        """Return a parsed data table; a missing table is empty.

        Raises:
            ContentLoadError: If the table is unknown, unparseable or the wrong shape.
        """
        expected = _DATA_TABLE_TYPES.get(table_name)
        if expected is None:
            raise ContentLoadError(f"Unknown data table '{table_name}'.")

        if table_name in self._broken_tables:
            logger.warning("Data table %s is malformed: %s", table_name, self._broken_tables[table_name])
            raise ContentLoadError(f"{table_name}: {self._broken_tables[table_name]}")

        table = self._data_tables.get(table_name)
        if table is None:
            return expected()
        if not isinstance(table, expected):
            logger.warning("Data table %s has the wrong shape (%s)", table_name, type(table).__name__)
            raise ContentLoadError(
                f"{table_name}: expected {expected.__name__}, got {type(table).__name__}."
            )
        return table

    # ── DefinitionTableService ────────────────────────────────────────────────

    def namespaces(self) -> Iterable[str]:
        return [*self._definitions.keys(), WALLPAPER_NAMESPACE, FLOORING_NAMESPACE]

    def list_identifiers(self, namespace: str) -> Iterable[str]:
        # wallpaper and flooring ids are range-driven, not listed
        return list(self._definitions.get(namespace, {}).keys())

    def construct(
        self,
        namespace: str,
        identifier: str,
        quantity: int = 1,
        quality: int = LOW_QUALITY,
    ) -> Item:
        """Build a new instance of ``identifier`` in ``namespace``.

        Raises:
            KeyError: Unknown namespace or id.
            ValueError: Malformed definition row or wallpaper id.
        """
        if namespace in (WALLPAPER_NAMESPACE, FLOORING_NAMESPACE):
            return self._construct_wall_covering(identifier, is_floor=namespace == FLOORING_NAMESPACE)

        definition = self._definition(namespace, identifier)
        if namespace != "O":
            return Item(
                item_id=identifier,
                name=definition.name,
                price=definition.price,
                category=definition.category,
                description=definition.description,
                context_tags=set(definition.context_tags),
                quality=quality,
                stack=quantity,
            )

        cls = Ring if definition.kind == ItemKind.RING else ObjectItem
        return cls(
            item_id=identifier,
            name=definition.name,
            price=definition.price,
            category=definition.category,
            description=definition.description,
            context_tags=set(definition.context_tags),
            quality=quality,
            stack=quantity,
        )

    def _definition(self, namespace: str, identifier: str) -> ItemDefinition:
        rows = self._definitions[namespace]
        return ItemDefinition.model_validate(rows[identifier])

    def _construct_wall_covering(self, identifier: str, is_floor: bool) -> Wallpaper:
        if not identifier.isdigit():
            raise ValueError(f"Wallpaper id must be a non-negative integer, got '{identifier}'.")
        label = "Flooring" if is_floor else "Wallpaper"
        return Wallpaper(
            item_id=identifier,
            name=label,
            price=100,
            description=f"Decorates the {'floor' if is_floor else 'walls'} of a room.",
            is_floor=is_floor,
        )

    # ── ObjectMetadataService ─────────────────────────────────────────────────

    def object_ids(self) -> Iterable[str]:
        return self.list_identifiers("O")

    def construct_object(self, identifier: str, quantity: int = 1) -> ObjectItem:
        """Build an object-table entry by id (a ring for ring rows)."""
        return self.construct("O", identifier, quantity)

    def construct_colored(self, identifier: str, quantity: int, color: Color) -> ColoredObject:
        definition = self._definition("O", identifier)
        return ColoredObject(
            item_id=identifier,
            name=definition.name,
            price=definition.price,
            category=definition.category,
            description=definition.description,
            context_tags=set(definition.context_tags),
            stack=quantity,
            color=color,
        )

    # ── DyeColorLookup ────────────────────────────────────────────────────────

    def color_for(self, item: Any) -> Optional[Color]:
        for tag in sorted(item.get_context_tags()):
            if tag in DYE_COLORS:
                return DYE_COLORS[tag]
        return None

    # ── ToolFactory ───────────────────────────────────────────────────────────

    def create_tool(self, kind: ToolKind, quality: int) -> Tool:
        """Build an upgradeable tool at a quality tier.

        Raises:
            ValueError: Unknown tier, or iridium fishing rod.
        """
        kind = ToolKind(kind)
        tier = ToolQuality(quality)
        if kind == ToolKind.FISHING_ROD:
            if tier >= len(_FISHING_ROD_NAMES):
                raise ValueError(f"Fishing rod has no tier {tier.name}.")
            name = _FISHING_ROD_NAMES[tier]
        else:
            name = f"{_TIER_PREFIXES[tier]}{_TOOL_NAMES[kind]}"
        return Tool(
            item_id=str(int(kind)),
            name=name,
            description=f"{name} (upgrade level {int(tier)}).",
            upgrade_level=int(tier),
        )

    def create_special_tool(self, name: str) -> Tool:
        """Build one of the tools that have no game data id."""
        if name not in SYNTHETIC_TOOLS:
            raise ValueError(f"Unknown tool '{name}'. Must be one of {list(SYNTHETIC_TOOLS)}.")
        return Tool(item_id="", name=name, description=f"A {name.lower()}.")
