"""
In-memory item instances produced by the reference content backend.

Instances are plain mutable dataclasses: the derivation rules rename and
re-price objects after constructing them. Each construction returns a new
instance with its own tag set, so two instances never share mutable state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from spawn_catalog.models.content import Color
from spawn_catalog.taxonomy.item_taxonomy import ItemKind


class ItemDataError(Exception):
    """An item's backing data is incomplete (e.g. no description)."""


@dataclass
class Item:
    """Base item instance.

    Attributes:
        item_id: Id within the item's namespace.
        name: Display name (may be changed after construction).
        price: Sell price.
        category: Object category code, 0 when not applicable.
        description: Description text; ``None`` for broken entries.
        context_tags: Context tags; each instance owns its own set.
        kind: Runtime kind of this instance.
        quality: Item quality.
        stack: Stack size.
    """

    item_id: str
    name: str
    price: int = 0
    category: int = 0
    description: Optional[str] = None
    context_tags: set[str] = field(default_factory=set)
    kind: ItemKind = ItemKind.OTHER
    quality: int = 0
    stack: int = 1
    preserve: Optional[str] = None
    preserved_parent_sheet_index: Optional[str] = None

    @property
    def parent_sheet_index(self) -> int:
        return int(self.item_id) if self.item_id.isdigit() else -1

    def get_description(self) -> str:
        if self.description is None:
            raise ItemDataError(f"Item '{self.item_id}' ({self.name}) has no description.")
        return self.description

    def get_context_tags(self) -> set[str]:
        return set(self.context_tags)


@dataclass
class ObjectItem(Item):
    kind: ItemKind = ItemKind.PLAIN_OBJECT


@dataclass
class ColoredObject(ObjectItem):
    color: Color = field(default_factory=lambda: Color(r=255, g=255, b=255))


@dataclass
class Ring(ObjectItem):
    kind: ItemKind = ItemKind.RING


@dataclass
class Tool(Item):
    upgrade_level: int = 0


@dataclass
class Wallpaper(Item):
    is_floor: bool = False
