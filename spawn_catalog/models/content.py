"""
Content table models.

These validate raw entries read from the content backend before anything is
built from them. ``PondProductionRule`` is the one the catalog core depends on
directly: it feeds the roe tag index.
"""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from spawn_catalog.taxonomy.item_taxonomy import ItemKind

NEGATION_MARKER = "!"


class Color(BaseModel):
    """An RGBA color; each channel in [0, 255]."""

    model_config = ConfigDict(frozen=True)

    r: int
    g: int
    b: int
    a: int = 255

    @field_validator("r", "g", "b", "a")
    @classmethod
    def validate_channel(cls, v: int) -> int:
        if not 0 <= v <= 255:
            raise ValueError(f"Color channel must be in [0, 255], got {v}.")
        return v

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)


STURGEON_ROE_COLOR = Color(r=61, g=55, b=42)
ORANGE = Color(r=255, g=165, b=0)


class ItemDefinition(BaseModel):
    """One row of a per-type definition table.

    Attributes:
        name: Internal display name.
        price: Base sell price; must be non-negative.
        category: Object category code (0 when the table has none).
        description: Description text. ``None`` marks a broken entry: the
            description is only resolved when an instance asks for it.
        context_tags: Free-form tags used by pond rules and dye lookups.
        kind: Runtime kind an instance of this entry constructs into.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    price: int = 0
    category: int = 0
    description: Optional[str] = None
    context_tags: tuple[str, ...] = ()
    kind: ItemKind = ItemKind.PLAIN_OBJECT

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"price must be non-negative, got {v}.")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("name must not be empty.")
        return v


class ProducedItem(BaseModel):
    """One output of a fish pond rule."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    item_id: str = Field(validation_alias=AliasChoices("item_id", "ItemID", "ItemId"))

    @field_validator("item_id", mode="before")
    @classmethod
    def coerce_item_id(cls, v: object) -> object:
        return str(v) if isinstance(v, int) else v


class PondProductionRule(BaseModel):
    """A pond production rule: what a pond produces and which fish qualify.

    A required tag starting with ``!`` is negated.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    produced_items: tuple[ProducedItem, ...] = Field(
        default=(),
        validation_alias=AliasChoices("produced_items", "ProducedItems"),
    )
    required_tags: tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices("required_tags", "RequiredTags"),
    )

    def produces(self, item_id: str) -> bool:
        return any(p.item_id == item_id for p in self.produced_items)


def is_negated(tag: str) -> bool:
    return tag.startswith(NEGATION_MARKER)
