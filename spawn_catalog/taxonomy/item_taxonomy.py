"""
Item taxonomy for the spawnable-entity catalog.

``EntityType`` is the closed set of broad kinds a catalog entry can belong to.
Every entry is identified by ``(EntityType, LocalKey)``; the LocalKey is only
unique within its type.

The remaining enums and constants mirror fixed values from the game data:
object category codes, preserve types, tool kinds/tiers and the handful of
well-known object ids the derivation rules are keyed on.

This module has NO imports from any other ``spawn_catalog`` package.
"""

from enum import IntEnum, StrEnum


class EntityType(StrEnum):
    """Broad kind of a catalog entry."""

    TOOL = "Tool"
    CLOTHING = "Clothing"
    WALLPAPER = "Wallpaper"
    FLOORING = "Flooring"
    BOOTS = "Boots"
    HAT = "Hat"
    WEAPON = "Weapon"
    FURNITURE = "Furniture"
    BIG_CRAFTABLE = "BigCraftable"
    OBJECT = "Object"
    RING = "Ring"


class ItemKind(StrEnum):
    """Runtime kind of a constructed instance, decided once after construction."""

    PLAIN_OBJECT = "plain_object"
    """A regular inventory object (crops, fish, artisan goods, ...)."""

    RING = "ring"
    """An object-table entry that constructs into a ring."""

    OTHER = "other"
    """Anything else: tools, clothing, furniture, ..."""


class PreserveType(StrEnum):
    """Processing method recorded on a derived food item."""

    WINE = "Wine"
    JELLY = "Jelly"
    JUICE = "Juice"
    PICKLE = "Pickle"
    HONEY = "Honey"
    ROE = "Roe"
    AGED_ROE = "AgedRoe"


class ObjectCategory(IntEnum):
    """Object category codes used by the derivation rules."""

    FRUIT = -79
    VEGETABLE = -75
    FLOWER = -80
    SELL_AT_FISH_SHOP = -23
    FURNITURE = -24
    AGED_ROE = -27


class ToolKind(IntEnum):
    """Upgradeable tool kinds; the value is the tool's id."""

    AXE = 0
    HOE = 1
    FISHING_ROD = 2
    PICKAXE = 3
    WATERING_CAN = 4


class ToolQuality(IntEnum):
    """Tool upgrade tiers, lowest to highest."""

    STONE = 0
    COPPER = 1
    STEEL = 2
    GOLD = 3
    IRIDIUM = 4


# Tool kinds enumerated per tier, in order. The fishing rod has no iridium tier.
TIERED_TOOL_KINDS: tuple[ToolKind, ...] = (
    ToolKind.AXE,
    ToolKind.HOE,
    ToolKind.PICKAXE,
    ToolKind.WATERING_CAN,
    ToolKind.FISHING_ROD,
)

# Tools with no id in the game data; keyed from the custom id offset, in order.
SYNTHETIC_TOOLS: tuple[str, ...] = ("Milk Pail", "Shears", "Copper Pan", "Return Scepter")

# Lowest item quality, used when constructing the default instance of an id.
LOW_QUALITY = 0


# ── Well-known object ids ─────────────────────────────────────────────────────

HONEY_ID = "340"
PICKLES_ID = "342"
JELLY_ID = "344"
WINE_ID = "348"
JUICE_ID = "350"
SECRET_NOTE_ID = "79"
ROE_ID = "812"
AGED_ROE_ID = "447"
STURGEON_ID = "698"
"""Sturgeon: its roe has a fixed color and its aged roe is Caviar, a separate item."""

# Sheet index of the item that triggers the full roe scan.
ROE_SHEET_INDEX = 812
STURGEON_SHEET_INDEX = 698


# ── Enumeration order and namespaces ──────────────────────────────────────────

# Stable order in which the builder produces entity types. Ring shares the
# Object pass and comes out of it.
TYPE_ORDER: tuple[EntityType, ...] = (
    EntityType.TOOL,
    EntityType.CLOTHING,
    EntityType.WALLPAPER,
    EntityType.FLOORING,
    EntityType.BOOTS,
    EntityType.HAT,
    EntityType.WEAPON,
    EntityType.FURNITURE,
    EntityType.BIG_CRAFTABLE,
    EntityType.OBJECT,
    EntityType.RING,
)

# Definition-table namespaces read for each table-driven type, in order.
TYPE_NAMESPACES: dict[EntityType, tuple[str, ...]] = {
    EntityType.CLOTHING: ("P", "S"),  # pants, shirts
    EntityType.BOOTS: ("B",),
    EntityType.HAT: ("H",),
    EntityType.WEAPON: ("W",),
    EntityType.FURNITURE: ("F",),
    EntityType.BIG_CRAFTABLE: ("BC",),
    EntityType.OBJECT: ("O",),
}

WALLPAPER_NAMESPACE = "WP"
FLOORING_NAMESPACE = "FL"

# Suffixes appended to a base key by the derivation rules.
VARIANT_SUFFIXES: tuple[str, ...] = (
    "wine", "jelly", "juice", "pickled", "honey", "roe", "aged-roe",
)
SECRET_NOTE_KEY_PREFIX = "SecretNote::"
