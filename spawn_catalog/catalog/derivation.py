"""
Derivation engine: flavored variants of base objects.

Given a validated base Object entity, emit the entities derived from it. Keys
are ``"<baseKey>/<suffix>"``; dispatch is on the base item's category:

  fruit       → wine (price ×3), jelly (50 + price ×2)
  vegetable   → juice (int(price ×2.25)), pickled (50 + price ×2)
  flower      → honey (honey base price + price ×2)
  fish shop   → roe / aged roe, but only for the roe item itself (sheet 812);
                it triggers a scan of the whole object table.

Roe scan (derived from the fish pond produce rules):
  1. Build the roe ``TagRuleIndex`` from the pond table.
  2. Construct every object; skip those that fail or have no context tags.
  3. Each object whose tags match is a roe-producing fish: emit
     ``"<fishId>/roe"`` and, unless it is the sturgeon (whose aged roe is
     Caviar, a separate item), ``"<fishId>/aged-roe"`` at twice the roe price.

Factories capture only immutable values read from the validation sample
(name, price, sheet index, color), so every call builds a fresh object graph.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Iterator, Optional

from spawn_catalog.catalog.backend import FISH_POND_TABLE, CatalogBackend, GameItem, try_load
from spawn_catalog.catalog.factory import try_create
from spawn_catalog.catalog.tag_rules import (
    NegatedTagPolicy,
    TagRuleIndex,
    build_roe_tag_index,
    parse_pond_rules,
)
from spawn_catalog.models.content import ORANGE, STURGEON_ROE_COLOR, Color
from spawn_catalog.models.entity import CatalogEntity
from spawn_catalog.taxonomy.item_taxonomy import (
    AGED_ROE_ID,
    HONEY_ID,
    JELLY_ID,
    JUICE_ID,
    PICKLES_ID,
    ROE_ID,
    ROE_SHEET_INDEX,
    STURGEON_ID,
    STURGEON_SHEET_INDEX,
    WINE_ID,
    EntityType,
    ObjectCategory,
    PreserveType,
)

logger = logging.getLogger(__name__)


class DerivationEngine:
    """Emits derived entities (artisan goods, roe) for base objects.

    Args:
        backend: Content collaborators to construct derived objects through.
        negated_tag_policy: How negated pond rule tags are matched.
    """

    def __init__(
        self,
        backend: CatalogBackend,
        negated_tag_policy: NegatedTagPolicy = NegatedTagPolicy.REQUIRE_ABSENT,
    ) -> None:
        self._backend = backend
        self._objects = backend.objects
        self.negated_tag_policy = negated_tag_policy

    def derive(self, base: CatalogEntity) -> Iterator[Optional[CatalogEntity]]:
        """Yield derived entities (``None`` for any that failed validation)."""
        item = base.sample
        if item is None:
            return

        name: str = item.name
        price: int = item.price
        sheet_index: int = item.parent_sheet_index
        category = item.category
        key = base.key

        # fruit products
        if category == ObjectCategory.FRUIT:
            yield self._variant(
                key, "wine", WINE_ID, f"{name} Wine",
                PreserveType.WINE, sheet_index, price=price * 3,
            )
            yield self._variant(
                key, "jelly", JELLY_ID, f"{name} Jelly",
                PreserveType.JELLY, sheet_index, price=50 + price * 2,
            )

        # vegetable products
        elif category == ObjectCategory.VEGETABLE:
            yield self._variant(
                key, "juice", JUICE_ID, f"{name} Juice",
                PreserveType.JUICE, sheet_index, price=int(price * 2.25),
            )
            yield self._variant(
                key, "pickled", PICKLES_ID, f"Pickled {name}",
                PreserveType.PICKLE, sheet_index, price=50 + price * 2,
            )

        # flower honey
        elif category == ObjectCategory.FLOWER:
            yield self._variant(
                key, "honey", HONEY_ID, f"{name} Honey",
                PreserveType.HONEY, sheet_index, add_price=price * 2,
            )

        # roe and aged roe
        elif category == ObjectCategory.SELL_AT_FISH_SHOP and sheet_index == ROE_SHEET_INDEX:
            yield from self.derive_roe()

    # ── Artisan goods ─────────────────────────────────────────────────────────

    def _variant(
        self,
        base_key: str,
        suffix: str,
        object_id: str,
        name: str,
        preserve: PreserveType,
        parent_sheet_index: int,
        price: Optional[int] = None,
        add_price: int = 0,
    ) -> Optional[CatalogEntity]:
        return try_create(
            EntityType.OBJECT,
            f"{base_key}/{suffix}",
            partial(
                self._create_preserved,
                object_id, name, preserve, parent_sheet_index, price, add_price,
            ),
        )

    def _create_preserved(
        self,
        object_id: str,
        name: str,
        preserve: PreserveType,
        parent_sheet_index: int,
        price: Optional[int],
        add_price: int,
    ) -> GameItem:
        item = self._objects.construct_object(object_id, 1)
        item.name = name
        item.preserve = str(preserve)
        item.preserved_parent_sheet_index = str(parent_sheet_index)
        if price is not None:
            item.price = price
        item.price += add_price
        return item

    # ── Roe ───────────────────────────────────────────────────────────────────

    def build_tag_index(self) -> TagRuleIndex:
        """Read the pond table and build the roe tag lookups."""
        raw = try_load(self._backend.tables, FISH_POND_TABLE, list)
        return build_roe_tag_index(parse_pond_rules(raw), policy=self.negated_tag_policy)

    def derive_roe(self) -> Iterator[Optional[CatalogEntity]]:
        """Scan the object table and yield roe + aged roe for every roe-producing fish."""
        index = self.build_tag_index()
        matched = 0

        for fish_id in self._objects.object_ids():
            # get input
            candidate = try_create(
                EntityType.OBJECT, fish_id, partial(self._objects.construct_object, fish_id, 1),
            )
            fish = candidate.sample if candidate is not None else None
            tags = fish.get_context_tags() if fish is not None else None
            if not tags:
                continue

            # check if roe-producing fish
            if not index.matches(tags):
                continue
            matched += 1

            color = self.roe_color(fish)
            roe = try_create(
                EntityType.OBJECT,
                f"{fish_id}/roe",
                partial(self._create_roe, fish.name, fish.price, fish.parent_sheet_index, color),
            )
            yield roe

            if roe is not None and fish_id != STURGEON_ID:
                yield try_create(
                    EntityType.OBJECT,
                    f"{fish_id}/aged-roe",
                    partial(
                        self._create_aged_roe, fish.name, roe.sample.price, fish.parent_sheet_index, color,
                    ),
                )

        logger.debug("Roe scan matched %d fish", matched)

    def roe_color(self, fish: Any) -> Color:
        """Color for a fish's roe: fixed for sturgeon, else its dye color or orange."""
        if fish.parent_sheet_index == STURGEON_SHEET_INDEX:
            return STURGEON_ROE_COLOR
        return self._backend.dyes.color_for(fish) or ORANGE

    def _create_roe(self, fish_name: str, fish_price: int, fish_sheet_index: int, color: Color) -> GameItem:
        roe = self._objects.construct_colored(ROE_ID, 1, color)
        roe.name = f"{fish_name} Roe"
        roe.preserve = str(PreserveType.ROE)
        roe.preserved_parent_sheet_index = str(fish_sheet_index)
        roe.price += fish_price // 2
        return roe

    def _create_aged_roe(self, fish_name: str, roe_price: int, fish_sheet_index: int, color: Color) -> GameItem:
        aged = self._objects.construct_colored(AGED_ROE_ID, 1, color)
        aged.name = f"Aged {fish_name} Roe"
        aged.category = int(ObjectCategory.AGED_ROE)
        aged.preserve = str(PreserveType.AGED_ROE)
        aged.preserved_parent_sheet_index = str(fish_sheet_index)
        aged.price = roe_price * 2
        return aged
