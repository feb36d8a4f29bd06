"""
Catalog builder: every spawnable entity, built lazily on demand.

Flow
----
Types are produced in a fixed order (tools, clothing, wallpaper, flooring,
boots, hats, weapons, furniture, big craftables, then objects and rings):

1. Tools are not table-driven: each upgradeable kind at each quality tier
   (the fishing rod has no iridium tier), then four synthetic tools keyed from
   the custom id offset.
2. Wallpaper and flooring ids come from fixed ranges.
3. Every other type lists its ids from the definition tables.
4. Objects are post-processed: rings are re-emitted as ``Ring``; the secret
   note expands into one entity per secret-note key; everything else is
   yielded and (with ``include_variants``) passed to the derivation engine.

Failed candidates (``None``) and repeated ``(type, key)`` pairs are dropped
before anything reaches the caller. Nothing is built for a type the caller did
not request, and nothing past the point where the caller stops iterating.

Usage::

    builder = CatalogBuilder(CatalogBackend.from_repository(repo))
    for entity in builder.get_all({EntityType.OBJECT}, include_variants=False):
        item = entity.create_instance()
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping
from functools import partial
from typing import Callable, Iterable, Iterator, Optional

from spawn_catalog.catalog.backend import SECRET_NOTES_TABLE, CatalogBackend, GameItem, try_load
from spawn_catalog.catalog.derivation import DerivationEngine
from spawn_catalog.catalog.factory import get_for_item_type, try_create
from spawn_catalog.catalog.tag_rules import NegatedTagPolicy
from spawn_catalog.config import CatalogConfig
from spawn_catalog.models.entity import CatalogEntity
from spawn_catalog.taxonomy.item_taxonomy import (
    FLOORING_NAMESPACE,
    LOW_QUALITY,
    SECRET_NOTE_ID,
    SECRET_NOTE_KEY_PREFIX,
    SYNTHETIC_TOOLS,
    TIERED_TOOL_KINDS,
    TYPE_NAMESPACES,
    TYPE_ORDER,
    WALLPAPER_NAMESPACE,
    EntityType,
    ItemKind,
    ObjectCategory,
    ToolKind,
    ToolQuality,
)

logger = logging.getLogger(__name__)


def _normalize_types(item_types: Optional[Iterable[EntityType | str]]) -> Optional[frozenset[EntityType]]:
    """Requested types as a set, or ``None`` meaning every type."""
    if not item_types:
        return None
    types = frozenset(EntityType(t) for t in item_types)
    return types or None


class CatalogBuilder:
    """Builds the catalog of spawnable entities from injected content collaborators.

    The builder keeps no state between builds; each ``get_all()`` call starts
    fresh (including the roe tag index).

    Args:
        backend: Read-only content collaborators.
        config: Catalog settings; defaults to ``CatalogConfig()``.
    """

    def __init__(
        self,
        backend: CatalogBackend,
        config: Optional[CatalogConfig] = None,
    ) -> None:
        self.config = config or CatalogConfig()
        self._backend = backend
        self._derivation = DerivationEngine(
            backend,
            negated_tag_policy=NegatedTagPolicy(self.config.negated_tag_policy),
        )

    def get_all(
        self,
        item_types: Optional[Iterable[EntityType | str]] = None,
        include_variants: Optional[bool] = None,
    ) -> Iterator[CatalogEntity]:
        """Yield every spawnable entity.

        Args:
            item_types: Entity types to include; ``None`` or empty for all.
            include_variants: Whether to include flavored variants such as
                "Sunflower Honey" and roe. Defaults to the configured value.

        Yields:
            Validated entities, unique by ``(entity_type, key)``.
        """
        types = _normalize_types(item_types)
        if include_variants is None:
            include_variants = self.config.include_variants

        seen: set[tuple[EntityType, str]] = set()
        counts: Counter[str] = Counter()

        for entity in self._get_all_raw(types, include_variants):
            if entity is None:
                continue
            ident = (entity.entity_type, entity.key)
            if ident in seen:
                logger.debug("Skipping duplicate entity %s:%s", entity.entity_type, entity.key)
                continue
            seen.add(ident)
            counts[str(entity.entity_type)] += 1
            yield entity

        logger.info(
            "Catalog build complete: %d entities (%s)",
            sum(counts.values()),
            ", ".join(f"{t}={n}" for t, n in sorted(counts.items())) or "none",
        )

    # ── Raw enumeration ───────────────────────────────────────────────────────

    def _get_all_raw(
        self,
        types: Optional[frozenset[EntityType]],
        include_variants: bool,
    ) -> Iterator[Optional[CatalogEntity]]:
        def should_get(entity_type: EntityType) -> bool:
            return types is None or entity_type in types

        for entity_type in TYPE_ORDER:
            # rings come out of the object pass
            if entity_type == EntityType.RING:
                continue
            if entity_type == EntityType.OBJECT:
                if should_get(EntityType.OBJECT) or should_get(EntityType.RING):
                    yield from self._get_objects(should_get, include_variants)
            elif should_get(entity_type):
                yield from self._get_type(entity_type)

    def _get_type(self, entity_type: EntityType) -> Iterator[Optional[CatalogEntity]]:
        if entity_type == EntityType.TOOL:
            yield from self._get_tools()
        elif entity_type == EntityType.WALLPAPER:
            yield from self._get_wall_coverings(
                EntityType.WALLPAPER, WALLPAPER_NAMESPACE, self.config.wallpaper_count,
            )
        elif entity_type == EntityType.FLOORING:
            yield from self._get_wall_coverings(
                EntityType.FLOORING, FLOORING_NAMESPACE, self.config.flooring_count,
            )
        else:
            for namespace in TYPE_NAMESPACES[entity_type]:
                yield from get_for_item_type(self._backend.definitions, entity_type, namespace)

    # ── Objects / rings ───────────────────────────────────────────────────────

    def _get_objects(
        self,
        should_get: Callable[[EntityType], bool],
        include_variants: bool,
    ) -> Iterator[Optional[CatalogEntity]]:
        for namespace in TYPE_NAMESPACES[EntityType.OBJECT]:
            for result in get_for_item_type(self._backend.definitions, EntityType.OBJECT, namespace):
                if result is None:
                    continue

                # ring
                if result.kind == ItemKind.RING:
                    if should_get(EntityType.RING):
                        yield result.retyped(EntityType.RING)

                # secret notes
                elif result.key == SECRET_NOTE_ID:
                    if should_get(EntityType.OBJECT):
                        yield from self._get_secret_notes()

                # item
                elif should_get(EntityType.OBJECT):
                    yield result
                    if include_variants:
                        yield from self._derivation.derive(result)

    # ── Tools ─────────────────────────────────────────────────────────────────

    def _get_tools(self) -> Iterator[Optional[CatalogEntity]]:
        tools = self._backend.tools
        for quality in ToolQuality:
            for kind in TIERED_TOOL_KINDS:
                if kind == ToolKind.FISHING_ROD and quality == ToolQuality.IRIDIUM:
                    continue
                yield try_create(
                    EntityType.TOOL,
                    f"{int(kind)}:{int(quality)}",
                    partial(tools.create_tool, kind, int(quality)),
                )

        # these have no id in the game data, so they get ids from the custom offset
        for offset, name in enumerate(SYNTHETIC_TOOLS):
            yield try_create(
                EntityType.TOOL,
                str(self.config.custom_id_offset + offset),
                partial(tools.create_special_tool, name),
            )

    # ── Wallpaper / flooring ──────────────────────────────────────────────────

    def _get_wall_coverings(
        self,
        entity_type: EntityType,
        namespace: str,
        count: int,
    ) -> Iterator[Optional[CatalogEntity]]:
        for covering_id in range(count):
            yield try_create(
                entity_type,
                str(covering_id),
                partial(self._create_wall_covering, namespace, str(covering_id)),
            )

    def _create_wall_covering(self, namespace: str, covering_id: str) -> GameItem:
        item = self._backend.definitions.construct(namespace, covering_id, 1, LOW_QUALITY)
        item.category = int(ObjectCategory.FURNITURE)
        return item

    # ── Secret notes ──────────────────────────────────────────────────────────

    def _get_secret_notes(self) -> Iterator[Optional[CatalogEntity]]:
        notes = try_load(self._backend.tables, SECRET_NOTES_TABLE, dict)
        if not isinstance(notes, Mapping):
            logger.debug("Secret note table is not a mapping; ignoring it")
            return

        for note_id in notes.keys():
            yield try_create(
                EntityType.OBJECT,
                f"{SECRET_NOTE_KEY_PREFIX}{note_id}",
                partial(self._create_secret_note, note_id),
            )

    def _create_secret_note(self, note_id: object) -> GameItem:
        note = self._backend.objects.construct_object(SECRET_NOTE_ID, 1)
        note.name = f"{note.name} #{note_id}"
        return note


def get_all(
    backend: CatalogBackend,
    item_types: Optional[Iterable[EntityType | str]] = None,
    include_variants: bool = True,
    config: Optional[CatalogConfig] = None,
) -> Iterator[CatalogEntity]:
    """Build a catalog once with a throwaway builder. See ``CatalogBuilder.get_all``."""
    return CatalogBuilder(backend, config).get_all(item_types, include_variants)
