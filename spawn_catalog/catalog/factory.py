"""
Validating factory and type-table adapter.

``try_create`` is the only place a candidate becomes a ``CatalogEntity``. It
builds one instance right away, forces its description to load (broken data
surfaces here, not later at an arbitrary use site), and stores the *original*
construction function so every later ``create_instance()`` gets a fresh object.
Any failure drops the candidate.

Closure capture: factories built in a loop must bind the per-iteration value
(``functools.partial`` or a helper function argument), never close over the loop
variable, or every deferred factory sees the last iteration's value.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable, Iterator, Optional

from spawn_catalog.catalog.backend import DefinitionTableService
from spawn_catalog.models.entity import CatalogEntity
from spawn_catalog.taxonomy.item_taxonomy import LOW_QUALITY, EntityType, ItemKind

logger = logging.getLogger(__name__)


def detect_kind(item: Any) -> ItemKind:
    """Classify a constructed instance once into the closed kind set."""
    kind = getattr(item, "kind", None)
    if kind is None:
        return ItemKind.OTHER
    return ItemKind(kind)


def try_create(
    entity_type: EntityType,
    key: str,
    create_item: Callable[[], Any],
) -> Optional[CatalogEntity]:
    """Create a catalog entity if the candidate is valid.

    Args:
        entity_type: The entity type.
        key: The locally unique key.
        create_item: Zero-argument constructor for a new instance.

    Returns:
        The entity, or ``None`` if construction or description loading failed.
    """
    try:
        item = create_item()
        item.get_description()  # force-load item data so invalid entries fail here
        kind = detect_kind(item)
        return CatalogEntity(
            entity_type=entity_type,
            key=key,
            kind=kind,
            factory=create_item,
            sample=item,
        )
    except Exception as exc:
        logger.debug("Dropping invalid candidate %s:%s (%s)", entity_type, key, exc)
        return None


def get_for_item_type(
    definitions: DefinitionTableService,
    entity_type: EntityType,
    namespace: str,
) -> Iterator[Optional[CatalogEntity]]:
    """Yield a validated entity (or ``None``) for every id in a namespace.

    Unknown namespaces yield nothing.
    """
    if namespace not in set(definitions.namespaces()):
        return

    for item_id in definitions.list_identifiers(namespace):
        yield try_create(
            entity_type,
            item_id,
            partial(definitions.construct, namespace, item_id, 1, LOW_QUALITY),
        )
