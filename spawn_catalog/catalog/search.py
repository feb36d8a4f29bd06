"""Search helpers over a built catalog."""

from __future__ import annotations

from typing import Iterable, Iterator

from spawn_catalog.models.entity import CatalogEntity


def search(entities: Iterable[CatalogEntity], query: str) -> Iterator[CatalogEntity]:
    """Yield entities whose display name or key contains ``query`` (case-insensitive).

    An empty query matches everything.
    """
    needle = query.strip().lower()
    for entity in entities:
        if not needle or needle in entity.name.lower() or needle in entity.key.lower():
            yield entity
