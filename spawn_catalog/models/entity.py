"""
Catalog entry models.

``EntityKey`` is the immutable ``(EntityType, LocalKey)`` identity of an entry.

``CatalogEntity`` is the unit the catalog produces. It owns a zero-argument
factory that builds a live instance on demand. The factory is never memoized:
each ``create_instance()`` call returns an independent object.

``sample`` holds the instance built while validating the entry. The builder and
derivation rules read display metadata (name, price, category) from it; consumers
that need an instance of their own must call ``create_instance()``.
"""

from __future__ import annotations

from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from spawn_catalog.taxonomy.item_taxonomy import EntityType, ItemKind


class EntityKey(BaseModel):
    """Identity of a catalog entry.

    Attributes:
        entity_type: Broad kind of the entry.
        local_key: Unique within ``entity_type`` for one catalog build. May be a
            raw backend id (``"128"``), a derivation (``"128/wine"``), or a
            synthetic id from the custom offset range (``"1000"``).
    """

    model_config = ConfigDict(frozen=True)

    entity_type: EntityType
    local_key: str

    @field_validator("local_key")
    @classmethod
    def validate_local_key(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("local_key must not be empty.")
        return v

    def __str__(self) -> str:
        return f"{self.entity_type}:{self.local_key}"


class CatalogEntity(BaseModel):
    """A validated, spawnable catalog entry.

    Attributes:
        entity_type: Broad kind of the entry.
        key: LocalKey, unique within ``entity_type``.
        kind: Runtime kind of the constructed instance.
        factory: Zero-argument callable producing a fresh instance.
        sample: The instance built during validation.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    entity_type: EntityType
    key: str
    kind: ItemKind = ItemKind.OTHER
    factory: Callable[[], Any] = Field(repr=False, exclude=True)
    sample: Any = Field(default=None, repr=False, exclude=True)

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("key must not be empty.")
        return v

    @property
    def entity_key(self) -> EntityKey:
        return EntityKey(entity_type=self.entity_type, local_key=self.key)

    @property
    def name(self) -> str:
        return getattr(self.sample, "name", "") or ""

    def create_instance(self) -> Any:
        """Build a new, independent instance of this entry."""
        return self.factory()

    def retyped(self, entity_type: EntityType) -> CatalogEntity:
        """Return the same entry (key, factory, sample) under another type."""
        return self.model_copy(update={"entity_type": entity_type})

    def to_record(self) -> dict[str, Any]:
        """Flat, serialisable summary of this entry."""
        return {
            "type": str(self.entity_type),
            "key": self.key,
            "name": self.name,
            "price": getattr(self.sample, "price", None),
            "category": getattr(self.sample, "category", None),
            "kind": str(self.kind),
        }
