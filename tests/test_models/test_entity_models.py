"""Tests for EntityKey / CatalogEntity and the content table models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from spawn_catalog.models.content import (
    Color,
    ItemDefinition,
    PondProductionRule,
    is_negated,
)
from spawn_catalog.models.entity import CatalogEntity, EntityKey
from spawn_catalog.taxonomy.item_taxonomy import EntityType, ItemKind


class _Thing:
    def __init__(self, name: str = "Thing", price: int = 5) -> None:
        self.name = name
        self.price = price
        self.category = -4
        self.tags = set()


class TestEntityKey:
    def test_str(self):
        key = EntityKey(entity_type=EntityType.OBJECT, local_key="128/roe")
        assert str(key) == "Object:128/roe"

    def test_empty_key_raises(self):
        with pytest.raises(ValidationError, match="local_key"):
            EntityKey(entity_type=EntityType.OBJECT, local_key="  ")

    def test_hashable_and_equal(self):
        a = EntityKey(entity_type=EntityType.HAT, local_key="0")
        b = EntityKey(entity_type=EntityType.HAT, local_key="0")
        assert a == b
        assert len({a, b}) == 1

    def test_unknown_type_raises(self):
        with pytest.raises(ValidationError):
            EntityKey(entity_type="Spaceship", local_key="1")


class TestCatalogEntity:
    def test_create_instance_calls_factory_each_time(self):
        entity = CatalogEntity(entity_type=EntityType.OBJECT, key="1", factory=_Thing)
        first = entity.create_instance()
        second = entity.create_instance()
        assert first is not second
        assert first.tags is not second.tags

    def test_empty_key_raises(self):
        with pytest.raises(ValidationError, match="key"):
            CatalogEntity(entity_type=EntityType.OBJECT, key="", factory=_Thing)

    def test_frozen_immutable(self):
        entity = CatalogEntity(entity_type=EntityType.OBJECT, key="1", factory=_Thing)
        with pytest.raises(Exception):
            entity.key = "2"

    def test_retyped_keeps_key_factory_and_sample(self):
        sample = _Thing()
        entity = CatalogEntity(
            entity_type=EntityType.OBJECT, key="516", kind=ItemKind.RING,
            factory=_Thing, sample=sample,
        )
        ring = entity.retyped(EntityType.RING)
        assert ring.entity_type == EntityType.RING
        assert ring.key == "516"
        assert ring.factory is entity.factory
        assert ring.sample is sample
        assert entity.entity_type == EntityType.OBJECT

    def test_entity_key(self):
        entity = CatalogEntity(entity_type=EntityType.BOOTS, key="504", factory=_Thing)
        assert entity.entity_key == EntityKey(entity_type=EntityType.BOOTS, local_key="504")

    def test_to_record_reads_sample(self):
        entity = CatalogEntity(
            entity_type=EntityType.OBJECT, key="1", factory=_Thing, sample=_Thing("Eel", 85),
        )
        assert entity.to_record() == {
            "type": "Object",
            "key": "1",
            "name": "Eel",
            "price": 85,
            "category": -4,
            "kind": "other",
        }

    def test_to_record_without_sample(self):
        record = CatalogEntity(entity_type=EntityType.OBJECT, key="1", factory=_Thing).to_record()
        assert record["name"] == ""
        assert record["price"] is None

    def test_model_dump_excludes_callables(self):
        dumped = CatalogEntity(entity_type=EntityType.OBJECT, key="1", factory=_Thing).model_dump()
        assert "factory" not in dumped
        assert "sample" not in dumped


class TestContentModels:
    def test_color_channel_range(self):
        with pytest.raises(ValidationError):
            Color(r=256, g=0, b=0)
        assert Color(r=1, g=2, b=3).as_tuple() == (1, 2, 3, 255)

    def test_item_definition_negative_price_raises(self):
        with pytest.raises(ValidationError, match="price"):
            ItemDefinition(name="Bad", price=-1)

    def test_item_definition_empty_name_raises(self):
        with pytest.raises(ValidationError, match="name"):
            ItemDefinition(name=" ")

    def test_item_definition_kind_defaults_to_plain_object(self):
        assert ItemDefinition(name="Carp").kind == ItemKind.PLAIN_OBJECT

    def test_pond_rule_accepts_game_field_names(self):
        rule = PondProductionRule.model_validate(
            {"RequiredTags": ["fish_ocean"], "ProducedItems": [{"ItemID": 812}]}
        )
        assert rule.required_tags == ("fish_ocean",)
        assert rule.produces("812")
        assert not rule.produces("447")

    def test_is_negated(self):
        assert is_negated("!fish_legendary")
        assert not is_negated("fish_legendary")
