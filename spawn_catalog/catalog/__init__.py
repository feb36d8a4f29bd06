"""Catalog construction: enumeration, validation and derivation of spawnable entities."""

from spawn_catalog.catalog.backend import CatalogBackend, ContentLoadError
from spawn_catalog.catalog.builder import CatalogBuilder, get_all
from spawn_catalog.catalog.search import search
from spawn_catalog.catalog.tag_rules import NegatedTagPolicy, TagRuleIndex

__all__ = [
    "CatalogBackend",
    "CatalogBuilder",
    "ContentLoadError",
    "NegatedTagPolicy",
    "TagRuleIndex",
    "get_all",
    "search",
]
