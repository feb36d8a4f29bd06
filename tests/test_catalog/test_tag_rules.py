"""Tests for the roe tag rule index and negated-tag policies."""

from __future__ import annotations

import pytest

from spawn_catalog.catalog.tag_rules import (
    NegatedTagPolicy,
    TagRuleIndex,
    build_roe_tag_index,
    parse_pond_rules,
)
from spawn_catalog.models.content import PondProductionRule


def _rule(*tags: str, produces: tuple[str, ...] = ("812",)) -> PondProductionRule:
    return PondProductionRule(
        required_tags=tags,
        produced_items=[{"item_id": item_id} for item_id in produces],
    )


class TestBuildIndex:
    def test_single_positive_tag_is_simple(self):
        index = build_roe_tag_index([_rule("fish_ocean")])
        assert index.simple_tags == frozenset({"fish_ocean"})
        assert index.complex_tags == ()

    def test_multiple_tags_are_complex(self):
        index = build_roe_tag_index([_rule("fish_lake", "fish_night")])
        assert index.simple_tags == frozenset()
        assert index.complex_tags == (("fish_lake", "fish_night"),)

    def test_single_negated_tag_is_complex(self):
        index = build_roe_tag_index([_rule("!fish_legendary")])
        assert index.simple_tags == frozenset()
        assert index.complex_tags == (("!fish_legendary",),)

    def test_rules_not_producing_roe_are_ignored(self):
        index = build_roe_tag_index([_rule("fish_desert", produces=("164",))])
        assert not index

    def test_policy_is_carried(self):
        index = build_roe_tag_index([], policy=NegatedTagPolicy.LITERAL)
        assert index.policy == NegatedTagPolicy.LITERAL


class TestMatching:
    def test_simple_tag_matches(self):
        index = TagRuleIndex(simple_tags=frozenset({"fish_ocean"}))
        assert index.matches({"fish_ocean", "color_yellow"})
        assert not index.matches({"fish_river"})

    def test_complex_set_needs_every_tag(self):
        index = TagRuleIndex(complex_tags=(("fish_lake", "fish_night"),))
        assert index.matches({"fish_lake", "fish_night", "color_red"})
        assert not index.matches({"fish_lake"})

    def test_any_complex_set_suffices(self):
        index = TagRuleIndex(complex_tags=(("a", "b"), ("c", "d")))
        assert index.matches({"c", "d"})

    def test_empty_tags_never_match(self):
        index = TagRuleIndex(complex_tags=((),))
        assert not index.matches(set())

    def test_empty_rule_matches_any_tagged_item(self):
        index = build_roe_tag_index([_rule()])
        assert index.matches({"anything"})


class TestNegatedTagPolicy:
    """How a ``!tag`` entry is interpreted is a policy; both are pinned here."""

    @pytest.fixture
    def rules(self):
        return [_rule("fish_lake", "!fish_legendary")]

    def test_require_absent_accepts_when_tag_missing(self, rules):
        index = build_roe_tag_index(rules, policy=NegatedTagPolicy.REQUIRE_ABSENT)
        assert index.matches({"fish_lake"})

    def test_require_absent_rejects_when_tag_present(self, rules):
        index = build_roe_tag_index(rules, policy=NegatedTagPolicy.REQUIRE_ABSENT)
        assert not index.matches({"fish_lake", "fish_legendary"})

    def test_literal_needs_the_raw_negated_string(self, rules):
        index = build_roe_tag_index(rules, policy=NegatedTagPolicy.LITERAL)
        assert not index.matches({"fish_lake"})
        assert index.matches({"fish_lake", "!fish_legendary"})


class TestParsePondRules:
    def test_skips_malformed_entries(self):
        raw = [
            {"required_tags": ["fish_ocean"], "produced_items": [{"item_id": "812"}]},
            {"required_tags": "not-a-list", "produced_items": 5},
        ]
        rules = parse_pond_rules(raw)
        assert len(rules) == 1
        assert rules[0].required_tags == ("fish_ocean",)

    def test_non_list_is_empty(self):
        assert parse_pond_rules({"oops": 1}) == []
        assert parse_pond_rules(None) == []

    def test_passes_through_models(self):
        rule = _rule("fish_ocean")
        assert parse_pond_rules([rule]) == [rule]
