"""
Roe tag rule index.

Built once per catalog build from the pond production rules. Only rules whose
outputs include roe are relevant. They split two ways:

  simple   - exactly one required tag, not negated. A fish matches if it has
             any simple tag (a set lookup).
  complex  - everything else. A fish matches if it satisfies every tag of at
             least one set.

How a negated (``!tag``) entry is matched is a ``NegatedTagPolicy``:

  REQUIRE_ABSENT - ``!tag`` is satisfied when ``tag`` is absent (default).
  LITERAL        - ``!tag`` is compared as a plain string, so it only matches an
                   item that literally carries the tag ``"!tag"``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Iterable

from pydantic import ValidationError

from spawn_catalog.models.content import NEGATION_MARKER, PondProductionRule, is_negated
from spawn_catalog.taxonomy.item_taxonomy import ROE_ID

logger = logging.getLogger(__name__)


class NegatedTagPolicy(StrEnum):
    REQUIRE_ABSENT = "require_absent"
    LITERAL = "literal"


@dataclass(frozen=True)
class TagRuleIndex:
    """Lookups matching items which produce roe in a fish pond.

    Attributes:
        simple_tags: Single tags which alone qualify a fish.
        complex_tags: Tag sets which jointly qualify a fish.
        policy: How negated entries in ``complex_tags`` are matched.
    """

    simple_tags: frozenset[str] = frozenset()
    complex_tags: tuple[tuple[str, ...], ...] = ()
    policy: NegatedTagPolicy = NegatedTagPolicy.REQUIRE_ABSENT

    def __bool__(self) -> bool:
        return bool(self.simple_tags or self.complex_tags)

    def matches(self, tags: Iterable[str]) -> bool:
        """Whether an item with these context tags produces roe."""
        tag_set = set(tags)
        if not tag_set:
            return False
        if not self.simple_tags.isdisjoint(tag_set):
            return True
        return any(self._satisfies(rule, tag_set) for rule in self.complex_tags)

    def _satisfies(self, rule: tuple[str, ...], tag_set: set[str]) -> bool:
        for tag in rule:
            if self.policy == NegatedTagPolicy.REQUIRE_ABSENT and is_negated(tag):
                if tag[len(NEGATION_MARKER):] in tag_set:
                    return False
            elif tag not in tag_set:
                return False
        return True


def parse_pond_rules(raw: Any) -> list[PondProductionRule]:
    """Validate raw pond table entries, skipping malformed ones."""
    if not isinstance(raw, (list, tuple)):
        if raw:
            logger.debug("Pond table is not a list (%s); ignoring it", type(raw).__name__)
        return []

    rules: list[PondProductionRule] = []
    for i, entry in enumerate(raw):
        if isinstance(entry, PondProductionRule):
            rules.append(entry)
            continue
        try:
            rules.append(PondProductionRule.model_validate(entry))
        except ValidationError as exc:
            logger.debug("Skipping malformed pond rule at index %d: %s", i, exc)
    return rules


def build_roe_tag_index(
    rules: Iterable[PondProductionRule],
    policy: NegatedTagPolicy = NegatedTagPolicy.REQUIRE_ABSENT,
    produced_item_id: str = ROE_ID,
) -> TagRuleIndex:
    """Build the simple/complex lookups from pond rules producing ``produced_item_id``."""
    simple: set[str] = set()
    complex_sets: list[tuple[str, ...]] = []

    for rule in rules:
        if not rule.produces(produced_item_id):
            continue  # doesn't produce roe
        if len(rule.required_tags) == 1 and not is_negated(rule.required_tags[0]):
            simple.add(rule.required_tags[0])
        else:
            complex_sets.append(tuple(rule.required_tags))

    return TagRuleIndex(
        simple_tags=frozenset(simple),
        complex_tags=tuple(complex_sets),
        policy=policy,
    )
