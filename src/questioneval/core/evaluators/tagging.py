"""Rule-driven tag derivation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...schemas.evaluation import AutoTaggingConfig
from ..conditions import ConditionEvaluator, is_blank, parse_condition
from ..normalize import active_section


@dataclass(frozen=True, slots=True)
class TagResult:
    applied: frozenset[str] = field(default_factory=frozenset)
    removed: frozenset[str] = field(default_factory=frozenset)


NO_TAGS = TagResult()


class AutoTagger:
    """Union the tags of every rule whose condition holds for the answer."""

    def __init__(self, *, conditions: ConditionEvaluator | None = None) -> None:
        self._conditions = conditions or ConditionEvaluator()

    def tag(self, auto_tagging: AutoTaggingConfig | None, answer: Any) -> TagResult:
        auto_tagging = active_section(auto_tagging)
        if auto_tagging is None or is_blank(answer):
            return NO_TAGS

        applied: set[str] = set()
        removed: set[str] = set()
        for rule in auto_tagging.rules:
            # Blank or ill-typed values are configuration errors; lint reports them.
            condition = parse_condition(
                rule.condition, rule.value, config=self._conditions.config
            )
            if condition is None:
                continue
            if not self._conditions.evaluate_parsed(condition, answer):
                continue
            applied.update(tag for tag in rule.tags if tag)
            removed.update(tag for tag in rule.remove_tags if tag)

        if not applied and not removed:
            return NO_TAGS
        return TagResult(applied=frozenset(applied), removed=frozenset(removed))
