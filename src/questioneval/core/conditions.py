"""Predicate evaluation for auto-tagging rules and correctness checks."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Literal, Union

from ..schemas.evaluation import ConditionKind

MatchMode = Literal["full", "search"]

TEXT_KINDS: frozenset[str] = frozenset({"equals", "contains", "matches"})
THRESHOLD_KINDS: frozenset[str] = frozenset({"greater_than", "less_than"})

# Stands in for values that have no string form, such as ints past the
# interpreter's digit limit. Non-blank and never numeric.
UNRENDERABLE = "\ufffd"


@dataclass(frozen=True, slots=True)
class TextCondition:
    kind: ConditionKind
    text: str


@dataclass(frozen=True, slots=True)
class ThresholdCondition:
    kind: ConditionKind
    threshold: float


@dataclass(frozen=True, slots=True)
class RangeCondition:
    low: float
    high: float

    kind: ConditionKind = "in_range"


Condition = Union[TextCondition, ThresholdCondition, RangeCondition]


@dataclass
class ConditionConfig:
    """Engine-wide condition semantics."""

    match_mode: MatchMode = "full"
    case_sensitive: bool = False
    range_separator: str = ","


def parse_number(raw: Any) -> float | None:
    """Parse a finite float, returning None for anything else."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        if isinstance(raw, (int, float)):
            value = float(raw)
        else:
            value = float(str(raw).strip())
    except (ValueError, OverflowError):
        return None
    if math.isnan(value):
        return None
    return value


def parse_condition(
    kind: str,
    value: Any,
    *,
    config: ConditionConfig | None = None,
) -> Condition | None:
    """Bind a raw rule value to the shape its condition kind expects.

    Returns None when the value cannot serve the kind: blank values,
    unparsable numbers, malformed or inverted ranges, and regular expressions
    that do not compile.
    """
    config = config or ConditionConfig()
    text = answer_text(value)
    if not text.strip() or text == UNRENDERABLE:
        return None

    if kind in TEXT_KINDS:
        if kind == "matches" and compile_pattern(text, case_sensitive=config.case_sensitive) is None:
            return None
        return TextCondition(kind=kind, text=text)  # type: ignore[arg-type]

    if kind in THRESHOLD_KINDS:
        threshold = parse_number(text)
        if threshold is None:
            return None
        return ThresholdCondition(kind=kind, threshold=threshold)  # type: ignore[arg-type]

    if kind == "in_range":
        parts = text.split(config.range_separator)
        if len(parts) != 2:
            return None
        low, high = (parse_number(part) for part in parts)
        if low is None or high is None or low > high:
            return None
        return RangeCondition(low=low, high=high)

    return None


def compile_pattern(pattern: str, *, case_sensitive: bool) -> re.Pattern[str] | None:
    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        return re.compile(pattern, flags)
    except (re.error, TypeError):
        return None


def answer_text(value: Any) -> str:
    """Render a scalar answer the way it is compared against rule values."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    try:
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
    except ValueError:
        return UNRENDERABLE


def answer_items(answer: Any) -> list[str]:
    """Flatten an answer into its string items."""
    if answer is None:
        return []
    if isinstance(answer, (list, tuple, set, frozenset)):
        return [answer_text(item) for item in answer if item is not None]
    return [answer_text(answer)]


def is_blank(answer: Any) -> bool:
    return not any(item.strip() for item in answer_items(answer))


class ConditionEvaluator:
    """Evaluate a single condition against a candidate answer.

    Multi-valued answers satisfy a condition when any of their items does.
    Anything that cannot be interpreted evaluates to False.
    """

    def __init__(self, *, config: ConditionConfig | None = None) -> None:
        self._config = config or ConditionConfig()

    @property
    def config(self) -> ConditionConfig:
        return self._config

    def evaluate(self, condition: str, target: Any, answer: Any) -> bool:
        parsed = parse_condition(condition, target, config=self._config)
        if parsed is None:
            return False
        return self.evaluate_parsed(parsed, answer)

    def evaluate_parsed(self, condition: Condition, answer: Any) -> bool:
        items = [item for item in answer_items(answer) if item.strip()]
        return any(self._check(condition, item) for item in items)

    def pattern_matches(
        self,
        pattern: str,
        text: str,
        *,
        case_sensitive: bool,
    ) -> bool | None:
        """Apply a regular expression with the configured match mode.

        Returns None when the pattern does not compile.
        """
        compiled = compile_pattern(pattern, case_sensitive=case_sensitive)
        if compiled is None:
            return None
        if self._config.match_mode == "search":
            return compiled.search(text) is not None
        return compiled.fullmatch(text) is not None

    def _check(self, condition: Condition, item: str) -> bool:
        if isinstance(condition, TextCondition):
            return self._check_text(condition, item)

        number = parse_number(item)
        if number is None:
            return False
        if isinstance(condition, RangeCondition):
            return condition.low <= number <= condition.high
        if condition.kind == "greater_than":
            return number > condition.threshold
        return number < condition.threshold

    def _check_text(self, condition: TextCondition, item: str) -> bool:
        case_sensitive = self._config.case_sensitive
        if condition.kind == "matches":
            return bool(
                self.pattern_matches(condition.text, item, case_sensitive=case_sensitive)
            )

        target = condition.text
        if not case_sensitive:
            target = target.casefold()
            item = item.casefold()
        if condition.kind == "equals":
            return item == target
        return target in item
