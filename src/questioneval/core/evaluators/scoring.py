"""Point contribution of a single answer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ...schemas.evaluation import MandatoryConfig, ScoringConfig
from ...schemas.form import CHOICE_TYPES, ApplicationQuestion
from ..conditions import answer_items, is_blank
from ..normalize import active_section
from .mandatory import MandatoryGate, question_type


@dataclass
class ScoringCalculatorConfig:
    """Configuration for answer scoring."""

    # When False, blank answers contribute nothing instead of pointsForIncorrect.
    score_blank_answers: bool = False


@dataclass(frozen=True, slots=True)
class ScoreResult:
    points: float
    passed: bool | None = None


NOT_SCORED = ScoreResult(points=0.0, passed=None)


class ScoringCalculator:
    """Compute option-table or correctness-based points."""

    def __init__(
        self,
        *,
        config: ScoringCalculatorConfig | None = None,
        gate: MandatoryGate | None = None,
    ) -> None:
        self._config = config or ScoringCalculatorConfig()
        self._gate = gate or MandatoryGate()

    def score(
        self,
        scoring: ScoringConfig | None,
        question: ApplicationQuestion | Mapping[str, Any] | None,
        answer: Any,
        *,
        mandatory: MandatoryConfig | None = None,
    ) -> ScoreResult:
        scoring = active_section(scoring)
        if scoring is None:
            return NOT_SCORED

        raw_points = self._raw_points(scoring, active_section(mandatory), question, answer)
        points = self._clamp(raw_points, scoring.max_points)
        passed = (
            points >= scoring.min_points_to_pass
            if scoring.min_points_to_pass is not None
            else None
        )
        return ScoreResult(points=points, passed=passed)

    def _raw_points(
        self,
        scoring: ScoringConfig,
        mandatory: MandatoryConfig | None,
        question: ApplicationQuestion | Mapping[str, Any] | None,
        answer: Any,
    ) -> float:
        blank = is_blank(answer)
        if blank and not self._config.score_blank_answers:
            return 0.0

        if question_type(question) in CHOICE_TYPES and scoring.points_per_answer:
            table = scoring.points_per_answer
            return float(sum(table.get(item, 0) for item in set(answer_items(answer))))

        correct = self._gate.is_correct(mandatory, question, answer)
        if correct is None:
            return 0.0
        if correct and not blank:
            return float(scoring.points_for_correct or 0)
        return float(scoring.points_for_incorrect or 0)

    @staticmethod
    def _clamp(points: float, max_points: int | None) -> float:
        if max_points is None or max_points <= 0:
            return points
        return min(max(points, 0.0), float(max_points))
