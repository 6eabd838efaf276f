"""Per-question evaluation orchestration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from ..schemas.evaluation import QuestionEvaluationSettings, TriggerAction
from ..schemas.form import ApplicationQuestion
from .evaluators import AutoTagger, MandatoryGate, ScoringCalculator, TriggerDispatcher
from .normalize import coerce_settings


@dataclass(frozen=True, slots=True)
class QuestionEvaluationResult:
    """Outcome of evaluating one answer against its question's settings."""

    disqualified: bool = False
    disqualify_reason: str | None = None
    points_awarded: float = 0.0
    scoring_passed: bool | None = None
    tags_applied: frozenset[str] = field(default_factory=frozenset)
    tags_removed: frozenset[str] = field(default_factory=frozenset)
    triggered_action: TriggerAction | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "disqualified": self.disqualified,
            "disqualify_reason": self.disqualify_reason,
            "points_awarded": self.points_awarded,
            "scoring_passed": self.scoring_passed,
            "tags_applied": sorted(self.tags_applied),
            "tags_removed": sorted(self.tags_removed),
            "triggered_action": (
                self.triggered_action.model_dump(mode="json", by_alias=True, exclude_none=True)
                if self.triggered_action is not None
                else None
            ),
        }


INERT_RESULT = QuestionEvaluationResult()


class QuestionEvaluationEngine:
    """Run gate, scoring, tagging and trigger dispatch for one answer."""

    def __init__(
        self,
        *,
        gate: MandatoryGate | None = None,
        scoring: ScoringCalculator | None = None,
        tagger: AutoTagger | None = None,
        dispatcher: TriggerDispatcher | None = None,
    ) -> None:
        self._gate = gate or MandatoryGate()
        self._scoring = scoring or ScoringCalculator(gate=self._gate)
        self._tagger = tagger or AutoTagger()
        self._dispatcher = dispatcher or TriggerDispatcher()

    def evaluate_question(
        self,
        settings: QuestionEvaluationSettings | Mapping[str, Any] | None,
        question: ApplicationQuestion | Mapping[str, Any] | None,
        answer: Any,
    ) -> QuestionEvaluationResult:
        canonical = coerce_settings(settings)
        if canonical is None:
            return INERT_RESULT

        gate_result = self._gate.check(canonical.mandatory, question, answer)
        score = self._scoring.score(
            canonical.scoring,
            question,
            answer,
            mandatory=canonical.mandatory,
        )
        tags = self._tagger.tag(canonical.auto_tagging, answer)
        action = self._dispatcher.dispatch(canonical.triggers, gate_result)

        return QuestionEvaluationResult(
            disqualified=gate_result.disqualified,
            disqualify_reason=gate_result.reason,
            points_awarded=score.points,
            scoring_passed=score.passed,
            tags_applied=tags.applied,
            tags_removed=tags.removed,
            triggered_action=action,
        )

    def evaluate(
        self,
        question: ApplicationQuestion,
        answer: Any,
    ) -> QuestionEvaluationResult:
        """Evaluate ``answer`` against the settings embedded in ``question``."""
        return self.evaluate_question(question.evaluation, question, answer)


_DEFAULT_ENGINE = QuestionEvaluationEngine()


def evaluate_question(
    settings: QuestionEvaluationSettings | Mapping[str, Any] | None,
    question: ApplicationQuestion | Mapping[str, Any] | None,
    answer: Any,
) -> QuestionEvaluationResult:
    """Evaluate with the default engine configuration."""
    return _DEFAULT_ENGINE.evaluate_question(settings, question, answer)
