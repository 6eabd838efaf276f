"""Application-level fold over per-question results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

from ..schemas.evaluation import TriggerAction
from ..schemas.form import ApplicationFormConfig, ApplicationSubmission
from .engine import INERT_RESULT, QuestionEvaluationEngine, QuestionEvaluationResult
from .visibility import QuestionVisibility

DecisionType = Literal["pass", "below_threshold", "disqualified"]


@dataclass(frozen=True, slots=True)
class ApplicationVerdict:
    """Commutative summary of question results.

    Reasons and actions are kept sorted by question id so that merging in
    any order yields the same value.
    """

    disqualified: bool = False
    disqualify_reasons: tuple[tuple[str, str], ...] = ()
    total_points: float = 0.0
    tags_applied: frozenset[str] = field(default_factory=frozenset)
    tags_removed: frozenset[str] = field(default_factory=frozenset)
    actions: tuple[tuple[str, TriggerAction], ...] = ()

    @classmethod
    def from_result(cls, question_id: str, result: QuestionEvaluationResult) -> "ApplicationVerdict":
        reasons: tuple[tuple[str, str], ...] = ()
        if result.disqualified:
            reasons = ((question_id, result.disqualify_reason or "disqualified"),)
        actions: tuple[tuple[str, TriggerAction], ...] = ()
        if result.triggered_action is not None:
            actions = ((question_id, result.triggered_action),)
        return cls(
            disqualified=result.disqualified,
            disqualify_reasons=reasons,
            total_points=result.points_awarded,
            tags_applied=result.tags_applied,
            tags_removed=result.tags_removed,
            actions=actions,
        )

    def merge(self, other: "ApplicationVerdict") -> "ApplicationVerdict":
        return ApplicationVerdict(
            disqualified=self.disqualified or other.disqualified,
            disqualify_reasons=tuple(sorted(self.disqualify_reasons + other.disqualify_reasons)),
            total_points=self.total_points + other.total_points,
            tags_applied=self.tags_applied | other.tags_applied,
            tags_removed=self.tags_removed | other.tags_removed,
            actions=tuple(sorted(self.actions + other.actions, key=_action_sort_key)),
        )

    @property
    def tags(self) -> frozenset[str]:
        """Tags left after removals."""
        return self.tags_applied - self.tags_removed

    def decide(self, min_total_points: float | None = None) -> DecisionType:
        if self.disqualified:
            return "disqualified"
        if min_total_points is not None and self.total_points < min_total_points:
            return "below_threshold"
        return "pass"

    def to_dict(self) -> dict[str, Any]:
        return {
            "disqualified": self.disqualified,
            "disqualify_reasons": [
                {"question_id": question_id, "reason": reason}
                for question_id, reason in self.disqualify_reasons
            ],
            "total_points": self.total_points,
            "tags": sorted(self.tags),
            "tags_applied": sorted(self.tags_applied),
            "tags_removed": sorted(self.tags_removed),
            "actions": [
                {
                    "question_id": question_id,
                    "action": action.model_dump(mode="json", by_alias=True, exclude_none=True),
                }
                for question_id, action in self.actions
            ],
        }


def _action_sort_key(item: tuple[str, TriggerAction]) -> tuple[str, str]:
    question_id, action = item
    return question_id, action.model_dump_json()


def fold_results(results: Mapping[str, QuestionEvaluationResult]) -> ApplicationVerdict:
    verdict = ApplicationVerdict()
    for question_id, result in results.items():
        verdict = verdict.merge(ApplicationVerdict.from_result(question_id, result))
    return verdict


@dataclass(slots=True)
class ApplicationEvaluation:
    """Complete evaluation payload for one submission."""

    application_id: str
    candidate_id: str | None
    form_id: str
    questions: dict[str, QuestionEvaluationResult]
    verdict: ApplicationVerdict
    decision: DecisionType
    hidden_questions: frozenset[str] = frozenset()

    def to_dict(self) -> dict[str, Any]:
        return {
            "application_id": self.application_id,
            "candidate_id": self.candidate_id,
            "form_id": self.form_id,
            "decision": self.decision,
            "verdict": self.verdict.to_dict(),
            "hidden_questions": sorted(self.hidden_questions),
            "questions": {
                question_id: result.to_dict()
                for question_id, result in self.questions.items()
            },
        }


class ApplicationEvaluator:
    """Evaluate every form question for a submission and fold the results.

    Questions hidden by conditional logic contribute the inert result.
    """

    def __init__(
        self,
        *,
        engine: QuestionEvaluationEngine | None = None,
        visibility: QuestionVisibility | None = None,
        min_total_points: float | None = None,
    ) -> None:
        self._engine = engine or QuestionEvaluationEngine()
        self._visibility = visibility or QuestionVisibility()
        self._min_total_points = min_total_points

    def evaluate(
        self,
        form: ApplicationFormConfig,
        submission: ApplicationSubmission,
    ) -> ApplicationEvaluation:
        hidden = self._visibility.hidden_questions(form, submission)
        results: dict[str, QuestionEvaluationResult] = {}
        for question in form.ordered_questions():
            if question.id in hidden:
                results[question.id] = INERT_RESULT
                continue
            # Unanswered questions are evaluated as blank so blank gates fire.
            answer = submission.answer_for(question.id)
            results[question.id] = self._engine.evaluate(question, answer)

        verdict = fold_results(results)
        return ApplicationEvaluation(
            application_id=submission.application_id,
            candidate_id=submission.candidate_id,
            form_id=form.id,
            questions=results,
            verdict=verdict,
            decision=verdict.decide(self._min_total_points),
            hidden_questions=hidden,
        )
