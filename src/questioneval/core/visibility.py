"""Conditional display of follow-up questions."""

from __future__ import annotations

from typing import Any

from ..schemas.form import ApplicationFormConfig, ApplicationQuestion, ApplicationSubmission, ShowWhen
from .conditions import ConditionEvaluator, is_blank


class QuestionVisibility:
    """Decide which questions of a form the candidate was shown.

    A question is hidden when its parent is hidden or when the parent's answer
    does not meet ``showWhen``. Dependencies on questions missing from the form
    and dependency cycles leave the question visible; the linter reports both.
    """

    def __init__(self, *, conditions: ConditionEvaluator | None = None) -> None:
        self._conditions = conditions or ConditionEvaluator()

    def hidden_questions(
        self,
        form: ApplicationFormConfig,
        submission: ApplicationSubmission,
    ) -> frozenset[str]:
        questions = form.question_by_id()
        resolved: dict[str, bool] = {}
        return frozenset(
            question_id
            for question_id in questions
            if not self._visible(question_id, questions, submission, resolved, set())
        )

    def is_shown(self, show_when: ShowWhen | None, parent_answer: Any) -> bool:
        if show_when is None:
            return True
        if show_when.equals:
            targets = [show_when.equals] if isinstance(show_when.equals, str) else show_when.equals
            if not any(self._conditions.evaluate("equals", target, parent_answer) for target in targets):
                return False
        if show_when.contains and not self._conditions.evaluate(
            "contains", show_when.contains, parent_answer
        ):
            return False
        if show_when.is_empty and not is_blank(parent_answer):
            return False
        if show_when.is_not_empty and is_blank(parent_answer):
            return False
        return True

    def _visible(
        self,
        question_id: str,
        questions: dict[str, ApplicationQuestion],
        submission: ApplicationSubmission,
        resolved: dict[str, bool],
        resolving: set[str],
    ) -> bool:
        if question_id in resolved:
            return resolved[question_id]
        if question_id in resolving:
            return True

        logic = questions[question_id].conditional_logic
        parent_id = logic.depends_on_question_id if logic is not None and logic.enabled else None
        if parent_id is None or parent_id == question_id or parent_id not in questions:
            visible = True
        else:
            resolving.add(question_id)
            visible = self._visible(
                parent_id, questions, submission, resolved, resolving
            ) and self.is_shown(logic.show_when, submission.answer_for(parent_id))
            resolving.discard(question_id)

        resolved[question_id] = visible
        return visible
