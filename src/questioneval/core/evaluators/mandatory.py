"""Mandatory-response gate deciding outright disqualification."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ...schemas.evaluation import MandatoryConfig
from ...schemas.form import CHOICE_TYPES, TEXT_TYPES, ApplicationQuestion
from ..conditions import ConditionEvaluator, answer_items, is_blank
from ..normalize import active_section

BLANK_REQUIRED_ANSWER = "blank_required_answer"
INCORRECT_ANSWER = "incorrect_answer"
PATTERN_MISMATCH = "pattern_mismatch"


@dataclass
class MandatoryGateConfig:
    """Configuration for the mandatory gate."""

    # Applied when a question does not set ``caseSensitive``.
    case_sensitive_default: bool = False
    require_all_correct: bool = True


@dataclass(frozen=True, slots=True)
class GateResult:
    disqualified: bool
    reason: str | None = None


PASSED = GateResult(disqualified=False)


def question_type(question: ApplicationQuestion | Mapping[str, Any] | None) -> str:
    """Return the question type, defaulting to ``short_text``."""
    if isinstance(question, ApplicationQuestion):
        return question.type
    if isinstance(question, Mapping):
        value = question.get("type")
        if isinstance(value, str):
            return value
    return "short_text"


class MandatoryGate:
    """Disqualify blank or incorrect answers to mandatory questions."""

    def __init__(
        self,
        *,
        config: MandatoryGateConfig | None = None,
        conditions: ConditionEvaluator | None = None,
    ) -> None:
        self._config = config or MandatoryGateConfig()
        self._conditions = conditions or ConditionEvaluator()

    def check(
        self,
        mandatory: MandatoryConfig | None,
        question: ApplicationQuestion | Mapping[str, Any] | None,
        answer: Any,
    ) -> GateResult:
        mandatory = active_section(mandatory)
        if mandatory is None:
            return PASSED

        if is_blank(answer):
            if mandatory.disqualify_if_blank:
                return GateResult(disqualified=True, reason=BLANK_REQUIRED_ANSWER)
            return PASSED

        if not mandatory.disqualify_if_incorrect:
            return PASSED

        if self.is_correct(mandatory, question, answer) is False:
            kind = question_type(question)
            reason = INCORRECT_ANSWER if kind in CHOICE_TYPES else PATTERN_MISMATCH
            return GateResult(disqualified=True, reason=reason)
        return PASSED

    def is_correct(
        self,
        mandatory: MandatoryConfig | None,
        question: ApplicationQuestion | Mapping[str, Any] | None,
        answer: Any,
    ) -> bool | None:
        """Run the correctness check for a non-blank answer.

        Returns None when no correctness criterion is configured for the
        question type, or when the configured pattern does not compile.
        """
        if mandatory is None:
            return None

        kind = question_type(question)
        if kind in CHOICE_TYPES:
            return self._choice_correct(mandatory, answer)
        if kind in TEXT_TYPES:
            return self._text_correct(mandatory, answer)
        return None

    def _choice_correct(self, mandatory: MandatoryConfig, answer: Any) -> bool | None:
        allowed = {value for value in mandatory.correct_answers or [] if value}
        if not allowed:
            return None
        selected = [item for item in answer_items(answer) if item.strip()]
        if not selected:
            return False
        if self._config.require_all_correct:
            return all(item in allowed for item in selected)
        return any(item in allowed for item in selected)

    def _text_correct(self, mandatory: MandatoryConfig, answer: Any) -> bool | None:
        pattern = mandatory.correct_pattern
        if not pattern:
            return None
        case_sensitive = (
            mandatory.case_sensitive
            if mandatory.case_sensitive is not None
            else self._config.case_sensitive_default
        )
        text = ", ".join(answer_items(answer))
        return self._conditions.pattern_matches(
            pattern, text.strip(), case_sensitive=case_sensitive
        )
