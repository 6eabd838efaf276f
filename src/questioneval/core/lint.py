"""Save-time validation of evaluation settings.

The engine degrades silently on bad configuration; this module is where such
problems are surfaced to the form author.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping

from pydantic import ValidationError

from ..schemas.evaluation import (
    AutoTaggingConfig,
    MandatoryConfig,
    QuestionEvaluationSettings,
    ScoringConfig,
)
from ..schemas.form import CHOICE_TYPES, TEXT_TYPES, ApplicationFormConfig, ApplicationQuestion
from .conditions import ConditionConfig, compile_pattern, parse_condition
from .normalize import active_section

Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class SettingsIssue:
    path: str
    code: str
    severity: Severity
    message: str

    def to_dict(self) -> dict[str, str]:
        return {
            "path": self.path,
            "code": self.code,
            "severity": self.severity,
            "message": self.message,
        }


def lint_settings(
    settings: QuestionEvaluationSettings | Mapping[str, Any] | None,
    question: ApplicationQuestion | None = None,
    *,
    conditions: ConditionConfig | None = None,
) -> list[SettingsIssue]:
    """Report configuration problems the engine would otherwise ignore."""
    if settings is None:
        return []
    try:
        parsed = (
            settings
            if isinstance(settings, QuestionEvaluationSettings)
            else QuestionEvaluationSettings.model_validate(settings)
        )
    except ValidationError as exc:
        return [
            SettingsIssue(
                path=".".join(str(part) for part in error["loc"]) or "evaluation",
                code="invalid_settings",
                severity="error",
                message=error["msg"],
            )
            for error in exc.errors()
        ]

    issues: list[SettingsIssue] = []
    issues.extend(_non_canonical(parsed))
    mandatory = active_section(parsed.mandatory)
    if mandatory is not None:
        issues.extend(_lint_mandatory(mandatory, question))
    scoring = active_section(parsed.scoring)
    if scoring is not None:
        issues.extend(_lint_scoring(scoring, question))
    auto_tagging = active_section(parsed.auto_tagging)
    if auto_tagging is not None:
        issues.extend(_lint_tagging(auto_tagging, conditions or ConditionConfig()))
    triggers = active_section(parsed.triggers)
    if triggers is not None and triggers.on_pass is None and triggers.on_fail is None:
        issues.append(
            SettingsIssue(
                path="triggers",
                code="no_trigger_actions",
                severity="warning",
                message="Triggers are enabled but neither onPass nor onFail is set.",
            )
        )
    return issues


def lint_form(
    form: ApplicationFormConfig,
    *,
    conditions: ConditionConfig | None = None,
) -> dict[str, list[SettingsIssue]]:
    """Lint every question of a form; questions without issues are omitted."""
    report: dict[str, list[SettingsIssue]] = {}
    known = form.question_by_id()
    for question in form.ordered_questions():
        issues = lint_settings(question.evaluation, question, conditions=conditions)
        issues.extend(_lint_conditional_logic(question, known))
        if issues:
            report[question.id] = issues
    return report


def _lint_conditional_logic(
    question: ApplicationQuestion,
    known: Mapping[str, ApplicationQuestion],
) -> list[SettingsIssue]:
    logic = question.conditional_logic
    if logic is None or not logic.enabled:
        return []
    parent_id = logic.depends_on_question_id
    if not parent_id:
        return [
            SettingsIssue(
                path="conditionalLogic.dependsOnQuestionId",
                code="missing_dependency",
                severity="warning",
                message="Conditional logic is enabled without a parent question; it is always shown.",
            )
        ]
    if parent_id == question.id or parent_id not in known:
        return [
            SettingsIssue(
                path="conditionalLogic.dependsOnQuestionId",
                code="unknown_dependency",
                severity="warning",
                message=f"Question {parent_id!r} cannot control visibility; it is always shown.",
            )
        ]
    return []


def _non_canonical(settings: QuestionEvaluationSettings) -> list[SettingsIssue]:
    issues = []
    for alias, field in (
        ("mandatory", "mandatory"),
        ("scoring", "scoring"),
        ("autoTagging", "auto_tagging"),
        ("triggers", "triggers"),
    ):
        section = getattr(settings, field)
        if section is not None and active_section(section) is None:
            issues.append(
                SettingsIssue(
                    path=alias,
                    code="non_canonical",
                    severity="warning",
                    message=f"Disabled section '{alias}' is stored; it will be pruned.",
                )
            )
    return issues


def _lint_mandatory(
    mandatory: MandatoryConfig,
    question: ApplicationQuestion | None,
) -> list[SettingsIssue]:
    issues: list[SettingsIssue] = []

    if mandatory.correct_pattern:
        case_sensitive = bool(mandatory.case_sensitive)
        if compile_pattern(mandatory.correct_pattern, case_sensitive=case_sensitive) is None:
            issues.append(
                SettingsIssue(
                    path="mandatory.correctPattern",
                    code="invalid_pattern",
                    severity="error",
                    message=f"Pattern {mandatory.correct_pattern!r} does not compile.",
                )
            )

    if question is None or not mandatory.disqualify_if_incorrect:
        return issues

    if question.type in CHOICE_TYPES and not mandatory.correct_answers:
        issues.append(
            SettingsIssue(
                path="mandatory.correctAnswers",
                code="missing_correct_answers",
                severity="warning",
                message="disqualifyIfIncorrect is set but no correct answers are selected.",
            )
        )
    if question.type in TEXT_TYPES and not mandatory.correct_pattern:
        issues.append(
            SettingsIssue(
                path="mandatory.correctPattern",
                code="missing_correct_pattern",
                severity="warning",
                message="disqualifyIfIncorrect is set but no pattern is configured.",
            )
        )
    if question.type in CHOICE_TYPES:
        issues.extend(
            _unknown_options(
                question,
                mandatory.correct_answers or [],
                path="mandatory.correctAnswers",
            )
        )
    return issues


def _lint_scoring(
    scoring: ScoringConfig,
    question: ApplicationQuestion | None,
) -> list[SettingsIssue]:
    issues: list[SettingsIssue] = []

    if (
        scoring.max_points is not None
        and scoring.max_points > 0
        and scoring.min_points_to_pass is not None
        and scoring.min_points_to_pass > scoring.max_points
    ):
        issues.append(
            SettingsIssue(
                path="scoring.minPointsToPass",
                code="unreachable_pass_threshold",
                severity="warning",
                message=(
                    f"minPointsToPass {scoring.min_points_to_pass} exceeds "
                    f"maxPoints {scoring.max_points}."
                ),
            )
        )
    if question is not None and question.type in CHOICE_TYPES and scoring.points_per_answer:
        issues.extend(
            _unknown_options(
                question,
                list(scoring.points_per_answer),
                path="scoring.pointsPerAnswer",
            )
        )
    return issues


def _lint_tagging(
    auto_tagging: AutoTaggingConfig,
    conditions: ConditionConfig,
) -> list[SettingsIssue]:
    issues: list[SettingsIssue] = []

    for index, rule in enumerate(auto_tagging.rules):
        path = f"autoTagging.rules.{index}"
        if not rule.value.strip():
            issues.append(
                SettingsIssue(
                    path=f"{path}.value",
                    code="empty_rule_value",
                    severity="error",
                    message="Rule value is empty; the rule is skipped.",
                )
            )
        elif parse_condition(rule.condition, rule.value, config=conditions) is None:
            issues.append(
                SettingsIssue(
                    path=f"{path}.value",
                    code="invalid_rule_value",
                    severity="error",
                    message=f"Value {rule.value!r} is not valid for condition '{rule.condition}'.",
                )
            )
        if not rule.tags and not rule.remove_tags:
            issues.append(
                SettingsIssue(
                    path=f"{path}.tags",
                    code="rule_without_tags",
                    severity="warning",
                    message="Rule applies no tags.",
                )
            )
    return issues


def _unknown_options(
    question: ApplicationQuestion,
    values: list[str],
    *,
    path: str,
) -> list[SettingsIssue]:
    known = set(question.option_values())
    if not known:
        return []
    return [
        SettingsIssue(
            path=path,
            code="unknown_option",
            severity="warning",
            message=f"Option value {value!r} is not defined on question '{question.id}'.",
        )
        for value in values
        if value not in known
    ]
