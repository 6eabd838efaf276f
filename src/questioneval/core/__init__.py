"""Core question evaluation engine components."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .aggregate import (
    ApplicationEvaluation,
    ApplicationEvaluator,
    ApplicationVerdict,
    fold_results,
)
from .conditions import ConditionConfig, ConditionEvaluator, parse_condition
from .engine import QuestionEvaluationEngine, QuestionEvaluationResult, evaluate_question
from .evaluators import (
    AutoTagger,
    GateResult,
    MandatoryGate,
    MandatoryGateConfig,
    ScoringCalculator,
    ScoringCalculatorConfig,
    TriggerDispatcher,
)
from .lint import SettingsIssue, lint_form, lint_settings
from .normalize import coerce_settings, normalize
from .visibility import QuestionVisibility

__all__ = [
    "ApplicationEvaluation",
    "ApplicationEvaluator",
    "ApplicationVerdict",
    "AutoTagger",
    "ConditionConfig",
    "ConditionEvaluator",
    "GateResult",
    "MandatoryGate",
    "MandatoryGateConfig",
    "QuestionEvaluationEngine",
    "QuestionEvaluationResult",
    "QuestionVisibility",
    "ScoringCalculator",
    "ScoringCalculatorConfig",
    "SettingsIssue",
    "TriggerDispatcher",
    "coerce_settings",
    "evaluate_question",
    "fold_results",
    "lint_form",
    "lint_settings",
    "normalize",
    "parse_condition",
]
