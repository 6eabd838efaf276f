"""Pydantic schema definitions for application forms and evaluation settings."""

from __future__ import annotations

from .evaluation import (
    AssessmentInvite,
    AutoTaggingConfig,
    ConditionKind,
    MandatoryConfig,
    QuestionEvaluationSettings,
    ScoringConfig,
    SectionName,
    TaggingRule,
    TriggerAction,
    TriggerConfig,
)
from .form import (
    CHOICE_TYPES,
    TEXT_TYPES,
    AnswerValue,
    ApplicationAnswer,
    ApplicationFormConfig,
    ApplicationQuestion,
    ApplicationSubmission,
    ConditionalLogic,
    QuestionOption,
    QuestionType,
    ShowWhen,
)

__all__ = [
    "AnswerValue",
    "ApplicationAnswer",
    "ApplicationFormConfig",
    "ApplicationQuestion",
    "ApplicationSubmission",
    "AssessmentInvite",
    "AutoTaggingConfig",
    "CHOICE_TYPES",
    "ConditionalLogic",
    "ConditionKind",
    "MandatoryConfig",
    "QuestionEvaluationSettings",
    "QuestionOption",
    "QuestionType",
    "ScoringConfig",
    "SectionName",
    "ShowWhen",
    "TEXT_TYPES",
    "TaggingRule",
    "TriggerAction",
    "TriggerConfig",
]
