"""Evaluation settings attached to application-form questions."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

ConditionKind = Literal[
    "equals",
    "contains",
    "matches",
    "greater_than",
    "less_than",
    "in_range",
]

SectionName = Literal["mandatory", "scoring", "autoTagging", "auto_tagging", "triggers"]

_MODEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


class MandatoryConfig(BaseModel):
    """Auto-disqualification rules for a question."""

    enabled: bool = False
    disqualify_if_blank: bool = False
    disqualify_if_incorrect: bool | None = None
    correct_answers: list[str] | None = None
    correct_pattern: str | None = None
    case_sensitive: bool | None = None

    model_config = _MODEL_CONFIG


class ScoringConfig(BaseModel):
    """Point values contributed by an answer."""

    enabled: bool = False
    points_per_answer: dict[str, int] | None = None
    points_for_correct: int | None = None
    points_for_incorrect: int | None = None
    max_points: int | None = None
    min_points_to_pass: int | None = None

    model_config = _MODEL_CONFIG


class TaggingRule(BaseModel):
    """Condition to tags mapping.

    ``value`` is stored as a string regardless of the condition kind; numbers
    and two-item ranges supplied by older form payloads are flattened here.
    """

    condition: ConditionKind = "equals"
    value: str = ""
    tags: list[str] = Field(default_factory=list)
    remove_tags: list[str] = Field(default_factory=list)

    model_config = _MODEL_CONFIG

    @field_validator("value", mode="before")
    @classmethod
    def _stringify_value(cls, raw: Any) -> Any:
        if raw is None:
            return ""
        if isinstance(raw, bool):
            return "yes" if raw else "no"
        if isinstance(raw, (int, float)):
            return _format_number(raw)
        if isinstance(raw, (list, tuple)):
            return ",".join(
                _format_number(item) if isinstance(item, (int, float)) else str(item)
                for item in raw
            )
        return raw


class AutoTaggingConfig(BaseModel):
    """Ordered tagging rules."""

    enabled: bool = False
    rules: list[TaggingRule] = Field(default_factory=list)

    model_config = _MODEL_CONFIG


class AssessmentInvite(BaseModel):
    """Request to invite the candidate to an external assessment."""

    assessment_type: str
    provider: str
    pass_threshold: float | None = None
    expiry_days: int | None = None

    model_config = _MODEL_CONFIG


class TriggerAction(BaseModel):
    """Action bundle handed to the application pipeline."""

    move_to_stage: str | None = None
    add_tags: list[str] | None = None
    remove_tags: list[str] | None = None
    send_assessment_invite: AssessmentInvite | None = None
    send_rejection_email: bool | None = None

    model_config = _MODEL_CONFIG


class TriggerConfig(BaseModel):
    """Pass/fail action bundles."""

    enabled: bool = False
    on_pass: TriggerAction | None = None
    on_fail: TriggerAction | None = None

    model_config = _MODEL_CONFIG


class QuestionEvaluationSettings(BaseModel):
    """Per-question evaluation configuration."""

    mandatory: MandatoryConfig | None = None
    scoring: ScoringConfig | None = None
    auto_tagging: AutoTaggingConfig | None = None
    triggers: TriggerConfig | None = None

    model_config = _MODEL_CONFIG

    def to_payload(self) -> dict[str, Any]:
        """Render the stored camelCase representation."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


SECTION_FIELDS: dict[SectionName, str] = {
    "mandatory": "mandatory",
    "scoring": "scoring",
    "autoTagging": "auto_tagging",
    "auto_tagging": "auto_tagging",
    "triggers": "triggers",
}


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


__all__ = [
    "AssessmentInvite",
    "AutoTaggingConfig",
    "ConditionKind",
    "MandatoryConfig",
    "QuestionEvaluationSettings",
    "SECTION_FIELDS",
    "ScoringConfig",
    "SectionName",
    "TaggingRule",
    "TriggerAction",
    "TriggerConfig",
]
