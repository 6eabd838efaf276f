"""Canonical form of evaluation settings and copy-on-write editing helpers.

A sub-config is only meaningful while its ``enabled`` flag is set. The stored
representation never keeps a disabled sub-config: it is dropped on every
mutation, so "key absent" is the only canonical way to say "disabled".
"""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from ..schemas.evaluation import (
    SECTION_FIELDS,
    QuestionEvaluationSettings,
    SectionName,
    TaggingRule,
)

SectionT = TypeVar("SectionT", bound=BaseModel)

_SECTION_DEFAULTS: dict[str, dict[str, Any]] = {
    "mandatory": {"disqualify_if_blank": False},
    "scoring": {},
    "auto_tagging": {"rules": []},
    "triggers": {},
}


def active_section(section: SectionT | None) -> SectionT | None:
    """Return ``section`` when it is enabled, otherwise None."""
    if section is None or not getattr(section, "enabled", False):
        return None
    return section


def normalize(
    settings: QuestionEvaluationSettings | Mapping[str, Any] | None,
) -> QuestionEvaluationSettings | None:
    """Drop disabled sub-configs; None when nothing is left.

    Raises ``pydantic.ValidationError`` when ``settings`` cannot be parsed.
    """
    if settings is None:
        return None
    parsed = (
        settings
        if isinstance(settings, QuestionEvaluationSettings)
        else QuestionEvaluationSettings.model_validate(settings)
    )
    kept = {
        field: active_section(getattr(parsed, field))
        for field in _SECTION_DEFAULTS
    }
    if all(section is None for section in kept.values()):
        return None
    return QuestionEvaluationSettings(**kept)


def coerce_settings(settings: Any) -> QuestionEvaluationSettings | None:
    """Lenient variant of :func:`normalize` used at evaluation time."""
    if settings is None:
        return None
    if not isinstance(settings, (QuestionEvaluationSettings, Mapping)):
        return None
    try:
        return normalize(settings)
    except ValidationError:
        return None


def _field_for(name: SectionName) -> str:
    try:
        return SECTION_FIELDS[name]
    except KeyError as exc:
        raise KeyError(f"Unknown evaluation section: {name!r}") from exc


def _as_settings(
    settings: QuestionEvaluationSettings | Mapping[str, Any] | None,
) -> QuestionEvaluationSettings:
    return normalize(settings) or QuestionEvaluationSettings()


def update_section(
    settings: QuestionEvaluationSettings | Mapping[str, Any] | None,
    name: SectionName,
    **updates: Any,
) -> QuestionEvaluationSettings | None:
    """Merge ``updates`` into a section, creating it enabled when missing.

    Passing ``enabled=False`` removes the section.
    """
    field = _field_for(name)
    current = _as_settings(settings)
    section = getattr(current, field)
    merged: dict[str, Any] = {"enabled": True, **_SECTION_DEFAULTS[field]}
    if section is not None:
        merged.update(section.model_dump(exclude_none=True))
    merged.update(updates)

    payload = current.model_dump(exclude_none=True)
    payload[field] = merged
    return normalize(QuestionEvaluationSettings.model_validate(payload))


def toggle_section(
    settings: QuestionEvaluationSettings | Mapping[str, Any] | None,
    name: SectionName,
    enabled: bool,
) -> QuestionEvaluationSettings | None:
    if enabled:
        return update_section(settings, name, enabled=True)
    field = _field_for(name)
    current = _as_settings(settings)
    return normalize(current.model_copy(update={field: None}))


def _rules(settings: QuestionEvaluationSettings) -> list[TaggingRule]:
    section = settings.auto_tagging
    return list(section.rules) if section is not None else []


def add_tagging_rule(
    settings: QuestionEvaluationSettings | Mapping[str, Any] | None,
    rule: TaggingRule | Mapping[str, Any] | None = None,
) -> QuestionEvaluationSettings | None:
    """Append a rule; an empty ``equals`` rule when none is given."""
    current = _as_settings(settings)
    new_rule = (
        rule
        if isinstance(rule, TaggingRule)
        else TaggingRule.model_validate(rule or {"condition": "equals", "value": "", "tags": []})
    )
    return update_section(current, "autoTagging", rules=[*_rules(current), new_rule])


def update_tagging_rule(
    settings: QuestionEvaluationSettings | Mapping[str, Any] | None,
    index: int,
    **updates: Any,
) -> QuestionEvaluationSettings | None:
    current = _as_settings(settings)
    rules = _rules(current)
    rules[index] = TaggingRule.model_validate({**rules[index].model_dump(), **updates})
    return update_section(current, "autoTagging", rules=rules)


def remove_tagging_rule(
    settings: QuestionEvaluationSettings | Mapping[str, Any] | None,
    index: int,
) -> QuestionEvaluationSettings | None:
    current = _as_settings(settings)
    rules = _rules(current)
    del rules[index]
    return update_section(current, "autoTagging", rules=rules)


def set_option_points(
    settings: QuestionEvaluationSettings | Mapping[str, Any] | None,
    option_value: str,
    points: int,
) -> QuestionEvaluationSettings | None:
    current = _as_settings(settings)
    table = dict((current.scoring.points_per_answer or {}) if current.scoring else {})
    table[option_value] = points
    return update_section(current, "scoring", points_per_answer=table)


__all__ = [
    "active_section",
    "add_tagging_rule",
    "coerce_settings",
    "normalize",
    "remove_tagging_rule",
    "set_option_points",
    "toggle_section",
    "update_section",
    "update_tagging_rule",
]
