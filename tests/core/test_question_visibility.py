from __future__ import annotations

from typing import Any

import pytest

from questioneval.core import ApplicationEvaluator, QuestionVisibility
from questioneval.core.engine import INERT_RESULT
from questioneval.schemas import ApplicationFormConfig, ApplicationSubmission, ShowWhen


def follow_up_form(show_when: dict[str, Any], *, enabled: bool = True) -> ApplicationFormConfig:
    return ApplicationFormConfig.model_validate(
        {
            "id": "F-driver",
            "questions": [
                {"id": "has_license", "type": "yes_no", "order": 1},
                {
                    "id": "license_no",
                    "type": "short_text",
                    "order": 2,
                    "conditionalLogic": {
                        "enabled": enabled,
                        "dependsOnQuestionId": "has_license",
                        "showWhen": show_when,
                    },
                    "evaluation": {
                        "mandatory": {"enabled": True, "disqualifyIfBlank": True},
                    },
                },
            ],
        }
    )


def submission(answers: dict[str, Any]) -> ApplicationSubmission:
    return ApplicationSubmission.model_validate({"applicationId": "A-1", "answers": answers})


def test_hidden_follow_up_does_not_disqualify():
    form = follow_up_form({"equals": "yes"})

    evaluation = ApplicationEvaluator().evaluate(form, submission({"has_license": "no"}))

    assert evaluation.decision == "pass"
    assert evaluation.hidden_questions == frozenset({"license_no"})
    assert evaluation.questions["license_no"] == INERT_RESULT
    assert evaluation.to_dict()["hidden_questions"] == ["license_no"]


def test_shown_follow_up_is_evaluated():
    form = follow_up_form({"equals": "yes"})

    evaluation = ApplicationEvaluator().evaluate(form, submission({"has_license": "yes"}))

    assert evaluation.decision == "disqualified"
    assert evaluation.verdict.disqualify_reasons == (("license_no", "blank_required_answer"),)
    assert evaluation.hidden_questions == frozenset()


def test_disabled_logic_keeps_question_visible():
    form = follow_up_form({"equals": "yes"}, enabled=False)

    evaluation = ApplicationEvaluator().evaluate(form, submission({"has_license": "no"}))

    assert evaluation.decision == "disqualified"


@pytest.mark.parametrize(
    ("show_when", "parent_answer", "expected"),
    [
        ({"equals": "yes"}, "Yes", True),
        ({"equals": ["aws", "gcp"]}, ["azure", "gcp"], True),
        ({"equals": ["aws", "gcp"]}, ["azure"], False),
        ({"contains": "senior"}, "Senior engineer", True),
        ({"contains": "senior"}, "Junior", False),
        ({"isEmpty": True}, "  ", True),
        ({"isEmpty": True}, "text", False),
        ({"isNotEmpty": True}, None, False),
        ({"isNotEmpty": True}, "text", True),
        ({"equals": "yes", "isNotEmpty": True}, "no", False),
        ({}, None, True),
    ],
)
def test_show_when_criteria(show_when, parent_answer, expected):
    visibility = QuestionVisibility()

    assert visibility.is_shown(ShowWhen.model_validate(show_when), parent_answer) is expected


def test_hidden_parent_hides_its_follow_ups():
    form = ApplicationFormConfig.model_validate(
        {
            "id": "F-chain",
            "questions": [
                {"id": "q1", "type": "yes_no"},
                {
                    "id": "q2",
                    "type": "yes_no",
                    "conditionalLogic": {
                        "enabled": True,
                        "dependsOnQuestionId": "q1",
                        "showWhen": {"equals": "yes"},
                    },
                },
                {
                    "id": "q3",
                    "type": "short_text",
                    "conditionalLogic": {
                        "enabled": True,
                        "dependsOnQuestionId": "q2",
                        "showWhen": {"isEmpty": True},
                    },
                },
            ],
        }
    )

    hidden = QuestionVisibility().hidden_questions(form, submission({"q1": "no"}))

    assert hidden == frozenset({"q2", "q3"})


def test_unknown_parent_and_cycles_stay_visible():
    form = ApplicationFormConfig.model_validate(
        {
            "id": "F-broken",
            "questions": [
                {
                    "id": "orphan",
                    "conditionalLogic": {
                        "enabled": True,
                        "dependsOnQuestionId": "missing",
                        "showWhen": {"equals": "yes"},
                    },
                },
                {
                    "id": "self",
                    "conditionalLogic": {
                        "enabled": True,
                        "dependsOnQuestionId": "self",
                        "showWhen": {"isNotEmpty": True},
                    },
                },
            ],
        }
    )

    assert QuestionVisibility().hidden_questions(form, submission({})) == frozenset()
