from __future__ import annotations

from questioneval.core.lint import lint_form, lint_settings
from questioneval.schemas import ApplicationFormConfig, ApplicationQuestion


def codes(issues) -> set[str]:
    return {issue.code for issue in issues}


def choice_question(**kwargs) -> ApplicationQuestion:
    return ApplicationQuestion(
        id="Q-choice",
        type="dropdown",
        options=[
            {"id": "1", "label": "Yes", "value": "yes"},
            {"id": "2", "label": "No", "value": "no"},
        ],
        **kwargs,
    )


def test_clean_settings_have_no_issues():
    settings = {
        "mandatory": {"enabled": True, "disqualifyIfBlank": True},
        "autoTagging": {
            "enabled": True,
            "rules": [{"condition": "in_range", "value": "1,5", "tags": ["mid"]}],
        },
    }

    assert lint_settings(settings, ApplicationQuestion(id="Q", type="number")) == []


def test_invalid_shape_is_reported_not_raised():
    issues = lint_settings({"scoring": {"enabled": True, "maxPoints": "lots"}})

    assert codes(issues) == {"invalid_settings"}
    assert issues[0].path == "scoring.maxPoints"


def test_invalid_pattern_and_disabled_section():
    issues = lint_settings(
        {
            "mandatory": {"enabled": True, "disqualifyIfIncorrect": True, "correctPattern": "([0-9"},
            "scoring": {"enabled": False},
        },
        ApplicationQuestion(id="Q", type="short_text"),
    )

    assert codes(issues) == {"invalid_pattern", "non_canonical"}


def test_rule_value_shape_errors():
    issues = lint_settings(
        {
            "autoTagging": {
                "enabled": True,
                "rules": [
                    {"condition": "greater_than", "value": "five", "tags": ["x"]},
                    {"condition": "in_range", "value": "9,1", "tags": ["y"]},
                    {"condition": "equals", "value": "", "tags": ["z"]},
                    {"condition": "contains", "value": "go", "tags": []},
                ],
            }
        }
    )

    by_path = {issue.path: issue.code for issue in issues}
    assert by_path == {
        "autoTagging.rules.0.value": "invalid_rule_value",
        "autoTagging.rules.1.value": "invalid_rule_value",
        "autoTagging.rules.2.value": "empty_rule_value",
        "autoTagging.rules.3.tags": "rule_without_tags",
    }


def test_choice_question_checks():
    issues = lint_settings(
        {
            "mandatory": {"enabled": True, "disqualifyIfIncorrect": True, "correctAnswers": ["maybe"]},
            "scoring": {"enabled": True, "pointsPerAnswer": {"yes": 1}, "maxPoints": 3, "minPointsToPass": 4},
        },
        choice_question(),
    )

    assert codes(issues) == {"unknown_option", "unreachable_pass_threshold"}


def test_missing_correctness_criteria():
    choice = lint_settings(
        {"mandatory": {"enabled": True, "disqualifyIfIncorrect": True}}, choice_question()
    )
    text = lint_settings(
        {"mandatory": {"enabled": True, "disqualifyIfIncorrect": True}},
        ApplicationQuestion(id="Q", type="long_text"),
    )

    assert codes(choice) == {"missing_correct_answers"}
    assert codes(text) == {"missing_correct_pattern"}


def test_triggers_without_actions():
    assert codes(lint_settings({"triggers": {"enabled": True}})) == {"no_trigger_actions"}


def test_lint_form_keys_issues_by_question():
    form = ApplicationFormConfig(
        id="F-1",
        questions=[
            ApplicationQuestion(id="Q-ok", type="short_text"),
            ApplicationQuestion(
                id="Q-bad",
                type="short_text",
                evaluation={"triggers": {"enabled": True}},
            ),
        ],
    )

    report = lint_form(form)

    assert list(report) == ["Q-bad"]
    assert report["Q-bad"][0].to_dict()["code"] == "no_trigger_actions"


def test_conditional_logic_dependencies_are_checked():
    form = ApplicationFormConfig.model_validate(
        {
            "id": "F-logic",
            "questions": [
                {"id": "Q-parent", "type": "yes_no"},
                {
                    "id": "Q-child",
                    "conditionalLogic": {
                        "enabled": True,
                        "dependsOnQuestionId": "Q-parent",
                        "showWhen": {"equals": "yes"},
                    },
                },
                {
                    "id": "Q-orphan",
                    "conditionalLogic": {"enabled": True, "dependsOnQuestionId": "Q-gone"},
                },
                {"id": "Q-unset", "conditionalLogic": {"enabled": True}},
                {
                    "id": "Q-off",
                    "conditionalLogic": {"enabled": False, "dependsOnQuestionId": "Q-gone"},
                },
            ],
        }
    )

    report = lint_form(form)

    assert set(report) == {"Q-orphan", "Q-unset"}
    assert codes(report["Q-orphan"]) == {"unknown_dependency"}
    assert codes(report["Q-unset"]) == {"missing_dependency"}
