from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from questioneval.cli import app


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")


FORM = {
    "id": "F-001",
    "name": "Site Reliability Engineer",
    "questions": [
        {
            "id": "Q-visa",
            "type": "yes_no",
            "label": "Are you authorized to work in Japan?",
            "required": True,
            "order": 1,
            "evaluation": {
                "mandatory": {
                    "enabled": True,
                    "disqualifyIfBlank": True,
                    "disqualifyIfIncorrect": True,
                    "correctAnswers": ["yes"],
                },
                "scoring": {"enabled": False},
                "triggers": {
                    "enabled": True,
                    "onPass": {"moveToStage": "Resume Review"},
                    "onFail": {"moveToStage": "Rejected", "sendRejectionEmail": True},
                },
            },
        },
        {
            "id": "Q-tools",
            "type": "long_text",
            "label": "Which IaC tools have you used?",
            "order": 2,
            "evaluation": {
                "autoTagging": {
                    "enabled": True,
                    "rules": [
                        {"condition": "contains", "value": "terraform", "tags": ["iac"]},
                        {"condition": "contains", "value": "", "tags": ["ignored"]},
                    ],
                }
            },
        },
    ],
}


def test_cli_runs_pipeline_and_writes_output(tmp_path: Path, runner: CliRunner) -> None:
    form_path = tmp_path / "form.json"
    submissions_path = tmp_path / "submissions.jsonl"
    output_path = tmp_path / "results.json"

    submissions = [
        {
            "applicationId": "A-001",
            "candidateId": "C-001",
            "answers": [
                {"questionId": "Q-visa", "answer": "yes"},
                {"questionId": "Q-tools", "answer": "Terraform and Ansible"},
            ],
        },
        {"applicationId": "A-002", "candidateId": "C-002", "answers": {"Q-visa": "no"}},
    ]
    write_json(form_path, FORM)
    submissions_path.write_text(
        "\n".join(json.dumps(item, ensure_ascii=False) for item in submissions),
        encoding="utf-8",
    )

    result = runner.invoke(
        app,
        [
            "run",
            "--form",
            str(form_path),
            "--submissions",
            str(submissions_path),
            "--output",
            str(output_path),
        ],
    )

    assert result.exit_code == 0, result.stdout
    rendered = json.loads(output_path.read_text(encoding="utf-8"))
    assert rendered["metadata"]["form_id"] == "F-001"
    assert rendered["metadata"]["application_count"] == 2
    assert rendered["metadata"]["errors"] == []

    first, second = rendered["results"]
    assert first["decision"] == "pass"
    assert first["verdict"]["tags"] == ["iac"]
    assert first["verdict"]["actions"] == [
        {"question_id": "Q-visa", "action": {"moveToStage": "Resume Review"}}
    ]
    assert second["decision"] == "disqualified"
    assert second["questions"]["Q-visa"]["disqualify_reason"] == "incorrect_answer"
    assert second["questions"]["Q-visa"]["triggered_action"] == {
        "moveToStage": "Rejected",
        "sendRejectionEmail": True,
    }


def test_cli_lint_reports_errors(tmp_path: Path, runner: CliRunner) -> None:
    form_path = tmp_path / "form.json"
    write_json(form_path, FORM)

    result = runner.invoke(app, ["lint", "--form", str(form_path)])

    assert result.exit_code == 1
    assert "empty_rule_value" in result.stdout
    assert "non_canonical" in result.stdout


def test_cli_lint_passes_clean_form(tmp_path: Path, runner: CliRunner) -> None:
    form_path = tmp_path / "form.json"
    write_json(form_path, {"id": "F-clean", "questions": [{"id": "Q-1", "type": "short_text"}]})

    result = runner.invoke(app, ["lint", "--form", str(form_path), "--strict"])

    assert result.exit_code == 0, result.stdout
    assert "no blocking issues" in result.stdout


def test_cli_normalize_prunes_disabled_sections(tmp_path: Path, runner: CliRunner) -> None:
    form_path = tmp_path / "form.json"
    output_path = tmp_path / "canonical.json"
    form = {
        "id": "F-002",
        "questions": [
            {
                "id": "Q-1",
                "type": "short_text",
                "evaluation": {"scoring": {"enabled": False, "maxPoints": 3}},
            },
            {
                "id": "Q-2",
                "type": "short_text",
                "evaluation": {
                    "mandatory": {"enabled": True, "disqualifyIfBlank": True},
                    "triggers": {"enabled": False},
                },
            },
        ],
    }
    write_json(form_path, form)

    result = runner.invoke(
        app, ["normalize", "--form", str(form_path), "--output", str(output_path)]
    )

    assert result.exit_code == 0, result.stdout
    canonical = json.loads(output_path.read_text(encoding="utf-8"))
    assert "evaluation" not in canonical["questions"][0]
    assert canonical["questions"][1]["evaluation"] == {
        "mandatory": {"enabled": True, "disqualifyIfBlank": True}
    }


def test_cli_rejects_non_mapping_config(tmp_path: Path, runner: CliRunner) -> None:
    form_path = tmp_path / "form.json"
    submissions_path = tmp_path / "submissions.jsonl"
    config_path = tmp_path / "config.yaml"
    write_json(form_path, FORM)
    submissions_path.write_text("", encoding="utf-8")
    config_path.write_text("- not\n- a mapping\n", encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "run",
            "--form",
            str(form_path),
            "--submissions",
            str(submissions_path),
            "--output",
            str(tmp_path / "out.json"),
            "--config",
            str(config_path),
        ],
    )

    assert result.exit_code != 0


def test_cli_applies_configured_point_threshold(tmp_path: Path, runner: CliRunner) -> None:
    form_path = tmp_path / "form.json"
    submissions_path = tmp_path / "submissions.jsonl"
    config_path = tmp_path / "config.yaml"
    output_path = tmp_path / "results.json"
    write_json(form_path, FORM)
    submissions_path.write_text(
        json.dumps({"applicationId": "A-001", "answers": {"Q-visa": "yes"}}),
        encoding="utf-8",
    )
    config_path.write_text("core:\n  min_total_points: 100\n", encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "run",
            "--form",
            str(form_path),
            "--submissions",
            str(submissions_path),
            "--output",
            str(output_path),
            "--config",
            str(config_path),
        ],
    )

    assert result.exit_code == 0, result.stdout
    rendered = json.loads(output_path.read_text(encoding="utf-8"))
    assert rendered["results"][0]["decision"] == "below_threshold"
