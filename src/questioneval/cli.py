"""Typer CLI entrypoint for the question evaluation engine."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer

import yaml
from pydantic import ValidationError

from .container import create_container
from .core import lint_form, normalize
from .logging import configure_logging
from .pipeline import AuditLogger, FormLoader
from .schemas.config import load_config

app = typer.Typer(help="Application question evaluation CLI.")


def _load_settings(config: Optional[Path]) -> dict[str, Any]:
    if not config:
        return {}
    with config.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, dict):
        raise typer.BadParameter("Config file must be a YAML object", param_name="config")
    try:
        return load_config(loaded).to_settings()
    except ValidationError as exc:
        raise typer.BadParameter(str(exc), param_name="config") from exc


@app.command()
def run(
    form: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Application form JSON path."),
    submissions: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Submissions JSONL path."),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    log_format: str = typer.Option("json", help="Log renderer: json or console."),
    audit_log: Optional[Path] = typer.Option(None, dir_okay=False, help="Audit log output (JSONL)."),
) -> None:
    """Evaluate submissions against an application form."""
    settings = _load_settings(config)

    if log_format not in ("json", "console"):
        raise typer.BadParameter("Log format must be json or console", param_name="log_format")
    configure_logging(log_level, log_format=log_format)

    container = create_container(settings=settings)
    pipeline = container.pipeline()
    audit_logger = AuditLogger(audit_log) if audit_log else None

    results = pipeline.run(
        form_path=form,
        submissions_path=submissions,
        output_path=output,
        audit_logger=audit_logger,
    )
    typer.echo(f"Evaluated {len(results)} applications. Results saved to {output}.")


@app.command()
def lint(
    form: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Application form JSON path."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    strict: bool = typer.Option(False, help="Fail on warnings as well as errors."),
) -> None:
    """Report evaluation settings problems in an application form."""
    container = create_container(settings=_load_settings(config))
    document = FormLoader().load(form)
    report = lint_form(document, conditions=container.condition_config())

    failing = 0
    for question_id, issues in report.items():
        for issue in issues:
            typer.echo(f"{question_id}: {issue.severity} {issue.code} at {issue.path}: {issue.message}")
            if issue.severity == "error" or strict:
                failing += 1

    if failing:
        raise typer.Exit(code=1)
    typer.echo(f"Form {document.id}: no blocking issues.")


@app.command("normalize")
def normalize_form(
    form: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Application form JSON path."),
    output: Path = typer.Option(..., dir_okay=False, resolve_path=True, help="Output JSON path."),
) -> None:
    """Write the form with every question's evaluation settings in canonical form."""
    with form.open("r", encoding="utf-8") as handle:
        try:
            document = json.load(handle)
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"Invalid form JSON: {exc}", param_name="form") from exc

    for question in document.get("questions", []):
        if "evaluation" not in question:
            continue
        try:
            canonical = normalize(question["evaluation"])
        except ValidationError as exc:
            raise typer.BadParameter(
                f"Question {question.get('id')!r}: {exc}", param_name="form"
            ) from exc
        if canonical is None:
            del question["evaluation"]
        else:
            question["evaluation"] = canonical.to_payload()

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
    typer.echo(f"Normalized form written to {output}.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
