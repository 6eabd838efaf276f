"""Batch evaluation pipeline assembly and execution."""

from __future__ import annotations

import json
from pathlib import Path

import pendulum
import structlog
from pydantic import ValidationError

from . import __version__
from .core import ApplicationEvaluator, lint_form
from .core.conditions import ConditionConfig
from .logging import bind_run_context
from .schemas import ApplicationFormConfig, ApplicationSubmission


class SubmissionLoadError(ValueError):
    """Raised when submission loading encounters invalid records."""

    def __init__(self, errors: list[str], partial: list[ApplicationSubmission]):
        super().__init__("Submission loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Submission loading failed: {self.errors}"


class SubmissionLoader:
    """Load candidate submissions from JSON lines."""

    def load(self, path: Path) -> list[ApplicationSubmission]:
        submissions: list[ApplicationSubmission] = []
        errors: list[str] = []
        seen: set[str] = set()
        with path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    record = json.loads(raw)
                except (ValueError, RecursionError) as exc:
                    errors.append(f"line {idx}: invalid JSON ({exc})")
                    continue
                if not isinstance(record, dict):
                    errors.append(f"line {idx}: expected an object")
                    continue
                try:
                    submission = ApplicationSubmission.model_validate(record)
                except ValidationError as exc:
                    errors.append(f"line {idx}: {exc.errors()[0]['msg']}")
                    continue
                if submission.application_id in seen:
                    errors.append(
                        f"line {idx}: duplicate application '{submission.application_id}'"
                    )
                    continue
                seen.add(submission.application_id)
                submissions.append(submission)
        if errors:
            raise SubmissionLoadError(errors, submissions)
        return submissions


class FormLoader:
    """Load application form documents."""

    def load(self, path: Path) -> ApplicationFormConfig:
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid form JSON: {exc}") from exc
        return ApplicationFormConfig.model_validate(data)


class OutputWriter:
    """Persist evaluation reports."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )


class AuditLogger:
    """Append-only audit logger writing JSON lines."""

    def __init__(self, path: Path):
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: dict) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False))
            handle.write("\n")


class EvaluationPipeline:
    """Evaluate a batch of submissions against one application form."""

    def __init__(
        self,
        *,
        evaluator: ApplicationEvaluator,
        conditions: ConditionConfig | None = None,
        form_loader: FormLoader | None = None,
        submission_loader: SubmissionLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._evaluator = evaluator
        self._conditions = conditions
        self._forms = form_loader or FormLoader()
        self._submissions = submission_loader or SubmissionLoader()
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def run(
        self,
        *,
        form_path: Path,
        submissions_path: Path,
        output_path: Path,
        audit_logger: AuditLogger | None = None,
    ) -> list[dict]:
        form = self._forms.load(form_path)
        bind_run_context(form_id=form.id, question_count=len(form.questions))
        for question_id, issues in lint_form(form, conditions=self._conditions).items():
            for issue in issues:
                self._logger.warning(
                    "form.lint_issue",
                    question_id=question_id,
                    **issue.to_dict(),
                )

        load_errors: list[str] = []
        try:
            submissions = self._submissions.load(submissions_path)
        except SubmissionLoadError as exc:
            submissions = exc.partial
            load_errors.extend(exc.errors)
            self._logger.warning("submissions.partial_load", errors=exc.errors)

        results: list[dict] = []
        for submission in submissions:
            evaluation = self._evaluator.evaluate(form, submission)
            entry = evaluation.to_dict()
            results.append(entry)

            if audit_logger:
                audit_logger.append(
                    {
                        "application_id": evaluation.application_id,
                        "candidate_id": evaluation.candidate_id,
                        "form_id": form.id,
                        "decision": evaluation.decision,
                        "total_points": evaluation.verdict.total_points,
                        "disqualify_reasons": entry["verdict"]["disqualify_reasons"],
                        "tags": entry["verdict"]["tags"],
                        "actions": entry["verdict"]["actions"],
                    }
                )

            self._logger.info(
                "evaluation.result",
                application_id=evaluation.application_id,
                decision=evaluation.decision,
                total_points=evaluation.verdict.total_points,
                disqualified=evaluation.verdict.disqualified,
                tags=entry["verdict"]["tags"],
            )

        metadata = {
            "form_id": form.id,
            "application_count": len(submissions),
            "errors": load_errors,
            "timestamp": pendulum.now().to_iso8601_string(),
            "app_version": __version__,
        }
        self._writer.write(output_path, {"metadata": metadata, "results": results})
        return results
