"""Rule-based evaluation of application-form answers."""

from __future__ import annotations

__version__ = "0.1.0"

from .core import (  # noqa: E402
    QuestionEvaluationEngine,
    QuestionEvaluationResult,
    evaluate_question,
    normalize,
)

__all__ = [
    "QuestionEvaluationEngine",
    "QuestionEvaluationResult",
    "__version__",
    "evaluate_question",
    "normalize",
]
