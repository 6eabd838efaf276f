from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .evaluation import QuestionEvaluationSettings

QuestionType = Literal[
    "short_text",
    "long_text",
    "multiple_choice",
    "checkbox",
    "dropdown",
    "file_upload",
    "date",
    "yes_no",
    "number",
]

CHOICE_TYPES: frozenset[str] = frozenset({"multiple_choice", "checkbox", "dropdown", "yes_no"})
TEXT_TYPES: frozenset[str] = frozenset({"short_text", "long_text", "number", "date"})

AnswerValue = Union[str, int, float, bool, list[str], None]

_MODEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


class QuestionOption(BaseModel):
    """Selectable option of a choice question."""

    id: str
    label: str
    value: str

    model_config = _MODEL_CONFIG


class ShowWhen(BaseModel):
    """Parent answer criteria that reveal a follow-up question.

    Every criterion that is set must hold.
    """

    equals: str | list[str] | None = None
    contains: str | None = None
    is_empty: bool | None = None
    is_not_empty: bool | None = None

    model_config = _MODEL_CONFIG


class ConditionalLogic(BaseModel):
    enabled: bool = False
    depends_on_question_id: str | None = None
    show_when: ShowWhen | None = None

    model_config = _MODEL_CONFIG


class ApplicationQuestion(BaseModel):
    """One item of a job's application form."""

    id: str
    type: QuestionType = "short_text"
    label: str = ""
    description: str | None = None
    required: bool = False
    options: list[QuestionOption] = Field(default_factory=list)
    order: int = 0
    conditional_logic: ConditionalLogic | None = None
    # Kept raw: the engine coerces it leniently, the linter reports problems.
    evaluation: dict[str, Any] | QuestionEvaluationSettings | None = None

    model_config = _MODEL_CONFIG

    @property
    def is_choice(self) -> bool:
        return self.type in CHOICE_TYPES

    @property
    def is_text(self) -> bool:
        return self.type in TEXT_TYPES

    def option_values(self) -> list[str]:
        return [option.value for option in self.options]


class ApplicationFormConfig(BaseModel):
    """Application form attached to a job posting."""

    id: str
    name: str = ""
    description: str | None = None
    questions: list[ApplicationQuestion] = Field(default_factory=list)

    model_config = _MODEL_CONFIG

    def ordered_questions(self) -> list[ApplicationQuestion]:
        return sorted(self.questions, key=lambda question: question.order)

    def question_by_id(self) -> dict[str, ApplicationQuestion]:
        return {question.id: question for question in self.questions}


class ApplicationAnswer(BaseModel):
    """Candidate answer to a single question."""

    question_id: str
    question: str = ""
    answer: AnswerValue = None

    model_config = _MODEL_CONFIG


class ApplicationSubmission(BaseModel):
    """Answers submitted with one application."""

    application_id: str
    candidate_id: str | None = None
    answers: list[ApplicationAnswer] = Field(default_factory=list)

    model_config = _MODEL_CONFIG

    @field_validator("answers", mode="before")
    @classmethod
    def _accept_mapping(cls, raw: Any) -> Any:
        if isinstance(raw, dict):
            return [
                {"questionId": question_id, "answer": answer}
                for question_id, answer in raw.items()
            ]
        return raw

    def answer_for(self, question_id: str) -> AnswerValue:
        for entry in self.answers:
            if entry.question_id == question_id:
                return entry.answer
        return None
