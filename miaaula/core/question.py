"""
Question model as seen by the report engine.

Questions are owned by the content layer; the engine only reads the final
answer state and proficiency numbers a study session leaves on them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

OPTION_KEYS: tuple[str, ...] = ("A", "B", "C", "D")

# Stored as the user's answer when nothing was selected
UNANSWERED = "-"

# Shown in place of option text that cannot be resolved
NO_ANSWER_TEXT = "—"

LocalizedText = Union[str, dict[str, str]]


class Question(BaseModel):
    """A quiz question carrying the learner's final state for one attempt."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    id: str
    question_ref: str = ""
    question_text: str = ""
    options: dict[str, str | None] = Field(default_factory=dict)
    correct_answer: str = ""
    your_answer: str | None = None
    last_was_correct: bool | None = None
    mastery_score: float = 0.0
    explanation: str | None = None
    wrong_diagnosis: LocalizedText | None = None
    subject: str = ""
    topic: str = ""

    # Linkage / import provenance
    law_ref: str | None = None
    raw_import_block: str | None = None

    # SRS state
    total_attempts: int = 0
    stability: float | None = None
    last_reviewed_at: datetime | None = None
    time_sec: float | None = None

    @field_validator(
        "question_ref", "question_text", "correct_answer", "subject", "topic",
        mode="before",
    )
    @classmethod
    def _null_text_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("mastery_score", "total_attempts", mode="before")
    @classmethod
    def _null_number_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("options", mode="before")
    @classmethod
    def _null_options_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def option_text(self, key: str | None) -> str:
        """Resolve an option key to its text, or the no-answer marker."""
        if not key or key == UNANSWERED:
            return NO_ANSWER_TEXT
        return self.options.get(key) or NO_ANSWER_TEXT


def coerce_questions(items: Iterable[Question | Mapping[str, Any]]) -> list[Question]:
    """Accept Question instances or raw camelCase dicts (as stored by the app)."""
    return [q if isinstance(q, Question) else Question.model_validate(q) for q in items]


def get_text(value: LocalizedText | None, lang: str = "pt-BR") -> str:
    """
    Select display text from a plain or localized value.

    Mappings are resolved as lang -> "pt" -> "en" -> first non-empty value.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        for candidate in (value.get(lang), value.get("pt"), value.get("en")):
            if candidate:
                return candidate
        return next((v for v in value.values() if v), "")
    return str(value)


@dataclass
class IntegrityCheck:
    """Outcome of checking a question's option block."""

    broken: bool
    missing: list[str] = field(default_factory=list)


def check_integrity(question: Question) -> IntegrityCheck:
    """
    Find empty option slots.

    A question is broken when the text of its correct option is empty; other
    missing options are reported but do not make the item unusable.
    """
    missing = [
        key for key in OPTION_KEYS
        if not (question.options.get(key) or "").strip()
    ]
    correct_text = question.options.get(question.correct_answer) or ""
    return IntegrityCheck(broken=not correct_text.strip(), missing=missing)
