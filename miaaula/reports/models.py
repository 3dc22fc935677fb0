"""
Report value objects.

Every model serializes with camelCase keys; that JSON shape is what the
history view reads back, so field names and order must stay stable.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from miaaula.core.question import LocalizedText, get_text


class PracticeType(str, Enum):
    """Kind of practice an attempt belongs to."""

    QUESTOES = "QUESTOES"  # Multiple-choice questions
    FLASHCARDS = "FLASHCARDS"
    LACUNAS = "LACUNAS"  # Gap-fill
    PARES = "PARES"  # Pair matching
    GERAL = "GERAL"


class ReportModel(BaseModel):
    """Base for immutable, camelCase-serialized report records."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_record(self) -> dict[str, Any]:
        """JSON-ready dict in the persisted shape (unset optionals omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_record(cls, data: Any):
        return cls.model_validate(data)


class WrongItemReport(ReportModel):
    """One incorrectly answered item within an attempt."""

    item_id: str
    q_ref: str
    text: str
    user_answer: str
    correct_answer: str
    user_answer_text: str
    correct_answer_text: str
    explanation: str | None = None
    wrong_diagnosis: LocalizedText | None = None
    subject: str = ""
    topic: str = ""
    time_sec: float | None = None

    def diagnosis_text(self, lang: str = "pt-BR") -> str:
        return get_text(self.wrong_diagnosis, lang)


class AttemptReport(ReportModel):
    """Diagnostic report for one finished attempt."""

    id: str
    lesson_id: str
    practice_type: str
    started_at: str
    finished_at: str
    total_items: int = Field(ge=0)
    total_correct: int = Field(ge=0)
    total_wrong: int = Field(ge=0)
    accuracy_pct: int = Field(ge=0, le=100)
    duration_sec: int = Field(ge=0)
    wrong_items: tuple[WrongItemReport, ...] = ()


class SessionResult(ReportModel):
    """Session summary with average mastery and domain deltas."""

    id: str
    title: str
    started_at: str
    ended_at: str
    total_questions: int
    answered_count: int
    correct_count: int
    wrong_count: int
    accuracy: float  # Unrounded percentage
    total_time_sec: int
    mastery_gain: float
    domain_gain: float
    performance_score: float
    is_completed: bool


class InvalidItemReport(ReportModel):
    """Audit entry for a question whose content is structurally broken."""

    id: str
    question_ref: str = ""
    law_ref: str | None = None
    correct_answer: str = ""
    missing_options: list[str] = Field(default_factory=list)
    has_raw_block: bool = False
    text_snippet: str = ""
    timestamp: str
    session_id: str | None = None
