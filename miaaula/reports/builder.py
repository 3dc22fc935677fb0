"""
Attempt report builder.

Turns the questions answered in one attempt into an AttemptReport listing
every wrong item. Pure apart from sampling the clock once for `finishedAt`.
"""

from __future__ import annotations

import secrets
import string
import time
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any

from miaaula.core.question import UNANSWERED, Question, coerce_questions
from miaaula.core.utils import ensure_utc, iso_timestamp, round_half_up, utc_now
from miaaula.reports.models import AttemptReport, PracticeType, WrongItemReport

_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_report_id() -> str:
    """Time-based id with a random suffix: rep_<epoch ms>_<5 chars>."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(5))
    return f"rep_{int(time.time() * 1000)}_{suffix}"


def accuracy_pct(correct: int, total: int) -> int:
    """Integer accuracy percentage, 0 for an empty attempt."""
    if total <= 0:
        return 0
    return round_half_up(correct / total * 100)


def build_wrong_item(question: Question) -> WrongItemReport:
    """Snapshot a wrongly answered question, resolving both answer texts."""
    user_answer = question.your_answer or UNANSWERED
    return WrongItemReport(
        item_id=question.id,
        q_ref=question.question_ref,
        text=question.question_text,
        user_answer=user_answer,
        correct_answer=question.correct_answer,
        user_answer_text=question.option_text(user_answer),
        correct_answer_text=question.option_text(question.correct_answer),
        explanation=question.explanation,
        wrong_diagnosis=question.wrong_diagnosis,
        subject=question.subject,
        topic=question.topic,
        time_sec=question.time_sec,
    )


def build_report(
    lesson_id: str,
    practice_type: PracticeType | str,
    started_at: datetime,
    answered_questions: Iterable[Question | Mapping[str, Any]],
    *,
    clock: Callable[[], datetime] = utc_now,
) -> AttemptReport:
    """
    Build the report for a finished attempt.

    Args:
        lesson_id: Lesson (or trail) the attempt belongs to
        practice_type: PracticeType or its string value
        started_at: When the attempt began (naive values are UTC)
        answered_questions: Exactly the questions presented, with final answer state
        clock: Source of the finish time

    Returns:
        Immutable AttemptReport; an empty batch yields a zeroed report
    """
    questions = coerce_questions(answered_questions)
    started = ensure_utc(started_at)
    finished = ensure_utc(clock())

    wrong_items = tuple(build_wrong_item(q) for q in questions if not q.last_was_correct)
    total = len(questions)
    correct = total - len(wrong_items)
    duration = max(0, round_half_up((finished - started).total_seconds()))

    return AttemptReport(
        id=new_report_id(),
        lesson_id=lesson_id,
        practice_type=getattr(practice_type, "value", practice_type),
        started_at=iso_timestamp(started),
        finished_at=iso_timestamp(finished),
        total_items=total,
        total_correct=correct,
        total_wrong=len(wrong_items),
        accuracy_pct=accuracy_pct(correct, total),
        duration_sec=duration,
        wrong_items=wrong_items,
    )
