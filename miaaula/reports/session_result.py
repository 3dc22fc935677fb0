"""
Session result aggregation.

Computes the visual progress summary of a study session: counts, unrounded
accuracy, and the average change in mastery and domain per answered
question relative to the snapshots taken before the session began.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from miaaula.core.question import Question, coerce_questions
from miaaula.core.srs import DomainFn, calculate_current_domain
from miaaula.core.utils import ensure_utc, iso_timestamp, round_half_up, utc_now
from miaaula.reports.models import SessionResult


@dataclass(frozen=True)
class Snapshot:
    """Mastery and domain of a question right before the session."""

    mastery: float
    domain: float


def _as_snapshot(value: Snapshot | Mapping[str, float]) -> Snapshot:
    if isinstance(value, Snapshot):
        return value
    return Snapshot(mastery=float(value["mastery"]), domain=float(value["domain"]))


def aggregate_session(
    title: str,
    started_at: datetime,
    answered_questions: Iterable[Question | Mapping[str, Any]],
    initial_states: Mapping[str, Snapshot | Mapping[str, float]],
    settings: Any,
    is_completed: bool,
    *,
    domain_fn: DomainFn = calculate_current_domain,
    clock: Callable[[], datetime] = utc_now,
) -> SessionResult:
    """
    Aggregate a session into a SessionResult.

    Questions without a snapshot add nothing to the gain totals but still
    count in the divisor, so the averages are taken over every answered
    question.

    Args:
        title: Display title of the session
        started_at: Session start (naive values are UTC)
        answered_questions: Questions answered in the session, final state
        initial_states: Question id -> Snapshot (or {"mastery", "domain"} dict)
        settings: Passed through untouched to domain_fn
        is_completed: Whether the session ran to the end
        domain_fn: Current-domain scoring function, called once per matched question
        clock: Source of the end time
    """
    questions = coerce_questions(answered_questions)
    started = ensure_utc(started_at)
    ended = ensure_utc(clock())

    answered = len(questions)
    correct = sum(1 for q in questions if q.last_was_correct)

    total_mastery_gain = 0.0
    total_domain_gain = 0.0
    for question in questions:
        initial = initial_states.get(question.id)
        if initial is None:
            continue
        snapshot = _as_snapshot(initial)
        current_domain = domain_fn(question, settings)
        total_mastery_gain += question.mastery_score - snapshot.mastery
        total_domain_gain += current_domain - snapshot.domain

    avg_mastery_gain = total_mastery_gain / answered if answered > 0 else 0.0
    avg_domain_gain = total_domain_gain / answered if answered > 0 else 0.0
    accuracy = correct / answered * 100 if answered > 0 else 0.0

    return SessionResult(
        id=f"session_{int(time.time() * 1000)}",
        title=title,
        started_at=iso_timestamp(started),
        ended_at=iso_timestamp(ended),
        total_questions=answered,
        answered_count=answered,
        correct_count=correct,
        wrong_count=answered - correct,
        accuracy=accuracy,
        total_time_sec=round_half_up((ended - started).total_seconds()),
        mastery_gain=avg_mastery_gain,
        domain_gain=avg_domain_gain,
        performance_score=accuracy,
        is_completed=is_completed,
    )
