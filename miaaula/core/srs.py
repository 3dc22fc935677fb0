"""
Domain scoring.

The domain score is the mastery a learner still holds *today*: the stored
mastery score decayed by the item's retrievability.

    R = e^(-t/S)
    domain = mastery * R

Where t is days since the last review and S the item's stability in days.
Callers may plug in any other function with the DomainFn signature.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Any, Protocol

from miaaula.core.question import Question

DAY_SECONDS = 86400.0


class DomainFn(Protocol):
    """Pure function computing an item's current domain score."""

    def __call__(self, question: Question, settings: Any) -> float: ...


def calculate_days_since(last_review: datetime, now: datetime | None = None) -> float:
    """Days elapsed between a review and now (naive timestamps are UTC)."""
    if now is None:
        now = datetime.now(UTC)
    if last_review.tzinfo is None:
        last_review = last_review.replace(tzinfo=UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return (now - last_review).total_seconds() / DAY_SECONDS


def calculate_retrievability(question: Question, now: datetime | None = None) -> float:
    """Probability of recall; 0 for items never reviewed."""
    if question.last_reviewed_at is None:
        return 0.0
    stability = question.stability or 1.0
    days = calculate_days_since(question.last_reviewed_at, now)
    return math.exp(-days / stability)


def calculate_current_domain(question: Question, settings: Any = None) -> float:
    """Mastery decayed by retrievability; 0 for items never attempted."""
    if not question.total_attempts:
        return 0.0
    return (question.mastery_score or 0.0) * calculate_retrievability(question)
