"""
End-of-session orchestration.

Runs the aggregator and the report builder once over the same answered
batch, then hands the report to the store. Saving is best-effort; the
caller gets both results back either way.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from loguru import logger

from miaaula.config import get_settings
from miaaula.core.question import Question, coerce_questions
from miaaula.core.srs import DomainFn, calculate_current_domain
from miaaula.core.utils import utc_now
from miaaula.reports.builder import build_report
from miaaula.reports.models import AttemptReport, PracticeType, SessionResult
from miaaula.reports.report_store import ReportStore
from miaaula.reports.session_result import Snapshot, aggregate_session


@dataclass(frozen=True)
class FinalizedSession:
    """Outputs of a finished session."""

    result: SessionResult
    report: AttemptReport
    saved: bool


def practice_type_for(session_type: str | None) -> PracticeType:
    """Gap-fill sessions are reported as LACUNAS, everything else as QUESTOES."""
    return PracticeType.LACUNAS if session_type == "gaps" else PracticeType.QUESTOES


def finalize_session(
    store: ReportStore,
    title: str,
    started_at: datetime,
    answered_questions: Sequence[Question | Mapping[str, Any]],
    initial_states: Mapping[str, Snapshot | Mapping[str, float]],
    settings: Any,
    is_completed: bool,
    *,
    lesson_id: str | None = None,
    session_type: str | None = None,
    domain_fn: DomainFn = calculate_current_domain,
    clock: Callable[[], datetime] = utc_now,
) -> FinalizedSession | None:
    """
    Close a study session.

    Returns None when nothing was answered (there is nothing to report).
    """
    questions = coerce_questions(answered_questions)
    if not questions:
        logger.debug(f"Session '{title}' closed without answers; no report")
        return None

    result = aggregate_session(
        title,
        started_at,
        questions,
        initial_states,
        settings,
        is_completed,
        domain_fn=domain_fn,
        clock=clock,
    )
    report = build_report(
        lesson_id or get_settings().default_lesson_id,
        practice_type_for(session_type),
        started_at,
        questions,
        clock=clock,
    )
    saved = store.save(report)
    return FinalizedSession(result=result, report=report, saved=saved)
