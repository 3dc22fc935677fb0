"""
Reports Module - attempt scoring, session deltas and report history.

Components:
- builder: AttemptReport from an answered batch
- session_result: SessionResult with average mastery/domain gains
- report_store: Capped report history keyed by lesson
- auditor: Deduplicated log of broken questions
- exporter: JSON export with a derived, filesystem-safe name
- session_finalizer: End-of-session orchestration
"""

from miaaula.reports.auditor import InvalidItemAuditor, build_invalid_item_report
from miaaula.reports.builder import accuracy_pct, build_report
from miaaula.reports.exporter import (
    DirectorySink,
    ExportedReport,
    MemorySink,
    export_as_json,
    export_filename,
)
from miaaula.reports.models import (
    AttemptReport,
    InvalidItemReport,
    PracticeType,
    SessionResult,
    WrongItemReport,
)
from miaaula.reports.report_store import ReportStore
from miaaula.reports.session_finalizer import FinalizedSession, finalize_session
from miaaula.reports.session_result import Snapshot, aggregate_session

__all__ = [
    # Models
    "AttemptReport",
    "WrongItemReport",
    "SessionResult",
    "InvalidItemReport",
    "PracticeType",
    # Builders
    "build_report",
    "accuracy_pct",
    "aggregate_session",
    "Snapshot",
    "finalize_session",
    "FinalizedSession",
    # Persistence
    "ReportStore",
    "InvalidItemAuditor",
    "build_invalid_item_report",
    # Export
    "export_as_json",
    "export_filename",
    "ExportedReport",
    "DirectorySink",
    "MemorySink",
]
