"""
Attempt report history.

All reports live in one flat array under a single store key, newest first
and capped at a fixed capacity; the per-lesson view is a filter on read.
Writes are read-modify-write with no locking, so two concurrent writers
can lose an update (last write wins).
"""

from __future__ import annotations

from typing import Any

from loguru import logger
from pydantic import ValidationError

from miaaula.config import get_settings
from miaaula.reports.models import AttemptReport
from miaaula.storage.kv_store import KeyValueStore


class ReportStore:
    """Bounded, append-only persistence of AttemptReport records."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str | None = None,
        capacity: int | None = None,
    ):
        settings = get_settings()
        self.store = store
        self.key = key or settings.reports_key
        if capacity is not None and capacity < 1:
            raise ValueError(f"Report capacity must be at least 1, got {capacity}")
        self.capacity = capacity if capacity is not None else settings.report_capacity

    def _load_records(self) -> list[Any]:
        data = self.store.load(self.key)
        if not isinstance(data, list):
            return []
        return data

    def save(self, report: AttemptReport) -> bool:
        """
        Prepend a report and evict anything beyond capacity.

        Failures are logged, never raised; the return value tells whether the
        write went through.
        """
        try:
            records = self._load_records()
            updated = [report.to_record(), *records][: self.capacity]
            self.store.save(self.key, updated)
        except Exception as e:
            logger.error(f"Failed to save attempt report {getattr(report, 'id', '?')}: {e}")
            return False

        evicted = len(records) + 1 - len(updated)
        if evicted > 0:
            logger.debug(f"Report history at capacity ({self.capacity}), evicted {evicted}")
        logger.info(f"Attempt report saved: {report.id}")
        return True

    def list_all(self) -> list[AttemptReport]:
        """Every readable report, newest first."""
        try:
            records = self._load_records()
        except Exception as e:
            logger.error(f"Failed to load attempt reports: {e}")
            return []

        reports = []
        for record in records:
            try:
                reports.append(AttemptReport.from_record(record))
            except ValidationError as e:
                logger.warning(f"Skipping malformed attempt report record: {e.error_count()} error(s)")
        return reports

    def list_by_lesson(self, lesson_id: str) -> list[AttemptReport]:
        """Reports whose lessonId matches exactly, in stored order."""
        return [r for r in self.list_all() if r.lesson_id == lesson_id]

    def get(self, report_id: str) -> AttemptReport | None:
        """Look up a single report by id."""
        return next((r for r in self.list_all() if r.id == report_id), None)
