"""
Invalid item audit log.

Questions whose option block is broken are recorded here so they can be
corrected offline in a batch. The log is best-effort: it never raises, and
the first report for a given question id wins.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime

from loguru import logger
from pydantic import ValidationError

from miaaula.config import get_settings
from miaaula.core.question import Question
from miaaula.core.utils import iso_timestamp, utc_now
from miaaula.reports.models import InvalidItemReport
from miaaula.storage.kv_store import KeyValueStore

SNIPPET_LENGTH = 200


def build_invalid_item_report(
    question: Question,
    missing_option_keys: Sequence[str],
    session_id: str | None = None,
    timestamp: datetime | None = None,
) -> InvalidItemReport:
    """Snapshot the parts of a broken question needed to fix it."""
    return InvalidItemReport(
        id=question.id,
        question_ref=question.question_ref,
        law_ref=question.law_ref,
        correct_answer=question.correct_answer,
        missing_options=list(missing_option_keys),
        has_raw_block=bool(question.raw_import_block),
        text_snippet=(question.question_text or "")[:SNIPPET_LENGTH],
        timestamp=iso_timestamp(timestamp or utc_now()),
        session_id=session_id,
    )


class InvalidItemAuditor:
    """Deduplicated log of structurally broken questions."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.key = key or get_settings().invalid_items_key
        self.clock = clock

    def log_invalid_item(
        self,
        question: Question,
        missing_option_keys: Sequence[str],
        session_id: str | None = None,
    ) -> bool:
        """
        Record a broken question unless its id is already logged.

        Returns:
            True if a new entry was written
        """
        try:
            report = build_invalid_item_report(
                question, missing_option_keys, session_id, self.clock()
            )
            existing = self.store.load(self.key)
            if not isinstance(existing, list):
                existing = []

            if any(isinstance(e, dict) and e.get("id") == report.id for e in existing):
                logger.debug(f"Invalid item {report.id} already logged")
                return False

            self.store.save(self.key, [report.to_record(), *existing])
        except Exception as e:
            logger.error(f"Failed to log invalid item {getattr(question, 'id', '?')}: {e}")
            return False

        logger.warning(
            f"Invalid item logged for correction: {report.id} "
            f"(ref={report.question_ref}, missing={report.missing_options})"
        )
        return True

    def list_invalid_items(self) -> list[InvalidItemReport]:
        """All logged entries, newest first."""
        try:
            records = self.store.load(self.key)
        except Exception as e:
            logger.error(f"Failed to load invalid item log: {e}")
            return []
        if not isinstance(records, list):
            return []

        items = []
        for record in records:
            try:
                items.append(InvalidItemReport.from_record(record))
            except ValidationError:
                logger.warning("Skipping malformed invalid item record")
        return items
