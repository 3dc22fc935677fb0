"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from miaaula.config import get_settings
from miaaula.core.question import Question
from miaaula.reports.models import AttemptReport
from miaaula.storage.kv_store import MemoryKeyValueStore


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Point every settings-derived path at a temp dir."""
    monkeypatch.setenv("MIAAULA_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("MIAAULA_EXPORT_DIR", str(tmp_path / "exports"))
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def started_at():
    """A fixed session start time."""
    return datetime(2024, 3, 5, 14, 2, 0, tzinfo=UTC)


@pytest.fixture
def clock_after(started_at):
    """Build a clock returning started_at + N seconds."""
    def _make(seconds: float):
        return lambda: started_at + timedelta(seconds=seconds)
    return _make


@pytest.fixture
def make_question():
    """Factory for answered questions with sensible defaults."""
    def _make(qid: str = "q1", correct: bool = True, **overrides) -> Question:
        data = {
            "id": qid,
            "questionRef": f"REF-{qid}",
            "questionText": f"Question text for {qid}",
            "options": {"A": "Alpha", "B": "Bravo", "C": "Charlie", "D": "Delta"},
            "correctAnswer": "A",
            "yourAnswer": "A" if correct else "B",
            "lastWasCorrect": correct,
            "masteryScore": 0.5,
            "subject": "Direito Constitucional",
            "topic": "Direitos Fundamentais",
        }
        data.update(overrides)
        return Question.model_validate(data)
    return _make


@pytest.fixture
def kv_store():
    """Empty in-memory key-value store."""
    return MemoryKeyValueStore()


@pytest.fixture
def make_report():
    """Factory for minimal attempt reports."""
    def _make(report_id: str = "rep_1", lesson_id: str = "lesson-1", **overrides) -> AttemptReport:
        data = {
            "id": report_id,
            "lessonId": lesson_id,
            "practiceType": "QUESTOES",
            "startedAt": "2024-03-05T14:02:00.000Z",
            "finishedAt": "2024-03-05T14:07:00.000Z",
            "totalItems": 2,
            "totalCorrect": 2,
            "totalWrong": 0,
            "accuracyPct": 100,
            "durationSec": 300,
            "wrongItems": [],
        }
        data.update(overrides)
        return AttemptReport.model_validate(data)
    return _make
