"""
Report export.

Serializes a single AttemptReport to an indented JSON file with a name
derived from its lesson, practice type and finish time:

    miaaula_report_<lessonId>_<practiceType>_<YYYY-MM-DD>_<HH-MM>.json

then lower-cased with every character outside [a-z0-9.] replaced by "_".
Delivery goes through a sink so the same code serves the CLI (files on
disk) and embedding applications (bytes in memory).
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from loguru import logger
from rich.console import Console

from miaaula.core.utils import parse_iso_timestamp
from miaaula.reports.models import AttemptReport

FILENAME_PREFIX = "miaaula_report"
EXPORT_ERROR_MESSAGE = "Error generating the report file for download."

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-z0-9.]", re.IGNORECASE)

Notifier = Callable[[str], None]


class DownloadSink(Protocol):
    """Receives an exported payload under its suggested file name."""

    def deliver(self, payload: bytes, filename: str) -> Any: ...


class DirectorySink:
    """Writes exports into a directory; returns the written path."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def deliver(self, payload: bytes, filename: str) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / filename
        path.write_bytes(payload)
        return path


class MemorySink:
    """Keeps exports in memory, keyed by file name."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}

    def deliver(self, payload: bytes, filename: str) -> str:
        self.files[filename] = payload
        return filename


@dataclass
class ExportedReport:
    """Result of a successful export."""

    filename: str
    payload: bytes
    location: Any = field(default=None)


def _console_notify(message: str) -> None:
    Console(stderr=True).print(f"[bold red]{message}[/bold red]")


def sanitize_filename(name: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", name).lower()


def export_filename(report: AttemptReport) -> str:
    """Deterministic, filesystem-safe name for an exported report (UTC time)."""
    finished = parse_iso_timestamp(report.finished_at)
    raw = (
        f"{FILENAME_PREFIX}_{report.lesson_id}_{report.practice_type}_"
        f"{finished:%Y-%m-%d}_{finished:%H-%M}.json"
    )
    return sanitize_filename(raw)


def serialize_report(report: AttemptReport) -> bytes:
    """Indented UTF-8 JSON in the persisted record shape."""
    return json.dumps(report.to_record(), ensure_ascii=False, indent=2).encode("utf-8")


def export_as_json(
    report: AttemptReport,
    sink: DownloadSink | None = None,
    notify: Notifier | None = None,
) -> ExportedReport | None:
    """
    Export a report as a JSON artifact.

    Args:
        report: Report to export
        sink: Where to deliver the payload (None just returns the bytes)
        notify: User-facing notification hook used on failure

    Returns:
        ExportedReport, or None when serialization or delivery failed
    """
    try:
        filename = export_filename(report)
        payload = serialize_report(report)
        location = sink.deliver(payload, filename) if sink is not None else None
    except Exception as e:
        logger.error(f"Failed to export report {getattr(report, 'id', '?')}: {e}")
        (notify or _console_notify)(EXPORT_ERROR_MESSAGE)
        return None

    logger.info(f"Report exported: {filename}")
    return ExportedReport(filename=filename, payload=payload, location=location)
