"""
Typer CLI for the miaaula report engine.

Commands:
    miaaula reports list LESSON_ID       - Show stored attempt reports for a lesson
    miaaula reports show REPORT_ID       - Show the wrong-item breakdown of a report
    miaaula reports export REPORT_ID     - Write a report to a JSON file
    miaaula reports build QUESTIONS.json - Build (and optionally save) a report
    miaaula audit list                   - Show the invalid item log
    miaaula audit check QUESTIONS.json   - Log broken questions from a dump

Usage:
    miaaula reports list turma-2024
    miaaula reports export rep_1709647620000_a1b2c --out ./exports
    miaaula reports build answered.json --lesson turma-2024 --started 2024-03-05T14:02:00Z --save
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from miaaula.config import Settings, get_settings
from miaaula.core.question import check_integrity, coerce_questions
from miaaula.core.utils import parse_iso_timestamp
from miaaula.reports.auditor import InvalidItemAuditor
from miaaula.reports.builder import build_report
from miaaula.reports.exporter import DirectorySink, export_as_json
from miaaula.reports.models import PracticeType
from miaaula.reports.report_store import ReportStore
from miaaula.storage.kv_store import JSONFileKeyValueStore

console = Console()

# ============================================================================
# TYPER APPS
# ============================================================================

app = typer.Typer(
    help="miaaula: attempt reports, session deltas and invalid item audit",
    no_args_is_help=True,
)

reports_app = typer.Typer(
    name="reports",
    help="Attempt report history commands",
    no_args_is_help=True,
)

audit_app = typer.Typer(
    name="audit",
    help="Invalid item audit commands",
    no_args_is_help=True,
)

app.add_typer(reports_app, name="reports")
app.add_typer(audit_app, name="audit")


# ============================================================================
# HELPERS
# ============================================================================


def configure_logging(settings: Settings) -> None:
    """Route loguru output to stderr (and a rotating file when configured)."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="10 MB", encoding="utf-8")


def _open_store(settings: Settings) -> JSONFileKeyValueStore:
    return JSONFileKeyValueStore(settings.data_dir)


def _read_questions(path: Path) -> list:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[bold red]Cannot read {path}: {e}[/bold red]")
        raise typer.Exit(1)
    if not isinstance(data, list):
        console.print(f"[bold red]{path} must contain a JSON array of questions[/bold red]")
        raise typer.Exit(1)
    try:
        return coerce_questions(data)
    except ValidationError as e:
        console.print(f"[bold red]Invalid question in {path}: {e.error_count()} error(s)[/bold red]")
        raise typer.Exit(1)


# ============================================================================
# REPORTS
# ============================================================================


@reports_app.command("list")
def reports_list(
    lesson_id: str = typer.Argument(..., help="Lesson id to filter on (exact match)"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON records"),
):
    """
    List attempt reports stored for a lesson, newest first.

    Examples:
        miaaula reports list turma-2024
        miaaula reports list GERAL --json
    """
    settings = get_settings()
    store = ReportStore(_open_store(settings))
    reports = store.list_by_lesson(lesson_id)

    if as_json:
        console.print_json(json.dumps([r.to_record() for r in reports], ensure_ascii=False))
        return

    if not reports:
        console.print(f"[dim]No reports for lesson '{lesson_id}'.[/dim]")
        return

    table = Table(title=f"Attempt reports - {lesson_id}")
    table.add_column("ID", style="cyan")
    table.add_column("Type")
    table.add_column("Finished")
    table.add_column("Items", justify="right")
    table.add_column("Wrong", justify="right", style="red")
    table.add_column("Accuracy", justify="right", style="green")
    table.add_column("Duration", justify="right")

    for r in reports:
        table.add_row(
            r.id,
            r.practice_type,
            r.finished_at,
            str(r.total_items),
            str(r.total_wrong),
            f"{r.accuracy_pct}%",
            f"{r.duration_sec}s",
        )
    console.print(table)


@reports_app.command("show")
def reports_show(
    report_id: str = typer.Argument(..., help="Report id"),
    lang: str = typer.Option(None, "--lang", help="Locale for diagnosis text"),
):
    """Show the wrong-item breakdown of one report."""
    settings = get_settings()
    report = ReportStore(_open_store(settings)).get(report_id)
    if report is None:
        console.print(f"[bold red]Report not found: {report_id}[/bold red]")
        raise typer.Exit(1)

    console.print(
        f"[bold]{report.lesson_id}[/bold] / {report.practice_type}  "
        f"{report.total_correct}/{report.total_items} correct ({report.accuracy_pct}%), "
        f"{report.duration_sec}s"
    )
    if not report.wrong_items:
        console.print("[green]No wrong items.[/green]")
        return

    table = Table(show_lines=True)
    table.add_column("Ref", style="cyan")
    table.add_column("Question")
    table.add_column("Your answer", style="red")
    table.add_column("Correct", style="green")
    table.add_column("Diagnosis")
    for item in report.wrong_items:
        table.add_row(
            item.q_ref,
            item.text,
            f"{item.user_answer}) {item.user_answer_text}",
            f"{item.correct_answer}) {item.correct_answer_text}",
            item.diagnosis_text(lang or settings.locale),
        )
    console.print(table)


@reports_app.command("export")
def reports_export(
    report_id: str = typer.Argument(..., help="Report id"),
    out: Path = typer.Option(None, "--out", "-o", help="Output directory"),
):
    """
    Export one report as an indented JSON file.

    Examples:
        miaaula reports export rep_1709647620000_a1b2c
        miaaula reports export rep_1709647620000_a1b2c -o ./exports
    """
    settings = get_settings()
    report = ReportStore(_open_store(settings)).get(report_id)
    if report is None:
        console.print(f"[bold red]Report not found: {report_id}[/bold red]")
        raise typer.Exit(1)

    exported = export_as_json(
        report,
        sink=DirectorySink(out or settings.export_dir),
        notify=lambda msg: console.print(f"[bold red]{msg}[/bold red]"),
    )
    if exported is None:
        raise typer.Exit(1)
    console.print(f"[green]Exported to {exported.location}[/green]")


@reports_app.command("build")
def reports_build(
    questions_file: Path = typer.Argument(..., help="JSON array of answered questions"),
    lesson: str = typer.Option(None, "--lesson", "-l", help="Lesson id (default from settings)"),
    practice_type: PracticeType = typer.Option(
        PracticeType.QUESTOES, "--type", "-t", help="Practice type"
    ),
    started: str = typer.Option(..., "--started", "-s", help="ISO-8601 start time"),
    save: bool = typer.Option(False, "--save", help="Persist the report to history"),
):
    """Build an attempt report from a dump of answered questions."""
    settings = get_settings()
    questions = _read_questions(questions_file)
    try:
        started_at = parse_iso_timestamp(started)
    except ValueError:
        console.print(f"[bold red]Invalid --started timestamp: {started}[/bold red]")
        raise typer.Exit(1)

    report = build_report(lesson or settings.default_lesson_id, practice_type, started_at, questions)
    console.print_json(json.dumps(report.to_record(), ensure_ascii=False))

    if save:
        if ReportStore(_open_store(settings)).save(report):
            console.print(f"[green]Saved {report.id}[/green]")
        else:
            console.print("[yellow]Report built but could not be saved.[/yellow]")


# ============================================================================
# AUDIT
# ============================================================================


@audit_app.command("list")
def audit_list():
    """Show questions logged for correction, newest first."""
    settings = get_settings()
    items = InvalidItemAuditor(_open_store(settings)).list_invalid_items()
    if not items:
        console.print("[dim]No invalid items logged.[/dim]")
        return

    table = Table(title="Invalid items")
    table.add_column("ID", style="cyan")
    table.add_column("Ref")
    table.add_column("Law ref")
    table.add_column("Answer")
    table.add_column("Missing", style="red")
    table.add_column("Raw block")
    table.add_column("Logged at")
    for item in items:
        table.add_row(
            item.id,
            item.question_ref,
            item.law_ref or "",
            item.correct_answer,
            ",".join(item.missing_options),
            "yes" if item.has_raw_block else "no",
            item.timestamp,
        )
    console.print(table)


@audit_app.command("check")
def audit_check(
    questions_file: Path = typer.Argument(..., help="JSON array of questions"),
    session_id: str = typer.Option(None, "--session-id", help="Tag logged entries with a session"),
):
    """Check option blocks and log every broken question."""
    settings = get_settings()
    auditor = InvalidItemAuditor(_open_store(settings))

    broken = 0
    logged = 0
    for question in _read_questions(questions_file):
        check = check_integrity(question)
        if not check.broken:
            continue
        broken += 1
        if auditor.log_invalid_item(question, check.missing, session_id=session_id):
            logged += 1

    console.print(f"{broken} broken question(s), {logged} newly logged.")


def main() -> None:
    """CLI entry point."""
    configure_logging(get_settings())
    app()


if __name__ == "__main__":
    main()
