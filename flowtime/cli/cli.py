"""CLI for inspecting the Flowtime statistics log.

Loads ``statistics.xml`` through the same loader the application uses and
prints the parsed day history.
"""

from datetime import datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from flowtime.core.logger import setup_logger
from flowtime.ingestion.errors import StatisticsLoadError
from flowtime.ingestion.statistics_loader import StatisticsSnapshot, parse_iso_datetime
from flowtime.state.statistics import Statistics

console = Console()

app = typer.Typer(
    name="flowtime-stats",
    help="Flowtime statistics - inspect the recorded worktime and breaktime history",
    add_completion=False,
)


def _format_duration(seconds: int) -> str:
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:d}:{minutes:02d}:{secs:02d}"


def _parse_now(value: str | None) -> datetime | None:
    if value is None:
        return None
    now = parse_iso_datetime(value)
    if now is None:
        raise typer.BadParameter(f"Invalid ISO-8601 date: {value}", param_hint="--now")
    return now


def _load(file: Path | None, now: datetime | None, missing_ok: bool) -> StatisticsSnapshot:
    statistics = Statistics(file)
    try:
        return statistics.load_days(now=now, missing_ok=missing_ok)
    except StatisticsLoadError as e:
        console.print(
            Panel(
                Text("Failed to load statistics", style="bold red"),
                subtitle=e.code,
                border_style="red",
            )
        )
        console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(code=1) from e


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level (defaults to FLOWTIME_LOG_LEVEL)"),
) -> None:
    setup_logger(level=log_level)


@app.command()
def show(
    file: Path | None = typer.Option(None, "--file", "-f", help="Statistics file (defaults to the user data dir)"),
    now: str | None = typer.Option(None, "--now", help="Reference date used to pick today (ISO-8601)"),
    missing_ok: bool = typer.Option(False, "--missing-ok", help="Treat a missing file as an empty history"),
) -> None:
    """Print every recorded day, marking today."""
    snapshot = _load(file, _parse_now(now), missing_ok)

    for index, day in enumerate(snapshot.days):
        marker = "[bold green]*[/bold green]" if index == snapshot.today_index else " "
        console.print(
            f"{marker} {day.date.date().isoformat()}  "
            f"worktime [cyan]{_format_duration(day.worktime)}[/cyan]  "
            f"breaktime [cyan]{_format_duration(day.breaktime)}[/cyan]"
        )

    if snapshot.diagnostics:
        console.print(f"\n[yellow]{len(snapshot.diagnostics)} record(s) skipped or repaired:[/yellow]")
        for diagnostic in snapshot.diagnostics:
            console.print(f"  [dim]- {escape(str(diagnostic))}[/dim]")


@app.command()
def today(
    file: Path | None = typer.Option(None, "--file", "-f", help="Statistics file (defaults to the user data dir)"),
    missing_ok: bool = typer.Option(True, "--missing-ok/--strict", help="Treat a missing file as an empty history"),
) -> None:
    """Print today's worktime and breaktime."""
    snapshot = _load(file, None, missing_ok)
    day = snapshot.today
    console.print(
        f"Today ({day.date.date().isoformat()}): "
        f"worktime {_format_duration(day.worktime)}, breaktime {_format_duration(day.breaktime)}"
    )


if __name__ == "__main__":
    app()
