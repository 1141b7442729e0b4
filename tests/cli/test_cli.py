"""Tests for the flowtime-stats CLI."""

from typer.testing import CliRunner

from flowtime.cli.cli import _format_duration, app

runner = CliRunner()

DOCUMENT = """
<statistics>
  <day date="2024-04-29"><worktime>7200</worktime><breaktime>900</breaktime></day>
  <day date="2024-05-01"><worktime>abc</worktime><breaktime>60</breaktime></day>
</statistics>
"""


def test_format_duration():
    assert _format_duration(0) == "0:00:00"
    assert _format_duration(3661) == "1:01:01"
    assert _format_duration(36000) == "10:00:00"


def test_show_prints_days_and_diagnostics(statistics_file):
    path = statistics_file(DOCUMENT)

    result = runner.invoke(app, ["--log-level", "ERROR", "show", "--file", str(path), "--now", "2024-05-01"])

    assert result.exit_code == 0, result.output
    assert "2024-04-29  worktime 2:00:00  breaktime 0:15:00" in result.output
    assert "* 2024-05-01  worktime 0:00:00  breaktime 0:01:00" in result.output
    assert "INVALID_COUNT" in result.output


def test_show_synthesizes_today(statistics_file):
    path = statistics_file(DOCUMENT)

    result = runner.invoke(app, ["--log-level", "ERROR", "show", "--file", str(path), "--now", "2024-06-01"])

    assert result.exit_code == 0, result.output
    assert "* 2024-06-01  worktime 0:00:00  breaktime 0:00:00" in result.output


def test_show_reports_malformed_document(statistics_file):
    path = statistics_file("<statistics><day date='2024-05-01'>")

    result = runner.invoke(app, ["--log-level", "ERROR", "show", "--file", str(path)])

    assert result.exit_code == 1
    assert "Failed to load statistics" in result.output
    assert "INVALID_MARKUP" in result.output


def test_show_rejects_invalid_now(statistics_file):
    path = statistics_file(DOCUMENT)

    result = runner.invoke(app, ["show", "--file", str(path), "--now", "someday"])

    assert result.exit_code == 2


def test_show_missing_file_fails_unless_allowed(tmp_path):
    missing = tmp_path / "statistics.xml"

    strict = runner.invoke(app, ["--log-level", "ERROR", "show", "--file", str(missing)])
    lenient = runner.invoke(
        app,
        ["--log-level", "ERROR", "show", "--file", str(missing), "--now", "2024-05-01", "--missing-ok"],
    )

    assert strict.exit_code == 1
    assert "STREAM_OPEN_FAILED" in strict.output
    assert lenient.exit_code == 0
    assert "* 2024-05-01" in lenient.output


def test_today_with_missing_file(tmp_path):
    result = runner.invoke(app, ["--log-level", "ERROR", "today", "--file", str(tmp_path / "statistics.xml")])

    assert result.exit_code == 0, result.output
    assert "worktime 0:00:00, breaktime 0:00:00" in result.output
