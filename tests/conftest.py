"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

import datetime as dt
from pathlib import Path

import pytest
from loguru import logger

REFERENCE_NOW = dt.datetime(2024, 5, 1, 9, 30, tzinfo=dt.UTC)


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop sinks added by a test so they never outlive its captured streams."""
    yield
    logger.remove()


@pytest.fixture
def log_messages() -> list[str]:
    """Collect WARNING and above loguru messages emitted during the test."""
    messages: list[str] = []
    logger.add(messages.append, level="WARNING", format="{level} | {message}")
    return messages


@pytest.fixture
def reference_now() -> dt.datetime:
    return REFERENCE_NOW


@pytest.fixture
def statistics_file(tmp_path: Path):
    """Write a statistics document to a temporary file and return its path."""

    def _write(content: str, name: str = "statistics.xml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
