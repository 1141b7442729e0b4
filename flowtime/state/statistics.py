"""Statistics host.

Holds the result of the last load and exposes it to presentation code.
The loader itself is a pure function; this object only stores the snapshot
it returns. Not thread-safe: callers serialize access.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path

from loguru import logger

from flowtime.config.settings import settings
from flowtime.ingestion.errors import Diagnostic, StreamOpenError
from flowtime.ingestion.statistics_loader import StatisticsSnapshot, empty_snapshot, load_statistics
from flowtime.models.day import Day


class Statistics:
    """Day history plus the designated today."""

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        rank_productive_day: Callable[[Sequence[Day]], str] | None = None,
    ) -> None:
        self.path = Path(path) if path is not None else settings.statistics_path
        self._rank_productive_day = rank_productive_day
        self._snapshot: StatisticsSnapshot | None = None
        self._productive_day = ""

    @property
    def snapshot(self) -> StatisticsSnapshot:
        if self._snapshot is None:
            raise RuntimeError("Statistics have not been loaded yet, call load_days() first")
        return self._snapshot

    @property
    def all_days(self) -> tuple[Day, ...]:
        return self.snapshot.days

    @property
    def today(self) -> Day:
        return self.snapshot.today

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return self.snapshot.diagnostics

    @property
    def productive_day(self) -> str:
        """Label of the most productive day, computed elsewhere. Empty by default."""
        return self._productive_day

    def days_model(self) -> Sequence[Day]:
        """Ordered, read-only sequence of days for list views."""
        return tuple(self.all_days)

    def load_days(self, *, now: datetime | None = None, missing_ok: bool = False) -> StatisticsSnapshot:
        """Load the statistics file and keep the result.

        Args:
            now: Reference "now" used to pick today
            missing_ok: Start from an empty history when the file does not exist

        Returns:
            The stored snapshot

        Raises:
            StreamOpenError: If the file cannot be opened
            MalformedDocumentError: If the document is structurally broken
        """
        try:
            self._snapshot = load_statistics(self.path, now=now)
        except StreamOpenError as e:
            if not missing_ok or not isinstance(e.__cause__, FileNotFoundError):
                raise
            logger.info(f"No statistics file at {self.path}, starting with an empty history")
            self._snapshot = empty_snapshot(now=now)

        if self._rank_productive_day is not None:
            self._productive_day = self._rank_productive_day(self._snapshot.days)
        return self._snapshot
