"""Streaming loader for the statistics log.

Reads a ``statistics.xml`` document of the form::

    <statistics>
      <day date="2024-05-01">
        <worktime>3600</worktime>
        <breaktime>600</breaktime>
      </day>
    </statistics>

and turns it into an ordered, immutable ``StatisticsSnapshot``.

Rules:
- One ``Day`` per well-formed ``day`` element, in document order
- The first day matching the reference "now" is today; later matches are ignored
- No match means a synthesized ``Day(now, 0, 0)`` is appended and used as today
- Malformed or unrecognized elements are skipped with their whole subtree
- Only an unopenable file or broken nesting aborts the load
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import IO

from loguru import logger

from flowtime.ingestion.elements import StatisticsElement, local_name
from flowtime.ingestion.errors import (
    AnomalyKind,
    Diagnostic,
    MalformedDocumentError,
    StreamOpenError,
)
from flowtime.models.day import Day, same_day

# Counts are stored as unsigned 32-bit integers
MAX_COUNT = 2**32 - 1

_COUNT_PATTERN = re.compile(r"\d+", re.ASCII)


@dataclass(frozen=True)
class StatisticsSnapshot:
    """Result of one load: every parsed day plus the designated today."""

    days: tuple[Day, ...]
    today_index: int
    reference_now: datetime
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def today(self) -> Day:
        return self.days[self.today_index]

    def find_day(self, when: datetime) -> Day | None:
        return next((d for d in self.days if d.is_same_day(when)), None)


@dataclass
class _PendingDay:
    date: datetime | None
    worktime: int = 0
    breaktime: int = 0


@dataclass
class _DayAggregator:
    """Element-stack state machine fed with start, characters and end events."""

    now: datetime
    stack: list[StatisticsElement] = field(default_factory=list)
    days: list[Day] = field(default_factory=list)
    today_index: int | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)
    pending: _PendingDay | None = None

    @property
    def top(self) -> StatisticsElement:
        return self.stack[-1] if self.stack else StatisticsElement.NONE

    def start(self, name: str, attributes: Mapping[str, str]) -> None:
        if self.top is StatisticsElement.SKIP:
            self.stack.append(StatisticsElement.SKIP)
            return

        element = StatisticsElement.from_name(name)
        if element is None:
            self._anomaly(AnomalyKind.UNRECOGNIZED_ELEMENT, "UNRECOGNIZED_ELEMENT", f"Unrecognized element <{name}>", name)
            self.stack.append(StatisticsElement.SKIP)
            return

        if element is StatisticsElement.DAY:
            self._start_day(attributes)
            return

        self.stack.append(element)

    def characters(self, content: str) -> None:
        if not content.strip():
            return

        current = self.top
        if current is StatisticsElement.SKIP:
            return

        if not current.is_count:
            self._anomaly(
                AnomalyKind.UNEXPECTED_CONTENT,
                "UNEXPECTED_CONTENT",
                f"Received content {content.strip()!r} in {current.value}, but it is not supported",
                current.value,
            )
            return

        if self.pending is None:
            self._anomaly(
                AnomalyKind.UNEXPECTED_CONTENT,
                "COUNT_OUTSIDE_DAY",
                f"<{current.value}> appears outside of a day, dropping {content.strip()!r}",
                current.value,
            )
            return

        count = _parse_count(content)
        if count is None:
            self._anomaly(
                AnomalyKind.MALFORMED_COUNT,
                "INVALID_COUNT",
                f"Failed to parse count {content.strip()!r}",
                current.value,
            )
            return

        if current is StatisticsElement.WORKTIME:
            self.pending.worktime = count
        else:
            self.pending.breaktime = count

    def end(self) -> None:
        current = self.stack.pop() if self.stack else StatisticsElement.NONE
        if current is StatisticsElement.DAY:
            self._finish_day()

    def finish(self) -> StatisticsSnapshot:
        if self.stack:
            raise MalformedDocumentError(
                "UNBALANCED_ELEMENTS",
                f"Document ended with {len(self.stack)} open element(s): "
                f"{', '.join(e.value for e in self.stack)}",
            )

        if self.today_index is None:
            logger.debug(f"No day matches {self.now.date()}, synthesizing an empty one")
            self.days.append(Day(date=self.now, worktime=0, breaktime=0))
            self.today_index = len(self.days) - 1

        return StatisticsSnapshot(
            days=tuple(self.days),
            today_index=self.today_index,
            reference_now=self.now,
            diagnostics=tuple(self.diagnostics),
        )

    def _start_day(self, attributes: Mapping[str, str]) -> None:
        if self.pending is not None:
            self._anomaly(AnomalyKind.MALFORMED_ATTRIBUTE, "NESTED_DAY", "Day element nested inside another day", "day")
            self.stack.append(StatisticsElement.SKIP)
            return

        raw_date = next((v for k, v in attributes.items() if local_name(k) == "date"), None)
        if raw_date is None:
            self._anomaly(AnomalyKind.MALFORMED_ATTRIBUTE, "MISSING_DATE", "Could not find attribute date", "day")
            self.stack.append(StatisticsElement.SKIP)
            return

        day_date = parse_iso_datetime(raw_date)
        if day_date is None:
            self._anomaly(AnomalyKind.MALFORMED_ATTRIBUTE, "INVALID_DATE", f"Invalid ISO-8601 date {raw_date!r}", "day")
            self.stack.append(StatisticsElement.SKIP)
            return

        logger.debug(f"Starting to parse day {raw_date}")
        self.stack.append(StatisticsElement.DAY)
        self.pending = _PendingDay(date=day_date)

    def _finish_day(self) -> None:
        pending, self.pending = self.pending, None
        if pending is None or pending.date is None:
            self._anomaly(
                AnomalyKind.MISSING_DAY_DATE,
                "MISSING_DAY_DATE",
                "Day ended without a captured date",
                "day",
            )
            return

        day = Day(date=pending.date, worktime=pending.worktime, breaktime=pending.breaktime)
        if self.today_index is None and same_day(day.date, self.now):
            self.today_index = len(self.days)
        self.days.append(day)
        logger.debug(f"Parsed day {day.date.date()} (worktime={day.worktime}, breaktime={day.breaktime})")

    def _anomaly(self, kind: AnomalyKind, code: str, message: str, element: str) -> None:
        diagnostic = Diagnostic(kind=kind, code=code, message=message, element=element)
        logger.warning(f"Statistics anomaly {diagnostic}")
        self.diagnostics.append(diagnostic)


def parse_iso_datetime(value: str) -> datetime | None:
    """Parse an ISO-8601 date or date-time, normalized to UTC.

    Values without an offset are taken as UTC. Returns None when unparsable.
    """
    try:
        parsed = datetime.fromisoformat(value.strip())
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=UTC)
        return parsed.astimezone(UTC)
    except (ValueError, OverflowError):
        # Offsets can push dates at the edges of the range out of it
        return None


def _parse_count(content: str) -> int | None:
    text = content.strip()
    if not _COUNT_PATTERN.fullmatch(text):
        return None
    # Bound the digit count before int() so huge values never reach the conversion limit
    if len(text.lstrip("0")) > len(str(MAX_COUNT)):
        return None
    count = int(text)
    if count > MAX_COUNT:
        return None
    return count


def _normalize_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(UTC)
    if now.tzinfo is None:
        return now.replace(tzinfo=UTC)
    return now.astimezone(UTC)


def parse_statistics(stream: IO[bytes] | IO[str], *, now: datetime | None = None) -> StatisticsSnapshot:
    """Parse a statistics document from an open stream.

    Args:
        stream: Binary or text file-like object positioned at the document start
        now: Reference "now" used to pick today (defaults to the current UTC time)

    Returns:
        StatisticsSnapshot with days in document order

    Raises:
        MalformedDocumentError: If the markup is not well-formed or nesting is broken
    """
    aggregator = _DayAggregator(now=_normalize_now(now))
    logger.debug("Started to parse statistics document")

    open_elements: list[ET.Element] = []
    # Element that just ended, with its parent. Its tail is only complete once
    # the next event arrives, after which it is detached to keep memory flat.
    finished: tuple[ET.Element, ET.Element] | None = None

    try:
        for event, elem in ET.iterparse(stream, events=("start", "end")):
            if finished is not None:
                parent, child = finished
                if child.tail:
                    aggregator.characters(child.tail)
                parent.remove(child)
                finished = None

            if event == "start":
                open_elements.append(elem)
                aggregator.start(local_name(elem.tag), elem.attrib)
                continue

            open_elements.pop()
            if elem.text:
                aggregator.characters(elem.text)
            aggregator.end()

            tail = elem.tail
            elem.clear()
            elem.tail = tail
            if open_elements:
                finished = (open_elements[-1], elem)
    except ET.ParseError as e:
        line, column = e.position
        raise MalformedDocumentError(
            "INVALID_MARKUP",
            f"Failed to parse statistics document at line {line}, column {column}: {e}",
        ) from e

    snapshot = aggregator.finish()
    logger.debug("End of statistics document")
    return snapshot


def load_statistics(path: str | Path, *, now: datetime | None = None) -> StatisticsSnapshot:
    """Load the statistics file at ``path``.

    Raises:
        StreamOpenError: If the file cannot be opened
        MalformedDocumentError: If the document is structurally broken
    """
    file_path = Path(path)
    try:
        stream = file_path.open("rb")
    except OSError as e:
        raise StreamOpenError("STREAM_OPEN_FAILED", f"Could not open statistics file {file_path}: {e}") from e

    with stream:
        snapshot = parse_statistics(stream, now=now)

    logger.info(
        f"Loaded {len(snapshot.days)} day(s) from {file_path} "
        f"({len(snapshot.diagnostics)} anomaly(ies) recovered)"
    )
    return snapshot


def empty_snapshot(*, now: datetime | None = None) -> StatisticsSnapshot:
    """Snapshot for a log with no recorded days: only the synthesized today."""
    return _DayAggregator(now=_normalize_now(now)).finish()
