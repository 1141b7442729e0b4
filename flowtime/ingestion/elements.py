from __future__ import annotations

from enum import Enum


class StatisticsElement(Enum):
    """Parser-state tags kept on the element stack."""

    DAY = "day"
    WORKTIME = "worktime"
    BREAKTIME = "breaktime"
    STATISTICS = "statistics"
    # Top of an empty stack
    NONE = "none"
    # Inside a malformed or unrecognized subtree
    SKIP = "skip"

    @classmethod
    def from_name(cls, name: str) -> StatisticsElement | None:
        return _BY_NAME.get(name)

    @property
    def is_count(self) -> bool:
        return self in {StatisticsElement.WORKTIME, StatisticsElement.BREAKTIME}


_BY_NAME = {
    "day": StatisticsElement.DAY,
    "worktime": StatisticsElement.WORKTIME,
    "breaktime": StatisticsElement.BREAKTIME,
    "statistics": StatisticsElement.STATISTICS,
}


def local_name(tag: str) -> str:
    """Strip an ElementTree ``{namespace}`` prefix from a tag."""
    if tag.startswith("{"):
        return tag.rsplit("}", 1)[1]
    return tag
