"""Error types for statistics loading.

Only ``StreamOpenError`` and ``MalformedDocumentError`` abort a load.
Per-element anomalies are recovered locally and reported as ``Diagnostic``
records on the returned snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StatisticsLoadError(RuntimeError):
    """Raised when a statistics document cannot be loaded at all.

    Attributes:
        code: Error code
        message: Error message
    """

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


class StreamOpenError(StatisticsLoadError):
    """Raised when the statistics file cannot be opened."""

    pass


class MalformedDocumentError(StatisticsLoadError):
    """Raised when the document nesting is broken or the markup is not well-formed."""

    pass


class AnomalyKind(str, Enum):
    MALFORMED_ATTRIBUTE = "MALFORMED_ATTRIBUTE"
    MALFORMED_COUNT = "MALFORMED_COUNT"
    UNRECOGNIZED_ELEMENT = "UNRECOGNIZED_ELEMENT"
    UNEXPECTED_CONTENT = "UNEXPECTED_CONTENT"
    MISSING_DAY_DATE = "MISSING_DAY_DATE"


@dataclass(frozen=True)
class Diagnostic:
    """A recovered per-element anomaly.

    Attributes:
        kind: Anomaly category
        code: Specific error code within the category
        message: Human readable description
        element: Local name of the element involved
    """

    kind: AnomalyKind
    code: str
    message: str
    element: str

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"
