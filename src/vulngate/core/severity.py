"""Severity levels and scoring for scan issues.

The remote service reports one of three severity labels. Scores give them a
total order so issues can be filtered against a threshold and sorted.

Provides:
- Severity: Enum of recognized severity labels
- SEVERITY_SCORES: Label to score mapping
- severity_score: Score for a raw label, None when unrecognized
"""

from enum import Enum
from typing import Any


class Severity(str, Enum):
    """Issue severity as reported by the scan service.

    Ordered LOW < MEDIUM < HIGH through their scores.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def score(self) -> int:
        return SEVERITY_SCORES[self]


SEVERITY_SCORES: dict[Severity, int] = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
}


def severity_score(value: Any) -> int | None:
    """Return the numeric score for a severity label.

    Accepts a Severity or the raw string from a response record. Missing,
    misspelled or non-string values have no score and return None rather
    than raising, so a malformed record can be skipped by the caller.

    Args:
        value: Severity enum member or raw label (e.g., "high")

    Returns:
        1, 2 or 3 for low, medium and high; None otherwise

    Example:
        >>> severity_score("medium")
        2
        >>> severity_score("critical") is None
        True
    """
    if isinstance(value, Severity):
        return SEVERITY_SCORES[value]
    if not isinstance(value, str):
        return None
    try:
        return SEVERITY_SCORES[Severity(value)]
    except ValueError:
        return None
