"""Issue extraction, scoring, filtering and ordering.

Turns a ScanResult into the list of issues that matter for the build. All
functions are pure: the same verdict and threshold always give the same
list.

Provides:
- extract_issues: Raw issue records in extraction order
- normalize_issue: Raw record to Issue, None for unscorable severity
- filter_issues: Keep issues at or above a threshold
- sort_issues: Stable ascending sort by score
- evaluate: Full extraction, normalization, filtering and ordering
"""

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from vulngate.core.models import Issue, ScanResult
from vulngate.core.severity import Severity, severity_score

logger = structlog.get_logger()


def extract_issues(result: ScanResult) -> list[dict[str, Any]]:
    """Concatenate raw issue records from every collection in the verdict.

    Order: top-level vulnerabilities, then issues.vulnerabilities, then
    issues.licenses. Absent collections contribute nothing.
    """
    issues: list[dict[str, Any]] = []
    if result.vulnerabilities is not None:
        issues.extend(result.vulnerabilities)
    if result.issues is not None:
        if result.issues.vulnerabilities is not None:
            issues.extend(result.issues.vulnerabilities)
        if result.issues.licenses is not None:
            issues.extend(result.issues.licenses)
    return issues


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _chain(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        return (_text(value),)
    return tuple(_text(hop) for hop in value)


def normalize_issue(raw: Mapping[str, Any]) -> Issue | None:
    """Normalize one raw record.

    Returns None when the severity is missing or unrecognized; such records
    are dropped from scoring and from the result.
    """
    score = severity_score(raw.get("severity"))
    if score is None:
        logger.debug("issue_skipped_unknown_severity", id=raw.get("id"), severity=raw.get("severity"))
        return None

    return Issue(
        id=_text(raw.get("id")),
        severity=Severity(raw["severity"]),
        score=score,
        package=_text(raw.get("package")),
        title=_text(raw.get("title")),
        url=_text(raw.get("url")),
        introduced_from=_chain(raw.get("from")),
    )


def filter_issues(issues: Iterable[Issue], threshold: Severity | str) -> list[Issue]:
    """Keep issues whose score is at or above the threshold's score."""
    minimum = severity_score(threshold)
    if minimum is None:
        raise ValueError(f"Unknown severity threshold: {threshold!r}")
    return [issue for issue in issues if issue.score >= minimum]


def sort_issues(issues: Iterable[Issue]) -> list[Issue]:
    """Sort ascending by score; equal scores keep their extraction order."""
    return sorted(issues, key=lambda issue: issue.score)


def evaluate(result: ScanResult, threshold: Severity | str = Severity.LOW) -> list[Issue]:
    """Produce the filtered, ordered issue list for a verdict.

    Args:
        result: Verdict from the scan service
        threshold: Lowest severity to keep (default: low)

    Returns:
        Issues at or above threshold, ascending by score, stable on ties

    Example:
        >>> result = ScanResult.model_validate({
        ...     "ok": False,
        ...     "vulnerabilities": [
        ...         {"id": "x1", "severity": "high"},
        ...         {"id": "x2", "severity": "low"},
        ...     ],
        ... })
        >>> [issue.id for issue in evaluate(result)]
        ['x2', 'x1']
    """
    normalized = [issue for issue in map(normalize_issue, extract_issues(result)) if issue is not None]
    return sort_issues(filter_issues(normalized, threshold))
