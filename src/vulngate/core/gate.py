"""Build gate decision."""

from collections.abc import Iterable

from vulngate.core.models import Issue, ScanOutcome


def decide(
    issues: Iterable[Issue],
    dependency_count: int = 0,
    fail_on_discovery: bool = True,
) -> ScanOutcome:
    """Decide whether the build must fail.

    The build fails if and only if at least one issue remains after
    filtering and fail_on_discovery is set.

    Args:
        issues: Filtered, ordered issues
        dependency_count: Number of dependencies the service tested
        fail_on_discovery: Whether discovered issues fail the build

    Returns:
        ScanOutcome carrying the issues and the decision
    """
    issues = tuple(issues)
    return ScanOutcome(
        issues=issues,
        dependency_count=dependency_count,
        must_fail=bool(issues) and fail_on_discovery,
    )
