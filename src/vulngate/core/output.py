"""Report formatting for scan results.

Pure functions that render issues and the summary line as text. Printing is
left to the caller so formatting can be tested without capturing output.

Provides:
- format_issue: One line describing a single issue
- format_summary: One summary line for the whole scan
- format_report: Header, issue lines and summary
"""

from collections.abc import Sequence

import asyncclick as click

from vulngate.core.models import Issue, ScanOutcome
from vulngate.core.severity import Severity

SEVERITY_COLORS = {
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "blue",
}


def format_issue(issue: Issue, color: bool = False) -> str:
    """Format one issue as a single line.

    Includes severity, package, title, info URL, the first hop of the
    introduction path and the full dependency chain.

    Args:
        issue: Issue to render
        color: Wrap the severity label in ANSI color

    Returns:
        Single-line description of the issue
    """
    label = f"✗ {issue.severity.value.capitalize()} severity vulnerability found in {issue.package}"
    if color:
        label = click.style(label, fg=SEVERITY_COLORS[issue.severity], bold=issue.severity is Severity.MEDIUM)

    introduced = issue.introduced_from[0] if issue.introduced_from else "-"
    chain = " > ".join(issue.introduced_from) if issue.introduced_from else "-"
    return (
        f"{label} | Description: {issue.title} | Info: {issue.url}"
        f" | Introduced through: {introduced} | From: {chain}"
    )


def format_summary(issues: Sequence[Issue], dependency_count: int, color: bool = False) -> str:
    """Format the one-line scan summary.

    Counts unique issue ids and the total length of all introduction paths.

    Example:
        >>> format_summary([], 42)
        'Tested 42 dependencies. No vulnerabilities found.'
    """
    head = f"Tested {dependency_count} dependencies."
    if not issues:
        tail = "No vulnerabilities found."
        return f"{head} {click.style(tail, fg='green')}" if color else f"{head} {tail}"

    outcome = ScanOutcome(issues=tuple(issues), dependency_count=dependency_count)
    tail = (
        f"Found {outcome.unique_count} unique vulnerabilities "
        f"across {outcome.vulnerable_paths} vulnerable paths."
    )
    return f"{head} {click.style(tail, fg='red')}" if color else f"{head} {tail}"


def format_report(
    issues: Sequence[Issue],
    dependency_count: int,
    project_name: str | None = None,
    color: bool = False,
) -> str:
    """Format the full report: optional header, one line per issue, summary.

    Args:
        issues: Filtered, ordered issues
        dependency_count: Number of dependencies tested
        project_name: Name shown in the "Testing ..." header
        color: Emit ANSI colors

    Returns:
        Report text, lines separated by newlines
    """
    lines = []
    if project_name:
        header = f"Testing {project_name}..."
        lines.append(click.style(header, bold=True) if color else header)
    lines.extend(format_issue(issue, color=color) for issue in issues)
    lines.append(format_summary(issues, dependency_count, color=color))
    return "\n".join(lines)
