"""Error hierarchy for the scan pipeline.

Every stage raises a ScanError subclass where the problem is detected; the
pipeline never retries and the CLI turns any fatal error into a single
message and a non-zero exit.

Provides:
- ScanError: Base class with a fatal flag
- NoManifestsFound: Nothing to scan (non-fatal, treated as pass)
- FilesystemAccessError and its archive-specific subclasses
- NetworkError, RemoteServiceError, ResponseParseError: Scan client failures
- VulnerabilitiesFound: Build gate tripped
- ConfigError: Invalid configuration values
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vulngate.core.models import ScanOutcome


class ScanError(Exception):
    """Base class for all pipeline errors."""

    fatal = True


class NoManifestsFound(ScanError):
    """No pom.xml was found on disk or inside any archive."""

    fatal = False


class ConfigError(ScanError):
    """Configuration could not be resolved into valid settings."""


class FilesystemAccessError(ScanError):
    """Project root or a manifest could not be read."""


class ArchiveNotFoundError(FilesystemAccessError):
    """Archive file does not exist."""


class ArchiveEntryNotFoundError(FilesystemAccessError):
    """Archive exists but does not contain the requested entry."""


class ArchiveReadError(FilesystemAccessError):
    """Archive is not a readable zip file."""


class NetworkError(ScanError):
    """Scan endpoint could not be reached (DNS, connection, TLS, timeout)."""


class RemoteServiceError(ScanError):
    """Scan endpoint answered with a non-success HTTP status."""

    def __init__(self, status: int, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(f"HTTP error {status}: {body[:200]}" if body else f"HTTP error {status}")


class ResponseParseError(ScanError):
    """Scan endpoint answered with a body that is not a valid verdict."""


class VulnerabilitiesFound(ScanError):
    """Issues at or above the threshold were found and the build must fail."""

    def __init__(self, outcome: ScanOutcome):
        self.outcome = outcome
        super().__init__(
            f"Found {outcome.unique_count} unique vulnerabilities "
            f"across {outcome.vulnerable_paths} vulnerable paths"
        )
