"""ScanAgent orchestrating the manifest scan pipeline.

Runs locate -> build request -> test -> evaluate -> decide -> report, one
stage after another. Any fatal error aborts the remaining stages; the
report is always printed before the build gate raises.
"""

from collections.abc import Callable
from pathlib import Path

import asyncclick as click

from vulngate.core.config import Config
from vulngate.core.errors import VulnerabilitiesFound
from vulngate.core.evaluator import evaluate
from vulngate.core.gate import decide
from vulngate.core.manifests import gather_manifests
from vulngate.core.models import ScanOutcome
from vulngate.core.output import format_report
from vulngate.core.request import build_scan_request
from vulngate.tools.snyk import SnykClient

from .base import BaseAgent


class ScanAgent(BaseAgent):
    """Manifest scan agent.

    Pipeline:
    1. Gather pom.xml manifests from disk and jar archives
    2. Short-circuit with a passing outcome when there are none
    3. Build the scan request (first manifest is the target)
    4. Submit it to the scan service
    5. Extract, filter and order issues against the threshold
    6. Decide, print the report, then raise if the build must fail
    """

    def __init__(
        self,
        config: Config,
        client: SnykClient | None = None,
        echo: Callable[[str], None] = click.echo,
        color: bool = False,
        session_id: str | None = None,
    ):
        """Initialize ScanAgent.

        Args:
            config: Resolved scan configuration
            client: Scan client (built from config if not provided)
            echo: Callable that prints the report
            color: Emit ANSI colors in the report
            session_id: Optional session ID
        """
        super().__init__(config, session_id)
        self.client = client or SnykClient.from_config(config)
        self.echo = echo
        self.color = color

    def detect(self) -> str | None:
        """Return the component name when scanning is enabled, else None."""
        if self.config.enabled:
            self.log.debug("snyk_token_found")
            return self.client.name
        self.log.debug("snyk_token_missing")
        return None

    async def run(self, root: Path | str) -> ScanOutcome:
        """Scan the project at root and apply the build gate.

        Args:
            root: Project root directory

        Returns:
            ScanOutcome (passing, or failing with fail_on_discovery off)

        Raises:
            FilesystemAccessError: If root or any manifest cannot be read
            NetworkError: If the scan service cannot be reached
            RemoteServiceError: If the scan service returns a non-2xx status
            ResponseParseError: If the verdict cannot be parsed
            VulnerabilitiesFound: If issues remain and fail_on_discovery is set
        """
        root = Path(root)
        self.log.info(
            "scan_start",
            root=str(root),
            severity_threshold=self.config.severity_threshold.value,
            fail_on_discovery=self.config.fail_on_discovery,
        )

        manifests = gather_manifests(root)
        if not manifests:
            self.log.warning("no_manifests_found", root=str(root))
            return ScanOutcome()

        request = build_scan_request(manifests, self.config.org_name)
        self.log.info(
            "scan_request_built",
            target=manifests[0].origin,
            additional=len(request.additional),
        )

        result = await self.client.test(request)
        issues = evaluate(result, self.config.severity_threshold)
        outcome = decide(issues, result.dependency_count, self.config.fail_on_discovery)

        self.echo(
            format_report(
                outcome.issues,
                outcome.dependency_count,
                project_name=root.resolve().name,
                color=self.color,
            )
        )

        if not outcome.issues:
            self.log.info("scan_passed", dependency_count=outcome.dependency_count)
            return outcome

        self.log.warning(
            "vulnerabilities_found",
            unique=outcome.unique_count,
            paths=outcome.vulnerable_paths,
        )
        if outcome.must_fail:
            self.log.error("failing_build")
            raise VulnerabilitiesFound(outcome)

        self.log.warning("continuing_despite_vulnerabilities")
        return outcome
