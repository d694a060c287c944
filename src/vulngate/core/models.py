"""Data types passed between pipeline stages.

Stages hand each other immutable values: manifests from discovery, a request
for the scan client, the service verdict, normalized issues and the final
outcome.

Provides:
- Manifest: Content and origin of one pom.xml
- ScanRequest: Primary and supplementary manifest contents plus org
- IssueGroups, ScanResult: Verdict returned by the scan service
- Issue: Normalized issue with its severity score
- ScanOutcome: Final issue list and build decision
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vulngate.core.severity import Severity


@dataclass(frozen=True)
class Manifest:
    """Raw content of one dependency descriptor.

    Attributes:
        content: File content as text
        origin: Filesystem path, or "<archive>!/<entry>" for archive entries
    """

    content: str
    origin: str


@dataclass(frozen=True)
class ScanRequest:
    """One scan request: a target manifest plus supplementary context."""

    target: str
    additional: tuple[str, ...] = ()
    org_name: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Build the JSON request body.

        The "additional" key is only present when supplementary manifests
        exist. The organization never appears in the body.
        """
        files: dict[str, Any] = {"target": {"contents": self.target}}
        if self.additional:
            files["additional"] = [{"contents": content} for content in self.additional]
        return {"encoding": "plain", "files": files}

    def query_params(self) -> dict[str, str]:
        """Transport-level query parameters (org only when non-empty)."""
        if self.org_name:
            return {"org": self.org_name}
        return {}


class IssueGroups(BaseModel):
    """Nested "issues" object of a verdict."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    vulnerabilities: list[dict[str, Any]] | None = None
    licenses: list[dict[str, Any]] | None = None


class ScanResult(BaseModel):
    """Verdict returned by the scan service.

    Raw issue records are kept as mappings; normalization happens in the
    evaluator so that a record with a bad severity can be skipped instead of
    failing the whole response.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    ok: bool
    dependency_count: int = Field(default=0, alias="dependencyCount")
    vulnerabilities: list[dict[str, Any]] | None = None
    issues: IssueGroups | None = None

    @field_validator("dependency_count", mode="before")
    @classmethod
    def _null_count(cls, value: Any) -> Any:
        return 0 if value is None else value


class Issue(BaseModel):
    """Normalized vulnerability or license issue.

    Attributes:
        id: Issue identifier (e.g., "SNYK-JAVA-ORGAPACHE-12345")
        severity: Recognized severity label
        score: Numeric score derived from severity
        package: Affected package name
        title: Short description
        url: Link to more information
        introduced_from: Dependency chain that pulled in the package
    """

    model_config = ConfigDict(frozen=True)

    id: str
    severity: Severity
    score: int
    package: str = ""
    title: str = ""
    url: str = ""
    introduced_from: tuple[str, ...] = ()


@dataclass(frozen=True)
class ScanOutcome:
    """Terminal result of a scan: qualifying issues and the gate decision."""

    issues: tuple[Issue, ...] = field(default_factory=tuple)
    dependency_count: int = 0
    must_fail: bool = False

    @property
    def passed(self) -> bool:
        return not self.must_fail

    @property
    def unique_count(self) -> int:
        return len({issue.id for issue in self.issues})

    @property
    def vulnerable_paths(self) -> int:
        return sum(len(issue.introduced_from) for issue in self.issues)
