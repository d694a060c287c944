"""Configuration management for the scan gate.

Resolves settings once at startup into an immutable Config. Values come from
environment variables first, then from the credentials of a bound Snyk
service in VCAP_SERVICES, then from defaults.

Provides:
- Config: Pydantic model with all scan settings
- load_config: Factory resolving Config from an environment mapping
- find_service_credentials: Credentials of the first matching bound service
"""

import json
import os
import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from vulngate.core.errors import ConfigError
from vulngate.core.severity import Severity

DEFAULT_API_URL = "https://snyk.io/api"

SERVICE_FILTER = re.compile(r"snyk")

API_TOKEN = "apiToken"
API_URL = "apiUrl"
ORG_NAME = "orgName"


class Config(BaseModel):
    """Scan gate configuration.

    Attributes:
        api_token: Snyk API token (SNYK_TOKEN or service apiToken)
        api_url: Snyk API base URL, must be https (SNYK_API or service apiUrl)
        org_name: Organization to test under (SNYK_ORG_NAME or service orgName)
        severity_threshold: Lowest severity that is reported (SNYK_SEVERITY_THRESHOLD)
        fail_on_discovery: Fail the build when issues remain (SNYK_DONT_BREAK_BUILD=true disables)
        request_timeout: Seconds before the scan request is abandoned
    """

    model_config = ConfigDict(frozen=True)

    api_token: str = ""
    api_url: str = Field(default=DEFAULT_API_URL)
    org_name: str | None = None
    severity_threshold: Severity = Field(default=Severity.LOW)
    fail_on_discovery: bool = Field(default=True)
    request_timeout: float = Field(default=30.0, gt=0)

    @field_validator("api_url")
    @classmethod
    def _require_https(cls, value: str) -> str:
        if not value.lower().startswith("https://"):
            raise ValueError(f"api_url must use https: {value}")
        return value.rstrip("/")

    @field_validator("org_name")
    @classmethod
    def _blank_org(cls, value: str | None) -> str | None:
        return value or None

    @property
    def enabled(self) -> bool:
        """Scanning is enabled only when a token is available."""
        return bool(self.api_token)


def find_service_credentials(
    vcap_services: str | None, pattern: re.Pattern = SERVICE_FILTER
) -> dict[str, Any]:
    """Find credentials of the first bound service matching pattern.

    A service matches when its name, label or any tag matches the pattern
    and its credentials carry an API token.

    Args:
        vcap_services: Raw VCAP_SERVICES JSON (None or empty means no services)
        pattern: Regex applied to name, label and tags

    Returns:
        Credentials dict, or an empty dict when nothing matches

    Raises:
        ConfigError: If VCAP_SERVICES is not valid JSON
    """
    if not vcap_services:
        return {}

    try:
        services = json.loads(vcap_services)
    except json.JSONDecodeError as e:
        raise ConfigError(f"VCAP_SERVICES is not valid JSON: {e}") from e

    if not isinstance(services, dict):
        raise ConfigError("VCAP_SERVICES must be a JSON object")

    for instances in services.values():
        for service in instances or []:
            if not isinstance(service, dict):
                continue
            tags = service.get("tags") or []
            if not isinstance(tags, list):
                tags = [tags]
            candidates = [service.get("name"), service.get("label"), *tags]
            if not any(isinstance(c, str) and pattern.search(c) for c in candidates):
                continue
            credentials = service.get("credentials")
            if isinstance(credentials, dict) and credentials.get(API_TOKEN):
                return credentials

    return {}


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Load configuration from environment and bound service credentials.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Populated Config instance

    Raises:
        ConfigError: If any resolved value is invalid
    """
    env = os.environ if environ is None else environ
    credentials = find_service_credentials(env.get("VCAP_SERVICES"))

    values: dict[str, Any] = {
        "api_token": env.get("SNYK_TOKEN") or credentials.get(API_TOKEN) or "",
        "api_url": env.get("SNYK_API") or credentials.get(API_URL) or DEFAULT_API_URL,
        "org_name": env.get("SNYK_ORG_NAME") or credentials.get(ORG_NAME),
    }

    threshold = env.get("SNYK_SEVERITY_THRESHOLD")
    if threshold:
        values["severity_threshold"] = threshold.strip().lower()

    dont_break_build = env.get("SNYK_DONT_BREAK_BUILD")
    if dont_break_build is not None:
        values["fail_on_discovery"] = dont_break_build.strip().lower() != "true"

    timeout = env.get("SNYK_REQUEST_TIMEOUT")
    if timeout:
        values["request_timeout"] = timeout

    try:
        return Config(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
