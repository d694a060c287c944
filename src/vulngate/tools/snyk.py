"""Snyk test API client (pure Python, aiohttp).

Sends one scan request to the Snyk Maven test endpoint and parses the
verdict. Every request goes to the live service: nothing is cached and a
failed attempt is final.

Provides:
- SnykClient: Client for POST <api>/v1/test/maven
- parse_scan_result: Response body to ScanResult
"""

import asyncio
import json

import aiohttp
import structlog
from pydantic import ValidationError

from vulngate.core.config import Config
from vulngate.core.errors import NetworkError, RemoteServiceError, ResponseParseError
from vulngate.core.models import ScanRequest, ScanResult

logger = structlog.get_logger()

TEST_MAVEN_PATH = "/v1/test/maven"


def parse_scan_result(body: str) -> ScanResult:
    """Parse a response body into a ScanResult.

    Args:
        body: Raw response text

    Returns:
        Validated ScanResult

    Raises:
        ResponseParseError: If body is not JSON or lacks the expected fields
    """
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ResponseParseError(f"Expected a JSON object, got {type(data).__name__}")

    try:
        return ScanResult.model_validate(data)
    except ValidationError as e:
        raise ResponseParseError(f"Unexpected response structure: {e}") from e


class SnykClient:
    """Snyk Maven test client.

    Posts the request body as JSON with token authorization. The request is
    bounded by a total timeout so a hung service cannot stall the build.
    """

    name = "snyk"

    def __init__(self, api_url: str, api_token: str, timeout: float = 30.0):
        """Initialize the client.

        Args:
            api_url: API base URL (e.g., https://snyk.io/api)
            api_token: Snyk API token
            timeout: Total request timeout in seconds
        """
        self.api_url = api_url.rstrip("/")
        self.api_token = api_token
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Config) -> "SnykClient":
        return cls(config.api_url, config.api_token, timeout=config.request_timeout)

    @property
    def endpoint(self) -> str:
        return f"{self.api_url}{TEST_MAVEN_PATH}"

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"token {self.api_token}",
        }

    async def test(self, request: ScanRequest) -> ScanResult:
        """Submit a scan request and return the verdict.

        Args:
            request: Scan request with target and supplementary manifests

        Returns:
            Parsed ScanResult

        Raises:
            NetworkError: On connection, DNS or TLS failure, or timeout
            RemoteServiceError: On a non-2xx HTTP status
            ResponseParseError: On a body that is not a valid verdict

        Example:
            >>> client = SnykClient("https://snyk.io/api", "token")
            >>> result = await client.test(request)
            >>> print(result.dependency_count)
            42
        """
        log = logger.bind(endpoint=self.endpoint, org=request.org_name)
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        payload = json.dumps(request.to_payload())

        log.debug("snyk_request_started", additional=len(request.additional))

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    self.endpoint,
                    params=request.query_params(),
                    data=payload,
                    headers=self._headers(),
                ) as response:
                    status = response.status
                    raw = await response.read()

        except asyncio.TimeoutError as e:
            log.error("snyk_request_timeout", timeout=self.timeout)
            raise NetworkError(f"Timed out after {self.timeout}s connecting to {self.endpoint}") from e
        except aiohttp.ClientError as e:
            log.error("snyk_request_failed", error=str(e))
            raise NetworkError(f"Failed to connect to {self.endpoint}: {e}") from e

        # invalid UTF-8 is replaced and then fails JSON parsing
        body = raw.decode("utf-8", errors="replace")

        if not 200 <= status < 300:
            log.debug("snyk_http_error", status=status, body=body)
            raise RemoteServiceError(status, body)

        log.debug("snyk_request_completed", status=status, body_len=len(body))
        return parse_scan_result(body)
