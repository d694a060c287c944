"""Unit tests for CLI commands with a mocked scan client."""

from unittest.mock import AsyncMock, patch

import pytest
from asyncclick.testing import CliRunner

from vulngate.cli.scan import cli
from vulngate.core.config import Config
from vulngate.core.errors import ConfigError, NoManifestsFound, RemoteServiceError
from vulngate.core.models import ScanResult


VULNERABLE = ScanResult.model_validate({
    "ok": False,
    "dependencyCount": 9,
    "issues": {
        "vulnerabilities": [
            {"id": "SNYK-JAVA-1", "severity": "high", "package": "commons-collections",
             "title": "Deserialization of Untrusted Data",
             "url": "https://snyk.io/vuln/SNYK-JAVA-1", "from": ["app@1.0", "commons-collections@3.2.1"]},
        ],
    },
})

CLEAN = ScanResult.model_validate({"ok": True, "dependencyCount": 9})


@pytest.fixture
def project(tmp_path):
    (tmp_path / "pom.xml").write_text("<project/>")
    return tmp_path


@pytest.mark.asyncio
async def test_detect_enabled():
    """Test that detect prints the component name when a token is set."""
    runner = CliRunner()

    with patch("vulngate.cli.scan.load_config", return_value=Config(api_token="token")):
        result = await runner.invoke(cli, ["detect"])

    assert result.exit_code == 0
    assert "snyk" in result.output.splitlines()


@pytest.mark.asyncio
async def test_detect_disabled():
    """Test that detect exits non-zero without a token."""
    runner = CliRunner()

    with patch("vulngate.cli.scan.load_config", return_value=Config()):
        result = await runner.invoke(cli, ["detect"])

    assert result.exit_code == 1
    assert "snyk" not in result.output.splitlines()


@pytest.mark.asyncio
async def test_scan_clean(project):
    """Test a clean scan exits zero."""
    runner = CliRunner()

    with patch("vulngate.cli.scan.load_config", return_value=Config(api_token="token")):
        with patch("vulngate.tools.snyk.SnykClient.test", new=AsyncMock(return_value=CLEAN)):
            result = await runner.invoke(cli, ["scan", str(project), "--no-color"])

    assert result.exit_code == 0
    assert "Tested 9 dependencies. No vulnerabilities found." in result.output
    assert "[+] Snyk finished successfully" in result.output


@pytest.mark.asyncio
async def test_scan_vulnerable_fails(project):
    """Test that vulnerabilities fail the build after the report is printed."""
    runner = CliRunner()

    with patch("vulngate.cli.scan.load_config", return_value=Config(api_token="token")):
        with patch("vulngate.tools.snyk.SnykClient.test", new=AsyncMock(return_value=VULNERABLE)):
            result = await runner.invoke(cli, ["scan", str(project), "--no-color"])

    assert result.exit_code == 1
    assert "High severity vulnerability found in commons-collections" in result.output
    assert "Found 1 unique vulnerabilities across 2 vulnerable paths." in result.output
    assert result.output.index("Found 1 unique") < result.output.index("[-] Failing build")


@pytest.mark.asyncio
async def test_scan_no_fail_on_discovery(project):
    """Test that the flag keeps the build passing while still reporting."""
    runner = CliRunner()

    with patch("vulngate.cli.scan.load_config", return_value=Config(api_token="token")):
        with patch("vulngate.tools.snyk.SnykClient.test", new=AsyncMock(return_value=VULNERABLE)):
            result = await runner.invoke(
                cli, ["scan", str(project), "--no-color", "--no-fail-on-discovery"]
            )

    assert result.exit_code == 0
    assert "High severity vulnerability found" in result.output
    assert "[!] Vulnerabilities found, continuing build" in result.output


@pytest.mark.asyncio
async def test_scan_threshold_option(project):
    """Test that --severity-threshold overrides the configured threshold."""
    runner = CliRunner()
    low_only = ScanResult.model_validate({
        "ok": False,
        "dependencyCount": 2,
        "vulnerabilities": [{"id": "x", "severity": "low", "from": ["a"]}],
    })

    with patch("vulngate.cli.scan.load_config", return_value=Config(api_token="token")):
        with patch("vulngate.tools.snyk.SnykClient.test", new=AsyncMock(return_value=low_only)):
            result = await runner.invoke(cli, ["scan", str(project), "--no-color", "-t", "medium"])

    assert result.exit_code == 0
    assert "[*] Severity threshold: medium" in result.output
    assert "No vulnerabilities found." in result.output


@pytest.mark.asyncio
async def test_scan_org_option(project):
    """Test that --org is passed through to the request."""
    runner = CliRunner()
    mock_test = AsyncMock(return_value=CLEAN)

    with patch("vulngate.cli.scan.load_config", return_value=Config(api_token="token")):
        with patch("vulngate.tools.snyk.SnykClient.test", new=mock_test):
            result = await runner.invoke(cli, ["scan", str(project), "--org", "team-a"])

    assert result.exit_code == 0
    assert mock_test.call_args.args[0].org_name == "team-a"


@pytest.mark.asyncio
async def test_scan_remote_error(project):
    """Test that a service error exits non-zero with one message."""
    runner = CliRunner()
    failing = AsyncMock(side_effect=RemoteServiceError(500, "Internal Server Error"))

    with patch("vulngate.cli.scan.load_config", return_value=Config(api_token="token")):
        with patch("vulngate.tools.snyk.SnykClient.test", new=failing):
            result = await runner.invoke(cli, ["scan", str(project), "--no-color"])

    assert result.exit_code == 1
    assert "[-] Snyk test failed: HTTP error 500" in result.output
    assert "Tested" not in result.output


@pytest.mark.asyncio
async def test_scan_without_token(project):
    """Test that scanning without a token exits non-zero."""
    runner = CliRunner()

    with patch("vulngate.cli.scan.load_config", return_value=Config()):
        result = await runner.invoke(cli, ["scan", str(project)])

    assert result.exit_code == 1
    assert "No Snyk API token found" in result.output


@pytest.mark.asyncio
async def test_scan_invalid_config(project):
    """Test that a configuration error exits non-zero."""
    runner = CliRunner()

    with patch("vulngate.cli.scan.load_config", side_effect=ConfigError("Invalid configuration")):
        result = await runner.invoke(cli, ["scan", str(project)])

    assert result.exit_code == 1
    assert "[-] Invalid configuration" in result.output


@pytest.mark.asyncio
async def test_scan_no_manifests(tmp_path):
    """Test that a project without manifests passes without a request."""
    runner = CliRunner()
    mock_test = AsyncMock(return_value=CLEAN)

    with patch("vulngate.cli.scan.load_config", return_value=Config(api_token="token")):
        with patch("vulngate.tools.snyk.SnykClient.test", new=mock_test):
            result = await runner.invoke(cli, ["scan", str(tmp_path)])

    assert result.exit_code == 0
    mock_test.assert_not_called()


@pytest.mark.asyncio
async def test_debug_log_level_shows_pipeline_events(project):
    """Test that --log-level debug emits structured pipeline events."""
    runner = CliRunner()

    with patch("vulngate.cli.scan.load_config", return_value=Config(api_token="token")):
        with patch("vulngate.tools.snyk.SnykClient.test", new=AsyncMock(return_value=CLEAN)):
            result = await runner.invoke(cli, ["--log-level", "debug", "scan", str(project)])

    assert result.exit_code == 0
    assert "scan_start" in result.output
    assert "manifests_found" in result.output


@pytest.mark.asyncio
async def test_scan_non_fatal_error_passes(project):
    """Test that a non-fatal pipeline error skips the scan with exit zero."""
    runner = CliRunner()
    skipped = AsyncMock(side_effect=NoManifestsFound("No pom.xml manifests found"))

    with patch("vulngate.cli.scan.load_config", return_value=Config(api_token="token")):
        with patch("vulngate.agents.scan.ScanAgent.run", new=skipped):
            result = await runner.invoke(cli, ["scan", str(project), "--no-color"])

    assert result.exit_code == 0
    assert "[!] No pom.xml manifests found, skipping Snyk test" in result.output
    assert "Snyk test failed" not in result.output
