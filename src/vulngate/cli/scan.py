"""AsyncClick CLI for the build-time scan gate.

Provides user-facing commands:
- detect: Report whether scanning is enabled
- scan: Scan a project and fail on qualifying vulnerabilities
"""

import asyncclick as click
import structlog

from vulngate.core.config import load_config
from vulngate.core.errors import ConfigError, ScanError, VulnerabilitiesFound
from vulngate.core.logging import LOG_LEVELS, setup_logging
from vulngate.core.severity import Severity

logger = structlog.get_logger()


@click.group()
@click.option("--log-level", default=None, type=click.Choice(LOG_LEVELS),
              help="Diagnostic log level on stderr (default: VULNGATE_LOG_LEVEL or warning)")
@click.pass_context
async def cli(ctx, log_level: str | None):
    """vulngate - Maven dependency vulnerability gate"""
    ctx.ensure_object(dict)
    setup_logging(log_level)


@cli.command()
@click.pass_context
async def detect(ctx):
    """Print the component name if a Snyk token is configured.

    Exits with status 1 when scanning is not enabled.
    """
    from vulngate.agents import ScanAgent

    try:
        config = load_config()
    except ConfigError as e:
        click.echo(f"[-] {e}")
        ctx.exit(1)

    name = ScanAgent(config).detect()
    if name is None:
        ctx.exit(1)
    click.echo(name)


@cli.command()
@click.argument("root", default=".", type=click.Path(file_okay=False))
@click.option("--severity-threshold", "-t", default=None,
              type=click.Choice([s.value for s in Severity]),
              help="Lowest severity to report (default: SNYK_SEVERITY_THRESHOLD or low)")
@click.option("--org", default=None, help="Snyk organization (default: SNYK_ORG_NAME)")
@click.option("--fail-on-discovery/--no-fail-on-discovery", default=None,
              help="Fail the build when vulnerabilities are found")
@click.option("--color/--no-color", default=True, help="Colorize the report")
@click.pass_context
async def scan(ctx, root: str, severity_threshold: str | None, org: str | None,
               fail_on_discovery: bool | None, color: bool):
    """Scan pom.xml manifests under ROOT for known vulnerabilities.

    Examples:
        vulngate scan
        vulngate scan ./app -t medium
        vulngate scan ./app --no-fail-on-discovery
    """
    from vulngate.agents import ScanAgent

    try:
        config = load_config()
    except ConfigError as e:
        click.echo(f"[-] {e}")
        ctx.exit(1)

    overrides = {}
    if severity_threshold is not None:
        overrides["severity_threshold"] = Severity(severity_threshold)
    if org is not None:
        overrides["org_name"] = org or None
    if fail_on_discovery is not None:
        overrides["fail_on_discovery"] = fail_on_discovery
    config = config.model_copy(update=overrides)

    if not config.enabled:
        click.echo("[-] No Snyk API token found (set SNYK_TOKEN or bind a Snyk service)")
        ctx.exit(1)

    click.echo(f"[*] Running Snyk test on {root}")
    if not config.fail_on_discovery:
        click.echo("[*] Fail on discovery disabled, vulnerabilities will not break the build")
    click.echo(f"[*] Severity threshold: {config.severity_threshold.value}")

    agent = ScanAgent(config, color=color)

    try:
        outcome = await agent.run(root)
    except VulnerabilitiesFound as e:
        click.echo(f"\n[-] Failing build: {e}")
        ctx.exit(1)
    except ScanError as e:
        if not e.fatal:
            logger.warning("scan_skipped", reason=str(e), error_type=type(e).__name__)
            click.echo(f"\n[!] {e}, skipping Snyk test")
            return
        logger.error("scan_failed", error=str(e), error_type=type(e).__name__)
        click.echo(f"\n[-] Snyk test failed: {e}")
        ctx.exit(1)

    if outcome.issues:
        click.echo("\n[!] Vulnerabilities found, continuing build")
    else:
        click.echo("\n[+] Snyk finished successfully")
