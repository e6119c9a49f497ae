"""AsyncClick CLI for depaudit.

Provides user-facing commands:
- test: Test project paths for known vulnerabilities
"""

import asyncclick as click
import structlog

from depaudit.commands import run_test
from depaudit.core.config import load_config
from depaudit.core.errors import AuditFailedError, DepAuditError
from depaudit.core.log import configure_logging
from depaudit.engine.command import CommandScanEngine

logger = structlog.get_logger()

# exit codes
EXIT_ISSUES = 1
EXIT_ERROR = 2


@click.group()
@click.option("--debug", "-d", is_flag=True, help="Print debug output to stderr")
@click.pass_context
async def cli(ctx, debug: bool):
    """depaudit - Test project dependencies for known vulnerabilities"""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    configure_logging(debug)


@cli.command("test")
@click.argument("paths", nargs=-1)
@click.option("--org", default=None, help="Organisation to test under")
@click.option("--show-vulnerable-paths", default=None, metavar="BOOL",
              help="Set to 'false' to hide vulnerable paths (default: shown)")
@click.option("--severity-threshold", default=None,
              help="Only report issues of this severity or higher")
@click.option("--json", "json_mode", is_flag=True, help="Output the report as JSON")
@click.option("--package-manager", default=None, help="Package manager of the project (npm, yarn, rubygems, ...)")
@click.option("--file", "target_file", default=None, help="Manifest file to test")
async def test_paths(
    paths: tuple[str, ...],
    org: str | None,
    show_vulnerable_paths: str | None,
    severity_threshold: str | None,
    json_mode: bool,
    package_manager: str | None,
    target_file: str | None,
):
    """Test project paths for known vulnerabilities.

    Tests the current directory when no path is given. Exits with 1 when any
    path has issues or fails to test.

    Examples:
        depaudit test
        depaudit test ./api ./web --severity-threshold high
        depaudit test --json --show-vulnerable-paths false
    """
    config = load_config()
    flags = {
        "org": org,
        "show-vulnerable-paths": show_vulnerable_paths,
        "severity-threshold": severity_threshold,
        "json": json_mode,
        "packageManager": package_manager,
        "file": target_file,
    }

    try:
        output = await run_test(paths, flags, engine=CommandScanEngine(config), config=config)
    except AuditFailedError as e:
        # the report is the error message
        logger.debug("test_failed", code=e.code, json=e.json_report)
        click.echo(e.message)
        raise click.exceptions.Exit(EXIT_ISSUES)
    except DepAuditError as e:
        click.echo(f"[-] {e.message}", err=True)
        raise click.exceptions.Exit(EXIT_ERROR)

    click.echo(output)


if __name__ == "__main__":
    cli()
