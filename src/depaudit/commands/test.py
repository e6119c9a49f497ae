"""The `test` command: test one or more project paths and report.

Ties the pipeline together: validate flags, check the API token, run the
engine over every path in order, then render a JSON or text report. A run
with any vulnerable or failed path raises AuditFailedError carrying the full
report, so the caller prints it instead of a generic error.
"""

import os
from typing import Any, Mapping, Sequence

import structlog

from depaudit.core.auth import api_token_exists
from depaudit.core.config import Config, load_config
from depaudit.core.errors import AuditFailedError, InvalidSeverityThresholdError
from depaudit.core.models import ScanOptions
from depaudit.core.runner import SequentialRunner
from depaudit.core.severity import validate_severity_threshold
from depaudit.engine.base import ScanEngine
from depaudit.engine.command import CommandScanEngine
from depaudit.reporting import render_json, render_text_report, summarize

logger = structlog.get_logger()


async def run_test(
    paths: Sequence[str],
    flags: Mapping[str, Any] | None = None,
    *,
    engine: ScanEngine | None = None,
    config: Config | None = None,
) -> str:
    """Test paths for known vulnerabilities.

    Args:
        paths: Paths to test; the current directory when empty
        flags: Raw flags (`org`, `show-vulnerable-paths`, `severity-threshold`,
            `json`, `packageManager`/`package-manager`, `file`)
        engine: Scan engine (defaults to CommandScanEngine)
        config: Configuration (defaults to load_config())

    Returns:
        Report text (JSON in JSON mode) when every path passed

    Raises:
        InvalidSeverityThresholdError: Unknown severity threshold, nothing tested
        MissingApiTokenError: No API token configured, nothing tested
        AuditFailedError: A path had issues or failed; message is the report
    """
    config = config or load_config()
    flags = flags or {}
    paths = list(paths) or [os.getcwd()]

    threshold = flags.get("severity-threshold")
    if threshold and not validate_severity_threshold(threshold):
        raise InvalidSeverityThresholdError(threshold)

    options = ScanOptions.from_flags(flags, default_org=config.org)
    log = logger.bind(paths=len(paths), json=options.json_mode)

    await api_token_exists("depaudit test", config)

    runner = SequentialRunner(engine or CommandScanEngine(config))
    runs = await runner.run(paths, options)
    outcomes = [run.outcome for run in runs]

    if options.json_mode:
        report, all_ok = render_json(outcomes)
        log.debug("test_complete", ok=all_ok)
        if all_ok:
            return report
        raise AuditFailedError(report, json_report=True)

    summary = summarize(outcomes)
    report = render_text_report(runs, options, summary, config)
    log.debug(
        "test_complete",
        vulnerable=len(summary.vulnerable),
        errors=len(summary.errors),
    )

    if summary.overall_failure:
        raise AuditFailedError(report, code=summary.failure_code)
    return report
