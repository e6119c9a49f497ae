"""Human-readable text report.

Renders one block per tested path (header, issues with remediation advice,
metadata and a summary line) and, when several paths were tested, a final
line summarising the whole run.

Provides:
- display_result: Render the block for one path
- meta_for_display: Render the metadata lines for one result
- render_text_report: Render the full report for a run
"""

from typing import Sequence

import asyncclick as click

from depaudit.core.config import Config
from depaudit.core.models import (
    Outcome,
    ProjectError,
    ProjectResult,
    ProjectRun,
    ScanOptions,
    Vulnerability,
)
from depaudit.reporting.summary import RunSummary

SEPARATOR = "\n" + "-" * 40 + "\n"


def _present(step: str | bool | None) -> bool:
    """True for an actual upgrade target in an upgrade path."""
    return bool(step)


def _licenses_enabled(result: ProjectResult) -> bool:
    return result.licenses_policy is not None


def meta_for_display(result: ProjectResult, options: ScanOptions) -> str:
    """Metadata lines describing what was tested."""
    meta = [
        click.style("Organisation:    ", bold=True) + (result.org or "-"),
        click.style("Package manager: ", bold=True)
        + (options.package_manager or result.package_manager or "-"),
        click.style("Target file:     ", bold=True) + (options.file or "-"),
        click.style("Open source:     ", bold=True) + ("no" if result.is_private else "yes"),
        click.style("Project path:    ", bold=True) + (options.path or "-"),
    ]
    if result.filesystem_policy:
        meta.append("Local Snyk policy found")
        if result.ignore_settings and result.ignore_settings.disregard_filesystem_ignores:
            meta.append("Local Snyk policy ignores disregarded")
    if _licenses_enabled(result):
        meta.append("Licenses enabled")

    return "\n".join(meta)


def _remediation(vuln: Vulnerability, text: str, package_manager: str | None) -> str:
    """Append remediation advice for one vulnerability to its block."""
    steps = [str(step) for step in vuln.upgrade_path if _present(step)]

    if not steps:
        if vuln.is_license:
            # no fix exists for license issues, drop the trailing newline
            return text[:-1]
        if package_manager == "npm":
            text += click.style(
                "Fix: None available. Consider removing this dependency.", fg="magenta"
            )
        return text

    upgrade_text = steps[0]
    if len(steps) > 1:
        upgrade_text += f" (triggers upgrades to {' > '.join(steps[1:])})"

    fix = ""
    for idx, step in enumerate(vuln.upgrade_path):
        if not _present(step):
            continue

        if idx < len(vuln.from_) and vuln.from_[idx] == step:
            # the chain already allows a fixed version, the install is stale
            fix += (
                "Your dependencies are out of date, otherwise you would be using "
                f"a newer {vuln.name} than {vuln.name}@{vuln.version}.\n"
            )
            if package_manager == "npm":
                fix += (
                    "Try deleting node_modules, reinstalling and running "
                    "`depaudit test` again.\nIf the problem persists, one of your "
                    "dependencies may be bundling outdated modules."
                )
            elif package_manager == "rubygems":
                fix += (
                    f"Try running `bundle update {vuln.name}` and running "
                    "`depaudit test` again."
                )
        elif idx == 0:
            fix += (
                "You've tested an outdated version of the project. "
                f"Should be upgraded to {upgrade_text}"
            )
        elif idx == 1:
            direct = vuln.from_[idx] if idx < len(vuln.from_) else str(step)
            fix += f"Upgrade direct dependency {direct} to {upgrade_text}"
        else:
            text += "No direct dependency upgrade can address this issue.\n" + click.style(
                "Run `depaudit wizard` to explore remediation options.", bold=True
            )
        break

    if fix:
        text += click.style(fix, bold=True)
    return text


def _format_vulnerability(vuln: Vulnerability, options: ScanOptions, config: Config) -> str:
    severity = vuln.severity.value.capitalize()
    issue = "issue" if vuln.is_license else "vulnerability"

    text = click.style(
        f"✗ {severity} severity {issue} found on {vuln.name}@{vuln.version}", fg="red"
    ) + "\n"
    text += f"- desc: {vuln.title}\n"
    text += f"- info: {config.root_url}/vuln/{vuln.id}\n"
    if options.show_vuln_paths:
        text += f"- from: {' > '.join(vuln.from_)}\n"

    if vuln.note:
        text += vuln.note + "\n"

    # remediation only makes sense alongside the vulnerable paths
    if not options.show_vuln_paths:
        return text.strip()

    return _remediation(vuln, text, options.package_manager)


def display_result(outcome: Outcome, options: ScanOptions, config: Config) -> str:
    """Render the report block for one tested path.

    Args:
        outcome: Result or error for the path
        options: Options the path was tested with
        config: Configuration (CI flag, info link base URL)

    Returns:
        Text block starting with "Testing <path>..."
    """
    prefix = f"\nTesting {options.path}...\n"

    if isinstance(outcome, ProjectError):
        return prefix + outcome.message

    result = outcome
    meta = meta_for_display(result, options) + "\n\n"
    show_paths = options.show_vuln_paths

    if result.dependency_count is not None:
        summary = f"Tested {result.dependency_count} dependencies"
    else:
        summary = f"Tested {options.path}"
    summary += " for known " + ("issues" if _licenses_enabled(result) else "vulnerabilities")

    if result.ok and not result.vulnerabilities:
        tail = ", no vulnerable paths found." if show_paths else ", none were found."
        summary = click.style("✓ " + summary + tail, fg="green")

        if not config.is_ci:
            summary += (
                "\n\nNext steps:\n"
                "- Run `depaudit monitor` to be notified about new related vulnerabilities.\n"
                "- Run `depaudit test` as part of your CI/test."
            )
        return prefix + meta + summary

    vuln_count = len(result.vulnerabilities)
    if result.unique_count == 1:
        noun = "issue" if _licenses_enabled(result) else "vulnerability"
    else:
        noun = "issues" if _licenses_enabled(result) else "vulnerabilities"

    count = f"found {result.unique_count} {noun}"
    if show_paths:
        count += f", {vuln_count} vulnerable " + ("path." if vuln_count == 1 else "paths.")
    else:
        count += "."
    summary += ", " + click.style(count, fg="red", bold=True)

    if options.package_manager in ("npm", "yarn"):
        summary += "\n\nRun `depaudit wizard` to address these issues."

    blocks = []
    reported: set[str] = set()
    for vuln in result.vulnerabilities:
        if not show_paths and vuln.id in reported:
            continue
        reported.add(vuln.id)
        blocks.append(_format_vulnerability(vuln, options, config))

    body = "\n\n".join(block for block in blocks if block)
    return prefix + body + "\n\n" + meta + summary


def _summarise_vulnerable(summary: RunSummary, show_paths: bool) -> str:
    if summary.vulnerable:
        if show_paths:
            return f", {len(summary.vulnerable)} contained vulnerable paths."
        return f", {len(summary.vulnerable)} had issues."

    if show_paths:
        return ", no vulnerable paths were found."
    return ", no issues were found."


def _summarise_errors(summary: RunSummary, config: Config) -> str:
    if not summary.errors:
        return ""

    projects = "projects" if len(summary.errors) > 1 else "project"
    return (
        f" Failed to test {len(summary.errors)} {projects}.\n"
        f"Run with `-d` for debug output and contact {config.support_email}"
    )


def render_text_report(
    runs: Sequence[ProjectRun],
    options: ScanOptions,
    summary: RunSummary,
    config: Config,
) -> str:
    """Render the full text report.

    Blocks for each path are joined by a dashed separator. When more than
    one path was tested a closing summary line follows, green when every
    path passed and red otherwise.

    Args:
        runs: Tested paths with their options and outcomes
        options: Base options of the run
        summary: Aggregated outcomes
        config: Configuration

    Returns:
        Complete report text
    """
    response = SEPARATOR.join(
        display_result(run.outcome, run.options, config) for run in runs
    )

    if len(runs) > 1:
        summary_message = (
            f"\n\nTested {len(runs)} projects"
            + _summarise_vulnerable(summary, options.show_vuln_paths)
            + _summarise_errors(summary, config)
        )
        color = "red" if summary.overall_failure else "green"
        response += click.style(summary_message, fg=color, bold=True)

    return response
