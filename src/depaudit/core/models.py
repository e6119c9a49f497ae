"""Data model for test options and per-path outcomes.

Wire payloads from the scan engine use camelCase keys; models accept both
the wire names and the Python field names, and keep unknown keys so a
result can be written back out unchanged.

Provides:
- ScanOptions: Options for one test invocation, derived per path
- Vulnerability: Single issue found on a dependency path
- ProjectResult: Successful scan result for one path
- ProjectError: Failed scan for one path
- Outcome: ProjectResult | ProjectError
- ProjectRun: Options and outcome for one tested path
"""

from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from depaudit.core.severity import Severity


class WireModel(BaseModel):
    """Base for models decoded from engine payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump with wire names, keeping only keys that were present."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class ScanOptions(BaseModel):
    """Options for a test invocation.

    Built once from the command line flags, then copied for every path so
    the engine can record per-path details (e.g. the detected target file)
    without touching other paths.
    """

    path: str | None = None
    org: str | None = None
    show_vuln_paths: bool = True
    severity_threshold: Severity | None = None
    package_manager: str | None = None
    json_mode: bool = False
    file: str | None = None

    @classmethod
    def from_flags(
        cls, flags: Mapping[str, Any], default_org: str | None = None
    ) -> "ScanOptions":
        """Build options from raw command line flags.

        `show-vulnerable-paths` is a string flag: only "false" (any case)
        turns vulnerable paths off. The severity threshold must already be
        validated.

        Args:
            flags: Raw flags keyed by their command line names
            default_org: Organisation used when no `org` flag is given

        Returns:
            Base options, not yet bound to a path
        """
        show_paths = str(flags.get("show-vulnerable-paths") or "").lower() != "false"
        return cls(
            org=flags.get("org") or default_org,
            show_vuln_paths=show_paths,
            severity_threshold=flags.get("severity-threshold") or None,
            package_manager=flags.get("packageManager") or flags.get("package-manager"),
            json_mode=bool(flags.get("json")),
            file=flags.get("file"),
        )

    def for_path(self, path: str) -> "ScanOptions":
        """Return an independent deep copy bound to path."""
        return self.model_copy(deep=True, update={"path": path})


class IgnoreSettings(WireModel):
    disregard_filesystem_ignores: bool = False


class Vulnerability(WireModel):
    """Issue found on one dependency path.

    Attributes:
        id: Vulnerability identifier, also used for the info link
        name: Vulnerable package name
        version: Vulnerable package version
        severity: Severity level
        title: Short description
        from_: Dependency chain from the project to the package
        upgrade_path: Upgrade per chain position, falsy where none is needed
        note: Optional free text shown under the issue
        type: "license" for license issues, otherwise a security issue
    """

    id: str
    name: str
    version: str
    severity: Severity
    title: str = ""
    from_: list[str] = Field(default_factory=list, alias="from")
    upgrade_path: list[str | bool | None] = Field(default_factory=list)
    note: str | None = None
    type: str | None = None

    @property
    def is_license(self) -> bool:
        return self.type == "license"


class ProjectResult(WireModel):
    """Scan result for one path, clean or with vulnerabilities."""

    ok: bool = False
    vulnerabilities: list[Vulnerability] = Field(default_factory=list)
    unique_count: int = 0
    dependency_count: int | None = None
    org: str | None = None
    package_manager: str | None = None
    is_private: bool = False
    filesystem_policy: bool | None = None
    ignore_settings: IgnoreSettings | None = None
    licenses_policy: dict[str, Any] | None = None
    path: str = ""
    code: str | int | None = None

    @property
    def is_vulnerable(self) -> bool:
        return len(self.vulnerabilities) > 0


class ProjectError(WireModel):
    """A path that could not be tested."""

    message: str = ""
    code: str | int | None = None
    path: str = ""

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ProjectError":
        code = getattr(exc, "code", None)
        if not isinstance(code, (str, int)):
            code = None
        return cls(message=str(exc), code=code)

    def to_wire(self) -> dict[str, Any]:
        return {"ok": False, "error": self.message, "path": self.path}


Outcome = ProjectResult | ProjectError


@dataclass
class ProjectRun:
    """Per-path options paired with the outcome they produced."""

    options: ScanOptions
    outcome: Outcome
