"""Error taxonomy for the test pipeline.

Input and precondition failures abort before any path is tested. Per-path
engine failures are turned into data by the normalizer and only surface
through AuditFailedError, which carries the rendered report.
"""

from depaudit.core.severity import SEVERITIES


class DepAuditError(Exception):
    """Base error with an optional machine-readable code."""

    code: str | int | None = None

    def __init__(self, message: str = "", code: str | int | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class InvalidSeverityThresholdError(DepAuditError):
    """Raised when --severity-threshold is not a known severity."""

    code = "INVALID_SEVERITY_THRESHOLD"

    def __init__(self, threshold: str):
        super().__init__(
            f"Invalid severity threshold '{threshold}', "
            f"please use one of: {', '.join(SEVERITIES)}"
        )
        self.threshold = threshold


class MissingApiTokenError(DepAuditError):
    """Raised when no API token is configured."""

    code = "NO_API_TOKEN"


class ScanEngineError(DepAuditError):
    """Raised by a scan engine when it could not test a path."""


class AuditFailedError(DepAuditError):
    """One or more tested paths had issues or could not be tested.

    The message is the complete report, ready to be printed as is.
    """

    def __init__(
        self,
        report: str,
        code: str | int | None = None,
        json_report: bool = False,
    ):
        super().__init__(report, code=code)
        self.json_report = json_report
