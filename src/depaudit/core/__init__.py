"""Core test pipeline functionality.

Provides:
- Data model for options and per-path outcomes
- Severity threshold validation
- Error taxonomy
"""

from .errors import (
    AuditFailedError,
    DepAuditError,
    InvalidSeverityThresholdError,
    MissingApiTokenError,
    ScanEngineError,
)
from .models import Outcome, ProjectError, ProjectResult, ProjectRun, ScanOptions, Vulnerability
from .severity import SEVERITIES, Severity, validate_severity_threshold

__all__ = [
    "AuditFailedError",
    "DepAuditError",
    "InvalidSeverityThresholdError",
    "MissingApiTokenError",
    "ScanEngineError",
    "Outcome",
    "ProjectError",
    "ProjectResult",
    "ProjectRun",
    "ScanOptions",
    "Vulnerability",
    "SEVERITIES",
    "Severity",
    "validate_severity_threshold",
]
