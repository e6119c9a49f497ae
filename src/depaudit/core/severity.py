"""Severity levels and severity threshold validation.

Provides:
- Severity: Ordered enum of vulnerability severities
- SEVERITIES: Allowed severity values, lowest first
- validate_severity_threshold: Check a requested threshold
"""

from enum import Enum


class Severity(str, Enum):
    """Vulnerability severity, declared from least to most severe."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


SEVERITIES: tuple[str, ...] = tuple(level.value for level in Severity)


def validate_severity_threshold(threshold: str) -> bool:
    """Return True if threshold is one of the known severity levels.

    The comparison is case-sensitive: "High" is rejected.

    Args:
        threshold: Raw threshold value from the command line

    Returns:
        True if threshold is in SEVERITIES, False otherwise
    """
    return threshold in SEVERITIES
