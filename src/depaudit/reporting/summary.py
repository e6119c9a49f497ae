"""Aggregate outcomes into an overall pass/fail decision."""

from dataclasses import dataclass, field
from typing import Sequence

from depaudit.core.models import Outcome, ProjectError, ProjectResult


@dataclass
class RunSummary:
    """Vulnerable and failed outcomes of a test run."""
    vulnerable: list[ProjectResult] = field(default_factory=list)
    errors: list[ProjectError] = field(default_factory=list)

    @property
    def overall_failure(self) -> bool:
        return bool(self.vulnerable or self.errors)

    @property
    def failure_code(self) -> str | int | None:
        """Code to report for the whole run.

        Only one code can be surfaced, so the first vulnerable outcome wins,
        then the first error.
        """
        if self.vulnerable:
            return self.vulnerable[0].code
        if self.errors:
            return self.errors[0].code
        return None


def summarize(outcomes: Sequence[Outcome]) -> RunSummary:
    """Split outcomes into vulnerable results and errors.

    Args:
        outcomes: Outcomes in the order paths were tested

    Returns:
        RunSummary preserving that order
    """
    return RunSummary(
        vulnerable=[o for o in outcomes if isinstance(o, ProjectResult) and o.is_vulnerable],
        errors=[o for o in outcomes if isinstance(o, ProjectError)],
    )
