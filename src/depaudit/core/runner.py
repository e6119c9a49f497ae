"""Sequential test runner.

Tests each path in turn, one engine call at a time, and collects an
outcome per path in input order. Engine failures for a path are recorded
as that path's outcome and never stop the remaining paths.
"""

from typing import Sequence

import structlog
from pydantic import ValidationError

from depaudit.core.models import Outcome, ProjectError, ProjectRun, ScanOptions
from depaudit.core.normalize import normalize_error, outcome_from_payload
from depaudit.engine.base import EngineRejection, ScanEngine

logger = structlog.get_logger()


class SequentialRunner:
    """Run the scan engine over a list of paths.

    Each path gets its own deep copy of the base options. Calls are never
    concurrent: the next path starts only after the previous outcome has
    been recorded.
    """

    def __init__(self, engine: ScanEngine):
        """Initialize runner.

        Args:
            engine: Scan engine invoked once per path
        """
        self.engine = engine
        self.log = logger.bind(engine=getattr(engine, "name", type(engine).__name__))

    async def run(self, paths: Sequence[str], base_options: ScanOptions) -> list[ProjectRun]:
        """Test every path and pair each outcome with the options used.

        Args:
            paths: Paths to test, in order
            base_options: Options shared by all paths; never mutated

        Returns:
            One ProjectRun per path, in input order, each outcome tagged with
            the path that produced it
        """
        runs: list[ProjectRun] = []
        for index, path in enumerate(paths):
            options = base_options.for_path(path)
            self.log.debug("path_test_started", path=path, index=index, total=len(paths))

            outcome = await self._test_path(path, options)
            outcome = outcome.model_copy(update={"path": path})
            runs.append(ProjectRun(options=options, outcome=outcome))

            self.log.debug(
                "path_test_finished",
                path=path,
                outcome=type(outcome).__name__,
                vulnerabilities=len(getattr(outcome, "vulnerabilities", [])),
            )
        return runs

    async def _test_path(self, path: str, options: ScanOptions) -> Outcome:
        try:
            payload = await self.engine.test(path, options)
        except EngineRejection as e:
            return normalize_error(e.reason)
        except Exception as e:
            self.log.debug("engine_failed", path=path, error=str(e), error_type=type(e).__name__)
            return normalize_error(e)

        if not isinstance(payload, dict):
            return ProjectError(message=f"Unexpected response from scan engine: {payload!r}")

        try:
            return outcome_from_payload(payload)
        except ValidationError as e:
            self.log.warning("invalid_engine_payload", path=path, errors=e.error_count())
            return ProjectError(
                message=f"Unexpected response from scan engine: {e.error_count()} invalid field(s)"
            )
