"""Scan engine backed by an external engine binary.

Runs `<engine> test <path> --json` and decodes the JSON it prints. A zero
exit code means the path is clean; a non-zero exit code with a JSON report on
stdout means vulnerabilities were found, which is reported as a rejection
whose message is that report.
"""

import asyncio
import json
import time
from pathlib import Path
from typing import Any

import structlog

from depaudit.core.config import Config
from depaudit.core.errors import ScanEngineError
from depaudit.core.models import ScanOptions
from .base import EngineRejection, check_binary, run_subprocess

logger = structlog.get_logger()


# Manifest file -> package manager, checked in order
MANIFESTS = (
    ("yarn.lock", "yarn"),
    ("package.json", "npm"),
    ("Gemfile.lock", "rubygems"),
    ("Gemfile", "rubygems"),
    ("pom.xml", "maven"),
    ("build.gradle", "gradle"),
    ("requirements.txt", "pip"),
    ("Pipfile", "pip"),
    ("Gopkg.lock", "golangdep"),
    ("composer.lock", "composer"),
)


def detect_target_file(path: str) -> tuple[str, str] | None:
    """Find the manifest to test inside a project directory.

    Args:
        path: Project directory

    Returns:
        (file name, package manager) or None if no known manifest exists
    """
    root = Path(path)
    for file_name, package_manager in MANIFESTS:
        if (root / file_name).is_file():
            return file_name, package_manager
    return None


class CommandScanEngine:
    """Wrapper for the depaudit engine binary.

    Handles a missing binary and timeouts by raising ScanEngineError, which
    the runner records as the path's outcome.
    """

    name = "command"

    def __init__(self, config: Config):
        """Initialize engine wrapper.

        Args:
            config: Configuration with engine_command and engine_timeout
        """
        self.binary_name = config.engine_command
        self.timeout = config.engine_timeout
        self.log = logger.bind(engine=self.name, binary=self.binary_name)

    def is_available(self) -> bool:
        return check_binary(self.binary_name)

    def build_command(self, path: str, options: ScanOptions) -> list[str]:
        cmd = [self.binary_name, "test", path, "--json"]
        if options.org:
            cmd += ["--org", options.org]
        if options.file:
            cmd += ["--file", options.file]
        if options.package_manager:
            cmd += ["--package-manager", options.package_manager]
        if options.severity_threshold:
            cmd += ["--severity-threshold", options.severity_threshold.value]
        return cmd

    async def test(self, path: str, options: ScanOptions) -> dict[str, Any]:
        """Test one project directory.

        Fills options.file and options.package_manager from the detected
        manifest when they were not given.

        Args:
            path: Project directory to test
            options: Per-path options, updated in place

        Returns:
            Decoded result payload for a clean project

        Raises:
            ScanEngineError: Engine missing, timed out, or printed invalid JSON
            EngineRejection: Engine exited non-zero; the reason's message is
                its output (a JSON report when vulnerabilities were found)
        """
        start_time = time.time()

        if not self.is_available():
            self.log.warning("binary_not_found")
            raise ScanEngineError(
                f"{self.binary_name} not installed or not on PATH. "
                "Set DEPAUDIT_ENGINE to the engine binary.",
                code="ENGINE_NOT_INSTALLED",
            )

        if not options.file:
            detected = detect_target_file(path)
            if detected:
                options.file = detected[0]
                options.package_manager = options.package_manager or detected[1]
                self.log.debug("target_file_detected", path=path, file=options.file)

        cmd = self.build_command(path, options)
        self.log.info("engine_start", path=path)

        try:
            stdout, stderr, returncode = await run_subprocess(cmd, timeout=self.timeout)
        except asyncio.TimeoutError:
            raise ScanEngineError(
                f"Testing {path} timed out after {self.timeout}s",
                code="ENGINE_TIMEOUT",
            )

        self.log.info(
            "engine_complete",
            path=path,
            returncode=returncode,
            duration=round(time.time() - start_time, 2),
        )

        if returncode != 0:
            raise EngineRejection({
                "message": stdout.strip() or stderr.strip(),
                "code": returncode,
            })

        try:
            payload = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise ScanEngineError(
                f"Invalid JSON from {self.binary_name}: {e}",
                code="ENGINE_BAD_OUTPUT",
            ) from e
        return payload
