"""Scan engine protocol and subprocess helpers.

Provides:
- ScanEngine protocol for the per-path test call
- EngineRejection for failures that carry a non-exception reason
- Helper functions for binary checking and subprocess execution
"""

import asyncio
import shutil
from typing import Any, Protocol, runtime_checkable

import structlog

from depaudit.core.models import ScanOptions

logger = structlog.get_logger()


class EngineRejection(Exception):
    """Engine failure carrying an arbitrary reason.

    The reason can be a primitive (e.g. "ENOENT") or an object whose
    `message` holds a JSON-encoded result. The runner hands it to the
    normalizer as is.
    """

    def __init__(self, reason: Any):
        super().__init__(reason if isinstance(reason, str) else repr(reason))
        self.reason = reason


@runtime_checkable
class ScanEngine(Protocol):
    """Protocol for scan engines."""
    name: str

    async def test(self, path: str, options: ScanOptions) -> dict[str, Any]:
        """Test one path and return the result payload.

        May record per-path details on options (e.g. options.file).
        """
        ...


def check_binary(binary_name: str) -> bool:
    """Check if binary exists on PATH.

    Args:
        binary_name: Name of binary to check (e.g., "depaudit-engine")

    Returns:
        True if binary is available, False otherwise
    """
    return shutil.which(binary_name) is not None


async def run_subprocess(
    cmd: list[str],
    timeout: int = 300
) -> tuple[str, str, int]:
    """Run command via subprocess with timeout.

    Uses asyncio.create_subprocess_exec (NEVER shell=True) for safe execution.
    Kills process on timeout and ensures cleanup.

    Args:
        cmd: Command and arguments as list
        timeout: Timeout in seconds (default: 300)

    Returns:
        Tuple of (stdout, stderr, returncode)

    Raises:
        asyncio.TimeoutError: If command exceeds timeout
    """
    log = logger.bind(cmd=cmd[0], timeout=timeout)

    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    log.debug("subprocess_started", pid=process.pid)

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(),
            timeout=timeout
        )
    except asyncio.TimeoutError:
        log.warning("subprocess_timeout", pid=process.pid)
        process.kill()
        # Wait for process to actually terminate
        await process.communicate()
        raise

    stdout = stdout_bytes.decode("utf-8", errors="replace")
    stderr = stderr_bytes.decode("utf-8", errors="replace")
    returncode = process.returncode or 0

    log.debug(
        "subprocess_completed",
        returncode=returncode,
        stdout_len=len(stdout),
        stderr_len=len(stderr)
    )
    return stdout, stderr, returncode
