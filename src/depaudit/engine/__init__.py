"""Scan engines invoked once per tested path.

Provides:
- ScanEngine protocol and EngineRejection
- CommandScanEngine backed by the engine binary
"""

from .base import EngineRejection, ScanEngine, check_binary, run_subprocess
from .command import CommandScanEngine, detect_target_file

__all__ = [
    "EngineRejection",
    "ScanEngine",
    "check_binary",
    "run_subprocess",
    "CommandScanEngine",
    "detect_target_file",
]
