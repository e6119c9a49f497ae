"""Command implementations independent of the CLI layer."""

from .test import run_test

__all__ = ["run_test"]
