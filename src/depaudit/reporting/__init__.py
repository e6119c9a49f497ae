"""Report rendering for test runs.

Provides:
- summarize / RunSummary: Overall pass/fail and failure code
- render_json: Machine-readable report
- render_text_report / display_result: Human-readable report
"""

from .json_report import render_json
from .summary import RunSummary, summarize
from .text import display_result, render_text_report

__all__ = ["RunSummary", "display_result", "render_json", "render_text_report", "summarize"]
