"""Machine-readable JSON report."""

import json
from typing import Sequence

from depaudit.core.models import Outcome


def render_json(outcomes: Sequence[Outcome]) -> tuple[str, bool]:
    """Serialize outcomes as a JSON report.

    Results are written as received from the engine; errors become
    `{"ok": false, "error": <message>, "path": <path>}`. A single outcome is
    written as a bare object rather than a one-element list, which existing
    consumers of the report rely on.

    Args:
        outcomes: Outcomes in the order paths were tested

    Returns:
        Tuple of (JSON text with 2-space indentation, whether every entry is ok)
    """
    entries = [outcome.to_wire() for outcome in outcomes]
    data = entries[0] if len(entries) == 1 else entries
    all_ok = all(entry.get("ok") is True for entry in entries)
    return json.dumps(data, indent=2, ensure_ascii=False), all_ok
