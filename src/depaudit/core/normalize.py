"""Normalize scan engine failures into outcomes.

An engine can fail in three shapes:
- a real exception, describing why the scan could not run
- a primitive (string, number) describing the problem
- an object whose `message` is a JSON-encoded result; this is how the
  engine reports "scan finished, vulnerabilities found"

After normalization every path has an Outcome value and nothing is raised.

Provides:
- normalize_error: Turn any rejection into an Outcome
- outcome_from_payload: Decode an engine payload into an Outcome
"""

import json
from typing import Any, Mapping

from depaudit.core.models import Outcome, ProjectError, ProjectResult


def outcome_from_payload(payload: Mapping[str, Any]) -> Outcome:
    """Decode an engine payload into a result or an error.

    Payloads carrying `vulnerabilities` or `ok` are results; anything else
    describes a failure.

    Raises:
        pydantic.ValidationError: If a result payload does not match the model
    """
    if "vulnerabilities" in payload or "ok" in payload:
        return ProjectResult.model_validate(payload)
    return _error_from_mapping(payload)


def normalize_error(raw: Any) -> Outcome:
    """Turn whatever the engine rejected with into an Outcome.

    Args:
        raw: Exception, primitive, or object with a `message` attribute/key

    Returns:
        ProjectResult if the message held an encoded result, else ProjectError
    """
    if isinstance(raw, ProjectError):
        return raw

    if isinstance(raw, BaseException):
        return ProjectError.from_exception(raw)

    if isinstance(raw, Mapping):
        message = raw.get("message")
    elif hasattr(raw, "message"):
        message = raw.message
    else:
        return ProjectError(message=str(raw))

    try:
        decoded = json.loads(message)
    except (TypeError, ValueError):
        return _error_from_object(raw)

    if not isinstance(decoded, dict):
        return _error_from_object(raw)

    try:
        outcome = outcome_from_payload(decoded)
    except ValueError:
        # decoded JSON that is not a valid result
        return _error_from_object(raw)

    # the rejection code applies when the decoded payload carries none
    if outcome.code is None:
        code = _code(raw.get("code") if isinstance(raw, Mapping) else getattr(raw, "code", None))
        if code is not None:
            outcome = outcome.model_copy(update={"code": code})
    return outcome


def _error_from_object(raw: Any) -> ProjectError:
    if isinstance(raw, Mapping):
        return _error_from_mapping(raw)
    return ProjectError(
        message=str(getattr(raw, "message", "")),
        code=_code(getattr(raw, "code", None)),
    )


def _error_from_mapping(raw: Mapping[str, Any]) -> ProjectError:
    extra = {
        key: value
        for key, value in raw.items()
        if key not in ("message", "code", "path") and isinstance(key, str)
    }
    message = raw.get("message")
    return ProjectError(
        message="" if message is None else str(message),
        code=_code(raw.get("code")),
        **extra,
    )


def _code(value: Any) -> str | int | None:
    return value if isinstance(value, (str, int)) else None
