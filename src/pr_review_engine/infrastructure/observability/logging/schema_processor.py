"""Structlog processor that nests review log events.

Errors, the emitting component and the upstream system get their own blocks;
whatever is left over goes to ``extra`` with secrets masked.
"""

from __future__ import annotations

import os
from typing import Any
from uuid import uuid4

from pr_review_engine.infrastructure.observability.redaction_service import redact_value


def _build_root_fields(event_dict: dict[str, Any]) -> dict[str, Any]:
    return {
        "timestamp": event_dict.pop("timestamp", None),
        "level": event_dict.pop("level", "info"),
        "service": os.environ.get("SERVICE_NAME", "pr-review-engine"),
        "environment": os.environ.get("APP_ENV", "local"),
        "pr_number": event_dict.pop("pr_number", None),
        "message": event_dict.pop("event", ""),
    }


def _build_error(event_dict: dict[str, Any]) -> dict[str, Any] | None:
    """Error block with secrets redacted. None if no error_type present."""
    error_type = event_dict.pop("error_type", None)
    if error_type is None:
        return None
    return {
        "type": error_type,
        "code": event_dict.pop("error_code", None),
        "details": redact_value(event_dict.pop("error_details", None)),
        "retryable": event_dict.pop("error_retryable", False),
    }


def _build_context(event_dict: dict[str, Any]) -> dict[str, Any] | None:
    component = event_dict.pop("context_component", None)
    if component is None:
        return None
    return {"component": component, "file_path": event_dict.pop("file_path", None)}


def review_schema_processor(
    logger: Any,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    result = _build_root_fields(event_dict)

    error = _build_error(event_dict)
    if error is not None:
        result["error"] = error

    result["event_id"] = str(uuid4())

    context = _build_context(event_dict)
    if context is not None:
        result["context"] = context

    source = event_dict.pop("source_system", None)
    if source is not None:
        result["metadata"] = {"source_system": source}

    if event_dict:
        result["extra"] = redact_value(dict(event_dict))

    return result
