"""Masks GitHub credentials before they reach a log line or an error message."""

import re
from typing import Any

_REDACTED = "[REDACTED]"

# Each pattern captures a prefix to keep and the secret to mask.
_SECRET_RES = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"(Bearer\s+)([\w\-.~+/=]+)",
        r"(Authorization:\s*)([\w\-.~+/=]+)",
        r"(token\s+)(gh[pousr]_\w+)",
        r"()(gh[pousr]_[A-Za-z0-9]{20,})",
        r"()(github_pat_\w+)",
        r"(https?://[^:/\s]+:)([^@\s]+)(?=@)",
    )
)

_SENSITIVE_KEY_PARTS = ("authorization", "api_key", "token", "password", "secret")


def redact_text(text: str) -> str:
    """Mask known secret shapes inside free text."""
    if not text:
        return text
    for regex in _SECRET_RES:
        text = regex.sub(rf"\1{_REDACTED}", text)
    return text


def _is_sensitive_key(key: object) -> bool:
    lowered = str(key).lower()
    return any(part in lowered for part in _SENSITIVE_KEY_PARTS)


def redact_value(value: Any) -> Any:
    """Recursive variant for log payloads (strings, dicts, lists)."""
    if isinstance(value, str):
        return redact_text(value)
    if isinstance(value, dict):
        return redact_dict(value)
    if isinstance(value, list | tuple):
        return [redact_value(item) for item in value]
    return value


def redact_dict(obj: dict[str, Any]) -> dict[str, Any]:
    return {
        key: _REDACTED if _is_sensitive_key(key) else redact_value(value)
        for key, value in obj.items()
    }
