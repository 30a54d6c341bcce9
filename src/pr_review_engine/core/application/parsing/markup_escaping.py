"""Escaping for the five reserved markup characters crossing the model boundary."""

from xml.sax.saxutils import escape, unescape

_ESCAPE_ENTITIES = {'"': "&quot;", "'": "&apos;"}
_UNESCAPE_ENTITIES = {"&quot;": '"', "&apos;": "'"}


def escape_markup(value: str | None) -> str:
    """Escape ``& < > " '`` so text can be interpolated into prompt markup."""
    if value is None:
        return ""
    return escape(value, _ESCAPE_ENTITIES)


def unescape_markup(value: str | None) -> str:
    """Inverse of :func:`escape_markup`; ``&amp;`` is restored last."""
    if value is None:
        return ""
    return unescape(value, _UNESCAPE_ENTITIES)
