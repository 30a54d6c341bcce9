from __future__ import annotations

from collections import OrderedDict
from collections.abc import Hashable

from pr_review_engine.core.application.tools.tool_calls import SearchRepositoryCall
from pr_review_engine.infrastructure.observability.metrics_service import SEARCH_CACHE_LOOKUPS_TOTAL

DEFAULT_CACHE_CAPACITY = 100


def make_cache_key(call: SearchRepositoryCall) -> tuple[Hashable, ...]:
    """Normalized tuple over every search parameter, so distinct searches never collide."""
    extensions = (
        tuple(sorted({ext.strip().lstrip(".") for ext in call.extensions if ext.strip()}))
        if call.extensions
        else None
    )
    paths = (
        tuple(sorted({p.strip().rstrip("/") or "." for p in call.paths if p.strip()}))
        if call.paths
        else None
    )
    return (
        call.query,
        call.case_sensitive,
        call.regex,
        call.word_boundary,
        extensions or None,
        paths or None,
        call.context_lines,
        call.max_results,
    )


class SearchCache:
    """Bounded LRU of formatted search results, owned by one toolset instance."""

    def __init__(self, capacity: int = DEFAULT_CACHE_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("Cache capacity must be at least 1")
        self._capacity = capacity
        self._entries: OrderedDict[Hashable, str] = OrderedDict()

    def get(self, key: Hashable) -> str | None:
        value = self._entries.get(key)
        if value is None:
            SEARCH_CACHE_LOOKUPS_TOTAL.labels(outcome="miss").inc()
            return None
        self._entries.move_to_end(key)
        SEARCH_CACHE_LOOKUPS_TOTAL.labels(outcome="hit").inc()
        return value

    def put(self, key: Hashable, value: str) -> None:
        self._entries[key] = value
        self._entries.move_to_end(key)
        while len(self._entries) > self._capacity:
            self._entries.popitem(last=False)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> list[Hashable]:
        """Keys from least to most recently used."""
        return list(self._entries)
