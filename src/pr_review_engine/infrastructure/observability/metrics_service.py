"""Prometheus metrics declarations for the review engine.

All metrics are declared statically at module level.
Labels use ONLY static enumerations, never dynamic IDs (PR numbers, paths, SHAs).
"""

from prometheus_client import Counter, Histogram

# ── Search toolset metrics ────────────────────────────────────────

SEARCH_CACHE_LOOKUPS_TOTAL = Counter(
    "pr_review_search_cache_lookups_total",
    "Repository search cache lookups",
    ["outcome"],
)

SEARCH_BACKEND_RUNS_TOTAL = Counter(
    "pr_review_search_backend_runs_total",
    "Repository searches executed per backend",
    ["backend", "outcome"],
)

TOOL_CALLS_TOTAL = Counter(
    "pr_review_tool_calls_total",
    "Agent tool invocations",
    ["tool", "outcome"],
)

# ── Publishing metrics ────────────────────────────────────────────

PLATFORM_CALLS_TOTAL = Counter(
    "pr_review_platform_calls_total",
    "Code-host API calls",
    ["call", "outcome"],
)

RATE_LIMIT_WAITS_TOTAL = Counter(
    "pr_review_rate_limit_waits_total",
    "Waits triggered by code-host rate limiting",
    ["kind"],
)

RATE_LIMIT_WAIT_SECONDS = Histogram(
    "pr_review_rate_limit_wait_seconds",
    "Seconds spent waiting on code-host rate limits",
    ["kind"],
)
