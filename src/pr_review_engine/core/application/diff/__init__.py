from pr_review_engine.core.application.diff.diff_segmenter import split_diff, strip_path_prefix
from pr_review_engine.core.application.diff.line_anchor_resolver import (
    build_file_line_map,
    resolve_findings,
    resolve_line,
)

__all__ = [
    "build_file_line_map",
    "resolve_findings",
    "resolve_line",
    "split_diff",
    "strip_path_prefix",
]
