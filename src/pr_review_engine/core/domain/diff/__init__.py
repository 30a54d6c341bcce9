from pr_review_engine.core.domain.diff.diff_granularity import DiffGranularity
from pr_review_engine.core.domain.diff.diff_unit import DiffUnit, HunkMeta
from pr_review_engine.core.domain.diff.file_line_map import FileLineMap, LineEntry

__all__ = ["DiffGranularity", "DiffUnit", "FileLineMap", "HunkMeta", "LineEntry"]
