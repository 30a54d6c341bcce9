from dataclasses import dataclass, field

from pr_review_engine.core.domain.diff import DiffGranularity

DEFAULT_SYSTEM_PROMPT = (
    "You review a pull-request diff. Use the tools to inspect surrounding code when needed. "
    "Answer with <prSummary>, <comments> (each <comment> holding <severity>, <file>, "
    "<line> quoting the diff line with its marker, <message>, optional <suggestion>) and "
    "<resolvedComments> for earlier comments the change addresses."
)


@dataclass(frozen=True)
class ReviewRequest:
    pr_number: int
    diff_text: str
    granularity: DiffGranularity = DiffGranularity.FILE
    commit_id: str | None = None
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    priority_models: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.pr_number <= 0:
            raise ValueError("pr_number must be positive")
