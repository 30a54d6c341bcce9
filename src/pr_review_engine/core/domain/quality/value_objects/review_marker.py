REVIEW_TAG = "PR Review Engine"
BOT_MARKER = "<!-- pr-review-engine -->"


def is_bot_comment(body: str | None) -> bool:
    """True for comment or review bodies this engine produced in an earlier run."""
    return bool(body) and (BOT_MARKER in body or REVIEW_TAG in body)
