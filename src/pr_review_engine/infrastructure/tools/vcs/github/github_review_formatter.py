"""Pure functions building Markdown bodies for GitHub reviews and inline comments."""

from pr_review_engine.core.domain.quality import CodeReviewReport, Finding, ReviewSeverity
from pr_review_engine.core.domain.quality.value_objects.review_marker import BOT_MARKER, REVIEW_TAG

_SEVERITY_BADGES = {
    ReviewSeverity.REQUIRED: "🔴",
    ReviewSeverity.OPTIONAL: "🟡",
    ReviewSeverity.NIT: "🔵",
    ReviewSeverity.FYI: "ℹ️",
    ReviewSeverity.PRAISE: "👏",
}
_DEFAULT_BADGE = "📝"


def format_inline_comment(finding: Finding) -> str:
    """Badge, upper-cased severity, message, then an optional suggestion block."""
    if finding.severity is None:
        body = f"{_DEFAULT_BADGE} {finding.message}"
    else:
        badge = _SEVERITY_BADGES[finding.severity]
        body = f"{badge} **{finding.severity.value.upper()}**: {finding.message}"
    if finding.suggestion:
        body += f"\n\n**Suggestion:**\n```\n{finding.suggestion}\n```"
    return f"{body}\n\n{BOT_MARKER}"


def build_review_body(report: CodeReviewReport) -> str:
    parts = [f"🔍 **{REVIEW_TAG} Summary**", ""]
    if report.summary:
        parts.extend([report.summary.strip(), ""])
    count = len(report.anchored_findings)
    noun = "item" if count == 1 else "items"
    verb = "needs" if count == 1 else "need"
    parts.append(f"**Review Results:** Found {count} {noun} that {verb} attention during review.")
    parts.extend(["", BOT_MARKER])
    return "\n".join(parts)

