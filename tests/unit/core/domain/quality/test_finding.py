"""Unit tests — Finding value object and review verdict rules."""

import pytest

from pr_review_engine.core.domain.quality import (
    CodeReviewReport,
    Finding,
    ReviewEvent,
    ReviewSeverity,
)
from pr_review_engine.core.domain.quality.value_objects.review_marker import (
    BOT_MARKER,
    is_bot_comment,
)


def _finding(quote: str = "+  return x;", **kwargs) -> Finding:
    return Finding(path="src/a.ts", raw_quoted_line=quote, message="Check this", **kwargs)


class TestFinding:
    @pytest.mark.parametrize(
        ("quote", "expected"),
        [
            ("+  return x;", "  return x;"),
            ("-  gone();", "  gone();"),
            ("   context", "  context"),
            ("no marker", "no marker"),
        ],
    )
    def test_line_to_match_strips_one_marker(self, quote: str, expected: str) -> None:
        assert _finding(quote).line_to_match == expected

    def test_attach_line_once(self) -> None:
        finding = _finding()
        finding.attach_line(7)

        assert finding.is_resolved
        assert finding.resolved_line == 7
        with pytest.raises(ValueError, match="already resolved"):
            finding.attach_line(8)

    def test_attach_line_rejects_non_positive(self) -> None:
        with pytest.raises(ValueError):
            _finding().attach_line(0)

    def test_dedupe_key_combines_path_line_and_message(self) -> None:
        first, second = _finding(), _finding("+other")
        first.attach_line(3)
        second.attach_line(3)

        assert first.dedupe_key == second.dedupe_key == "src/a.ts:3:Check this"

    def test_requires_path_and_message(self) -> None:
        with pytest.raises(ValueError):
            Finding(path="", raw_quoted_line="+x", message="m")
        with pytest.raises(ValueError):
            Finding(path="a.py", raw_quoted_line="+x", message="")


class TestReviewSeverity:
    @pytest.mark.parametrize(
        ("label", "expected"),
        [
            ("Required", ReviewSeverity.REQUIRED),
            (" nit ", ReviewSeverity.NIT),
            ("praise", ReviewSeverity.PRAISE),
            ("blocker", None),
            (None, None),
            ("", None),
        ],
    )
    def test_parse(self, label: str | None, expected: ReviewSeverity | None) -> None:
        assert ReviewSeverity.parse(label) is expected


class TestCodeReviewReport:
    def test_approval_with_required_finding_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="Cannot approve"):
            CodeReviewReport(
                event=ReviewEvent.APPROVE,
                summary="",
                findings=[_finding(severity=ReviewSeverity.REQUIRED)],
            )

    def test_approval_with_optional_findings_is_allowed(self) -> None:
        report = CodeReviewReport(
            event=ReviewEvent.APPROVE,
            summary="LGTM",
            findings=[_finding(severity=ReviewSeverity.NIT)],
        )

        assert not report.has_required_findings()

    def test_anchored_findings_excludes_unresolved(self) -> None:
        anchored = _finding()
        anchored.attach_line(2)
        report = CodeReviewReport(
            event=ReviewEvent.COMMENT, summary="", findings=[anchored, _finding()]
        )

        assert report.anchored_findings == [anchored]


class TestBotMarker:
    def test_marker_and_tag_are_recognized(self) -> None:
        assert is_bot_comment(f"text\n{BOT_MARKER}")
        assert is_bot_comment("## PR Review Engine\n\nSummary")

    def test_other_bodies_are_not(self) -> None:
        assert not is_bot_comment("looks good")
        assert not is_bot_comment(None)
        assert not is_bot_comment("")
