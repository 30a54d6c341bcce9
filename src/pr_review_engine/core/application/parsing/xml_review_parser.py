"""Best-effort scanner for the model's XML-like review markup.

Recognized shape (every section optional, prose around it ignored)::

    <prSummary>...</prSummary>
    <comments>
      <comment><severity/><file/><line/><message/><suggestion/></comment>
    </comments>
    <resolvedComments>
      <resolved><commentId/><path/><line/><reason/></resolved>
    </resolvedComments>

When neither section yields a record, bare ``<comment>`` blocks anywhere in
the text are accepted (older response format).
"""

import re

import structlog

from pr_review_engine.core.application.parsing.markup_escaping import unescape_markup
from pr_review_engine.core.application.ports import ResponseParserPort
from pr_review_engine.core.domain.quality import (
    AgentResponse,
    Finding,
    ResolvedComment,
    ReviewSeverity,
)

logger = structlog.get_logger()


def _block(tag: str) -> re.Pattern[str]:
    return re.compile(rf"<{tag}>(.*?)</{tag}>", re.DOTALL)


_SUMMARY_RE = _block("prSummary")
_COMMENTS_RE = _block("comments")
_COMMENT_RE = _block("comment")
_RESOLVED_SECTION_RE = _block("resolvedComments")
_RESOLVED_RE = _block("resolved")

_FIELD_RES = {
    name: _block(name)
    for name in (
        "severity",
        "file",
        "line",
        "message",
        "suggestion",
        "commentId",
        "path",
        "reason",
    )
}


class XmlReviewResponseParser(ResponseParserPort):
    """Regex-based implementation of ``ResponseParserPort``."""

    def parse(self, text: str) -> AgentResponse:
        if not text:
            return AgentResponse()

        summary_match = _SUMMARY_RE.search(text)
        pr_summary = unescape_markup(summary_match.group(1).strip()) if summary_match else None

        findings: list[Finding] = []
        section = _COMMENTS_RE.search(text)
        if section:
            findings = self._parse_comments(section.group(1))

        resolved: list[ResolvedComment] = []
        resolved_section = _RESOLVED_SECTION_RE.search(text)
        if resolved_section:
            resolved = self._parse_resolved(resolved_section.group(1))

        if not findings and not resolved:
            findings = self._parse_comments(text)

        return AgentResponse(findings=findings, resolved_comments=resolved, pr_summary=pr_summary)

    def _parse_comments(self, body: str) -> list[Finding]:
        findings: list[Finding] = []
        for match in _COMMENT_RE.finditer(body):
            finding = self._to_finding(match.group(1))
            if finding is not None:
                findings.append(finding)
        return findings

    @staticmethod
    def _to_finding(block: str) -> Finding | None:
        file_path = _field(block, "file")
        quoted = _field(block, "line", strip=False)
        message = _field(block, "message")
        if not file_path or quoted is None or not message:
            logger.debug("Dropping incomplete comment record", preview=block[:120])
            return None
        suggestion = _field(block, "suggestion")
        return Finding(
            path=file_path,
            raw_quoted_line=quoted.strip("\r\n"),
            message=message,
            severity=ReviewSeverity.parse(_field(block, "severity")),
            suggestion=suggestion or None,
        )

    @staticmethod
    def _parse_resolved(body: str) -> list[ResolvedComment]:
        resolved: list[ResolvedComment] = []
        for match in _RESOLVED_RE.finditer(body):
            block = match.group(1)
            path = _field(block, "path")
            raw_line = _field(block, "line")
            reason = _field(block, "reason")
            if not path or raw_line is None or reason is None:
                logger.debug("Dropping incomplete resolved record", preview=block[:120])
                continue
            try:
                line = int(raw_line)
            except ValueError:
                logger.debug("Dropping resolved record with bad line", line=raw_line)
                continue
            if line < 0:
                continue
            comment_id = _field(block, "commentId") or f"{path}:{line}"
            resolved.append(ResolvedComment(comment_id=comment_id, path=path, line=line, reason=reason))
        return resolved


def _field(block: str, name: str, *, strip: bool = True) -> str | None:
    """Return the unescaped text of the first ``<name>`` element, or ``None``."""
    match = _FIELD_RES[name].search(block)
    if match is None:
        return None
    value = match.group(1).strip() if strip else match.group(1)
    return unescape_markup(value)
