"""Reviews one diff unit: agent loop with the search toolset, parse, anchor."""

import structlog

from pr_review_engine.core.application.diff import resolve_findings
from pr_review_engine.core.application.loops.agentic_loop_runner import AgenticLoopRunner
from pr_review_engine.core.application.parsing import escape_markup
from pr_review_engine.core.application.ports import ResponseParserPort
from pr_review_engine.core.application.skills.review.review_unit_input import ReviewUnitInput
from pr_review_engine.core.application.skills.skill import BaseSkill
from pr_review_engine.core.application.tools import CodeSearchTool
from pr_review_engine.core.domain.quality import AgentResponse

logger = structlog.get_logger()


class ReviewDiffUnitSkill(BaseSkill[ReviewUnitInput, AgentResponse]):
    def __init__(
        self,
        runner: AgenticLoopRunner,
        search: CodeSearchTool,
        parser: ResponseParserPort,
    ) -> None:
        self._runner = runner
        self._search = search
        self._parser = parser

    async def execute(self, input_data: ReviewUnitInput) -> AgentResponse:
        unit = input_data.unit
        message = build_unit_message(input_data)
        text = await self._runner.run_loop(
            system_prompt=input_data.system_prompt,
            user_message=message,
            tools=[self._search],
            priority_models=input_data.priority_models,
            max_iterations=input_data.max_iterations,
        )
        response = self._parser.parse(text)
        resolve_findings(response.findings, unit.content)
        logger.info(
            "Diff unit reviewed",
            file_path=unit.file_name,
            findings=len(response.findings),
            anchored=sum(1 for f in response.findings if f.is_resolved),
            resolved_comments=len(response.resolved_comments),
        )
        return response


def build_unit_message(input_data: ReviewUnitInput) -> str:
    """User message carrying the diff and prior comments, markup-escaped."""
    unit = input_data.unit
    parts = [
        f'<diff file="{escape_markup(unit.file_name)}">\n{escape_markup(unit.content)}</diff>'
    ]
    if input_data.existing_comments:
        parts.append("<existingComments>")
        for comment in input_data.existing_comments:
            parts.append(
                "<existingComment"
                f' id="{escape_markup(str(comment.get("id", "")))}"'
                f' path="{escape_markup(str(comment.get("path", "")))}"'
                f' line="{escape_markup(str(comment.get("line") or ""))}">'
                f'{escape_markup(comment.get("body") or "")}</existingComment>'
            )
        parts.append("</existingComments>")
    return "\n".join(parts)
