from pr_review_engine.core.application.ports.brain_port import BrainPort
from pr_review_engine.core.application.ports.clock_port import ClockPort
from pr_review_engine.core.application.ports.response_parser_port import ResponseParserPort

__all__ = ["BrainPort", "ClockPort", "ResponseParserPort"]
