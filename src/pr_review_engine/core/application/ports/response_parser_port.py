from abc import ABC, abstractmethod

from pr_review_engine.core.domain.quality import AgentResponse


class ResponseParserPort(ABC):
    """Turns free-form model text into typed review records.

    Implementations must never raise on malformed input: incomplete records
    are dropped and the rest of the batch is kept.
    """

    @abstractmethod
    def parse(self, text: str) -> AgentResponse: ...
