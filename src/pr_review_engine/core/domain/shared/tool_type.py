from enum import StrEnum, auto


class ToolType(StrEnum):
    """Classifies every peripheral tool the review run can interact with.

    Note: the LLM (Brain) is not a tool; it lives behind ``BrainPort``.
    """

    VCS = auto()
    CODE_SEARCH = auto()
