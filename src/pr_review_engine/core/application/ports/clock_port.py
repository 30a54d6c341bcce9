from abc import ABC, abstractmethod


class ClockPort(ABC):
    """Timer abstraction so waits can be driven by a fake clock in tests."""

    @abstractmethod
    def now(self) -> float:
        """Current wall-clock time as epoch seconds."""

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        """Suspend the current task for *seconds*."""
