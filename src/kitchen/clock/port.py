"""Clock port — source of "now" for cutoffs and delivery planning.

Domain code programs against the port so tests can pin wall-clock time.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime


class ClockPort(ABC):
    """Abstract interface for clocks."""

    @abstractmethod
    def now(self) -> datetime:
        """Current timezone-aware time in the business timezone."""
        ...

    def today(self) -> date:
        return self.now().date()
