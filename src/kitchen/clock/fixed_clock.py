"""Fixed clock — deterministic time for tests and back-office replays."""

from datetime import datetime, timedelta

from kitchen.clock.port import ClockPort


class FixedClock(ClockPort):
    """Clock frozen at a given instant until moved."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime")
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def set(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime")
        self.instant = instant

    def advance(self, **kwargs) -> None:
        self.instant = self.instant + timedelta(**kwargs)
