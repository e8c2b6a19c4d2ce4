"""System clock — wall-clock time in the configured business timezone."""

from datetime import datetime
from zoneinfo import ZoneInfo

from kitchen.clock.port import ClockPort


class SystemClock(ClockPort):
    def __init__(self, tz: ZoneInfo):
        self.tz = tz

    def now(self) -> datetime:
        return datetime.now(self.tz)
