"""Clock abstraction — pluggable source of business-local time."""

_clock_instance = None


def get_clock():
    """Return the configured clock (singleton).

    Uses the system clock in the configured business timezone by default.
    """
    global _clock_instance
    if _clock_instance is None:
        from kitchen.clock.system_clock import SystemClock
        from kitchen.settings import get_settings

        _clock_instance = SystemClock(get_settings().tz)
    return _clock_instance


def set_clock(clock) -> None:
    """Install a specific clock (e.g. a FixedClock in tests)."""
    global _clock_instance
    _clock_instance = clock


def reset_clock():
    """Reset the clock singleton (useful for testing)."""
    global _clock_instance
    _clock_instance = None
