"""Kitchen settings — cutoffs, planning horizon and business timezone.

The settings object is handed to the delivery planner and the pause/skip
policy when they are built. ``get_settings()`` returns the process-wide
instance read from ``KITCHEN_*`` environment variables; tests replace it
with ``configure_settings()``.
"""

import os
import re
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, field_validator

_HHMM = re.compile(r"^([0-9]{1,2}):([0-9]{2})$")


class KitchenSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    timezone: str = "UTC"
    planning_horizon_days: int = 14
    default_delivery_time: str = "12:00"
    skip_cutoff: str = "06:00"
    pause_cutoff_hours: int = 24
    admin_list_limit: int = 200
    my_list_limit: int = 200

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("default_delivery_time", "skip_cutoff")
    @classmethod
    def _strict_hhmm(cls, value: str) -> str:
        match = _HHMM.match(value.strip())
        if not match or int(match.group(1)) > 23 or int(match.group(2)) > 59:
            raise ValueError(f"Expected HH:MM, got {value!r}")
        return f"{int(match.group(1)):02d}:{match.group(2)}"

    @field_validator("planning_horizon_days", "admin_list_limit", "my_list_limit")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Must be at least 1")
        return value

    @field_validator("pause_cutoff_hours")
    @classmethod
    def _not_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Must not be negative")
        return value

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @classmethod
    def from_env(cls) -> "KitchenSettings":
        """Build settings from ``KITCHEN_*`` environment variables, falling back to defaults."""
        env_map = {
            "timezone": "KITCHEN_TIMEZONE",
            "planning_horizon_days": "KITCHEN_PLANNING_HORIZON_DAYS",
            "default_delivery_time": "KITCHEN_DEFAULT_DELIVERY_TIME",
            "skip_cutoff": "KITCHEN_SKIP_CUTOFF",
            "pause_cutoff_hours": "KITCHEN_PAUSE_CUTOFF_HOURS",
            "admin_list_limit": "KITCHEN_ADMIN_LIST_LIMIT",
            "my_list_limit": "KITCHEN_MY_LIST_LIMIT",
        }
        values = {field: os.environ[var] for field, var in env_map.items() if os.environ.get(var, "").strip()}
        return cls(**values)


_settings_instance = None


def get_settings() -> KitchenSettings:
    """Return the configured settings (singleton)."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = KitchenSettings.from_env()
    return _settings_instance


def configure_settings(settings: KitchenSettings) -> None:
    """Replace the process-wide settings."""
    global _settings_instance
    _settings_instance = settings


def reset_settings() -> None:
    """Reset the settings singleton (useful for testing)."""
    global _settings_instance
    _settings_instance = None
