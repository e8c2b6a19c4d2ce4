"""Eligibility and cutoff rules for pause and skip submissions.

Cutoffs are evaluated at submission time against the injected clock, in
the business timezone from settings.
"""

from datetime import date, datetime

from protean.exceptions import ValidationError

from kitchen.delivery.delivery import DeliveryStatus
from kitchen.settings import KitchenSettings
from kitchen.shared.dates import hhmm_to_time


class PauseSkipPolicy:
    def __init__(self, settings: KitchenSettings, clock):
        self.settings = settings
        self.clock = clock

    def local_now(self) -> datetime:
        return self.clock.now().astimezone(self.settings.tz)

    def check_pause_window(self, start: date, end: date) -> None:
        if end < start:
            raise ValidationError({"pause_end_date": ["pause_end_date must be on/after pause_start_date"]})

        now = self.local_now()
        if start < now.date():
            raise ValidationError({"pause_start_date": ["pause_start_date must be today or later"]})

        # Only a same-day start is held to the cutoff
        cutoff_hours = self.settings.pause_cutoff_hours
        if cutoff_hours > 0 and start == now.date():
            raise ValidationError(
                {"pause_start_date": [f"Pause must be requested at least {cutoff_hours} hours in advance"]}
            )

    def check_skip(self, delivery) -> date:
        """Validate a skip of ``delivery`` right now. Returns the skip date."""
        now = self.local_now()
        cutoff = self.settings.skip_cutoff
        if now.time() >= hhmm_to_time(cutoff):
            raise ValidationError({"delivery_id": [f"Skip cutoff passed ({cutoff})"]})

        today = now.date()
        if delivery.date != today.isoformat():
            raise ValidationError({"delivery_id": ["Only today's delivery can be skipped"]})
        if delivery.status != DeliveryStatus.PENDING.value:
            raise ValidationError({"delivery_id": ["Only pending deliveries can be skipped"]})
        return today
