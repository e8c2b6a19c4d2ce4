"""Pause-window sweep — a periodic job starts and ends approved pause windows.

An external scheduler (cron, k8s CronJob) dispatches ReevaluatePauseWindows
once a day shortly after midnight in the business timezone.
"""

import structlog
from protean import handle
from protean.fields import Date
from protean.utils.globals import current_domain

from kitchen.clock import get_clock
from kitchen.domain import kitchen
from kitchen.subscription.subscription import Subscription

logger = structlog.get_logger(__name__)


@kitchen.command(part_of="Subscription")
class ReevaluatePauseWindows:
    """Trigger a pass over subscriptions that carry a pause window."""

    as_of = Date()  # replay a specific business day; defaults to today


@kitchen.command_handler(part_of=Subscription)
class PauseWindowSweepHandler:
    @handle(ReevaluatePauseWindows)
    def reevaluate(self, command):
        today = command.as_of or get_clock().today()
        repo = current_domain.repository_for(Subscription)

        paused = resumed = 0
        for subscription in repo._dao.query.filter(pause_end_date__isnull=False).limit(None).all().items:
            was_paused = subscription.is_paused
            if not subscription.reevaluate(today):
                continue
            repo.add(subscription)
            if was_paused and not subscription.is_paused:
                resumed += 1
            elif subscription.is_paused and not was_paused:
                paused += 1

        logger.info("Pause windows reevaluated", today=today.isoformat(), paused=paused, resumed=resumed)
        return {"paused": paused, "resumed": resumed}
