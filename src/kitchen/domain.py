"""Kitchen bounded context — Order Fulfillment for Meal Subscriptions.

Turns paid orders into scheduled daily deliveries, moves each delivery
through the kitchen workflow, and runs the customer pause/skip request
workflow that admins approve before live state changes.
"""

from protean.domain import Domain

from kitchen.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

kitchen = Domain(name="kitchen")
