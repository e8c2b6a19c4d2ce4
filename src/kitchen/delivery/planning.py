"""Delivery planning — expands a confirmed order into scheduled deliveries.

Planning is pure: it reads the order, today's date from the injected clock
and the settings, and returns unsaved ``Delivery`` aggregates. Persisting
them is the kitchen-move handler's job.

Single/trial lines become one combined delivery. Each weekly/monthly line
becomes one delivery per weekday (Mon–Fri) in the planning horizon.
"""

from datetime import date

from kitchen.delivery.delivery import COMBINED_SOURCE, Delivery
from kitchen.settings import KitchenSettings
from kitchen.shared.dates import days_from, is_weekday


class DeliveryPlanner:
    def __init__(self, settings: KitchenSettings, clock):
        self.settings = settings
        self.clock = clock

    def plan(self, order) -> list[Delivery]:
        today = self.clock.today()
        one_off = [item for item in order.items or [] if not item.is_recurring]
        recurring = [item for item in order.items or [] if item.is_recurring]

        deliveries = []
        if one_off:
            deliveries.append(self._combined(order, one_off, today))
        for item in recurring:
            deliveries.extend(self._recurring(order, item, today))
        return deliveries

    def _combined(self, order, items, today: date) -> Delivery:
        if any(item.immediate_delivery for item in items):
            day = today
        else:
            day = next((item.start_date for item in items if item.start_date), today)
        time = next((item.delivery_time for item in items if item.delivery_time), None)

        return Delivery.schedule(
            day=day,
            time=time or self.settings.default_delivery_time,
            user_id=order.user_id,
            order_id=order.id,
            items_data=[self._snapshot(order, item) for item in items],
            source_cart_item_id=COMBINED_SOURCE,
            address=order.delivery_address,
        )

    def _recurring(self, order, item, today: date) -> list[Delivery]:
        start = today if item.immediate_delivery else (item.start_date or today)
        time = item.delivery_time or self.settings.default_delivery_time

        return [
            Delivery.schedule(
                day=day,
                time=time,
                user_id=order.user_id,
                order_id=order.id,
                items_data=[self._snapshot(order, item)],
                source_cart_item_id=item.cart_item_id,
                subscription_id=item.cart_item_id,
                address=order.delivery_address,
            )
            for day in days_from(start, self.settings.planning_horizon_days)
            if is_weekday(day)
        ]

    @staticmethod
    def _snapshot(order, item) -> dict:
        return {
            "order_id": str(order.id),
            "cart_item_id": item.cart_item_id,
            "item_type": item.item_type,
            "plan": item.plan,
            "title": item.title or item.item_type,
            "quantity": item.quantity,
        }
