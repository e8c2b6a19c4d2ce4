"""Repository for the Delivery aggregate."""

from datetime import date

from protean.exceptions import ExpectedVersionError, ValidationError

from kitchen.domain import kitchen
from kitchen.delivery.delivery import Delivery
from kitchen.errors import ConflictError
from kitchen.shared.versioning import is_stale

# Date, then time slot, then creation
_SCHEDULE_ORDER = ["date", "delivery_time", "time", "created_at"]


@kitchen.repository(part_of=Delivery)
class DeliveryRepository:
    def insert_ignoring_duplicates(self, deliveries: list[Delivery]) -> tuple[int, int]:
        """Insert each delivery, counting source key collisions as duplicates.

        Returns ``(created, duplicates)``. Any error other than a source key
        collision propagates.
        """
        created = duplicates = 0
        for delivery in deliveries:
            try:
                self.add(delivery)
            except ValidationError as exc:
                if "source_key" not in (getattr(exc, "messages", None) or {}):
                    raise
                duplicates += 1
                continue
            created += 1
        return created, duplicates

    def save_guarded(self, delivery: Delivery) -> Delivery:
        conflict = ConflictError("Delivery status changed concurrently. Please retry.", current_status=delivery.status)
        if is_stale(self._dao, delivery):
            raise conflict
        try:
            return self.add(delivery)
        except ExpectedVersionError as exc:
            raise conflict from exc

    def for_date(self, day: date, status: str | None = None) -> list[Delivery]:
        """Deliveries on a date ordered by time then creation (the kitchen board)."""
        query = self._dao.query.filter(date=day.isoformat())
        if status:
            query = query.filter(status=status)
        return query.order_by(_SCHEDULE_ORDER).limit(None).all().items

    def for_user(self, user_id: str, date_from: date | None = None, date_to: date | None = None) -> list[Delivery]:
        """A customer's delivery timeline, optionally bounded by an inclusive date range."""
        query = self._dao.query.filter(user_id=str(user_id))
        if date_from:
            query = query.filter(date__gte=date_from.isoformat())
        if date_to:
            query = query.filter(date__lte=date_to.isoformat())
        return query.order_by(_SCHEDULE_ORDER).limit(None).all().items

    def for_order(self, order_id: str) -> list[Delivery]:
        return self._dao.query.filter(order_id=str(order_id)).order_by(_SCHEDULE_ORDER).limit(None).all().items
