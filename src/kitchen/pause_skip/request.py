"""PauseSkipRequest aggregate — a customer's request to pause a subscription or skip a delivery.

Requests never change live state on their own; an admin decision does.

State Machine:
    PENDING → APPROVED | DECLINED   (admin)
    PENDING → WITHDRAWN             (owner)
"""

from datetime import UTC, date, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Date, DateTime, Identifier, String, Text

from kitchen.domain import kitchen
from kitchen.errors import AlreadyProcessedError, InvalidTransitionError
from kitchen.order.order import parse_enum
from kitchen.pause_skip.events import (
    PauseRequested,
    PauseSkipRequestDecided,
    PauseSkipRequestWithdrawn,
    SkipRequested,
)


class RequestType(Enum):
    PAUSE = "PAUSE"
    SKIP = "SKIP"


class RequestKind(Enum):
    CUSTOM_MEAL = "customMeal"
    ADDON = "addon"
    MEAL_PACK = "mealPack"
    DELIVERY = "delivery"


PAUSABLE_KINDS = {RequestKind.CUSTOM_MEAL, RequestKind.ADDON, RequestKind.MEAL_PACK}


class RequestStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DECLINED = "DECLINED"
    WITHDRAWN = "WITHDRAWN"


DECISIONS = {RequestStatus.APPROVED, RequestStatus.DECLINED}


@kitchen.aggregate
class PauseSkipRequest:
    user_id = Identifier(required=True)
    request_type = String(required=True, choices=RequestType)
    kind = String(required=True, choices=RequestKind)
    status = String(choices=RequestStatus, default=RequestStatus.PENDING.value)

    # PAUSE
    subscription_id = String(max_length=100)
    pause_start_date = Date()
    pause_end_date = Date()

    # SKIP
    delivery_id = Identifier()
    skip_date = Date()

    reason = Text()
    admin_note = Text()
    decided_at = DateTime()
    decided_by = String(max_length=100)

    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory methods
    # -------------------------------------------------------------------
    @classmethod
    def pause(cls, user_id, kind: str, subscription_id: str, start: date, end: date, reason: str | None = None):
        pause_kind = parse_enum(RequestKind, kind, "kind")
        if pause_kind not in PAUSABLE_KINDS:
            raise InvalidTransitionError({"kind": [f"Cannot pause a {pause_kind.value}"]})

        now = datetime.now(UTC)
        request = cls(
            user_id=user_id,
            request_type=RequestType.PAUSE.value,
            kind=pause_kind.value,
            subscription_id=subscription_id,
            pause_start_date=start,
            pause_end_date=end,
            reason=reason,
            status=RequestStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        request.raise_(
            PauseRequested(
                request_id=str(request.id),
                user_id=str(user_id),
                kind=pause_kind.value,
                subscription_id=subscription_id,
                pause_start_date=start,
                pause_end_date=end,
                requested_at=now,
            )
        )
        return request

    @classmethod
    def skip(cls, user_id, delivery_id, skip_date: date, reason: str | None = None):
        now = datetime.now(UTC)
        request = cls(
            user_id=user_id,
            request_type=RequestType.SKIP.value,
            kind=RequestKind.DELIVERY.value,
            delivery_id=delivery_id,
            skip_date=skip_date,
            reason=reason,
            status=RequestStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        request.raise_(
            SkipRequested(
                request_id=str(request.id),
                user_id=str(user_id),
                delivery_id=str(delivery_id),
                skip_date=skip_date,
                requested_at=now,
            )
        )
        return request

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING.value

    @property
    def is_pause(self) -> bool:
        return self.request_type == RequestType.PAUSE.value

    # -------------------------------------------------------------------
    # Decision and withdrawal
    # -------------------------------------------------------------------
    def decide(self, status: str, admin_id: str, admin_note: str | None = None) -> None:
        """Approve or decline once. Deciding a settled request raises AlreadyProcessedError."""
        decision = parse_enum(RequestStatus, status, "status")
        if decision not in DECISIONS:
            raise ValidationError({"status": ["status must be APPROVED or DECLINED"]})
        if not self.is_pending:
            raise AlreadyProcessedError(f"Request {self.id} is already {self.status}")

        now = datetime.now(UTC)
        self.status = decision.value
        self.admin_note = admin_note
        self.decided_by = str(admin_id)
        self.decided_at = now
        self.updated_at = now
        self.raise_(
            PauseSkipRequestDecided(
                request_id=str(self.id),
                request_type=self.request_type,
                status=self.status,
                decided_by=str(admin_id),
                decided_at=now,
            )
        )

    def withdraw(self) -> None:
        if not self.is_pending:
            raise InvalidTransitionError({"status": [f"Only PENDING requests can be withdrawn (status is {self.status})"]})

        now = datetime.now(UTC)
        self.status = RequestStatus.WITHDRAWN.value
        self.decided_at = now
        self.updated_at = now
        self.raise_(
            PauseSkipRequestWithdrawn(
                request_id=str(self.id),
                user_id=str(self.user_id),
                withdrawn_at=now,
            )
        )
