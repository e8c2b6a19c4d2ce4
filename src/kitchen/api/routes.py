"""FastAPI routes for the Kitchen — orders, deliveries, pause/skip requests.

Identity arrives in ``X-User-Id`` / ``X-Admin-Id`` headers; authenticating
those is the gateway's concern.
"""

import json

from fastapi import APIRouter, Header
from protean.utils.globals import current_domain

from kitchen.api.schemas import (
    AcceptanceResultResponse,
    AddressSchema,
    AdminNotesRequest,
    AdvanceDeliveryStatusRequest,
    AdvanceOrderStatusRequest,
    DecisionRequest,
    DecisionResponse,
    DeliveryItemResponse,
    DeliveryListResponse,
    DeliveryResponse,
    DeliveryStatusResultResponse,
    KitchenMoveResponse,
    OrderIdResponse,
    OrderItemResponse,
    OrderListResponse,
    OrderResponse,
    OrderStatusResultResponse,
    PauseRequestBody,
    PauseSkipListResponse,
    PauseSkipRequestResponse,
    PauseSweepResponse,
    PaymentResultResponse,
    PlaceOrderRequest,
    RecordPaymentRequest,
    RegisterSubscriptionRequest,
    RequestIdResponse,
    SetAcceptanceRequest,
    SkipRequestBody,
    StatusChangeResponse,
    StatusResponse,
    SubscriptionIdResponse,
)
from kitchen.clock import get_clock
from kitchen.delivery.delivery import Delivery
from kitchen.delivery.status import AdvanceDeliveryStatus
from kitchen.order.acceptance import SetOrderAcceptance
from kitchen.order.kitchen_move import MoveOrderToKitchen
from kitchen.order.lifecycle import AdvanceOrderStatus
from kitchen.order.notes import MarkOrderSeen, UpdateAdminNotes
from kitchen.order.order import Actor, Order
from kitchen.order.payment import RecordOrderPayment
from kitchen.order.placement import PlaceOrder
from kitchen.pause_skip.decision import DecidePauseSkipRequest
from kitchen.pause_skip.request import PauseSkipRequest
from kitchen.pause_skip.submission import RequestPause, RequestSkip
from kitchen.pause_skip.withdrawal import WithdrawPauseSkipRequest
from kitchen.settings import get_settings
from kitchen.shared.dates import parse_iso_date
from kitchen.subscription.registration import RegisterSubscription
from kitchen.subscription.sweep import ReevaluatePauseWindows


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


# ---------------------------------------------------------------------------
# Serializers
# ---------------------------------------------------------------------------
def _address(address) -> AddressSchema | None:
    return AddressSchema(**address.to_dict()) if address else None


def _history(entries) -> list[StatusChangeResponse]:
    return [
        StatusChangeResponse(status=e.status, changed_at=_iso(e.changed_at), changed_by=e.changed_by)
        for e in sorted(entries or [], key=lambda e: e.sequence)
    ]


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        user_id=str(order.user_id),
        items=[
            OrderItemResponse(
                cart_item_id=item.cart_item_id,
                item_type=item.item_type,
                plan=item.plan,
                quantity=item.quantity,
                title=item.title,
                unit_price=item.unit_price,
                start_date=_iso(item.start_date),
                delivery_time=item.delivery_time,
                immediate_delivery=bool(item.immediate_delivery),
            )
            for item in order.items or []
        ],
        delivery_address=_address(order.delivery_address),
        payment_status=order.payment_status,
        payment_id=order.payment_id,
        paid_at=_iso(order.paid_at),
        acceptance_status=order.acceptance_status,
        current_status=order.current_status,
        status_history=_history(order.status_history),
        moved_to_kitchen_at=_iso(order.moved_to_kitchen_at),
        admin_notes=order.admin_notes,
        admin_seen_at=_iso(order.admin_seen_at),
        created_at=_iso(order.created_at),
        updated_at=_iso(order.updated_at),
    )


def _delivery_response(delivery: Delivery) -> DeliveryResponse:
    return DeliveryResponse(
        delivery_id=str(delivery.id),
        date=delivery.date,
        time=delivery.time,
        delivery_time=delivery.delivery_time,
        user_id=str(delivery.user_id),
        order_id=str(delivery.order_id),
        subscription_id=delivery.subscription_id,
        group_key=delivery.group_key,
        address=_address(delivery.address),
        items=[
            DeliveryItemResponse(
                order_id=str(item.order_id),
                cart_item_id=item.cart_item_id,
                item_type=item.item_type,
                plan=item.plan,
                title=item.title,
                quantity=item.quantity,
            )
            for item in delivery.items or []
        ],
        status=delivery.status,
        status_history=_history(delivery.status_history),
    )


def _request_response(request: PauseSkipRequest) -> PauseSkipRequestResponse:
    return PauseSkipRequestResponse(
        request_id=str(request.id),
        user_id=str(request.user_id),
        request_type=request.request_type,
        status=request.status,
        kind=request.kind,
        subscription_id=request.subscription_id,
        delivery_id=str(request.delivery_id) if request.delivery_id else None,
        reason=request.reason,
        pause_start_date=_iso(request.pause_start_date),
        pause_end_date=_iso(request.pause_end_date),
        skip_date=_iso(request.skip_date),
        admin_note=request.admin_note,
        decided_at=_iso(request.decided_at),
        decided_by=request.decided_by,
        created_at=_iso(request.created_at),
        updated_at=_iso(request.updated_at),
    )


def _delivery_status_update(delivery_id: str, body: AdvanceDeliveryStatusRequest, actor: Actor):
    command = AdvanceDeliveryStatus(
        delivery_id=delivery_id,
        status=body.status.strip().upper(),
        actor=actor.value,
        expected_status=body.expected_status.strip().upper() if body.expected_status else None,
    )
    result = current_domain.process(command, asynchronous=False)
    return DeliveryStatusResultResponse(**result)


def _board_date(date: str | None):
    return parse_iso_date(date, "date") if date else get_clock().today()


# ---------------------------------------------------------------------------
# Order Router (checkout and payment collaborators)
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest) -> OrderIdResponse:
    command = PlaceOrder(
        user_id=body.user_id,
        items=json.dumps([item.model_dump(exclude_none=True) for item in body.items]),
        delivery_address=json.dumps(body.delivery_address.model_dump()) if body.delivery_address else None,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


@order_router.post("/{order_id}/payment", response_model=PaymentResultResponse)
async def record_payment(order_id: str, body: RecordPaymentRequest) -> PaymentResultResponse:
    command = RecordOrderPayment(order_id=order_id, payment_id=body.payment_id, paid_at=body.paid_at)
    result = current_domain.process(command, asynchronous=False)
    return PaymentResultResponse(**result)


# ---------------------------------------------------------------------------
# Admin Order Router
# ---------------------------------------------------------------------------
admin_order_router = APIRouter(prefix="/admin/orders", tags=["admin-orders"])


@admin_order_router.get("", response_model=OrderListResponse)
async def list_orders(status: str | None = None, page: int = 1, limit: int = 20) -> OrderListResponse:
    """Paid orders, newest first."""
    page = max(page, 1)
    limit = _clamp(limit, 1, 100)
    orders, total = current_domain.repository_for(Order).find_paid(
        status.strip().upper() if status else None, page=page, limit=limit
    )
    return OrderListResponse(
        orders=[_order_response(o) for o in orders],
        page=page,
        limit=limit,
        total=total,
    )


@admin_order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, x_admin_id: str = Header()) -> OrderResponse:
    """Read an order; the first admin read stamps ``admin_seen_at``."""
    current_domain.process(MarkOrderSeen(order_id=order_id), asynchronous=False)
    return _order_response(current_domain.repository_for(Order).get(order_id))


@admin_order_router.get("/{order_id}/deliveries", response_model=DeliveryListResponse)
async def get_order_deliveries(order_id: str) -> DeliveryListResponse:
    deliveries = current_domain.repository_for(Delivery).for_order(order_id)
    return DeliveryListResponse(deliveries=[_delivery_response(d) for d in deliveries])


@admin_order_router.put("/{order_id}/acceptance", response_model=AcceptanceResultResponse)
async def set_acceptance(
    order_id: str, body: SetAcceptanceRequest, x_admin_id: str = Header()
) -> AcceptanceResultResponse:
    command = SetOrderAcceptance(
        order_id=order_id,
        acceptance_status=body.acceptance_status.strip().upper(),
        admin_id=x_admin_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return AcceptanceResultResponse(**result)


@admin_order_router.post("/{order_id}/kitchen", response_model=KitchenMoveResponse)
async def move_to_kitchen(order_id: str, x_admin_id: str = Header()) -> KitchenMoveResponse:
    command = MoveOrderToKitchen(order_id=order_id, admin_id=x_admin_id)
    result = current_domain.process(command, asynchronous=False)
    return KitchenMoveResponse(
        already_processed=result["already_processed"],
        deliveries_created=result["deliveries_created"],
        duplicates_ignored=result["duplicates_ignored"],
        moved_to_kitchen_at=_iso(result["moved_to_kitchen_at"]),
    )


@admin_order_router.put("/{order_id}/status", response_model=OrderStatusResultResponse)
async def advance_order_status(
    order_id: str, body: AdvanceOrderStatusRequest, x_admin_id: str = Header()
) -> OrderStatusResultResponse:
    command = AdvanceOrderStatus(
        order_id=order_id,
        status=body.status.strip().upper(),
        expected_status=body.expected_status.strip().upper() if body.expected_status else None,
        changed_by=Actor.ADMIN.value,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderStatusResultResponse(**result)


@admin_order_router.put("/{order_id}/notes", response_model=StatusResponse)
async def update_notes(order_id: str, body: AdminNotesRequest, x_admin_id: str = Header()) -> StatusResponse:
    current_domain.process(UpdateAdminNotes(order_id=order_id, notes=body.notes), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Admin Delivery Router
# ---------------------------------------------------------------------------
admin_delivery_router = APIRouter(prefix="/admin/deliveries", tags=["admin-deliveries"])


@admin_delivery_router.get("", response_model=DeliveryListResponse)
async def list_deliveries(date: str | None = None, status: str | None = None) -> DeliveryListResponse:
    """Deliveries for a date (today by default), ordered by time."""
    deliveries = current_domain.repository_for(Delivery).for_date(
        _board_date(date), status.strip().upper() if status else None
    )
    return DeliveryListResponse(deliveries=[_delivery_response(d) for d in deliveries])


@admin_delivery_router.get("/{delivery_id}", response_model=DeliveryResponse)
async def get_delivery(delivery_id: str) -> DeliveryResponse:
    return _delivery_response(current_domain.repository_for(Delivery).get(delivery_id))


@admin_delivery_router.put("/{delivery_id}/status", response_model=DeliveryStatusResultResponse)
async def admin_update_delivery_status(
    delivery_id: str, body: AdvanceDeliveryStatusRequest, x_admin_id: str = Header()
) -> DeliveryStatusResultResponse:
    return _delivery_status_update(delivery_id, body, Actor.ADMIN)


# ---------------------------------------------------------------------------
# Kitchen Router
# ---------------------------------------------------------------------------
kitchen_router = APIRouter(prefix="/admin/kitchen/deliveries", tags=["kitchen"])


@kitchen_router.get("", response_model=DeliveryListResponse)
async def kitchen_board(date: str | None = None, status: str | None = None) -> DeliveryListResponse:
    deliveries = current_domain.repository_for(Delivery).for_date(
        _board_date(date), status.strip().upper() if status else None
    )
    return DeliveryListResponse(deliveries=[_delivery_response(d) for d in deliveries])


@kitchen_router.put("/{delivery_id}/status", response_model=DeliveryStatusResultResponse)
async def kitchen_update_delivery_status(
    delivery_id: str, body: AdvanceDeliveryStatusRequest, x_admin_id: str = Header()
) -> DeliveryStatusResultResponse:
    return _delivery_status_update(delivery_id, body, Actor.KITCHEN)


# ---------------------------------------------------------------------------
# Customer Delivery Router
# ---------------------------------------------------------------------------
delivery_router = APIRouter(prefix="/deliveries", tags=["deliveries"])


@delivery_router.get("/my", response_model=DeliveryListResponse)
async def my_deliveries(
    x_user_id: str = Header(), date_from: str | None = None, date_to: str | None = None
) -> DeliveryListResponse:
    deliveries = current_domain.repository_for(Delivery).for_user(
        x_user_id,
        date_from=parse_iso_date(date_from, "date_from") if date_from else None,
        date_to=parse_iso_date(date_to, "date_to") if date_to else None,
    )
    return DeliveryListResponse(deliveries=[_delivery_response(d) for d in deliveries])


# ---------------------------------------------------------------------------
# Customer Pause/Skip Router
# ---------------------------------------------------------------------------
pause_skip_router = APIRouter(prefix="/pause-skip", tags=["pause-skip"])


@pause_skip_router.post("/pause", status_code=201, response_model=RequestIdResponse)
async def request_pause(body: PauseRequestBody, x_user_id: str = Header()) -> RequestIdResponse:
    command = RequestPause(
        user_id=x_user_id,
        kind=body.kind,
        subscription_id=body.subscription_id,
        pause_start_date=body.pause_start_date,
        pause_end_date=body.pause_end_date,
        reason=body.reason,
    )
    result = current_domain.process(command, asynchronous=False)
    return RequestIdResponse(request_id=result)


@pause_skip_router.post("/skip", status_code=201, response_model=RequestIdResponse)
async def request_skip(body: SkipRequestBody, x_user_id: str = Header()) -> RequestIdResponse:
    command = RequestSkip(user_id=x_user_id, delivery_id=body.delivery_id, reason=body.reason)
    result = current_domain.process(command, asynchronous=False)
    return RequestIdResponse(request_id=result)


@pause_skip_router.get("/my", response_model=PauseSkipListResponse)
async def my_requests(
    x_user_id: str = Header(), status: str | None = None, request_type: str | None = None
) -> PauseSkipListResponse:
    requests = current_domain.repository_for(PauseSkipRequest).for_user(
        x_user_id, status=status, request_type=request_type, limit=get_settings().my_list_limit
    )
    return PauseSkipListResponse(requests=[_request_response(r) for r in requests])


@pause_skip_router.put("/{request_id}/withdraw", response_model=PauseSkipRequestResponse)
async def withdraw_request(request_id: str, x_user_id: str = Header()) -> PauseSkipRequestResponse:
    current_domain.process(WithdrawPauseSkipRequest(request_id=request_id, user_id=x_user_id), asynchronous=False)
    return _request_response(current_domain.repository_for(PauseSkipRequest).get(request_id))


# ---------------------------------------------------------------------------
# Admin Pause/Skip Router
# ---------------------------------------------------------------------------
admin_pause_skip_router = APIRouter(prefix="/admin/pause-skip", tags=["admin-pause-skip"])


@admin_pause_skip_router.get("", response_model=PauseSkipListResponse)
async def list_requests(
    status: str = "PENDING",
    request_type: str | None = None,
    kind: str | None = None,
    user_id: str | None = None,
    limit: int | None = None,
) -> PauseSkipListResponse:
    """Requests for review. ``status=ALL`` lifts the status filter."""
    limit = _clamp(limit if limit is not None else get_settings().admin_list_limit, 1, 500)
    requests = current_domain.repository_for(PauseSkipRequest).for_admin(
        status=None if status.strip().upper() == "ALL" else status,
        request_type=request_type,
        kind=kind,
        user_id=user_id,
        limit=limit,
    )
    return PauseSkipListResponse(requests=[_request_response(r) for r in requests])


@admin_pause_skip_router.put("/{request_id}/decision", response_model=DecisionResponse)
async def decide_request(request_id: str, body: DecisionRequest, x_admin_id: str = Header()) -> DecisionResponse:
    command = DecidePauseSkipRequest(
        request_id=request_id,
        status=body.status.strip().upper(),
        admin_id=x_admin_id,
        admin_note=body.admin_note,
    )
    result = current_domain.process(command, asynchronous=False)
    request = current_domain.repository_for(PauseSkipRequest).get(request_id)
    return DecisionResponse(
        already_processed=result["already_processed"],
        applied=result["applied"],
        request=_request_response(request),
    )


# ---------------------------------------------------------------------------
# Subscription Routers (catalog collaborator and scheduler)
# ---------------------------------------------------------------------------
subscription_router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])
admin_subscription_router = APIRouter(prefix="/admin/subscriptions", tags=["admin-subscriptions"])


@subscription_router.post("", status_code=201, response_model=SubscriptionIdResponse)
async def register_subscription(body: RegisterSubscriptionRequest) -> SubscriptionIdResponse:
    command = RegisterSubscription(
        subscription_id=body.subscription_id,
        user_id=body.user_id,
        kind=body.kind,
        frequency=body.frequency,
        start_date=body.start_date,
    )
    result = current_domain.process(command, asynchronous=False)
    return SubscriptionIdResponse(subscription_id=result)


@admin_subscription_router.post("/pause-windows/reevaluate", response_model=PauseSweepResponse)
async def reevaluate_pause_windows() -> PauseSweepResponse:
    """Invoked by the daily scheduler."""
    result = current_domain.process(ReevaluatePauseWindows(), asynchronous=False)
    return PauseSweepResponse(**result)
