"""Pydantic request/response schemas for the Kitchen API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    label: str | None = None
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    pincode: str
    landmark: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class OrderItemSchema(BaseModel):
    cart_item_id: str
    item_type: str
    plan: str
    quantity: int = Field(ge=1)
    title: str | None = None
    unit_price: float | None = Field(default=None, ge=0)
    start_date: str | None = None
    delivery_time: str | None = None
    immediate_delivery: bool = False


class StatusChangeResponse(BaseModel):
    status: str
    changed_at: str | None = None
    changed_by: str


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    user_id: str
    items: list[OrderItemSchema] = Field(min_length=1)
    delivery_address: AddressSchema | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "user-001",
                    "items": [
                        {
                            "cart_item_id": "line-1",
                            "item_type": "meal",
                            "plan": "weekly",
                            "quantity": 1,
                            "title": "High Protein Pack",
                            "unit_price": 1499.0,
                            "start_date": "2026-10-19",
                            "delivery_time": "12:30",
                        }
                    ],
                }
            ]
        }
    }


class OrderIdResponse(BaseModel):
    order_id: str


class RecordPaymentRequest(BaseModel):
    payment_id: str
    paid_at: datetime | None = None


class PaymentResultResponse(BaseModel):
    recorded: bool


class SetAcceptanceRequest(BaseModel):
    acceptance_status: str


class AcceptanceResultResponse(BaseModel):
    changed: bool
    acceptance_status: str | None = None


class AdvanceOrderStatusRequest(BaseModel):
    status: str
    expected_status: str | None = None


class OrderStatusResultResponse(BaseModel):
    changed: bool
    current_status: str | None = None


class AdminNotesRequest(BaseModel):
    notes: str | None = None


class KitchenMoveResponse(BaseModel):
    already_processed: bool
    deliveries_created: int
    duplicates_ignored: int
    moved_to_kitchen_at: str | None = None


class OrderItemResponse(BaseModel):
    cart_item_id: str
    item_type: str
    plan: str
    quantity: int
    title: str | None = None
    unit_price: float | None = None
    start_date: str | None = None
    delivery_time: str | None = None
    immediate_delivery: bool = False


class OrderResponse(BaseModel):
    order_id: str
    user_id: str
    items: list[OrderItemResponse]
    delivery_address: AddressSchema | None = None
    payment_status: str
    payment_id: str | None = None
    paid_at: str | None = None
    acceptance_status: str | None = None
    current_status: str | None = None
    status_history: list[StatusChangeResponse] = []
    moved_to_kitchen_at: str | None = None
    admin_notes: str | None = None
    admin_seen_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    page: int
    limit: int
    total: int


# ---------------------------------------------------------------------------
# Deliveries
# ---------------------------------------------------------------------------
class DeliveryItemResponse(BaseModel):
    order_id: str
    cart_item_id: str
    item_type: str
    plan: str
    title: str
    quantity: int


class DeliveryResponse(BaseModel):
    delivery_id: str
    date: str
    time: str
    delivery_time: str | None = None
    user_id: str
    order_id: str
    subscription_id: str | None = None
    group_key: str | None = None
    address: AddressSchema | None = None
    items: list[DeliveryItemResponse]
    status: str
    status_history: list[StatusChangeResponse] = []


class DeliveryListResponse(BaseModel):
    deliveries: list[DeliveryResponse]


class AdvanceDeliveryStatusRequest(BaseModel):
    status: str
    expected_status: str | None = None


class DeliveryStatusResultResponse(BaseModel):
    changed: bool
    status: str


# ---------------------------------------------------------------------------
# Pause / skip requests
# ---------------------------------------------------------------------------
class PauseRequestBody(BaseModel):
    kind: str
    subscription_id: str
    pause_start_date: str
    pause_end_date: str
    reason: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "kind": "customMeal",
                    "subscription_id": "sub-001",
                    "pause_start_date": "2026-10-21",
                    "pause_end_date": "2026-10-25",
                    "reason": "Travelling",
                }
            ]
        }
    }


class SkipRequestBody(BaseModel):
    delivery_id: str
    reason: str | None = None


class RequestIdResponse(BaseModel):
    request_id: str


class DecisionRequest(BaseModel):
    status: str
    admin_note: str | None = None


class PauseSkipRequestResponse(BaseModel):
    request_id: str
    user_id: str
    request_type: str
    status: str
    kind: str
    subscription_id: str | None = None
    delivery_id: str | None = None
    reason: str | None = None
    pause_start_date: str | None = None
    pause_end_date: str | None = None
    skip_date: str | None = None
    admin_note: str | None = None
    decided_at: str | None = None
    decided_by: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class PauseSkipListResponse(BaseModel):
    requests: list[PauseSkipRequestResponse]


class DecisionResponse(BaseModel):
    already_processed: bool
    applied: bool
    request: PauseSkipRequestResponse


# ---------------------------------------------------------------------------
# Subscriptions
# ---------------------------------------------------------------------------
class RegisterSubscriptionRequest(BaseModel):
    subscription_id: str | None = None
    user_id: str
    kind: str
    frequency: str
    start_date: str | None = None


class SubscriptionIdResponse(BaseModel):
    subscription_id: str


class PauseSweepResponse(BaseModel):
    paused: int
    resumed: int
