"""Kitchen API package."""

from kitchen.api.errors import register_error_handlers
from kitchen.api.routes import (
    admin_delivery_router,
    admin_order_router,
    admin_pause_skip_router,
    admin_subscription_router,
    delivery_router,
    kitchen_router,
    order_router,
    pause_skip_router,
    subscription_router,
)

routers = [
    order_router,
    admin_order_router,
    admin_delivery_router,
    kitchen_router,
    delivery_router,
    pause_skip_router,
    admin_pause_skip_router,
    subscription_router,
    admin_subscription_router,
]

__all__ = ["routers", "register_error_handlers"]
