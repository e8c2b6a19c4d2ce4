"""Tests for request-scoped log context."""

import structlog

from kitchen.utils.logging import bind_actor, clear_actor


class TestActorContext:
    def test_bound_values_are_visible(self):
        clear_actor()
        bind_actor(admin_id="admin-1", path="/admin/orders")
        try:
            context = structlog.contextvars.get_contextvars()
            assert context["admin_id"] == "admin-1"
            assert context["path"] == "/admin/orders"
        finally:
            clear_actor()

    def test_clear_removes_everything(self):
        bind_actor(user_id="user-1")
        clear_actor()
        assert structlog.contextvars.get_contextvars() == {}
