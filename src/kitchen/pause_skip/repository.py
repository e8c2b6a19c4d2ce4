"""Repository for pause/skip requests."""

from kitchen.domain import kitchen
from kitchen.pause_skip.request import PauseSkipRequest, RequestStatus, RequestType


@kitchen.repository(part_of=PauseSkipRequest)
class PauseSkipRequestRepository:
    def pending_skip_for(self, delivery_id: str) -> PauseSkipRequest | None:
        matches = self._dao.query.filter(
            request_type=RequestType.SKIP.value,
            delivery_id=str(delivery_id),
            status=RequestStatus.PENDING.value,
        ).all().items
        return matches[0] if matches else None

    def for_user(self, user_id: str, status: str | None = None, request_type: str | None = None, limit: int = 200):
        """A user's own requests, newest first."""
        query = self._dao.query.filter(user_id=str(user_id))
        if status:
            query = query.filter(status=status.upper())
        if request_type:
            query = query.filter(request_type=request_type.upper())
        return query.order_by("-created_at").limit(limit).all().items

    def for_admin(
        self,
        status: str | None = RequestStatus.PENDING.value,
        request_type: str | None = None,
        kind: str | None = None,
        user_id: str | None = None,
        limit: int = 200,
    ):
        """The review queue, newest first. ``status=None`` spans every status."""
        query = self._dao.query
        if status:
            query = query.filter(status=status.upper())
        if request_type:
            query = query.filter(request_type=request_type.upper())
        if kind:
            query = query.filter(kind=kind)
        if user_id:
            query = query.filter(user_id=str(user_id))
        return query.order_by("-created_at").limit(limit).all().items
