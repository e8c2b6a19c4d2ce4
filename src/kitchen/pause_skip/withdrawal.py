"""Customer withdrawal of a pending pause/skip request."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from kitchen.domain import kitchen
from kitchen.pause_skip.request import PauseSkipRequest

logger = structlog.get_logger(__name__)


@kitchen.command(part_of="PauseSkipRequest")
class WithdrawPauseSkipRequest:
    request_id = Identifier(required=True)
    user_id = Identifier(required=True)


@kitchen.command_handler(part_of=PauseSkipRequest)
class WithdrawalHandler:
    @handle(WithdrawPauseSkipRequest)
    def withdraw(self, command):
        repo = current_domain.repository_for(PauseSkipRequest)
        try:
            request = repo.get(command.request_id)
        except ObjectNotFoundError:
            raise ObjectNotFoundError("Request not found") from None
        if str(request.user_id) != str(command.user_id):
            raise ObjectNotFoundError("Request not found")

        request.withdraw()
        repo.add(request)
        logger.info("Pause/skip request withdrawn", request_id=str(request.id), user_id=str(command.user_id))
