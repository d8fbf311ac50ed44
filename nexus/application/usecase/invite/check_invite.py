"""Check invite use case."""

import logfire
from pydantic import BaseModel

from nexus.application.usecase.base import BaseUseCase
from nexus.domain.error import ErrorKind, InviteEngineError
from nexus.domain.service import InviteService
from nexus.domain.value import InviteState


class CheckInviteRequest(BaseModel):
    """Check invite request."""

    code: str


class CheckInviteResponse(BaseModel):
    """Check invite response."""

    valid: bool
    state: InviteState | None = None
    reason: ErrorKind | None = None
    message: str | None = None


class CheckInviteUseCase(
    BaseUseCase[CheckInviteRequest, CheckInviteResponse]
):
    """Use case for checking a code without consuming it.

    Lets a registration form tell the user early whether their code is
    good. Only redemption actually claims the code.
    """

    def __init__(self, invite_service: InviteService) -> None:
        self.invite_service = invite_service

    async def execute(self, request: CheckInviteRequest) -> CheckInviteResponse:
        """Check an invite code.

        Args:
            request: Check request with code

        Returns:
            Whether the code can currently be redeemed, and why not
        """
        try:
            invite = await self.invite_service.check(request.code)
        except InviteEngineError as e:
            if e.kind.retryable:
                raise
            logfire.info("Invite check failed", code=request.code, reason=e.kind.value)
            return CheckInviteResponse(
                valid=False,
                state=InviteState.USED if e.kind == ErrorKind.ALREADY_USED else None,
                reason=e.kind,
                message=e.message,
            )

        return CheckInviteResponse(
            valid=True,
            state=invite.state,
            message="Valid invite",
        )
