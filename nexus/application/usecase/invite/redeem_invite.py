"""Redeem invite use case."""

from datetime import datetime

from pydantic import BaseModel, Field

from nexus.application.usecase.base import BaseUseCase
from nexus.domain.service import InviteService
from nexus.domain.value import AccountId


class RedeemInviteRequest(BaseModel):
    """Request to redeem an invite."""

    code: str = Field(min_length=1, max_length=64)
    account_id: str = Field(min_length=1, max_length=255)


class RedeemInviteResponse(BaseModel):
    """Response after redeeming an invite."""

    code: str
    issuer_id: str
    redeemed_at: datetime


class RedeemInviteUseCase(
    BaseUseCase[RedeemInviteRequest, RedeemInviteResponse]
):
    """Use case for consuming an invite while registering an account."""

    def __init__(self, invite_service: InviteService) -> None:
        self.invite_service = invite_service

    async def execute(self, request: RedeemInviteRequest) -> RedeemInviteResponse:
        """Redeem an invite.

        Raises:
            InviteNotFoundError: If the code is unknown
            InviteAlreadyUsedError: If the code was already redeemed
            InviteExpiredError: If the code is past its horizon
            ContentionError: If the retry budget is exhausted
        """
        invite = await self.invite_service.redeem(
            request.code, AccountId(request.account_id)
        )
        assert invite.redeemed_at is not None

        return RedeemInviteResponse(
            code=invite.code.root,
            issuer_id=invite.issuer_id,
            redeemed_at=invite.redeemed_at,
        )
