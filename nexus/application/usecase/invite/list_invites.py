"""List invites use case."""

from datetime import datetime

from pydantic import BaseModel, Field

from nexus.application.usecase.base import BaseUseCase
from nexus.domain.model import Invite
from nexus.domain.service import InviteService, QuotaLedger
from nexus.domain.value import InviteState, IssuerId


class InviteItem(BaseModel):
    """Invite item in response."""

    code: str
    state: InviteState
    created_at: datetime
    expires_at: datetime
    redeemed_by: str | None = None
    redeemed_at: datetime | None = None

    @classmethod
    def from_invite(cls, invite: Invite) -> "InviteItem":
        return cls(
            code=invite.code.root,
            state=invite.state,
            created_at=invite.created_at,
            expires_at=invite.expires_at,
            redeemed_by=invite.redeemed_by,
            redeemed_at=invite.redeemed_at,
        )


class ListInvitesRequest(BaseModel):
    """List invites request."""

    issuer_id: str = Field(min_length=1, max_length=255)
    limit: int | None = Field(default=None, ge=1, le=1000)
    offset: int = Field(default=0, ge=0)


class ListInvitesResponse(BaseModel):
    """List invites response."""

    invites: list[InviteItem]
    # All of the issuer's invites, not just this page
    total: int
    invites_available: int


class ListInvitesUseCase(
    BaseUseCase[ListInvitesRequest, ListInvitesResponse]
):
    """Use case for listing the invites an issuer created, newest first."""

    def __init__(
        self, invite_service: InviteService, quota_ledger: QuotaLedger
    ) -> None:
        """Initialize list invites use case.

        Args:
            invite_service: Invite domain service
            quota_ledger: Quota ledger
        """
        self.invite_service = invite_service
        self.quota_ledger = quota_ledger

    async def execute(self, request: ListInvitesRequest) -> ListInvitesResponse:
        """Execute list invites flow.

        Args:
            request: List invites request

        Returns:
            The issuer's invites and remaining quota
        """
        issuer_id = IssuerId(request.issuer_id)

        invites = await self.invite_service.list_invites(
            issuer_id, limit=request.limit, offset=request.offset
        )
        total = await self.invite_service.count_invites(issuer_id)
        invites_available = await self.quota_ledger.read_quota(issuer_id)

        invite_items = [InviteItem.from_invite(invite) for invite in invites]
        return ListInvitesResponse(
            invites=invite_items,
            total=total,
            invites_available=invites_available,
        )
