"""Issue invite use case."""

from datetime import datetime

from pydantic import BaseModel, Field

from nexus.application.usecase.base import BaseUseCase
from nexus.domain.service import InviteService, QuotaLedger
from nexus.domain.value import IssuerId


class IssueInviteRequest(BaseModel):
    """Request to issue an invite."""

    issuer_id: str = Field(min_length=1, max_length=255)
    is_privileged: bool = False


class IssueInviteResponse(BaseModel):
    """Response after issuing an invite."""

    code: str
    created_at: datetime
    expires_at: datetime
    remaining_quota: int | None  # None for privileged issuers (unbounded)


class IssueInviteUseCase(
    BaseUseCase[IssueInviteRequest, IssueInviteResponse]
):
    """Use case for issuing a single invite code."""

    def __init__(
        self, invite_service: InviteService, quota_ledger: QuotaLedger
    ) -> None:
        """Initialize use case.

        Args:
            invite_service: Invite domain service
            quota_ledger: Quota ledger
        """
        self.invite_service = invite_service
        self.quota_ledger = quota_ledger

    async def execute(self, request: IssueInviteRequest) -> IssueInviteResponse:
        """Issue an invite for the authenticated issuer.

        Args:
            request: Issue invite request

        Returns:
            The new code and its validity window

        Raises:
            QuotaExhaustedError: If an ordinary issuer has no credits
            ContentionError: If the retry budget is exhausted
        """
        issuer_id = IssuerId(request.issuer_id)
        invite = await self.invite_service.issue(issuer_id, request.is_privileged)

        remaining_quota = None
        if not request.is_privileged:
            remaining_quota = await self.quota_ledger.read_quota(issuer_id)

        return IssueInviteResponse(
            code=invite.code.root,
            created_at=invite.created_at,
            expires_at=invite.expires_at,
            remaining_quota=remaining_quota,
        )
