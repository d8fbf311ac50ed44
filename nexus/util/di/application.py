"""Application layer DI providers."""

from dishka import Scope, provide

from nexus.application.usecase.invite import (
    CheckInviteUseCase,
    IssueInviteUseCase,
    ListInvitesUseCase,
    RedeemInviteUseCase,
)
from nexus.domain.service import InviteService, QuotaLedger
from nexus.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_issue_invite_use_case(
        self, invite_service: InviteService, quota_ledger: QuotaLedger
    ) -> IssueInviteUseCase:
        """Provide issue invite use case."""
        return IssueInviteUseCase(
            invite_service=invite_service, quota_ledger=quota_ledger
        )

    @provide(scope=Scope.REQUEST)
    def get_redeem_invite_use_case(
        self, invite_service: InviteService
    ) -> RedeemInviteUseCase:
        """Provide redeem invite use case."""
        return RedeemInviteUseCase(invite_service=invite_service)

    @provide(scope=Scope.REQUEST)
    def get_list_invites_use_case(
        self, invite_service: InviteService, quota_ledger: QuotaLedger
    ) -> ListInvitesUseCase:
        """Provide list invites use case."""
        return ListInvitesUseCase(
            invite_service=invite_service, quota_ledger=quota_ledger
        )

    @provide(scope=Scope.REQUEST)
    def get_check_invite_use_case(
        self, invite_service: InviteService
    ) -> CheckInviteUseCase:
        """Provide check invite use case."""
        return CheckInviteUseCase(invite_service=invite_service)
