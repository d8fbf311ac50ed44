"""Domain layer DI providers."""

from dishka import Scope, provide

from nexus.config import InvitationSettings
from nexus.domain.repository import UnitOfWorkFactory
from nexus.domain.service import (
    InviteChangeFeed,
    InviteCodeGenerator,
    InviteService,
    QuotaLedger,
)
from nexus.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Services are REQUEST-scoped and open their own units of work. The change
    feed is APP-scoped so every request publishes to the same subscribers.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_change_feed(
        self, uow_factory: UnitOfWorkFactory, settings: InvitationSettings
    ) -> InviteChangeFeed:
        """Provide the shared invite change feed."""
        return InviteChangeFeed(
            uow_factory=uow_factory, buffer_size=settings.feed_buffer_size
        )

    @provide(scope=Scope.APP)
    def get_code_generator(self, settings: InvitationSettings) -> InviteCodeGenerator:
        """Provide invite code generator."""
        return InviteCodeGenerator(
            prefix=settings.code_prefix, length=settings.code_length
        )

    @provide
    def get_quota_ledger(
        self, uow_factory: UnitOfWorkFactory, settings: InvitationSettings
    ) -> QuotaLedger:
        """Provide quota ledger."""
        return QuotaLedger(uow_factory=uow_factory, policy=settings.quota_policy)

    @provide
    def get_invite_service(
        self,
        uow_factory: UnitOfWorkFactory,
        quota_ledger: QuotaLedger,
        code_generator: InviteCodeGenerator,
        change_feed: InviteChangeFeed,
        settings: InvitationSettings,
    ) -> InviteService:
        """Provide invite domain service."""
        return InviteService(
            uow_factory=uow_factory,
            quota_ledger=quota_ledger,
            code_generator=code_generator,
            change_feed=change_feed,
            settings=settings,
        )
