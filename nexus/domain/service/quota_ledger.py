"""Quota ledger domain service."""

import logfire

from nexus.domain.model.issuer import Issuer
from nexus.domain.repository import UnitOfWork, UnitOfWorkFactory
from nexus.domain.value import IssuerId, QuotaPolicy

from .base import Service


class QuotaLedger(Service):
    """Authoritative view of an ordinary issuer's remaining invite credits.

    Privileged issuers never reach the ledger; the issuance transaction
    checks the capability before touching it.
    """

    def __init__(
        self, uow_factory: UnitOfWorkFactory, policy: QuotaPolicy = QuotaPolicy.EXHAUST
    ) -> None:
        """Initialize quota ledger.

        Args:
            uow_factory: Factory for units of work
            policy: How one issuance changes the quota
        """
        self.uow_factory = uow_factory
        self.policy = policy

    async def read(self, uow: UnitOfWork, issuer_id: IssuerId) -> Issuer:
        """Read the issuer's ledger record inside a unit of work.

        An issuer without a record holds no credits.

        Args:
            uow: Active unit of work
            issuer_id: Issuer ID

        Returns:
            The stored issuer, or an empty ordinary record
        """
        issuer = await uow.issuers.find_by_id(issuer_id)
        if issuer is None:
            return Issuer(id=issuer_id, invites_available=0)
        return issuer

    async def read_quota(self, issuer_id: IssuerId) -> int:
        """Read the issuer's remaining credits in a transaction of its own.

        Args:
            issuer_id: Issuer ID

        Returns:
            Remaining credits, never negative
        """
        async with self.uow_factory() as uow:
            issuer = await self.read(uow, issuer_id)
        return max(0, issuer.invites_available)

    def remaining_after_issue(self, quota: int) -> int:
        """Quota left after one issuance under the configured policy."""
        if self.policy == QuotaPolicy.EXHAUST:
            return 0
        return max(0, quota - 1)

    async def consume(self, uow: UnitOfWork, issuer: Issuer) -> Issuer:
        """Charge one issuance against the issuer inside a unit of work.

        Args:
            uow: Active unit of work
            issuer: Issuer as read in the same unit of work

        Returns:
            The updated issuer

        Raises:
            WriteConflictError: If the quota changed since it was read
        """
        remaining = self.remaining_after_issue(issuer.invites_available)
        updated = await uow.issuers.update_quota(issuer, remaining)
        logfire.debug(
            "Quota charged",
            issuer_id=issuer.id,
            policy=self.policy.value,
            before=issuer.invites_available,
            after=remaining,
        )
        return updated
