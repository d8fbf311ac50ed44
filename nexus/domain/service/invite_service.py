"""Invite domain service.

Issuance and redemption each run as one optimistic transaction. Conflicts
detected by the store abort the attempt and the whole unit is replayed
from a fresh read, up to a finite budget.
"""

import asyncio
import random
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone

import logfire

from nexus.config import InvitationSettings
from nexus.domain.error import (
    CodeCollisionError,
    ContentionError,
    InviteAlreadyUsedError,
    InviteExpiredError,
    InviteNotFoundError,
    QuotaExhaustedError,
    WriteConflictError,
)
from nexus.domain.model.invite import Invite
from nexus.domain.repository import UnitOfWork, UnitOfWorkFactory
from nexus.domain.value import AccountId, InviteCode, IssuerId

from .base import Service
from .change_feed import InviteChangeFeed
from .code_generator import InviteCodeGenerator
from .quota_ledger import QuotaLedger


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InviteService(Service):
    """Domain service for invite issuance, redemption and history."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        quota_ledger: QuotaLedger,
        code_generator: InviteCodeGenerator,
        change_feed: InviteChangeFeed,
        settings: InvitationSettings,
    ) -> None:
        """Initialize invite service.

        Args:
            uow_factory: Factory for units of work
            quota_ledger: Quota ledger
            code_generator: Candidate code generator
            change_feed: Feed notified after each commit
            settings: Invitation settings
        """
        self.uow_factory = uow_factory
        self.quota_ledger = quota_ledger
        self.code_generator = code_generator
        self.change_feed = change_feed
        self.settings = settings

    async def issue(self, issuer_id: IssuerId, is_privileged: bool) -> Invite:
        """Issue a new invite.

        Privileged issuers bypass the quota entirely. For ordinary issuers
        the quota is re-read inside the transaction and charged in the same
        commit that creates the invite.

        Args:
            issuer_id: Authenticated issuer
            is_privileged: Whether the issuer is exempt from quota checks

        Returns:
            The new ACTIVE invite

        Raises:
            QuotaExhaustedError: If an ordinary issuer has no credits
            ContentionError: If the retry budget is exhausted
            StoreUnavailableError: If the store cannot be reached
        """
        with logfire.span(
            "invite_service.issue", issuer_id=issuer_id, privileged=is_privileged
        ):

            async def work(uow: UnitOfWork) -> Invite:
                issuer = None
                if not is_privileged:
                    issuer = await self.quota_ledger.read(uow, issuer_id)
                    if issuer.invites_available <= 0:
                        logfire.warn("Invite quota exhausted", issuer_id=issuer_id)
                        raise QuotaExhaustedError(issuer_id)

                now = utcnow()
                invite = Invite(
                    code=self.code_generator(),
                    issuer_id=issuer_id,
                    created_at=now,
                    expires_at=self._expiry_for(now),
                )
                await uow.invites.add(invite)
                if issuer is not None:
                    await self.quota_ledger.consume(uow, issuer)
                return invite

            invite = await self._transact("issue", work)
            logfire.info(
                "Invite issued",
                code=invite.code.root,
                issuer_id=issuer_id,
                expires_at=invite.expires_at,
            )
            return invite

    async def redeem(self, code: InviteCode | str, account_id: AccountId) -> Invite:
        """Consume an invite on behalf of a registering account.

        At most one concurrent redemption of a code wins; losers re-read
        the invite and fail with InviteAlreadyUsedError.

        Args:
            code: Invite code, any case
            account_id: Account consuming the invite

        Returns:
            The USED invite

        Raises:
            InviteNotFoundError: If no invite has this code
            InviteAlreadyUsedError: If the invite was already redeemed
            InviteExpiredError: If the invite is past its horizon
            ContentionError: If the retry budget is exhausted
            StoreUnavailableError: If the store cannot be reached
        """
        invite_code = self._parse_code(code)
        with logfire.span(
            "invite_service.redeem", code=invite_code.root, account_id=account_id
        ):

            async def work(uow: UnitOfWork) -> Invite:
                now = utcnow()
                invite = await self._load_redeemable(uow, invite_code, now)
                redeemed = invite.redeem(account_id, now)
                return await uow.invites.mark_redeemed(redeemed)

            invite = await self._transact("redeem", work)
            logfire.info(
                "Invite redeemed",
                code=invite.code.root,
                issuer_id=invite.issuer_id,
                account_id=account_id,
            )
            return invite

    async def check(self, code: InviteCode | str) -> Invite:
        """Check that a code could be redeemed right now, without using it.

        Raises:
            InviteNotFoundError: If no invite has this code
            InviteAlreadyUsedError: If the invite was already redeemed
            InviteExpiredError: If the invite is past its horizon
        """
        invite_code = self._parse_code(code)
        with logfire.span("invite_service.check", code=invite_code.root):
            async with self.uow_factory() as uow:
                return await self._load_redeemable(uow, invite_code, utcnow())

    async def list_invites(
        self, issuer_id: IssuerId, limit: int | None = None, offset: int = 0
    ) -> list[Invite]:
        """List invites created by an issuer, newest first.

        Args:
            issuer_id: Issuer ID
            limit: Maximum number of results, None for all
            offset: Number of results to skip

        Returns:
            List of invites
        """
        with logfire.span(
            "invite_service.list_invites",
            issuer_id=issuer_id,
            limit=limit,
            offset=offset,
        ):
            async with self.uow_factory() as uow:
                invites = await uow.invites.find_by_issuer(issuer_id, limit, offset)
            logfire.info("Invites listed", issuer_id=issuer_id, count=len(invites))
            return invites

    async def count_invites(self, issuer_id: IssuerId) -> int:
        """Count every invite created by an issuer, regardless of paging."""
        async with self.uow_factory() as uow:
            return await uow.invites.count_by_issuer(issuer_id)

    async def _load_redeemable(
        self, uow: UnitOfWork, code: InviteCode, now: datetime
    ) -> Invite:
        invite = await uow.invites.find_by_code(code)
        if invite is None:
            logfire.warn("Invite not found", code=code.root)
            raise InviteNotFoundError(code.root)
        if invite.is_used:
            logfire.warn("Invite already used", code=code.root)
            raise InviteAlreadyUsedError(code.root)
        if invite.is_expired(now):
            logfire.warn("Invite expired", code=code.root, expires_at=invite.expires_at)
            raise InviteExpiredError(code.root)
        return invite

    async def _transact(
        self, operation: str, work: Callable[[UnitOfWork], Awaitable[Invite]]
    ) -> Invite:
        """Run ``work`` in a unit of work, replaying it on write conflicts.

        The resulting row is published to the change feed as soon as the
        commit returns, before the unit of work is closed.
        """
        max_attempts = self.settings.max_attempts
        for attempt in range(1, max_attempts + 1):
            try:
                async with self.uow_factory() as uow:
                    result = await work(uow)
                    await uow.commit()
                    # No await between commit and publish
                    self.change_feed.publish(result)
                return result
            except (WriteConflictError, CodeCollisionError) as e:
                logfire.warn(
                    "Transaction conflict",
                    operation=operation,
                    attempt=attempt,
                    max_attempts=max_attempts,
                    error=str(e),
                )
                if attempt < max_attempts:
                    await self._backoff(attempt)

        logfire.error(
            "Retry budget exhausted", operation=operation, attempts=max_attempts
        )
        raise ContentionError(operation, max_attempts)

    async def _backoff(self, attempt: int) -> None:
        base = self.settings.retry_backoff_seconds
        if base <= 0:
            # Still yield so the winning transaction can make progress
            await asyncio.sleep(0)
            return
        await asyncio.sleep(random.uniform(0, base * 2 ** (attempt - 1)))

    def _expiry_for(self, now: datetime) -> datetime:
        if self.settings.fixed_expiry is not None:
            return self.settings.fixed_expiry
        return now + timedelta(days=self.settings.validity_days)

    @staticmethod
    def _parse_code(code: InviteCode | str) -> InviteCode:
        if isinstance(code, InviteCode):
            return code
        try:
            return InviteCode(root=code)
        except ValueError:
            # A malformed code can never have been issued
            raise InviteNotFoundError(code) from None
