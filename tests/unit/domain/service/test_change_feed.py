"""Unit tests for the invite change feed."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from nexus.domain.model import Invite
from nexus.domain.service import InviteChangeFeed, InviteHistory
from nexus.domain.value import AccountId, InviteCode, InviteState, IssuerId
from nexus.persistence.repository.inmemory import (
    InMemoryInviteStore,
    InMemoryUnitOfWork,
    InMemoryUnitOfWorkFactory,
)
from tests.conftest import build_invite_service, seed_issuer

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def make_invite(code: str, issuer_id: str = "alice", minutes: int = 0) -> Invite:
    created_at = NOW + timedelta(minutes=minutes)
    return Invite(
        code=InviteCode(root=code),
        issuer_id=IssuerId(issuer_id),
        created_at=created_at,
        expires_at=created_at + timedelta(days=30),
    )


async def next_invite(subscription) -> Invite:
    return await asyncio.wait_for(subscription.__anext__(), timeout=1)


class SlowCloseUnitOfWork(InMemoryUnitOfWork):
    """Stalls on exit after a commit, like a database session closing."""

    def __init__(self, store: InMemoryInviteStore, closing: asyncio.Event) -> None:
        super().__init__(store)
        self.closing = closing
        self.committed = False

    async def commit(self) -> None:
        await super().commit()
        self.committed = True

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await super().__aexit__(exc_type, exc, tb)
        if self.committed:
            self.closing.set()
            await asyncio.Event().wait()


class SlowCloseUnitOfWorkFactory(InMemoryUnitOfWorkFactory):
    def __init__(self, store: InMemoryInviteStore) -> None:
        super().__init__(store)
        self.closing = asyncio.Event()

    def __call__(self) -> InMemoryUnitOfWork:
        return SlowCloseUnitOfWork(self.store, self.closing)


class TestInviteChangeFeed:
    """Tests for InviteChangeFeed."""

    @pytest.mark.asyncio
    async def test_subscription_replays_history_first(self):
        """A new subscriber receives the existing history before live rows."""
        uow_factory = InMemoryUnitOfWorkFactory()
        invite_service = build_invite_service(uow_factory)
        existing = await invite_service.issue(IssuerId("alice"), is_privileged=True)
        feed = invite_service.change_feed

        async with feed.subscribe(IssuerId("alice")) as subscription:
            assert await next_invite(subscription) == existing

            live = await invite_service.issue(IssuerId("alice"), is_privileged=True)
            assert await next_invite(subscription) == live

    @pytest.mark.asyncio
    async def test_redemption_is_streamed(self):
        """Redeeming an invite pushes its USED row to the issuer."""
        uow_factory = InMemoryUnitOfWorkFactory()
        await seed_issuer(uow_factory, "alice", invites_available=1)
        invite_service = build_invite_service(uow_factory)
        feed = invite_service.change_feed

        async with feed.subscribe(IssuerId("alice")) as subscription:
            history = InviteHistory(IssuerId("alice"))
            issued = await invite_service.issue(IssuerId("alice"), is_privileged=False)
            await invite_service.redeem(issued.code, AccountId("acct-1"))

            history.apply(await next_invite(subscription))
            history.apply(await next_invite(subscription))
            while history.invites[0].state != InviteState.USED:
                history.apply(await next_invite(subscription))

        assert len(history) == 1
        assert history.invites[0].redeemed_by == "acct-1"

    @pytest.mark.asyncio
    async def test_feed_is_scoped_per_issuer(self):
        """Subscribers never see another issuer's invites."""
        feed = InviteChangeFeed(InMemoryUnitOfWorkFactory())

        async with feed.subscribe(IssuerId("alice")) as subscription:
            feed.publish(make_invite("NEXUS-BOB001", issuer_id="bob"))
            feed.publish(make_invite("NEXUS-ALI001"))

            received = await next_invite(subscription)

        assert received.code.root == "NEXUS-ALI001"

    @pytest.mark.asyncio
    async def test_unsubscribe_on_exit(self):
        feed = InviteChangeFeed(InMemoryUnitOfWorkFactory())

        async with feed.subscribe(IssuerId("alice")) as subscription:
            assert feed.subscriber_count(IssuerId("alice")) == 1

        assert feed.subscriber_count(IssuerId("alice")) == 0
        assert subscription.closed

    @pytest.mark.asyncio
    async def test_close_ends_iteration(self):
        """Closing a subscription wakes a pending reader and ends the stream."""
        feed = InviteChangeFeed(InMemoryUnitOfWorkFactory())

        async with feed.subscribe(IssuerId("alice")) as subscription:
            received = []

            async def consume():
                async for invite in subscription:
                    received.append(invite)

            consumer = asyncio.create_task(consume())
            await asyncio.sleep(0)
            subscription.close()
            await asyncio.wait_for(consumer, timeout=1)

        assert received == []

    @pytest.mark.asyncio
    async def test_overflow_triggers_resync(self):
        """A lagging subscriber is resynced from the store, losing nothing."""
        uow_factory = InMemoryUnitOfWorkFactory()
        invite_service = build_invite_service(uow_factory, feed_buffer_size=2)
        feed = invite_service.change_feed

        async with feed.subscribe(IssuerId("alice")) as subscription:
            history = InviteHistory(IssuerId("alice"))
            first = await invite_service.issue(IssuerId("alice"), is_privileged=True)
            history.apply(await next_invite(subscription))

            issued = [first]
            for _ in range(5):
                issued.append(
                    await invite_service.issue(IssuerId("alice"), is_privileged=True)
                )

            while len(history) < len(issued):
                history.apply(await next_invite(subscription))

        assert {inv.code for inv in history.invites} == {inv.code for inv in issued}

    @pytest.mark.asyncio
    async def test_committed_row_published_when_close_is_cancelled(self):
        """A caller cancelled while the unit of work closes still notifies."""
        store = InMemoryInviteStore()
        existing = make_invite("NEXUS-OLD111", issuer_id="admin")
        async with InMemoryUnitOfWorkFactory(store)() as uow:
            await uow.invites.add(existing)
            await uow.commit()

        uow_factory = SlowCloseUnitOfWorkFactory(store)
        invite_service = build_invite_service(uow_factory)
        feed = invite_service.change_feed

        async with feed.subscribe(IssuerId("admin")) as subscription:
            assert await next_invite(subscription) == existing

            issuing = asyncio.create_task(
                invite_service.issue(IssuerId("admin"), is_privileged=True)
            )
            await asyncio.wait_for(uow_factory.closing.wait(), timeout=1)
            issuing.cancel()
            with pytest.raises(asyncio.CancelledError):
                await issuing

            committed = set(store.invites) - {"NEXUS-OLD111"}
            assert len(committed) == 1
            received = await next_invite(subscription)

        assert received.code.root in committed


class TestInviteHistory:
    """Tests for InviteHistory."""

    def test_apply_is_idempotent(self):
        history = InviteHistory(IssuerId("alice"))
        invite = make_invite("NEXUS-AAA111")

        assert history.apply(invite) is True
        assert history.apply(invite) is False
        assert len(history) == 1

    def test_stale_active_row_never_downgrades_used(self):
        """Replaying an old ACTIVE row after its USED row changes nothing."""
        history = InviteHistory(IssuerId("alice"))
        active = make_invite("NEXUS-AAA111")
        used = active.redeem(AccountId("acct-1"), NOW + timedelta(hours=1))

        history.apply(used)
        assert history.apply(active) is False

        assert history.invites[0].state == InviteState.USED

    def test_invites_newest_first(self):
        history = InviteHistory(IssuerId("alice"))
        older = make_invite("NEXUS-OLD111", minutes=0)
        newer = make_invite("NEXUS-NEW111", minutes=5)

        history.apply(older)
        history.apply(newer)

        assert history.invites == [newer, older]

    def test_rejects_other_issuer(self):
        history = InviteHistory(IssuerId("alice"))

        with pytest.raises(ValueError, match="another issuer"):
            history.apply(make_invite("NEXUS-BOB111", issuer_id="bob"))
