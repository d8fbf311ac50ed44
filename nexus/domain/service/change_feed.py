"""Invite change feed.

Lets an issuer follow their own invite history as invites are issued and
redeemed. A subscription first replays the current history and then
streams every committed change for that issuer. Delivery is at-least-once:
the same row may arrive more than once, so subscribers fold rows into an
InviteHistory, which is idempotent.
"""

import asyncio
from collections import deque
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import logfire

from nexus.domain.model.invite import Invite
from nexus.domain.repository import UnitOfWorkFactory
from nexus.domain.value import IssuerId


class Subscription:
    """Live stream of one issuer's invite rows.

    Iterate with ``async for``. Iteration ends when the subscription is
    closed.
    """

    def __init__(
        self, feed: "InviteChangeFeed", issuer_id: IssuerId, buffer_size: int
    ) -> None:
        self.feed = feed
        self.issuer_id = issuer_id
        self._queue: asyncio.Queue[Invite | None] = asyncio.Queue(maxsize=buffer_size)
        self._pending: deque[Invite] = deque()
        self._needs_snapshot = True
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _push(self, invite: Invite) -> None:
        if self._closed:
            return
        try:
            self._queue.put_nowait(invite)
        except asyncio.QueueFull:
            # Dropped rows are recovered by replaying the full history
            self._drain()
            self._needs_snapshot = True
            logfire.warn(
                "Feed subscriber lagging, scheduling resync",
                issuer_id=self.issuer_id,
            )

    def _drain(self) -> None:
        while not self._queue.empty():
            self._queue.get_nowait()

    def close(self) -> None:
        """Stop the stream; a pending ``__anext__`` returns promptly."""
        if self._closed:
            return
        self._closed = True
        self._drain()
        self._queue.put_nowait(None)

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> Invite:
        if self._closed and not self._pending:
            raise StopAsyncIteration

        if self._needs_snapshot:
            self._needs_snapshot = False
            self._pending.extend(await self.feed.snapshot(self.issuer_id))

        if self._pending:
            return self._pending.popleft()

        invite = await self._queue.get()
        if invite is None:
            raise StopAsyncIteration
        return invite


class InviteChangeFeed:
    """In-process fan-out of committed invite changes, scoped per issuer."""

    def __init__(self, uow_factory: UnitOfWorkFactory, buffer_size: int = 256) -> None:
        """Initialize change feed.

        Args:
            uow_factory: Factory for units of work, used to load snapshots
            buffer_size: Rows buffered per subscriber before a resync
        """
        self.uow_factory = uow_factory
        self.buffer_size = buffer_size
        self._subscribers: dict[IssuerId, set[Subscription]] = {}

    def publish(self, invite: Invite) -> None:
        """Deliver a committed invite row to the issuer's subscribers.

        Only call this after the transaction that produced the row has
        committed.
        """
        for subscription in list(self._subscribers.get(invite.issuer_id, ())):
            subscription._push(invite)

    async def snapshot(self, issuer_id: IssuerId) -> list[Invite]:
        """Load the issuer's full history, newest first."""
        async with self.uow_factory() as uow:
            return await uow.invites.find_by_issuer(issuer_id)

    def subscriber_count(self, issuer_id: IssuerId) -> int:
        return len(self._subscribers.get(issuer_id, ()))

    @asynccontextmanager
    async def subscribe(self, issuer_id: IssuerId) -> AsyncIterator[Subscription]:
        """Subscribe to an issuer's invite history.

        The subscription is registered before the snapshot is read, so no
        committed change can fall between the two.

        Args:
            issuer_id: Issuer whose invites to follow

        Yields:
            Subscription to iterate over
        """
        subscription = Subscription(self, issuer_id, self.buffer_size)
        self._subscribers.setdefault(issuer_id, set()).add(subscription)
        logfire.info("Feed subscribed", issuer_id=issuer_id)
        try:
            yield subscription
        finally:
            subscription.close()
            subscribers = self._subscribers.get(issuer_id)
            if subscribers is not None:
                subscribers.discard(subscription)
                if not subscribers:
                    del self._subscribers[issuer_id]
            logfire.info("Feed unsubscribed", issuer_id=issuer_id)


class InviteHistory:
    """Subscriber-side view of an issuer's invites.

    Applying a row upserts it by code, so replays and duplicates are
    harmless. A stale ACTIVE row never overwrites a USED one.
    """

    def __init__(self, issuer_id: IssuerId) -> None:
        self.issuer_id = issuer_id
        self._by_code: dict[str, Invite] = {}

    def apply(self, invite: Invite) -> bool:
        """Fold one row into the view.

        Returns:
            True if the view changed
        """
        if invite.issuer_id != self.issuer_id:
            raise ValueError(
                f"Invite {invite.code} belongs to another issuer"
            )
        current = self._by_code.get(invite.code.root)
        if current == invite:
            return False
        if current is not None and current.is_used and not invite.is_used:
            return False
        self._by_code[invite.code.root] = invite
        return True

    @property
    def invites(self) -> list[Invite]:
        """Invites newest first."""
        return sorted(
            self._by_code.values(),
            key=lambda inv: (inv.created_at, inv.code.root),
            reverse=True,
        )

    def __len__(self) -> int:
        return len(self._by_code)
