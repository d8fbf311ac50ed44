"""In-memory invite repository for testing."""

import asyncio
from typing import Optional

from nexus.domain.error import CodeCollisionError, WriteConflictError
from nexus.domain.model.invite import Invite
from nexus.domain.repository.invite import InviteRepository
from nexus.domain.value import InviteCode, IssuerId

from .store import InMemoryInviteStore


class InMemoryInviteRepository(InviteRepository):
    """In-memory implementation of InviteRepository for testing.

    Reads see committed state plus this unit of work's own writes. Writes
    are staged until the unit of work commits.
    """

    def __init__(self, store: InMemoryInviteStore) -> None:
        self._store = store
        self.inserted: dict[str, Invite] = {}
        self.redeemed: dict[str, Invite] = {}

    async def find_by_code(self, code: InviteCode) -> Optional[Invite]:
        """Find an invite by code."""
        # Yield like real I/O so concurrent transactions interleave
        await asyncio.sleep(0)
        key = code.root
        if key in self.redeemed:
            return self.redeemed[key]
        if key in self.inserted:
            return self.inserted[key]
        return self._store.invites.get(key)

    async def find_by_issuer(
        self, issuer_id: IssuerId, limit: int | None = None, offset: int = 0
    ) -> list[Invite]:
        """Find invites by issuer, newest first."""
        await asyncio.sleep(0)
        merged = {**self._store.invites, **self.inserted, **self.redeemed}
        matches = [inv for inv in merged.values() if inv.issuer_id == issuer_id]
        matches.sort(key=lambda inv: (inv.created_at, inv.code.root), reverse=True)
        if limit is None:
            return matches[offset:]
        return matches[offset : offset + limit]

    async def count_by_issuer(self, issuer_id: IssuerId) -> int:
        """Count invites by issuer."""
        await asyncio.sleep(0)
        merged = {**self._store.invites, **self.inserted, **self.redeemed}
        return sum(1 for inv in merged.values() if inv.issuer_id == issuer_id)

    async def add(self, invite: Invite) -> Invite:
        """Stage an insert.

        Raises:
            CodeCollisionError: If the code is already taken
        """
        key = invite.code.root
        if key in self._store.invites or key in self.inserted:
            raise CodeCollisionError(key)
        self.inserted[key] = invite
        return invite

    async def mark_redeemed(self, invite: Invite) -> Invite:
        """Stage a redemption.

        Raises:
            WriteConflictError: If the committed invite is already redeemed
        """
        key = invite.code.root
        current = self._store.invites.get(key)
        if current is not None and current.is_used:
            raise WriteConflictError(f"Invite {key} changed concurrently")
        self.redeemed[key] = invite
        return invite
