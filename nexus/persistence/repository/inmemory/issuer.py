"""In-memory issuer repository for testing."""

import asyncio
from typing import Optional

from nexus.domain.error import WriteConflictError
from nexus.domain.model.issuer import Issuer
from nexus.domain.repository.issuer import IssuerRepository
from nexus.domain.value import IssuerId

from .store import InMemoryInviteStore


class InMemoryIssuerRepository(IssuerRepository):
    """In-memory implementation of IssuerRepository for testing."""

    def __init__(self, store: InMemoryInviteStore) -> None:
        self._store = store
        # issuer_id -> (version read, issuer to write)
        self.quota_writes: dict[IssuerId, tuple[int, Issuer]] = {}
        self.saved: dict[IssuerId, Issuer] = {}

    async def find_by_id(self, issuer_id: IssuerId) -> Optional[Issuer]:
        """Find an issuer by ID."""
        await asyncio.sleep(0)
        if issuer_id in self.quota_writes:
            return self.quota_writes[issuer_id][1]
        if issuer_id in self.saved:
            return self.saved[issuer_id]
        return self._store.issuers.get(issuer_id)

    async def update_quota(self, issuer: Issuer, invites_available: int) -> Issuer:
        """Stage a quota write conditioned on the version read.

        Raises:
            WriteConflictError: If the committed version already moved
        """
        current = self._store.issuers.get(issuer.id)
        if current is None or current.version != issuer.version:
            raise WriteConflictError(f"Issuer {issuer.id} quota changed concurrently")
        updated = issuer.model_copy(
            update={
                "invites_available": invites_available,
                "version": issuer.version + 1,
            }
        )
        self.quota_writes[issuer.id] = (issuer.version, updated)
        return updated

    async def save(self, issuer: Issuer) -> Issuer:
        """Stage an unconditional create or overwrite."""
        current = self._store.issuers.get(issuer.id)
        version = current.version + 1 if current else 0
        saved = issuer.model_copy(update={"version": version})
        self.saved[issuer.id] = saved
        return saved
