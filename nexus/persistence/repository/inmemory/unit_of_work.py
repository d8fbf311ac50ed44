"""In-memory unit of work for testing."""

from types import TracebackType

from nexus.domain.error import CodeCollisionError, WriteConflictError
from nexus.domain.repository import UnitOfWork, UnitOfWorkFactory

from .invite import InMemoryInviteRepository
from .issuer import InMemoryIssuerRepository
from .store import InMemoryInviteStore


class InMemoryUnitOfWork(UnitOfWork):
    """Optimistic transaction over an InMemoryInviteStore.

    Commit re-validates every staged write against the committed state and
    applies all of them, or raises and applies none.
    """

    def __init__(self, store: InMemoryInviteStore) -> None:
        self.store = store
        self.invites: InMemoryInviteRepository = InMemoryInviteRepository(store)
        self.issuers: InMemoryIssuerRepository = InMemoryIssuerRepository(store)

    async def __aenter__(self) -> "InMemoryUnitOfWork":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.rollback()

    async def commit(self) -> None:
        store = self.store
        invites = self.invites
        issuers = self.issuers

        # Validate everything first; nothing below awaits
        for code in invites.inserted:
            if code in store.invites:
                raise CodeCollisionError(code)
        for code in invites.redeemed:
            current = store.invites.get(code)
            if current is not None and current.is_used:
                raise WriteConflictError(f"Invite {code} changed concurrently")
        for issuer_id, (version, _) in issuers.quota_writes.items():
            current = store.issuers.get(issuer_id)
            if current is None or current.version != version:
                raise WriteConflictError(
                    f"Issuer {issuer_id} quota changed concurrently"
                )

        store.invites.update(invites.inserted)
        store.invites.update(invites.redeemed)
        for issuer_id, (_, updated) in issuers.quota_writes.items():
            store.issuers[issuer_id] = updated
        store.issuers.update(issuers.saved)
        await self.rollback()

    async def rollback(self) -> None:
        self.invites.inserted.clear()
        self.invites.redeemed.clear()
        self.issuers.quota_writes.clear()
        self.issuers.saved.clear()


class InMemoryUnitOfWorkFactory(UnitOfWorkFactory):
    """Creates in-memory units of work over one shared store."""

    def __init__(self, store: InMemoryInviteStore | None = None) -> None:
        self.store = store or InMemoryInviteStore()

    def __call__(self) -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(self.store)
