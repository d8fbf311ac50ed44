"""Unit of work interface.

A unit of work is one atomic transaction against the invite store. Its
repositories read committed data and stage writes; ``commit`` makes every
staged write visible at once or raises without applying any of them.
"""

from abc import ABC, abstractmethod
from types import TracebackType

from nexus.domain.repository.invite import InviteRepository
from nexus.domain.repository.issuer import IssuerRepository


class UnitOfWork(ABC):
    """Atomic transaction over the invite and issuer repositories."""

    invites: InviteRepository
    issuers: IssuerRepository

    @abstractmethod
    async def __aenter__(self) -> "UnitOfWork":
        pass

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Roll back anything that was not committed."""
        pass

    @abstractmethod
    async def commit(self) -> None:
        """Commit staged writes.

        Raises:
            WriteConflictError: If a concurrent transaction won
            CodeCollisionError: If a staged invite code was taken meanwhile
            StoreUnavailableError: If the store cannot be reached
        """
        pass

    @abstractmethod
    async def rollback(self) -> None:
        """Discard staged writes."""
        pass


class UnitOfWorkFactory(ABC):
    """Creates a fresh unit of work per transaction attempt."""

    @abstractmethod
    def __call__(self) -> UnitOfWork:
        pass
