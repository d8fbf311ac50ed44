"""PostgreSQL unit of work."""

from types import TracebackType

import logfire
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from nexus.domain.error import StoreUnavailableError
from nexus.domain.repository import UnitOfWork, UnitOfWorkFactory
from nexus.persistence.repository.invite import PostgresInviteRepository
from nexus.persistence.repository.issuer import PostgresIssuerRepository


def is_unavailable(exc: BaseException) -> bool:
    """Whether an exception means the database could not be reached."""
    if isinstance(exc, (OperationalError, InterfaceError, OSError)):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


class PostgresUnitOfWork(UnitOfWork):
    """One database transaction on its own session.

    Conditional statements detect conflicts as they execute; commit makes
    all of them visible together.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory
        self.session: AsyncSession | None = None
        self._committed = False

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self.session = self.session_factory()
        self.invites = PostgresInviteRepository(self.session)
        self.issuers = PostgresIssuerRepository(self.session)
        self._committed = False
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        assert self.session is not None
        try:
            if not self._committed:
                await self.rollback()
        finally:
            await self.session.close()
        if exc is not None and is_unavailable(exc):
            logfire.error("Database unavailable", error=str(exc))
            raise StoreUnavailableError(str(exc)) from exc

    async def commit(self) -> None:
        assert self.session is not None
        try:
            await self.session.commit()
        except Exception as e:
            if is_unavailable(e):
                raise StoreUnavailableError(str(e)) from e
            raise
        self._committed = True

    async def rollback(self) -> None:
        assert self.session is not None
        try:
            await self.session.rollback()
        except Exception as e:
            # The connection may already be gone; the transaction died with it
            logfire.warn("Rollback failed", error=str(e))


class PostgresUnitOfWorkFactory(UnitOfWorkFactory):
    """Creates PostgreSQL units of work from a session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    def __call__(self) -> PostgresUnitOfWork:
        return PostgresUnitOfWork(self.session_factory)
