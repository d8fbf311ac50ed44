"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from nexus.config import Settings
from nexus.domain.repository import UnitOfWorkFactory
from nexus.persistence.database import create_engine, create_session_factory
from nexus.persistence.repository import PostgresUnitOfWorkFactory
from nexus.util.di.base import ProviderBase
from nexus.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine, disposed when the container closes."""
        engine = create_engine(settings)
        # Instrument SQLAlchemy for observability
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()
        logfire.info("Database engine disposed")

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.APP)
    def get_uow_factory(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> UnitOfWorkFactory:
        """Provide unit of work factory.

        Each transaction attempt gets its own session, so retries never
        reuse a session that saw a conflict.
        """
        return PostgresUnitOfWorkFactory(session_factory)
