"""Mock persistence providers for testing."""

from dishka import Scope, provide

from nexus.domain.repository import UnitOfWorkFactory
from nexus.persistence.repository.inmemory import InMemoryUnitOfWorkFactory
from nexus.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using an in-memory store.

    The store lives as long as the container, so each test that builds its
    own container starts empty.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_uow_factory(self) -> UnitOfWorkFactory:
        """Provide in-memory unit of work factory."""
        return InMemoryUnitOfWorkFactory()
