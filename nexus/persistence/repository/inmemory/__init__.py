"""In-memory repository implementations for testing."""

from .invite import InMemoryInviteRepository
from .issuer import InMemoryIssuerRepository
from .store import InMemoryInviteStore
from .unit_of_work import InMemoryUnitOfWork, InMemoryUnitOfWorkFactory

__all__ = [
    "InMemoryInviteRepository",
    "InMemoryInviteStore",
    "InMemoryIssuerRepository",
    "InMemoryUnitOfWork",
    "InMemoryUnitOfWorkFactory",
]
