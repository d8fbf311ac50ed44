"""Repository interfaces for the invite engine.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from nexus.domain.repository.invite import InviteRepository
from nexus.domain.repository.issuer import IssuerRepository
from nexus.domain.repository.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "InviteRepository",
    "IssuerRepository",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
