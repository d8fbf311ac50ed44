"""PostgreSQL repository implementations."""

from nexus.persistence.repository.invite import PostgresInviteRepository
from nexus.persistence.repository.issuer import PostgresIssuerRepository
from nexus.persistence.repository.unit_of_work import (
    PostgresUnitOfWork,
    PostgresUnitOfWorkFactory,
)

__all__ = [
    "PostgresInviteRepository",
    "PostgresIssuerRepository",
    "PostgresUnitOfWork",
    "PostgresUnitOfWorkFactory",
]
