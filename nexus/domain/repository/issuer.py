"""Issuer repository interface."""

from abc import ABC, abstractmethod

from nexus.domain.model.issuer import Issuer
from nexus.domain.value import IssuerId


class IssuerRepository(ABC):
    """Repository for the issuer quota ledger."""

    @abstractmethod
    async def find_by_id(self, issuer_id: IssuerId) -> Issuer | None:
        """Find an issuer by ID.

        Args:
            issuer_id: The issuer's ID

        Returns:
            The issuer if found, None otherwise
        """
        pass

    @abstractmethod
    async def update_quota(self, issuer: Issuer, invites_available: int) -> Issuer:
        """Write a new quota, conditioned on the version that was read.

        Args:
            issuer: The issuer as read inside the current unit of work
            invites_available: The new quota

        Returns:
            The updated issuer with its version bumped

        Raises:
            WriteConflictError: If the stored version no longer matches
        """
        pass

    @abstractmethod
    async def save(self, issuer: Issuer) -> Issuer:
        """Create or overwrite an issuer record.

        This is the replenishment path used by administrators; the engine
        itself only ever calls update_quota.

        Args:
            issuer: The issuer to save

        Returns:
            The saved issuer with its version bumped
        """
        pass
