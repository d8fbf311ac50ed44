"""Invite repository interface."""

from abc import ABC, abstractmethod

from nexus.domain.model.invite import Invite
from nexus.domain.value import InviteCode, IssuerId


class InviteRepository(ABC):
    """Repository for Invite entity.

    Instances are bound to one unit of work; writes become visible to
    other readers only when that unit commits.
    """

    @abstractmethod
    async def find_by_code(self, code: InviteCode) -> Invite | None:
        """Find an invite by code.

        Args:
            code: The invite code

        Returns:
            The invite if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_issuer(
        self, issuer_id: IssuerId, limit: int | None = None, offset: int = 0
    ) -> list[Invite]:
        """Find invites created by an issuer, newest first.

        Args:
            issuer_id: The issuer's ID
            limit: Maximum number of results, None for all
            offset: Number of results to skip

        Returns:
            List of invites ordered by created_at descending
        """
        pass

    @abstractmethod
    async def count_by_issuer(self, issuer_id: IssuerId) -> int:
        """Count all invites created by an issuer."""
        pass

    @abstractmethod
    async def add(self, invite: Invite) -> Invite:
        """Insert a new invite, conditioned on its code being free.

        Args:
            invite: The invite to insert

        Returns:
            The inserted invite

        Raises:
            CodeCollisionError: If an invite with this code already exists
        """
        pass

    @abstractmethod
    async def mark_redeemed(self, invite: Invite) -> Invite:
        """Persist the USED transition of an invite.

        The write only applies if the stored invite is still unredeemed.

        Args:
            invite: The redeemed copy of the invite

        Returns:
            The redeemed invite

        Raises:
            WriteConflictError: If the invite was redeemed concurrently
        """
        pass
