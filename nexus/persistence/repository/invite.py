"""PostgreSQL implementation of Invite repository."""

from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from nexus.domain.error import CodeCollisionError, WriteConflictError
from nexus.domain.model import Invite
from nexus.domain.repository import InviteRepository
from nexus.domain.value import InviteCode, IssuerId
from nexus.persistence.mappers import invite_to_dict, row_to_invite
from nexus.persistence.tables import invites_table


class PostgresInviteRepository(InviteRepository):
    """PostgreSQL implementation of InviteRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session owned by the unit of work
        """
        self.session = session

    async def find_by_code(self, code: InviteCode) -> Optional[Invite]:
        """Find an invite by its code.

        Args:
            code: Invite code to look up

        Returns:
            Invite if found, None otherwise
        """
        stmt = select(invites_table).where(invites_table.c.code == code.root)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invite(dict(row)) if row else None

    async def find_by_issuer(
        self, issuer_id: IssuerId, limit: int | None = None, offset: int = 0
    ) -> list[Invite]:
        """Find invites by issuer, newest first.

        Args:
            issuer_id: Issuer ID
            limit: Maximum number of results, None for all
            offset: Number of results to skip

        Returns:
            List of matching invites
        """
        stmt = (
            select(invites_table)
            .where(invites_table.c.issuer_id == issuer_id)
            .order_by(invites_table.c.created_at.desc(), invites_table.c.code.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        rows = result.mappings().all()
        return [row_to_invite(dict(row)) for row in rows]

    async def count_by_issuer(self, issuer_id: IssuerId) -> int:
        """Count invites by issuer."""
        stmt = (
            select(func.count())
            .select_from(invites_table)
            .where(invites_table.c.issuer_id == issuer_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def add(self, invite: Invite) -> Invite:
        """Insert an invite unless its code is taken.

        A concurrent insert of the same code blocks on the primary key until
        the other transaction finishes, then does nothing.

        Raises:
            CodeCollisionError: If the code already exists
        """
        stmt = (
            insert(invites_table)
            .values(**invite_to_dict(invite))
            .on_conflict_do_nothing(index_elements=[invites_table.c.code])
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            raise CodeCollisionError(invite.code.root)
        return invite

    async def mark_redeemed(self, invite: Invite) -> Invite:
        """Write the redemption fields if the invite is still unredeemed.

        Raises:
            WriteConflictError: If another transaction redeemed it first
        """
        stmt = (
            update(invites_table)
            .where(invites_table.c.code == invite.code.root)
            .where(invites_table.c.redeemed_at.is_(None))
            .values(redeemed_by=invite.redeemed_by, redeemed_at=invite.redeemed_at)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            raise WriteConflictError(f"Invite {invite.code} changed concurrently")
        return invite
