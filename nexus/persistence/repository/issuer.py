"""PostgreSQL implementation of Issuer repository."""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from nexus.domain.error import WriteConflictError
from nexus.domain.model import Issuer
from nexus.domain.repository import IssuerRepository
from nexus.domain.value import IssuerId
from nexus.persistence.mappers import issuer_to_dict, row_to_issuer
from nexus.persistence.tables import issuers_table


class PostgresIssuerRepository(IssuerRepository):
    """PostgreSQL implementation of IssuerRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session owned by the unit of work
        """
        self.session = session

    async def find_by_id(self, issuer_id: IssuerId) -> Optional[Issuer]:
        """Find an issuer by ID.

        Args:
            issuer_id: Issuer ID to look up

        Returns:
            Issuer if found, None otherwise
        """
        stmt = select(issuers_table).where(issuers_table.c.id == issuer_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_issuer(dict(row)) if row else None

    async def update_quota(self, issuer: Issuer, invites_available: int) -> Issuer:
        """Compare-and-set the quota against the version that was read.

        Under READ COMMITTED a concurrent writer holding the row makes this
        statement wait, then re-check the version against the committed row.

        Raises:
            WriteConflictError: If the version moved since it was read
        """
        stmt = (
            update(issuers_table)
            .where(issuers_table.c.id == issuer.id)
            .where(issuers_table.c.version == issuer.version)
            .values(
                invites_available=invites_available,
                version=issuers_table.c.version + 1,
            )
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            raise WriteConflictError(f"Issuer {issuer.id} quota changed concurrently")
        return issuer.model_copy(
            update={
                "invites_available": invites_available,
                "version": issuer.version + 1,
            }
        )

    async def save(self, issuer: Issuer) -> Issuer:
        """Create or overwrite an issuer, bumping its version.

        Args:
            issuer: Issuer to save

        Returns:
            Saved issuer
        """
        values = issuer_to_dict(issuer)
        stmt = insert(issuers_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[issuers_table.c.id],
            set_={
                "role": stmt.excluded.role,
                "invites_available": stmt.excluded.invites_available,
                "version": issuers_table.c.version + 1,
            },
        ).returning(issuers_table)
        result = await self.session.execute(stmt)
        row = result.mappings().one()
        return row_to_issuer(dict(row))
