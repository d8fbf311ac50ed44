"""Unit tests for the quota replenishment script."""

import pytest

from nexus.domain.service import QuotaLedger
from nexus.domain.value import IssuerId, IssuerRole
from nexus.persistence.repository.inmemory import InMemoryUnitOfWorkFactory
from scripts.grant_invites import grant
from tests.conftest import build_invite_service, seed_issuer


class TestGrant:
    """Tests for grant."""

    @pytest.mark.asyncio
    async def test_grant_creates_missing_issuer(self):
        uow_factory = InMemoryUnitOfWorkFactory()

        issuer = await grant(uow_factory, IssuerId("alice"), 3)

        assert issuer.invites_available == 3
        assert issuer.role == IssuerRole.ORDINARY
        assert await QuotaLedger(uow_factory).read_quota(IssuerId("alice")) == 3

    @pytest.mark.asyncio
    async def test_grant_add_keeps_role(self):
        uow_factory = InMemoryUnitOfWorkFactory()
        await seed_issuer(uow_factory, "admin", 1, role=IssuerRole.PRIVILEGED)

        issuer = await grant(uow_factory, IssuerId("admin"), 2, add=True)

        assert issuer.invites_available == 3
        assert issuer.role == IssuerRole.PRIVILEGED

    @pytest.mark.asyncio
    async def test_grant_reopens_exhausted_issuer(self):
        """After replenishment an exhausted issuer can issue again."""
        uow_factory = InMemoryUnitOfWorkFactory()
        await seed_issuer(uow_factory, "alice", 1)
        invite_service = build_invite_service(uow_factory)
        await invite_service.issue(IssuerId("alice"), is_privileged=False)

        await grant(uow_factory, IssuerId("alice"), 1)
        invite = await invite_service.issue(IssuerId("alice"), is_privileged=False)

        assert invite.issuer_id == "alice"
