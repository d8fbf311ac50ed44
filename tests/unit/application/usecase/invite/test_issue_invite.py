"""Tests for issue invite use case."""

import pytest

from nexus.application.usecase.invite import IssueInviteRequest, IssueInviteUseCase
from nexus.domain.error import QuotaExhaustedError
from tests.conftest import seed_issuer
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestIssueInviteUseCase:
    """Tests for IssueInviteUseCase."""

    @pytest.mark.asyncio
    async def test_ordinary_issuer_sees_remaining_quota(self, unit_env):
        # Arrange
        use_case = await unit_env.get(IssueInviteUseCase)
        await seed_issuer(unit_env, "alice", invites_available=1)

        # Act
        response = await use_case.execute(IssueInviteRequest(issuer_id="alice"))

        # Assert
        assert response.code.startswith("NEXUS-")
        assert response.expires_at > response.created_at
        assert response.remaining_quota == 0

    @pytest.mark.asyncio
    async def test_privileged_issuer_has_no_quota(self, unit_env):
        use_case = await unit_env.get(IssueInviteUseCase)

        response = await use_case.execute(
            IssueInviteRequest(issuer_id="admin", is_privileged=True)
        )

        assert response.remaining_quota is None

    @pytest.mark.asyncio
    async def test_exhausted_issuer_raises(self, unit_env):
        use_case = await unit_env.get(IssueInviteUseCase)

        with pytest.raises(QuotaExhaustedError):
            await use_case.execute(IssueInviteRequest(issuer_id="alice"))
