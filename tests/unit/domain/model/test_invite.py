"""Unit tests for the Invite entity."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from nexus.domain.error import InviteAlreadyUsedError
from nexus.domain.model import Invite, Issuer
from nexus.domain.value import AccountId, InviteCode, InviteState, IssuerId, IssuerRole

CREATED = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def invite() -> Invite:
    return Invite(
        code=InviteCode(root="NEXUS-AB12CD"),
        issuer_id=IssuerId("alice"),
        created_at=CREATED,
        expires_at=CREATED + timedelta(days=30),
    )


class TestInvite:
    """Tests for Invite."""

    def test_new_invite_is_active(self, invite):
        assert invite.state == InviteState.ACTIVE
        assert not invite.is_used

    def test_redeem_returns_used_copy(self, invite):
        """Redeeming never mutates the original."""
        now = CREATED + timedelta(days=1)

        used = invite.redeem(AccountId("acct-1"), now)

        assert used.state == InviteState.USED
        assert used.redeemed_by == "acct-1"
        assert used.redeemed_at == now
        assert invite.state == InviteState.ACTIVE

    def test_redeem_twice_raises(self, invite):
        used = invite.redeem(AccountId("acct-1"), CREATED)

        with pytest.raises(InviteAlreadyUsedError):
            used.redeem(AccountId("acct-2"), CREATED)

    def test_expiry_boundary(self, invite):
        """An invite is expired from its horizon onwards."""
        assert not invite.is_expired(invite.expires_at - timedelta(microseconds=1))
        assert invite.is_expired(invite.expires_at)

    def test_redemption_fields_must_be_paired(self):
        with pytest.raises(ValidationError, match="set together"):
            Invite(
                code=InviteCode(root="NEXUS-AB12CD"),
                issuer_id=IssuerId("alice"),
                created_at=CREATED,
                expires_at=CREATED + timedelta(days=30),
                redeemed_by=AccountId("acct-1"),
            )

    def test_state_is_serialized(self, invite):
        assert invite.model_dump(mode="json")["state"] == "active"

    def test_is_immutable(self, invite):
        with pytest.raises(ValidationError):
            invite.redeemed_by = AccountId("acct-1")


class TestIssuer:
    """Tests for Issuer."""

    def test_defaults(self):
        issuer = Issuer(id=IssuerId("alice"))

        assert issuer.role == IssuerRole.ORDINARY
        assert issuer.invites_available == 0
        assert issuer.version == 0
        assert not issuer.is_privileged

    def test_privileged(self):
        issuer = Issuer(id=IssuerId("admin"), role=IssuerRole.PRIVILEGED)

        assert issuer.is_privileged
