"""Invite entity.

Registration is invite-only. An issuer generates a single-use code which a
new account consumes when it registers.
"""

from datetime import datetime
from typing import Optional

from pydantic import computed_field, model_validator

from nexus.domain.error import InviteAlreadyUsedError
from nexus.domain.model.common import DomainModel
from nexus.domain.value import AccountId, InviteCode, InviteState, IssuerId


class Invite(DomainModel):
    """Invite entity.

    Business rules:
    - The code is globally unique and never reused
    - Created ACTIVE by issuance, moved to USED once by redemption
    - Never deleted; used invites stay for history
    - State is derived from the redemption fields, never stored
    """

    code: InviteCode
    issuer_id: IssuerId
    created_at: datetime
    expires_at: datetime
    redeemed_by: Optional[AccountId] = None
    redeemed_at: Optional[datetime] = None

    @model_validator(mode="after")
    def check_redemption_fields(self) -> "Invite":
        """Redemption fields are set together or not at all."""
        if (self.redeemed_by is None) != (self.redeemed_at is None):
            raise ValueError("redeemed_by and redeemed_at must be set together")
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def state(self) -> InviteState:
        """Lifecycle state derived from the redemption fields."""
        if self.redeemed_at is not None:
            return InviteState.USED
        return InviteState.ACTIVE

    @property
    def is_used(self) -> bool:
        return self.state == InviteState.USED

    def is_expired(self, now: datetime) -> bool:
        """Whether the validity horizon has passed at ``now``."""
        return now >= self.expires_at

    def redeem(self, account_id: AccountId, now: datetime) -> "Invite":
        """Return the USED copy of this invite.

        Raises:
            InviteAlreadyUsedError: If the invite is already used
        """
        if self.is_used:
            raise InviteAlreadyUsedError(self.code.root)
        return self.model_copy(update={"redeemed_by": account_id, "redeemed_at": now})
