"""Domain value objects for the invite engine.

Value objects are immutable and defined by their values, not identity.
"""

import re
from enum import Enum

from pydantic import field_validator

from nexus.domain.value.common import RootValueObject


class InviteState(str, Enum):
    """Lifecycle state of an invite. USED is terminal."""

    ACTIVE = "active"
    USED = "used"


class IssuerRole(str, Enum):
    """Role of an issuer as far as quota gating is concerned."""

    ORDINARY = "ordinary"
    PRIVILEGED = "privileged"


class QuotaPolicy(str, Enum):
    """How one issuance changes an ordinary issuer's quota."""

    EXHAUST = "exhaust"
    DECREMENT = "decrement"


class InviteCode(RootValueObject[str]):
    """Human-typeable invite code, e.g. NEXUS-AB12CD.

    Codes are case-insensitive; the canonical form is upper case.
    """

    @field_validator("root")
    @classmethod
    def validate_code_format(cls, v: str) -> str:
        """Normalize to upper case and validate charset."""
        v = v.strip().upper()
        if not re.match(r"^[A-Z0-9][A-Z0-9-]{0,63}$", v):
            raise ValueError(
                "Invite code must be 1-64 characters of letters, digits and hyphens"
            )
        return v
