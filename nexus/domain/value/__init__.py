"""Domain value objects for the invite engine."""

from nexus.domain.value.identifiers import AccountId, IssuerId
from nexus.domain.value.types import InviteCode, InviteState, IssuerRole, QuotaPolicy

__all__ = [
    # Identifiers
    "AccountId",
    "IssuerId",
    # Types
    "InviteCode",
    "InviteState",
    "IssuerRole",
    "QuotaPolicy",
]
