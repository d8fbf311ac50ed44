"""Domain model entities for the invite engine."""

from nexus.domain.model.invite import Invite
from nexus.domain.model.issuer import Issuer

__all__ = [
    "Invite",
    "Issuer",
]
