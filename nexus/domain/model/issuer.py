"""Issuer entity.

Issuers are accounts owned by the identity collaborator. The engine only
keeps the part it needs for quota gating.
"""

from pydantic import Field

from nexus.domain.model.common import DomainModel
from nexus.domain.value import IssuerId, IssuerRole


class Issuer(DomainModel):
    """Quota ledger record for one issuer.

    ``invites_available`` only gates ordinary issuers. ``version`` is bumped
    on every quota write and used for optimistic conflict detection.
    """

    id: IssuerId
    role: IssuerRole = IssuerRole.ORDINARY
    invites_available: int = 0
    version: int = Field(default=0, ge=0)

    @property
    def is_privileged(self) -> bool:
        return self.role == IssuerRole.PRIVILEGED
