"""Committed state shared by in-memory units of work."""

from nexus.domain.model import Invite, Issuer
from nexus.domain.value import IssuerId


class InMemoryInviteStore:
    """Committed invites and issuers.

    Only InMemoryUnitOfWork.commit writes here, and it never awaits while
    doing so, which makes each commit atomic on the event loop.
    """

    def __init__(self) -> None:
        self.invites: dict[str, Invite] = {}
        self.issuers: dict[IssuerId, Issuer] = {}
