"""Invite use cases."""

from nexus.application.usecase.invite.check_invite import (
    CheckInviteRequest,
    CheckInviteResponse,
    CheckInviteUseCase,
)
from nexus.application.usecase.invite.issue_invite import (
    IssueInviteRequest,
    IssueInviteResponse,
    IssueInviteUseCase,
)
from nexus.application.usecase.invite.list_invites import (
    InviteItem,
    ListInvitesRequest,
    ListInvitesResponse,
    ListInvitesUseCase,
)
from nexus.application.usecase.invite.redeem_invite import (
    RedeemInviteRequest,
    RedeemInviteResponse,
    RedeemInviteUseCase,
)

__all__ = [
    "CheckInviteRequest",
    "CheckInviteResponse",
    "CheckInviteUseCase",
    "InviteItem",
    "IssueInviteRequest",
    "IssueInviteResponse",
    "IssueInviteUseCase",
    "ListInvitesRequest",
    "ListInvitesResponse",
    "ListInvitesUseCase",
    "RedeemInviteRequest",
    "RedeemInviteResponse",
    "RedeemInviteUseCase",
]
