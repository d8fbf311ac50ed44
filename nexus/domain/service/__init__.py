"""Domain services."""

from .base import Service
from .change_feed import InviteChangeFeed, InviteHistory, Subscription
from .code_generator import InviteCodeGenerator, generate_invite_code
from .invite_service import InviteService
from .quota_ledger import QuotaLedger

__all__ = [
    "InviteChangeFeed",
    "InviteCodeGenerator",
    "InviteHistory",
    "InviteService",
    "QuotaLedger",
    "Service",
    "Subscription",
    "generate_invite_code",
]
