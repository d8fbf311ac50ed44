"""Invite code generation."""

import secrets
import string

from nexus.domain.value import InviteCode

# Codes are case-insensitive, so only one case is drawn
CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_invite_code(prefix: str = "NEXUS-", length: int = 6) -> InviteCode:
    """Generate a short human-typeable code from a CSPRNG.

    Uniqueness is not guaranteed here; the store rejects duplicates and the
    issuance transaction retries with a fresh code.
    """
    suffix = "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))
    return InviteCode(root=f"{prefix}{suffix}")


class InviteCodeGenerator:
    """Callable producing candidate codes with a fixed prefix and length."""

    def __init__(self, prefix: str = "NEXUS-", length: int = 6) -> None:
        self.prefix = prefix
        self.length = length

    def __call__(self) -> InviteCode:
        return generate_invite_code(self.prefix, self.length)
