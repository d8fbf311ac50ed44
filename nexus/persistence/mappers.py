"""Mappers for converting between database rows and domain models.

Domain models are immutable Pydantic models, so rows are mapped by hand
instead of through SQLAlchemy's ORM.
"""

from typing import Any, Dict

from nexus.domain.model import Invite, Issuer
from nexus.domain.value import AccountId, InviteCode, IssuerId, IssuerRole


def row_to_issuer(row: Dict[str, Any]) -> Issuer:
    """Convert database row to Issuer domain model.

    Args:
        row: Database row as dict

    Returns:
        Issuer domain model
    """
    return Issuer(
        id=IssuerId(row["id"]),
        role=IssuerRole(row["role"]),
        invites_available=row["invites_available"],
        version=row["version"],
    )


def issuer_to_dict(issuer: Issuer) -> Dict[str, Any]:
    """Convert Issuer domain model to database dict.

    Args:
        issuer: Issuer domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return issuer.model_dump(mode="json")


def row_to_invite(row: Dict[str, Any]) -> Invite:
    """Convert database row to Invite domain model.

    Args:
        row: Database row as dict

    Returns:
        Invite domain model
    """
    return Invite(
        code=InviteCode(root=row["code"]),
        issuer_id=IssuerId(row["issuer_id"]),
        created_at=row["created_at"],
        expires_at=row["expires_at"],
        redeemed_by=AccountId(row["redeemed_by"]) if row.get("redeemed_by") else None,
        redeemed_at=row.get("redeemed_at"),
    )


def invite_to_dict(invite: Invite) -> Dict[str, Any]:
    """Convert Invite domain model to database dict.

    Args:
        invite: Invite domain model

    Returns:
        Dict suitable for database insertion/update
    """
    # state is derived from the redemption fields and has no column
    return invite.model_dump(exclude={"state"})
