"""SQLAlchemy table definitions for the invite engine.

These table definitions match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Enum,
    Index,
    Integer,
    MetaData,
    String,
    Table,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# ISSUERS TABLE (quota ledger)
# ============================================================================
issuers_table = Table(
    "issuers",
    metadata,
    Column("id", String(255), primary_key=True),  # Opaque ID from identity provider
    Column(
        "role",
        Enum("ordinary", "privileged", name="issuer_role", create_type=False),
        nullable=False,
        server_default="ordinary",
    ),
    Column("invites_available", Integer, nullable=False, server_default="0"),
    Column("version", Integer, nullable=False, server_default="0"),
    CheckConstraint(
        "role = 'privileged' OR invites_available >= 0",
        name="ordinary_quota_non_negative",
    ),
)

# ============================================================================
# INVITES TABLE
# ============================================================================
invites_table = Table(
    "invites",
    metadata,
    Column("code", String(64), primary_key=True),
    Column("issuer_id", String(255), nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column("redeemed_by", String(255), nullable=True),
    Column("redeemed_at", TIMESTAMP(timezone=True), nullable=True),
    CheckConstraint(
        "(redeemed_by IS NULL) = (redeemed_at IS NULL)",
        name="redemption_fields_together",
    ),
)

# History listing - newest first per issuer
Index(
    "idx_invites_issuer_created_at",
    invites_table.c.issuer_id,
    invites_table.c.created_at.desc(),
)
