"""initial_schema

Create the invite engine schema:
- Issuers (quota ledger with optimistic version counter)
- Invites (single-use codes, history kept forever)

Revision ID: 3c41e0b7d9a2
Revises:
Create Date: 2026-10-18 09:12:44.381205

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c41e0b7d9a2"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Create ENUM types (idempotent)
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE issuer_role AS ENUM ('ordinary', 'privileged');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    # ========================================================================
    # ISSUERS table (quota ledger)
    # ========================================================================
    op.create_table(
        "issuers",
        sa.Column("id", sa.String(255), nullable=False),
        sa.Column(
            "role",
            postgresql.ENUM(
                "ordinary", "privileged", name="issuer_role", create_type=False
            ),
            nullable=False,
            server_default="ordinary",
        ),
        sa.Column(
            "invites_available", sa.Integer(), nullable=False, server_default="0"
        ),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.CheckConstraint(
            "role = 'privileged' OR invites_available >= 0",
            name="ordinary_quota_non_negative",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # ========================================================================
    # INVITES table
    # ========================================================================
    op.create_table(
        "invites",
        sa.Column("code", sa.String(64), nullable=False),
        sa.Column("issuer_id", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("redeemed_by", sa.String(255), nullable=True),
        sa.Column("redeemed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.CheckConstraint(
            "(redeemed_by IS NULL) = (redeemed_at IS NULL)",
            name="redemption_fields_together",
        ),
        # Codes are unique forever, including used ones
        sa.PrimaryKeyConstraint("code"),
    )

    # History listing - newest first per issuer
    op.execute("""
        CREATE INDEX idx_invites_issuer_created_at
        ON invites (issuer_id, created_at DESC)
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_invites_issuer_created_at", table_name="invites")
    op.drop_table("invites")
    op.drop_table("issuers")
    op.execute("DROP TYPE IF EXISTS issuer_role")
