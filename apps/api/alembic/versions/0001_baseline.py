"""Baseline migration - accounts, forms, subscribers and activities.

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "0001_baseline"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    # ==========================================================================
    # Accounts
    # ==========================================================================
    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(100), nullable=False, unique=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("company_name", sa.String(255), nullable=True),
        sa.Column("token_version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # ==========================================================================
    # Forms
    # ==========================================================================
    op.create_table(
        "forms",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("owner_id", sa.Integer(), sa.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("collect_name", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("collect_email", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("social_sharing", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("confirmation_email", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("custom_css", sa.Text(), nullable=True),
        sa.Column("redirect_url", sa.String(2048), nullable=True),
        sa.Column("settings", JSONType, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_forms_owner", "forms", ["owner_id"])

    # ==========================================================================
    # Subscribers (no uniqueness on form_id + email)
    # ==========================================================================
    op.create_table(
        "subscribers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("form_id", sa.Integer(), sa.ForeignKey("forms.id", ondelete="CASCADE"), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("referrer", sa.String(2048), nullable=True),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("metadata", JSONType, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_subscribers_form_created", "subscribers", ["form_id", "created_at"])

    # ==========================================================================
    # Activities
    # ==========================================================================
    op.create_table(
        "activities",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("account_id", sa.Integer(), sa.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("form_id", sa.Integer(), sa.ForeignKey("forms.id", ondelete="SET NULL"), nullable=True),
        sa.Column("subscriber_id", sa.Integer(), sa.ForeignKey("subscribers.id", ondelete="SET NULL"), nullable=True),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("data", JSONType, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_activities_account_created", "activities", ["account_id", "created_at"])


def downgrade() -> None:
    op.drop_index("idx_activities_account_created", table_name="activities")
    op.drop_table("activities")
    op.drop_index("idx_subscribers_form_created", table_name="subscribers")
    op.drop_table("subscribers")
    op.drop_index("idx_forms_owner", table_name="forms")
    op.drop_table("forms")
    op.drop_table("accounts")
