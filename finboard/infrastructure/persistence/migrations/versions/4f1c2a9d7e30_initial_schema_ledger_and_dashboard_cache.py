"""initial_schema_ledger_and_dashboard_cache

Revision ID: 4f1c2a9d7e30
Revises:
Create Date: 2026-10-18 09:12:44.201337

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "4f1c2a9d7e30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

currency_enum = postgresql.ENUM("USD", "EUR", "ILS", name="currency", create_type=False)
transaction_type_enum = postgresql.ENUM(
    "INCOME", "EXPENSE", name="transaction_type", create_type=False
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema - ledger tables and dashboard_cache."""
    bind = op.get_bind()
    currency_enum.create(bind, checkfirst=True)
    transaction_type_enum.create(bind, checkfirst=True)

    op.create_table(
        "account",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("currency", currency_enum, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_account_user_id", "account", ["user_id"])

    op.create_table(
        "category",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("type", transaction_type_enum, nullable=False),
        sa.Column("color", sa.String(length=16), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "name", "type", name="uq_category_user_name_type"),
    )
    op.create_index("ix_category_user_id", "category", ["user_id"])

    op.create_table(
        "transaction",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "account_id",
            sa.String(),
            sa.ForeignKey("account.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "category_id",
            sa.String(),
            sa.ForeignKey("category.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("type", transaction_type_enum, nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", currency_enum, nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("month", sa.Date(), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_transaction_account_month", "transaction", ["account_id", "month"])
    op.create_index("ix_transaction_deleted_at", "transaction", ["deleted_at"])

    op.create_table(
        "budget",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "account_id",
            sa.String(),
            sa.ForeignKey("account.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "category_id",
            sa.String(),
            sa.ForeignKey("category.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("month", sa.Date(), nullable=False),
        sa.Column("planned", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", currency_enum, nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            "account_id", "category_id", "month", name="uq_budget_account_category_month"
        ),
    )

    # Disposable rows; no FK to account so deleting an account never blocks on cache.
    op.create_table(
        "dashboard_cache",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("cache_key", sa.String(), nullable=False, unique=True),
        sa.Column("data", sa.Text(), nullable=False),
        sa.Column("month_key", sa.String(length=7), nullable=False),
        sa.Column("account_id", sa.String(), nullable=True),
        sa.Column("preferred_currency", sa.String(length=3), nullable=True),
        sa.Column("fetched_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_dashboard_cache_month_key", "dashboard_cache", ["month_key"])
    op.create_index("ix_dashboard_cache_account_id", "dashboard_cache", ["account_id"])


def downgrade() -> None:
    """Downgrade schema - drop all tables and enum types."""
    op.drop_index("ix_dashboard_cache_account_id", "dashboard_cache")
    op.drop_index("ix_dashboard_cache_month_key", "dashboard_cache")
    op.drop_table("dashboard_cache")
    op.drop_table("budget")
    op.drop_index("ix_transaction_deleted_at", "transaction")
    op.drop_index("ix_transaction_account_month", "transaction")
    op.drop_table("transaction")
    op.drop_index("ix_category_user_id", "category")
    op.drop_table("category")
    op.drop_index("ix_account_user_id", "account")
    op.drop_table("account")

    bind = op.get_bind()
    transaction_type_enum.drop(bind, checkfirst=True)
    currency_enum.drop(bind, checkfirst=True)
