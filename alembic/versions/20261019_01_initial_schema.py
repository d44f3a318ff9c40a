"""Initial schema for budget tracker bot"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "20261019_01"
down_revision = None
branch_labels = None
depends_on = None


transaction_type = sa.Enum("expense", "income", name="transaction_type")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(), onupdate=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("item_name", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column("tx_date", sa.Date(), nullable=False),
        sa.Column("tx_type", transaction_type, nullable=False, server_default="expense"),
        sa.Column("source", sa.String(length=32), nullable=True, server_default="whatsapp"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(), onupdate=sa.func.now()),
        sa.CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
    )
    op.create_index("ix_transactions_user_id", "transactions", ["user_id"])
    op.create_index("ix_transactions_tx_date", "transactions", ["tx_date"])
    op.create_index("ix_transactions_user_txdate", "transactions", ["user_id", "tx_date"])

    op.create_table(
        "budget_periods",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("monthly_budget", sa.Numeric(18, 2), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(), onupdate=sa.func.now()),
        sa.CheckConstraint("end_date >= start_date", name="ck_budget_periods_range"),
    )
    op.create_index("ix_budget_periods_user_id", "budget_periods", ["user_id"])
    op.create_index("ix_budget_periods_user_active", "budget_periods", ["user_id", "is_active"])


def downgrade() -> None:
    op.drop_index("ix_budget_periods_user_active", table_name="budget_periods")
    op.drop_index("ix_budget_periods_user_id", table_name="budget_periods")
    op.drop_table("budget_periods")

    op.drop_index("ix_transactions_user_txdate", table_name="transactions")
    op.drop_index("ix_transactions_tx_date", table_name="transactions")
    op.drop_index("ix_transactions_user_id", table_name="transactions")
    op.drop_table("transactions")
    transaction_type.drop(op.get_bind(), checkfirst=False)

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
