from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from budget_bot.db.base import Base


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    name: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(32))

    transactions: Mapped[list["Transaction"]] = relationship(back_populates="user")
    budget_periods: Mapped[list["BudgetPeriod"]] = relationship(back_populates="user")


class Transaction(Base, TimestampMixin):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    item_name: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[float] = mapped_column(Numeric(18, 2), nullable=False)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    tx_date: Mapped[date] = mapped_column(Date, index=True)
    tx_type: Mapped[str] = mapped_column(
        Enum("expense", "income", name="transaction_type"), default="expense", nullable=False
    )
    source: Mapped[str | None] = mapped_column(String(32), default="whatsapp")

    user: Mapped[User] = relationship(back_populates="transactions")

    __table_args__ = (
        Index("ix_transactions_user_txdate", "user_id", "tx_date"),
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
    )


class BudgetPeriod(Base, TimestampMixin):
    __tablename__ = "budget_periods"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    monthly_budget: Mapped[float] = mapped_column(Numeric(18, 2), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    user: Mapped[User] = relationship(back_populates="budget_periods")

    __table_args__ = (
        Index("ix_budget_periods_user_active", "user_id", "is_active"),
        CheckConstraint("end_date >= start_date", name="ck_budget_periods_range"),
    )
