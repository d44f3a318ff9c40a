from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from budget_bot.db import models
from budget_bot.schemas.transactions import BudgetPeriodRecord, TransactionRecord, UserRecord


class BudgetRepository:
    """Logical queries the bot needs from the database.

    Every method only flushes; the caller decides when to commit or roll back
    so a failed reply never leaves half-written rows behind.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_user_by_email(self, email: str) -> UserRecord | None:
        stmt = select(models.User).where(func.lower(models.User.email) == email.strip().lower())
        user = await self.session.scalar(stmt)
        if user is None:
            return None
        return UserRecord(id=user.id, email=user.email, name=user.name)

    async def insert_transaction(
        self,
        user_id: int,
        *,
        item_name: str,
        amount: float,
        category: str,
        tx_date: date,
    ) -> TransactionRecord:
        tx = models.Transaction(
            user_id=user_id,
            item_name=item_name,
            amount=Decimal(str(amount)),
            category=category,
            tx_date=tx_date,
            tx_type="expense",
            source="whatsapp",
        )
        self.session.add(tx)
        await self.session.flush()
        return _transaction_to_record(tx)

    async def delete_transaction(self, user_id: int, tx_id: int) -> bool:
        stmt = delete(models.Transaction).where(
            models.Transaction.id == tx_id,
            models.Transaction.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return (result.rowcount or 0) > 0

    async def sum_expenses(self, user_id: int, start: date, end: date) -> float:
        stmt = select(func.coalesce(func.sum(models.Transaction.amount), 0)).where(
            models.Transaction.user_id == user_id,
            models.Transaction.tx_type == "expense",
            models.Transaction.tx_date >= start,
            models.Transaction.tx_date <= end,
        )
        total = (await self.session.execute(stmt)).scalar()
        return float(total or 0)

    async def list_transactions(self, user_id: int, start: date, end: date) -> list[TransactionRecord]:
        stmt = (
            select(models.Transaction)
            .where(
                models.Transaction.user_id == user_id,
                models.Transaction.tx_type == "expense",
                models.Transaction.tx_date >= start,
                models.Transaction.tx_date <= end,
            )
            .order_by(models.Transaction.tx_date.asc(), models.Transaction.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return [_transaction_to_record(tx) for tx in result.scalars().all()]

    async def list_today(self, user_id: int, day: date) -> list[TransactionRecord]:
        """Transactions of one day, most recent first (the order `!hapus <n>` refers to)."""
        stmt = (
            select(models.Transaction)
            .where(
                models.Transaction.user_id == user_id,
                models.Transaction.tx_type == "expense",
                models.Transaction.tx_date == day,
            )
            .order_by(models.Transaction.created_at.desc(), models.Transaction.id.desc())
        )
        result = await self.session.execute(stmt)
        return [_transaction_to_record(tx) for tx in result.scalars().all()]

    async def get_active_period(self, user_id: int) -> BudgetPeriodRecord | None:
        stmt = (
            select(models.BudgetPeriod)
            .where(
                models.BudgetPeriod.user_id == user_id,
                models.BudgetPeriod.is_active.is_(True),
            )
            .order_by(models.BudgetPeriod.start_date.desc())
            .limit(1)
        )
        period = await self.session.scalar(stmt)
        if period is None:
            return None
        return BudgetPeriodRecord(
            id=period.id,
            monthly_budget=float(period.monthly_budget or 0),
            start_date=period.start_date,
            end_date=period.end_date,
        )

    async def category_totals(self, user_id: int, start: date, end: date) -> dict[str, float]:
        stmt = (
            select(models.Transaction.category, func.sum(models.Transaction.amount))
            .where(
                models.Transaction.user_id == user_id,
                models.Transaction.tx_type == "expense",
                models.Transaction.tx_date >= start,
                models.Transaction.tx_date <= end,
            )
            .group_by(models.Transaction.category)
            .order_by(func.sum(models.Transaction.amount).desc())
        )
        result = await self.session.execute(stmt)
        return {name: float(total) for name, total in result.all() if total is not None}

    async def daily_totals(self, user_id: int, start: date, end: date) -> dict[date, float]:
        stmt = (
            select(models.Transaction.tx_date, func.sum(models.Transaction.amount))
            .where(
                models.Transaction.user_id == user_id,
                models.Transaction.tx_type == "expense",
                models.Transaction.tx_date >= start,
                models.Transaction.tx_date <= end,
            )
            .group_by(models.Transaction.tx_date)
            .order_by(models.Transaction.tx_date.asc())
        )
        result = await self.session.execute(stmt)
        return {day: float(total) for day, total in result.all() if total is not None}

    async def expense_amounts(self, user_id: int) -> list[float]:
        stmt = select(models.Transaction.amount).where(
            models.Transaction.user_id == user_id,
            models.Transaction.tx_type == "expense",
        )
        result = await self.session.execute(stmt)
        return [float(amount) for amount in result.scalars().all()]

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


def _transaction_to_record(tx: models.Transaction) -> TransactionRecord:
    return TransactionRecord(
        id=tx.id,
        item_name=tx.item_name,
        amount=float(tx.amount),
        category=tx.category,
        tx_date=tx.tx_date,
        tx_type=tx.tx_type,
    )
