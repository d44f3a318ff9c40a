from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field


class TransactionRecord(BaseModel):
    id: int
    item_name: str
    amount: float = Field(..., gt=0)
    category: str
    tx_date: date
    tx_type: Literal["expense", "income"] = "expense"


class BudgetPeriodRecord(BaseModel):
    id: int
    monthly_budget: float
    start_date: date
    end_date: date

    @property
    def total_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def days_left(self, today: date) -> int:
        """Days remaining in the period, counting today."""
        if today > self.end_date:
            return 0
        if today < self.start_date:
            return self.total_days
        return (self.end_date - today).days + 1


class UserRecord(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
