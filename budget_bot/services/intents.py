"""Closed set of intents the command classifier can produce."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Union


@dataclass(frozen=True)
class AddTransaction:
    item: str
    amount: float
    category: str
    date: date


@dataclass(frozen=True)
class AddMultiTransaction:
    items: tuple[AddTransaction, ...]

    @property
    def total(self) -> float:
        return sum(item.amount for item in self.items)


@dataclass(frozen=True)
class QueryRemainingBudget:
    pass


@dataclass(frozen=True)
class QuerySpending:
    pass


@dataclass(frozen=True)
class QueryToday:
    pass


@dataclass(frozen=True)
class QueryWeekly:
    pass


@dataclass(frozen=True)
class Undo:
    pass


@dataclass(frozen=True)
class DeleteTransaction:
    index: int


@dataclass(frozen=True)
class ShowCategories:
    pass


@dataclass(frozen=True)
class ListReminders:
    pass


@dataclass(frozen=True)
class AddReminder:
    name: str
    day: int


@dataclass(frozen=True)
class DeleteReminder:
    index: int


@dataclass(frozen=True)
class MonthlyComparison:
    pass


@dataclass(frozen=True)
class SpendingPrediction:
    pass


@dataclass(frozen=True)
class FullRecap:
    pass


@dataclass(frozen=True)
class DailyChallenge:
    pass


@dataclass(frozen=True)
class BudgetHealth:
    pass


@dataclass(frozen=True)
class SpendingMood:
    pass


@dataclass(frozen=True)
class RandomTip:
    pass


@dataclass(frozen=True)
class ToggleAlert:
    enabled: bool


@dataclass(frozen=True)
class Help:
    pass


@dataclass(frozen=True)
class Unknown:
    text: str = ""


Intent = Union[
    AddTransaction,
    AddMultiTransaction,
    QueryRemainingBudget,
    QuerySpending,
    QueryToday,
    QueryWeekly,
    Undo,
    DeleteTransaction,
    ShowCategories,
    ListReminders,
    AddReminder,
    DeleteReminder,
    MonthlyComparison,
    SpendingPrediction,
    FullRecap,
    DailyChallenge,
    BudgetHealth,
    SpendingMood,
    RandomTip,
    ToggleAlert,
    Help,
    Unknown,
]
