"""Rule-based command classifier.

Rules are checked top to bottom and the first one returning an intent wins.
Query keywords come before transaction parsing so "sisa budget?" is never
read as an expense.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date

from budget_bot.services import intents
from budget_bot.services.parsing import (
    classify_category,
    derive_item_label,
    extract_amount,
    extract_category_tag,
)

Rule = Callable[[str, str, date], "intents.Intent | None"]

_REMAINING_KEYWORDS = ("sisa", "budget")
_RECORD_KEYWORDS = ("catat", "tambah")
_SPENDING_KEYWORDS = ("total", "pengeluaran")
_TODAY_COMMANDS = {"!hari", "!today"}
_CATEGORY_COMMANDS = {"!kategori", "!cat"}
_HELP_COMMANDS = {"!help", "help"}

_EXACT_COMMANDS: dict[str, intents.Intent] = {
    "!undo": intents.Undo(),
    "!batal": intents.Undo(),
    "!minggu": intents.QueryWeekly(),
    "!mingguan": intents.QueryWeekly(),
    "!week": intents.QueryWeekly(),
    "!pengingat": intents.ListReminders(),
    "!reminder": intents.ListReminders(),
    "!banding": intents.MonthlyComparison(),
    "!compare": intents.MonthlyComparison(),
    "!prediksi": intents.SpendingPrediction(),
    "!predict": intents.SpendingPrediction(),
    "!rekap": intents.FullRecap(),
    "!recap": intents.FullRecap(),
    "!tantangan": intents.DailyChallenge(),
    "!challenge": intents.DailyChallenge(),
    "!sehat": intents.BudgetHealth(),
    "!health": intents.BudgetHealth(),
    "!mood": intents.SpendingMood(),
    "!tips": intents.RandomTip(),
    "!tip": intents.RandomTip(),
}

_DELETE_TX_PATTERN = re.compile(r"^!(?:hapus|delete)\s+(\d+)$")
_DELETE_REMINDER_PATTERN = re.compile(r"^!hapusingat\s+(\d+)$")
_ADD_REMINDER_PATTERN = re.compile(r"^!ingat\s+(.+)$", re.IGNORECASE)
_ALERT_PATTERN = re.compile(r"^!alert\s+(on|off|nyala|mati)$")
# A comma between two digits is a decimal separator ("2,5k"), not a list split.
_ITEM_SEPARATOR_PATTERN = re.compile(r"(?<!\d),|,(?!\d)")

# Markers whose malformed use deserves a usage hint instead of silence.
USAGE_HINTS = {
    "!hapusingat": "❌ Format: !hapusingat <nomor>\n\nContoh: !hapusingat 1",
    "!ingat": "❌ Format: !ingat <nama> <tanggal 1-31>\n\nContoh: !ingat Bayar listrik 5",
    "!hapus": "❌ Format: !hapus <nomor>\n\nLihat nomornya dengan !hari",
    "!delete": "❌ Format: !delete <nomor>\n\nLihat nomornya dengan !hari",
    "!alert": "❌ Format: !alert on atau !alert off",
}

MAX_REMINDER_DAY = 31


def classify(text: str | None, today: date | None = None) -> intents.Intent:
    raw = (text or "").strip()
    lowered = raw.lower()
    day = today or date.today()
    for rule in RULES:
        intent = rule(raw, lowered, day)
        if intent is not None:
            return intent
    return intents.Unknown(text=raw)


def usage_hint(text: str | None) -> str | None:
    """Return the usage hint for a malformed management command, if any."""
    lowered = (text or "").strip().lower()
    if not lowered.startswith("!"):
        return None
    marker = lowered.split()[0]
    return USAGE_HINTS.get(marker)


def _match_remaining(raw: str, lowered: str, today: date) -> intents.Intent | None:
    if any(keyword in lowered for keyword in _REMAINING_KEYWORDS) and not any(
        keyword in lowered for keyword in _RECORD_KEYWORDS
    ):
        return intents.QueryRemainingBudget()
    return None


def _match_spending(raw: str, lowered: str, today: date) -> intents.Intent | None:
    if any(keyword in lowered for keyword in _SPENDING_KEYWORDS):
        return intents.QuerySpending()
    return None


def _match_today(raw: str, lowered: str, today: date) -> intents.Intent | None:
    if lowered in _TODAY_COMMANDS or "hari ini" in lowered:
        return intents.QueryToday()
    return None


def _match_categories(raw: str, lowered: str, today: date) -> intents.Intent | None:
    if lowered in _CATEGORY_COMMANDS:
        return intents.ShowCategories()
    return None


def _match_help(raw: str, lowered: str, today: date) -> intents.Intent | None:
    if lowered in _HELP_COMMANDS:
        return intents.Help()
    return None


def _match_management(raw: str, lowered: str, today: date) -> intents.Intent | None:
    if not lowered.startswith("!"):
        return None

    exact = _EXACT_COMMANDS.get(lowered)
    if exact is not None:
        return exact

    match = _DELETE_TX_PATTERN.match(lowered)
    if match:
        return intents.DeleteTransaction(index=int(match.group(1)))

    match = _DELETE_REMINDER_PATTERN.match(lowered)
    if match:
        return intents.DeleteReminder(index=int(match.group(1)))

    match = _ALERT_PATTERN.match(lowered)
    if match:
        return intents.ToggleAlert(enabled=match.group(1) in {"on", "nyala"})

    match = _ADD_REMINDER_PATTERN.match(raw)
    if match:
        return _parse_reminder(match.group(1))

    return None


def _parse_reminder(argument: str) -> intents.AddReminder | None:
    parts = argument.rsplit(None, 1)
    if len(parts) != 2:
        return None
    name, day_token = parts[0].strip(), parts[1]
    try:
        day = int(day_token)
    except ValueError:
        return None
    if not name or not 1 <= day <= MAX_REMINDER_DAY:
        return None
    return intents.AddReminder(name=name, day=day)


def _match_multi(raw: str, lowered: str, today: date) -> intents.Intent | None:
    if "," not in raw:
        return None
    parsed = []
    for segment in _ITEM_SEPARATOR_PATTERN.split(raw):
        segment = segment.strip()
        if not segment:
            continue
        transaction = parse_transaction(segment, today)
        if transaction is not None:
            parsed.append(transaction)
    if len(parsed) < 2:
        return None
    return intents.AddMultiTransaction(items=tuple(parsed))


def _match_single(raw: str, lowered: str, today: date) -> intents.Intent | None:
    return parse_transaction(raw, today)


def parse_transaction(text: str, today: date) -> intents.AddTransaction | None:
    amount = extract_amount(text)
    if amount is None:
        return None
    # The tag must be read before the label is stripped of digits.
    category = classify_category(text, extract_category_tag(text))
    return intents.AddTransaction(
        item=derive_item_label(text),
        amount=amount,
        category=category,
        date=today,
    )


RULES: list[Rule] = [
    _match_remaining,
    _match_spending,
    _match_today,
    _match_categories,
    _match_help,
    _match_management,
    _match_multi,
    _match_single,
]
