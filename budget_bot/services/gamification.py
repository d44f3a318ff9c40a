"""Pure scoring helpers: XP, levels, daily challenge, budget health and mood."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

MIN_XP_PER_TRANSACTION = 5
XP_AMOUNT_UNIT = 1000

LEVELS = [
    (0, "Pemula Hemat"),
    (100, "Pencatat Rajin"),
    (300, "Pengatur Cerdas"),
    (600, "Ahli Anggaran"),
    (1000, "Master Keuangan"),
    (2000, "Legenda Finansial"),
]

CHALLENGES = [
    "Bawa bekal dari rumah, jangan jajan makan siang hari ini 🍱",
    "Tidak beli kopi kekinian hari ini ☕",
    "Catat semua pengeluaran sekecil apa pun hari ini 📝",
    "Jalan kaki atau naik transportasi umum, skip ojol 🚶",
    "Tidak checkout belanja online hari ini 🛒",
    "Masak sendiri untuk makan malam 🍳",
    "Sisihkan Rp10.000 ke tabungan hari ini 💰",
    "Cek ulang langganan yang jarang dipakai dan pertimbangkan berhenti 📺",
    "Habiskan kurang dari Rp50.000 seharian ini 🎯",
    "Minum air putih saja, tanpa minuman manis berbayar 💧",
]

_HEALTH_BREAKPOINTS = [
    (0.5, "A", "Sangat sehat"),
    (0.8, "B", "Sehat"),
    (1.0, "C", "Cukup"),
    (1.3, "D", "Waspada"),
]
_HEALTH_FALLBACK = ("F", "Bahaya")

_MOOD_BREAKPOINTS = [
    (0.5, "Sangat Hemat", "😇"),
    (0.8, "Hemat", "😊"),
    (1.2, "Normal", "🙂"),
    (1.5, "Boros", "😬"),
]
_MOOD_FALLBACK = ("Sangat Boros", "🤯")


@dataclass(frozen=True)
class LevelInfo:
    level: int
    name: str
    xp: int
    current_threshold: int
    next_threshold: int | None

    @property
    def xp_to_next(self) -> int | None:
        if self.next_threshold is None:
            return None
        return self.next_threshold - self.xp


@dataclass(frozen=True)
class HealthGrade:
    grade: str
    ratio: float
    label: str


@dataclass(frozen=True)
class Mood:
    label: str
    emoji: str
    ratio: float


def xp_for_amount(amount: float) -> int:
    return max(MIN_XP_PER_TRANSACTION, math.floor(amount / XP_AMOUNT_UNIT))


def total_xp(amounts: Iterable[float]) -> int:
    return sum(xp_for_amount(amount) for amount in amounts)


def level_for_xp(xp: int) -> LevelInfo:
    index = 0
    for position, (threshold, _) in enumerate(LEVELS):
        if xp >= threshold:
            index = position
    threshold, name = LEVELS[index]
    next_threshold = LEVELS[index + 1][0] if index + 1 < len(LEVELS) else None
    return LevelInfo(
        level=index + 1,
        name=name,
        xp=xp,
        current_threshold=threshold,
        next_threshold=next_threshold,
    )


def daily_challenge(day: date) -> str:
    """Pick the challenge for ``day``.

    Deterministic on purpose: the date read as YYYYMMDD modulo the number of
    challenges, so every user sees the same challenge all day without storing it.
    """
    return CHALLENGES[int(day.strftime("%Y%m%d")) % len(CHALLENGES)]


def budget_health(spent: float, budget: float, days_left: int, total_days: int) -> HealthGrade:
    """Grade spending pace against the share of the period already used.

    ratio = (spent / budget * 100) / (100 - pct_time_left + 1)

    The time-left percentage is clamped to [0, 100] so the denominator stays
    within [1, 101]. Early in a period the denominator is small and even
    modest spending grades poorly.
    """
    if budget <= 0:
        raise ValueError("budget must be positive")
    if total_days <= 0:
        raise ValueError("total_days must be positive")

    pct_spent = spent / budget * 100
    pct_time_left = min(max(days_left / total_days * 100, 0.0), 100.0)
    ratio = pct_spent / (100 - pct_time_left + 1)

    for limit, grade, label in _HEALTH_BREAKPOINTS:
        if ratio < limit:
            return HealthGrade(grade=grade, ratio=ratio, label=label)
    grade, label = _HEALTH_FALLBACK
    return HealthGrade(grade=grade, ratio=ratio, label=label)


def spending_mood(today_spent: float, average_daily: float) -> Mood:
    if average_daily <= 0:
        # No baseline yet: nothing spent is frugal, anything else is normal.
        ratio = 0.0 if today_spent <= 0 else 1.0
    else:
        ratio = today_spent / average_daily

    for limit, label, emoji in _MOOD_BREAKPOINTS:
        if ratio < limit:
            return Mood(label=label, emoji=emoji, ratio=ratio)
    label, emoji = _MOOD_FALLBACK
    return Mood(label=label, emoji=emoji, ratio=ratio)
