"""Per-session routines fired by the external scheduler.

Each job walks a snapshot of the logged-in sessions. A failure for one
sender is logged and counted, and the loop moves on to the next one.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import date
from typing import Protocol

from loguru import logger

from budget_bot.schemas.jobs import JobName, JobResult
from budget_bot.services.formatting import format_currency
from budget_bot.services.gamification import daily_challenge
from budget_bot.services.repository import BudgetRepository
from budget_bot.services.sessions import ChatSession, SessionManager
from budget_bot.services.wa import budget_alert_message, compute_mood, get_budget_status


class Gateway(Protocol):
    async def send_text(self, phone: str, text: str) -> None: ...


# Returns the message to send, or None to skip this session.
JobRoutine = Callable[[BudgetRepository, ChatSession, date], Awaitable["str | None"]]


async def _morning_message(repo: BudgetRepository, chat: ChatSession, today: date) -> str | None:
    return (
        f"🌅 Selamat pagi, {chat.display_name}!\n\n"
        f"🎯 Tantangan hari ini:\n{daily_challenge(today)}\n\n"
        "Jangan lupa catat setiap pengeluaran ya."
    )


async def _budget_check_message(repo: BudgetRepository, chat: ChatSession, today: date) -> str | None:
    if not chat.alert_enabled:
        return None
    status = await get_budget_status(repo, chat.user_id)
    return budget_alert_message(status)


async def _reminder_message(repo: BudgetRepository, chat: ChatSession, today: date) -> str | None:
    due = [reminder for reminder in chat.reminders if reminder.day == today.day]
    if not due:
        return None
    lines = ["⏰ *Pengingat Hari Ini*", ""]
    lines.extend(f"• {reminder.name}" for reminder in due)
    return "\n".join(lines)


async def _evening_message(repo: BudgetRepository, chat: ChatSession, today: date) -> str | None:
    txs = await repo.list_today(chat.user_id, today)
    if txs:
        return None
    return (
        f"🌇 Hai {chat.display_name}, belum ada transaksi tercatat hari ini.\n"
        'Ada pengeluaran? Kirim saja, misalnya "Makan malam 30k".'
    )


async def _night_message(repo: BudgetRepository, chat: ChatSession, today: date) -> str | None:
    today_spent, average, mood = await compute_mood(repo, chat.user_id, today)
    return (
        "🌙 *Ringkasan Hari Ini*\n\n"
        f"Total: {format_currency(today_spent)}\n"
        f"Rata-rata 7 hari: {format_currency(average)}\n"
        f"Mood belanja: {mood.emoji} {mood.label}"
    )


JOBS: dict[str, JobRoutine] = {
    "morning": _morning_message,
    "budget_check": _budget_check_message,
    "reminders": _reminder_message,
    "evening": _evening_message,
    "night": _night_message,
}


async def run_job(
    job: JobName,
    repo: BudgetRepository,
    sessions: SessionManager,
    gateway: Gateway,
    today: date,
) -> JobResult:
    routine = JOBS[job]
    snapshot = sessions.items()
    result = JobResult(job=job, sessions=len(snapshot))

    for phone, chat in snapshot:
        try:
            message = await routine(repo, chat, today)
            if message is None:
                result.skipped += 1
                continue
            await gateway.send_text(phone, message)
            result.sent += 1
        except Exception as exc:
            result.failed += 1
            logger.exception("Scheduled job failed for session", job=job, phone=phone, error=str(exc))
            try:
                await repo.rollback()
            except Exception:
                logger.exception("Rollback failed", job=job, phone=phone)

    logger.info(
        "Scheduled job finished",
        job=job,
        sessions=result.sessions,
        sent=result.sent,
        skipped=result.skipped,
        failed=result.failed,
    )
    return result
