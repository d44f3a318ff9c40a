from __future__ import annotations

import asyncio
import base64
import calendar
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any
from zoneinfo import ZoneInfo

from loguru import logger

from budget_bot.core.config import get_settings
from budget_bot.schemas.transactions import BudgetPeriodRecord
from budget_bot.schemas.wa import Attachment, IncomingMessage, WAResponse
from budget_bot.services import intents, reports
from budget_bot.services.commands import classify, usage_hint
from budget_bot.services.formatting import (
    GENERIC_ERROR_REPLY,
    HELP_MESSAGE,
    TIPS,
    build_progress_bar,
    format_category_list,
    format_currency,
    format_date,
    percent_change,
)
from budget_bot.services.gamification import (
    Mood,
    budget_health,
    daily_challenge,
    level_for_xp,
    spending_mood,
    total_xp,
    xp_for_amount,
)
from budget_bot.services.repository import BudgetRepository
from budget_bot.services.sessions import ChatSession, Reminder, SessionManager
from budget_bot.services.transport import is_group_sender, normalize_sender

settings = get_settings()

_TEXT_MESSAGE_TYPES = {"text", "chat"}
_MOOD_BASELINE_DAYS = 7
_TOP_CATEGORIES = 5
_DIVIDER = "━━━━━━━━━━━━━"


@dataclass
class HandlerResult:
    reply: str | None
    attachment: Attachment | None = None


@dataclass
class MessageContext:
    repo: BudgetRepository
    chat: ChatSession
    phone: str
    today: date


@dataclass
class BudgetStatus:
    period: BudgetPeriodRecord
    spent: float

    @property
    def budget(self) -> float:
        return self.period.monthly_budget

    @property
    def remaining(self) -> float:
        return self.budget - self.spent

    @property
    def used_ratio(self) -> float:
        if self.budget <= 0:
            return 0.0
        return self.spent / self.budget


async def handle_incoming_message(
    repo: BudgetRepository,
    sessions: SessionManager,
    payload: IncomingMessage,
) -> WAResponse:
    if payload.message_type not in _TEXT_MESSAGE_TYPES or is_group_sender(payload.from_number):
        return WAResponse(status="ignored")

    phone = normalize_sender(payload.from_number)
    allowed = settings.get_allowed_phones()
    if allowed and phone not in allowed:
        logger.info("Blocked sender outside whitelist", phone=phone)
        return WAResponse(status="ignored")

    text = (payload.text or "").strip()
    if not text:
        return WAResponse(status="ignored")

    logger.info("Processing incoming WA message", phone=phone, text=text)
    today = local_today(payload.timestamp)
    lowered = text.lower()

    if lowered == "!login" or lowered.startswith("!login "):
        async with sessions.lock(phone):
            return await _handle_login(repo, sessions, phone, text)
    if lowered == "!logout":
        return _handle_logout(sessions, phone)
    if lowered in {"!help", "help"}:
        return WAResponse(reply=HELP_MESSAGE)
    if phone not in sessions:
        return WAResponse(status="ignored")

    async with sessions.lock(phone):
        # Logged out while waiting for the lock.
        chat = sessions.get(phone)
        if chat is None:
            return WAResponse(status="ignored")

        intent = classify(text, today)
        logger.debug("Classified message", phone=phone, intent=type(intent).__name__)
        context = MessageContext(repo=repo, chat=chat, phone=phone, today=today)
        saved = chat.checkpoint()
        try:
            result = await dispatch_intent(context, intent)
            await repo.commit()
        except Exception as exc:
            logger.exception(
                "Failed processing incoming message",
                phone=phone,
                intent=type(intent).__name__,
                error=str(exc),
            )
            # The rows were rolled back, so the session must not point at them.
            chat.restore(saved)
            await _safe_rollback(repo)
            return WAResponse(status="error", reply=GENERIC_ERROR_REPLY)

    if result.reply is None:
        return WAResponse(status="ignored")
    return WAResponse(reply=result.reply, attachment=result.attachment)


async def dispatch_intent(context: MessageContext, intent: intents.Intent) -> HandlerResult:
    handler = _HANDLERS.get(type(intent))
    if handler is None:  # pragma: no cover - every Intent variant is registered
        raise TypeError(f"No handler registered for {type(intent).__name__}")
    return await handler(context, intent)


def local_today(timestamp: datetime | None = None) -> date:
    tz = ZoneInfo(settings.timezone)
    base = timestamp or datetime.now(timezone.utc)
    if base.tzinfo is None:
        base = base.replace(tzinfo=timezone.utc)
    return base.astimezone(tz).date()


def month_bounds(day: date) -> tuple[date, date]:
    last_day = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last_day)


async def get_budget_status(repo: BudgetRepository, user_id: int) -> BudgetStatus | None:
    period = await repo.get_active_period(user_id)
    if period is None:
        return None
    spent = await repo.sum_expenses(user_id, period.start_date, period.end_date)
    return BudgetStatus(period=period, spent=spent)


def budget_alert_message(status: BudgetStatus | None) -> str | None:
    if status is None or status.budget <= 0:
        return None
    used_pct = status.used_ratio * 100
    if status.used_ratio >= 1:
        return (
            f"🚨 *Budget habis!* Terpakai {used_pct:.0f}% "
            f"(lebih {format_currency(-status.remaining)})."
        )
    if status.used_ratio >= settings.budget_alert_threshold:
        return (
            f"⚠️ *Hati-hati!* Budget sudah terpakai {used_pct:.0f}%. "
            f"Sisa {format_currency(status.remaining)}."
        )
    return None


async def compute_mood(repo: BudgetRepository, user_id: int, day: date) -> tuple[float, float, Mood]:
    today_spent = await repo.sum_expenses(user_id, day, day)
    baseline_start = day - timedelta(days=_MOOD_BASELINE_DAYS)
    baseline_end = day - timedelta(days=1)
    baseline_total = await repo.sum_expenses(user_id, baseline_start, baseline_end)
    average = baseline_total / _MOOD_BASELINE_DAYS
    return today_spent, average, spending_mood(today_spent, average)


async def _safe_rollback(repo: BudgetRepository) -> None:
    try:
        await repo.rollback()
    except Exception:
        logger.exception("Rollback failed")


async def _handle_login(
    repo: BudgetRepository, sessions: SessionManager, phone: str, text: str
) -> WAResponse:
    email = text[len("!login"):].strip().lower()
    if not email or "@" not in email:
        return WAResponse(reply="❌ Format: !login <email>\n\nContoh: !login budi@gmail.com")

    try:
        user = await repo.find_user_by_email(email)
    except Exception as exc:
        logger.exception("User lookup failed", phone=phone, error=str(exc))
        await _safe_rollback(repo)
        return WAResponse(status="error", reply="❌ Gagal mengakses data user. Coba lagi nanti.")

    if user is None:
        return WAResponse(reply=f'❌ Email "{email}" tidak terdaftar.')

    display_name = user.name or user.email.split("@")[0]
    chat = ChatSession(user_id=user.id, email=user.email, display_name=display_name)
    previous = sessions.get(phone)
    if previous is not None and previous.user_id == user.id:
        chat.alert_enabled = previous.alert_enabled
        chat.reminders = previous.reminders
        chat.last_transaction_id = previous.last_transaction_id
    sessions.set(phone, chat)
    logger.info("Login", email=user.email, phone=phone)

    return WAResponse(
        reply=(
            "✅ *Login berhasil!*\n\n"
            f"Halo {display_name}! 👋\n\n"
            "Silakan kirim transaksi:\n"
            '• "Makan siang 25k"\n'
            '• "Isi bensin 50rb"\n'
            '• "Sisa budget?"\n\n'
            "Ketik `!help` untuk bantuan.\n"
            "Ketik `!logout` untuk keluar."
        )
    )


def _handle_logout(sessions: SessionManager, phone: str) -> WAResponse:
    chat = sessions.delete(phone)
    if chat is None:
        return WAResponse(reply="ℹ️ Kamu belum login.")
    logger.info("Logout", email=chat.email, phone=phone)
    return WAResponse(reply="👋 Logout berhasil! Sampai jumpa.")


async def _handle_add_transaction(
    context: MessageContext, intent: intents.AddTransaction
) -> HandlerResult:
    repo, chat = context.repo, context.chat
    record = await repo.insert_transaction(
        chat.user_id,
        item_name=intent.item,
        amount=intent.amount,
        category=intent.category,
        tx_date=intent.date,
    )
    chat.last_transaction_id = record.id
    logger.info(
        "Transaction recorded",
        phone=context.phone,
        item=intent.item,
        amount=intent.amount,
        category=intent.category,
    )

    lines = [
        "✅ *Tercatat!*",
        "",
        f"📝 {intent.item}",
        f"💰 {format_currency(intent.amount)}",
        f"🏷️ {intent.category}",
        f"📅 {format_date(intent.date)}",
        "",
        await _xp_line(repo, chat.user_id, xp_for_amount(intent.amount)),
    ]
    if chat.alert_enabled:
        alert = budget_alert_message(await get_budget_status(repo, chat.user_id))
        if alert:
            lines.extend(["", alert])
    return HandlerResult(reply="\n".join(lines))


async def _handle_add_multi(
    context: MessageContext, intent: intents.AddMultiTransaction
) -> HandlerResult:
    repo, chat = context.repo, context.chat
    lines = [f"✅ *{len(intent.items)} Transaksi Tercatat!*", ""]
    gained = 0
    for idx, item in enumerate(intent.items, start=1):
        record = await repo.insert_transaction(
            chat.user_id,
            item_name=item.item,
            amount=item.amount,
            category=item.category,
            tx_date=item.date,
        )
        chat.last_transaction_id = record.id
        gained += xp_for_amount(item.amount)
        lines.append(f"{idx}. {item.item}")
        lines.append(f"   💰 {format_currency(item.amount)} | 🏷️ {item.category}")
    logger.info("Multiple transactions recorded", phone=context.phone, count=len(intent.items))

    lines.append("")
    lines.append(_DIVIDER)
    lines.append(f"*Total: {format_currency(intent.total)}*")
    lines.append("")
    lines.append(await _xp_line(repo, chat.user_id, gained))
    lines.append("_!undo hanya membatalkan transaksi terakhir._")
    if chat.alert_enabled:
        alert = budget_alert_message(await get_budget_status(repo, chat.user_id))
        if alert:
            lines.extend(["", alert])
    return HandlerResult(reply="\n".join(lines))


async def _xp_line(repo: BudgetRepository, user_id: int, gained: int) -> str:
    level = level_for_xp(total_xp(await repo.expense_amounts(user_id)))
    return f"⭐ +{gained} XP • Level {level.level} ({level.name})"


async def _handle_remaining(
    context: MessageContext, intent: intents.QueryRemainingBudget
) -> HandlerResult:
    status = await get_budget_status(context.repo, context.chat.user_id)
    if status is None:
        return HandlerResult(reply="❌ Belum ada periode budget aktif.")

    percentage = round(status.used_ratio * 100)
    lines = [
        "💵 *Sisa Budget*",
        "",
        f"📅 Periode: {format_date(status.period.start_date)} s/d {format_date(status.period.end_date)}",
        f"Budget: {format_currency(status.budget)}",
        f"Terpakai: {format_currency(status.spent)} ({percentage}%)",
        build_progress_bar(percentage),
        _DIVIDER,
        f"*Sisa: {format_currency(status.remaining)}*",
    ]
    days_left = status.period.days_left(context.today)
    if days_left > 0 and status.remaining > 0:
        lines.append(f"💡 Jatah aman per hari: {format_currency(status.remaining / days_left)}")
    return HandlerResult(reply="\n".join(lines))


async def _handle_spending(context: MessageContext, intent: intents.QuerySpending) -> HandlerResult:
    repo, user_id = context.repo, context.chat.user_id
    period = await repo.get_active_period(user_id)
    if period is not None:
        start, end = period.start_date, period.end_date
        period_info = f"📅 Periode: {format_date(start)} s/d {format_date(end)}"
    else:
        start, end = month_bounds(context.today)
        period_info = f"📅 Bulan ini: {format_date(start)} s/d {format_date(end)}"

    totals = await repo.category_totals(user_id, start, end)
    total = sum(totals.values())

    lines = ["📊 *Total Pengeluaran*", "", period_info, "", f"*{format_currency(total)}*"]
    if totals:
        lines.append("")
        lines.append("Top Kategori:")
        ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
        for category, amount in ranked[:_TOP_CATEGORIES]:
            lines.append(f"• {category}: {format_currency(amount)}")

    attachment = None
    if total > 0:
        attachment = await _render_attachment(
            reports.render_category_chart,
            totals,
            "Pengeluaran per Kategori",
            filename=f"pengeluaran-{format_date(context.today)}.png",
            mime_type=reports.CHART_MIME_TYPE,
        )
    return HandlerResult(reply="\n".join(lines), attachment=attachment)


async def _render_attachment(
    render: Callable[..., bytes],
    *args: Any,
    filename: str,
    mime_type: str,
) -> Attachment | None:
    # Rendering runs off the event loop; a failure only drops the attachment.
    try:
        content = await asyncio.to_thread(render, *args)
    except Exception as exc:
        logger.exception("Report rendering failed", filename=filename, error=str(exc))
        return None
    return Attachment(
        filename=filename,
        mime_type=mime_type,
        content_base64=base64.b64encode(content).decode("ascii"),
    )


async def _handle_today(context: MessageContext, intent: intents.QueryToday) -> HandlerResult:
    txs = await context.repo.list_today(context.chat.user_id, context.today)
    if not txs:
        return HandlerResult(reply="📋 *Transaksi Hari Ini*\n\n_Belum ada transaksi hari ini._")

    total = sum(tx.amount for tx in txs)
    lines = ["📋 *Transaksi Hari Ini*", f"📅 {format_date(context.today)}", ""]
    for idx, tx in enumerate(txs, start=1):
        lines.append(f"{idx}. {tx.item_name}")
        lines.append(f"   💰 {format_currency(tx.amount)} | 🏷️ {tx.category}")
    lines.append("")
    lines.append(_DIVIDER)
    lines.append(f"*Total: {format_currency(total)}*")
    lines.append("_Hapus dengan !hapus <nomor>_")
    return HandlerResult(reply="\n".join(lines))


async def _handle_weekly(context: MessageContext, intent: intents.QueryWeekly) -> HandlerResult:
    repo, user_id = context.repo, context.chat.user_id
    start = context.today - timedelta(days=6)
    daily = await repo.daily_totals(user_id, start, context.today)
    totals = await repo.category_totals(user_id, start, context.today)
    total = sum(daily.values())

    lines = ["📆 *Ringkasan 7 Hari Terakhir*", f"{format_date(start)} s/d {format_date(context.today)}", ""]
    for offset in range(7):
        day = start + timedelta(days=offset)
        amount = daily.get(day, 0.0)
        lines.append(f"• {day.strftime('%a %d/%m')}: {format_currency(amount)}")
    lines.append("")
    lines.append(_DIVIDER)
    lines.append(f"*Total: {format_currency(total)}*")
    lines.append(f"Rata-rata/hari: {format_currency(total / 7)}")
    if totals:
        top_category, top_amount = max(totals.items(), key=lambda item: item[1])
        lines.append(f"Terbesar: {top_category} ({format_currency(top_amount)})")
    return HandlerResult(reply="\n".join(lines))


async def _handle_undo(context: MessageContext, intent: intents.Undo) -> HandlerResult:
    chat = context.chat
    tx_id = chat.last_transaction_id
    if tx_id is None:
        return HandlerResult(reply="ℹ️ Tidak ada transaksi terakhir untuk dibatalkan.")

    deleted = await context.repo.delete_transaction(chat.user_id, tx_id)
    chat.last_transaction_id = None
    if not deleted:
        return HandlerResult(reply="ℹ️ Transaksi terakhir sudah tidak ada.")
    logger.info("Transaction undone", phone=context.phone, transaction_id=tx_id)
    return HandlerResult(reply="↩️ Transaksi terakhir berhasil dibatalkan.")


async def _handle_delete(context: MessageContext, intent: intents.DeleteTransaction) -> HandlerResult:
    chat = context.chat
    txs = await context.repo.list_today(chat.user_id, context.today)
    if not txs:
        return HandlerResult(reply="ℹ️ Belum ada transaksi hari ini untuk dihapus.")
    if not 1 <= intent.index <= len(txs):
        return HandlerResult(reply=f"❌ Nomor tidak valid. Pilih 1-{len(txs)} (lihat !hari).")

    tx = txs[intent.index - 1]
    await context.repo.delete_transaction(chat.user_id, tx.id)
    if chat.last_transaction_id == tx.id:
        chat.last_transaction_id = None
    logger.info("Transaction deleted", phone=context.phone, transaction_id=tx.id)
    return HandlerResult(reply=f"🗑️ Dihapus: {tx.item_name} ({format_currency(tx.amount)})")


async def _handle_categories(context: MessageContext, intent: intents.ShowCategories) -> HandlerResult:
    return HandlerResult(reply=format_category_list())


async def _handle_list_reminders(context: MessageContext, intent: intents.ListReminders) -> HandlerResult:
    reminders = context.chat.reminders
    if not reminders:
        return HandlerResult(
            reply="📭 Belum ada pengingat.\n\nTambah dengan: !ingat <nama> <tanggal>"
        )
    lines = ["⏰ *Pengingat Bulanan*", ""]
    for idx, reminder in enumerate(reminders, start=1):
        lines.append(f"{idx}. {reminder.name} (tiap tanggal {reminder.day})")
    lines.append("")
    lines.append("_Hapus dengan !hapusingat <nomor>_")
    return HandlerResult(reply="\n".join(lines))


async def _handle_add_reminder(context: MessageContext, intent: intents.AddReminder) -> HandlerResult:
    context.chat.reminders.append(Reminder(name=intent.name, day=intent.day))
    logger.info("Reminder added", phone=context.phone, day=intent.day)
    return HandlerResult(
        reply=f"⏰ Pengingat ditambahkan: *{intent.name}* setiap tanggal {intent.day}."
    )


async def _handle_delete_reminder(context: MessageContext, intent: intents.DeleteReminder) -> HandlerResult:
    reminders = context.chat.reminders
    if not reminders:
        return HandlerResult(reply="ℹ️ Belum ada pengingat untuk dihapus.")
    if not 1 <= intent.index <= len(reminders):
        return HandlerResult(reply=f"❌ Nomor tidak valid. Pilih 1-{len(reminders)} (lihat !pengingat).")
    removed = reminders.pop(intent.index - 1)
    return HandlerResult(reply=f"🗑️ Pengingat dihapus: {removed.name}")


async def _handle_monthly_comparison(
    context: MessageContext, intent: intents.MonthlyComparison
) -> HandlerResult:
    repo, user_id, today = context.repo, context.chat.user_id, context.today
    this_start, _ = month_bounds(today)
    last_end = this_start - timedelta(days=1)
    last_start, _ = month_bounds(last_end)
    # Compare equal spans: day 1..today in both months.
    last_same_day = last_start.replace(day=min(today.day, last_end.day))

    this_month = await repo.sum_expenses(user_id, this_start, today)
    last_month_to_date = await repo.sum_expenses(user_id, last_start, last_same_day)
    last_month_full = await repo.sum_expenses(user_id, last_start, last_end)

    lines = [
        "📈 *Perbandingan Bulanan*",
        "",
        f"Bulan ini (1-{today.day}): {format_currency(this_month)}",
        f"Bulan lalu (1-{last_same_day.day}): {format_currency(last_month_to_date)}",
        f"Bulan lalu (penuh): {format_currency(last_month_full)}",
        _DIVIDER,
    ]
    change = percent_change(this_month, last_month_to_date)
    if change is None:
        lines.append("Belum ada data bulan lalu untuk dibandingkan.")
    elif change > 0:
        lines.append(f"🔺 Naik {change:.0f}% dibanding periode yang sama bulan lalu.")
    elif change < 0:
        lines.append(f"🔻 Turun {abs(change):.0f}% dibanding periode yang sama bulan lalu. Mantap!")
    else:
        lines.append("➖ Sama persis dengan bulan lalu.")
    return HandlerResult(reply="\n".join(lines))


async def _handle_prediction(context: MessageContext, intent: intents.SpendingPrediction) -> HandlerResult:
    status = await get_budget_status(context.repo, context.chat.user_id)
    if status is None:
        return HandlerResult(reply="❌ Belum ada periode budget aktif.")

    period = status.period
    total_days = period.total_days
    days_left = period.days_left(context.today)
    elapsed = min(max(total_days - days_left + 1, 1), total_days)
    daily_average = status.spent / elapsed
    projected = daily_average * total_days

    lines = [
        "🔮 *Prediksi Pengeluaran*",
        "",
        f"Terpakai: {format_currency(status.spent)} dalam {elapsed} hari",
        f"Rata-rata/hari: {format_currency(daily_average)}",
        f"Perkiraan akhir periode: *{format_currency(projected)}*",
        f"Budget: {format_currency(status.budget)}",
        _DIVIDER,
    ]
    if projected > status.budget:
        lines.append(f"⚠️ Diperkirakan lebih {format_currency(projected - status.budget)}.")
    else:
        lines.append(f"✅ Diperkirakan hemat {format_currency(status.budget - projected)}.")
    if days_left > 0 and status.remaining > 0:
        lines.append(f"💡 Batas aman per hari: {format_currency(status.remaining / days_left)}")
    return HandlerResult(reply="\n".join(lines))


async def _handle_recap(context: MessageContext, intent: intents.FullRecap) -> HandlerResult:
    repo, user_id, today = context.repo, context.chat.user_id, context.today
    period = await repo.get_active_period(user_id)
    if period is not None:
        start, end = period.start_date, period.end_date
    else:
        start, end = month_bounds(today)

    transactions = await repo.list_transactions(user_id, start, end)
    totals: dict[str, float] = {}
    for tx in transactions:
        totals[tx.category] = totals.get(tx.category, 0.0) + tx.amount
    spent = sum(totals.values())
    level = level_for_xp(total_xp(await repo.expense_amounts(user_id)))

    lines = [
        "🧾 *Rekap Lengkap*",
        f"📅 {format_date(start)} s/d {format_date(end)}",
        "",
        f"Transaksi: {len(transactions)}",
        f"Total: *{format_currency(spent)}*",
    ]
    if period is not None:
        lines.append(f"Budget: {format_currency(period.monthly_budget)}")
        lines.append(f"Sisa: {format_currency(period.monthly_budget - spent)}")
        if period.monthly_budget > 0:
            grade = budget_health(spent, period.monthly_budget, period.days_left(today), period.total_days)
            lines.append(f"Kesehatan budget: *{grade.grade}* ({grade.label})")
    if totals:
        lines.append("")
        lines.append("Per kategori:")
        for category, amount in sorted(totals.items(), key=lambda item: item[1], reverse=True):
            share = amount / spent * 100 if spent else 0
            lines.append(f"• {category}: {format_currency(amount)} ({share:.0f}%)")
    lines.append("")
    next_info = f", {level.xp_to_next} XP lagi ke level berikutnya" if level.xp_to_next else ""
    lines.append(f"⭐ Level {level.level} ({level.name}) • {level.xp} XP{next_info}")

    attachment = None
    if transactions:
        lines.append("")
        lines.append("📎 File Excel terlampir.")
        attachment = await _render_attachment(
            reports.build_transactions_workbook,
            transactions,
            f"Rekap {format_date(start)} - {format_date(end)}",
            filename=f"rekap-{format_date(start)}-{format_date(end)}.xlsx",
            mime_type=reports.WORKBOOK_MIME_TYPE,
        )
    return HandlerResult(reply="\n".join(lines), attachment=attachment)


async def _handle_challenge(context: MessageContext, intent: intents.DailyChallenge) -> HandlerResult:
    challenge = daily_challenge(context.today)
    return HandlerResult(
        reply=f"🎯 *Tantangan Hari Ini* ({format_date(context.today)})\n\n{challenge}"
    )


async def _handle_health(context: MessageContext, intent: intents.BudgetHealth) -> HandlerResult:
    status = await get_budget_status(context.repo, context.chat.user_id)
    if status is None or status.budget <= 0:
        return HandlerResult(reply="❌ Belum ada periode budget aktif.")

    period = status.period
    days_left = period.days_left(context.today)
    grade = budget_health(status.spent, status.budget, days_left, period.total_days)
    lines = [
        "🩺 *Kesehatan Budget*",
        "",
        f"Nilai: *{grade.grade}* ({grade.label})",
        f"Terpakai: {status.used_ratio * 100:.0f}% budget",
        f"Sisa waktu: {days_left} dari {period.total_days} hari",
    ]
    if grade.grade in {"D", "F"}:
        lines.append("")
        lines.append("💡 Kurangi pengeluaran non-pokok beberapa hari ke depan.")
    return HandlerResult(reply="\n".join(lines))


async def _handle_mood(context: MessageContext, intent: intents.SpendingMood) -> HandlerResult:
    today_spent, average, mood = await compute_mood(
        context.repo, context.chat.user_id, context.today
    )
    return HandlerResult(
        reply=(
            f"{mood.emoji} *Mood Belanja: {mood.label}*\n\n"
            f"Hari ini: {format_currency(today_spent)}\n"
            f"Rata-rata {_MOOD_BASELINE_DAYS} hari: {format_currency(average)}"
        )
    )


async def _handle_tip(context: MessageContext, intent: intents.RandomTip) -> HandlerResult:
    return HandlerResult(reply=f"💡 *Tips Hemat*\n\n{random.choice(TIPS)}")


async def _handle_toggle_alert(context: MessageContext, intent: intents.ToggleAlert) -> HandlerResult:
    context.chat.alert_enabled = intent.enabled
    state = "dinyalakan 🔔" if intent.enabled else "dimatikan 🔕"
    return HandlerResult(reply=f"Peringatan budget {state}.")


async def _handle_help(context: MessageContext, intent: intents.Help) -> HandlerResult:
    return HandlerResult(reply=HELP_MESSAGE)


async def _handle_unknown(context: MessageContext, intent: intents.Unknown) -> HandlerResult:
    return HandlerResult(reply=usage_hint(intent.text))


_HANDLERS: dict[type, Callable[[MessageContext, Any], Awaitable[HandlerResult]]] = {
    intents.AddTransaction: _handle_add_transaction,
    intents.AddMultiTransaction: _handle_add_multi,
    intents.QueryRemainingBudget: _handle_remaining,
    intents.QuerySpending: _handle_spending,
    intents.QueryToday: _handle_today,
    intents.QueryWeekly: _handle_weekly,
    intents.Undo: _handle_undo,
    intents.DeleteTransaction: _handle_delete,
    intents.ShowCategories: _handle_categories,
    intents.ListReminders: _handle_list_reminders,
    intents.AddReminder: _handle_add_reminder,
    intents.DeleteReminder: _handle_delete_reminder,
    intents.MonthlyComparison: _handle_monthly_comparison,
    intents.SpendingPrediction: _handle_prediction,
    intents.FullRecap: _handle_recap,
    intents.DailyChallenge: _handle_challenge,
    intents.BudgetHealth: _handle_health,
    intents.SpendingMood: _handle_mood,
    intents.RandomTip: _handle_tip,
    intents.ToggleAlert: _handle_toggle_alert,
    intents.Help: _handle_help,
    intents.Unknown: _handle_unknown,
}
