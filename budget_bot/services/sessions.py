from __future__ import annotations

import asyncio
import weakref
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone


@dataclass
class Reminder:
    name: str
    day: int
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class ChatSession:
    user_id: int
    email: str
    display_name: str
    alert_enabled: bool = True
    last_transaction_id: int | None = None
    reminders: list[Reminder] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def checkpoint(self) -> ChatSession:
        """Copy of the mutable state, for ``restore`` after a failed reply."""
        return replace(self, reminders=list(self.reminders))

    def restore(self, saved: ChatSession) -> None:
        self.alert_enabled = saved.alert_enabled
        self.last_transaction_id = saved.last_transaction_id
        self.reminders[:] = saved.reminders


class SessionManager:
    """In-memory login sessions keyed by sender phone number.

    Entries are independent of each other. Handlers that read and then write
    one session hold ``lock(phone)`` so two messages from the same sender
    cannot lose each other's update. A lock lives only while someone holds or
    waits on it.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, ChatSession] = {}
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def get(self, phone: str) -> ChatSession | None:
        return self._sessions.get(phone)

    def set(self, phone: str, chat: ChatSession) -> None:
        self._sessions[phone] = chat

    def delete(self, phone: str) -> ChatSession | None:
        return self._sessions.pop(phone, None)

    def items(self) -> list[tuple[str, ChatSession]]:
        """Snapshot of the current sessions, safe to iterate across awaits."""
        return list(self._sessions.items())

    def lock(self, phone: str) -> asyncio.Lock:
        lock = self._locks.get(phone)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[phone] = lock
        return lock

    def lock_count(self) -> int:
        return len(self._locks)

    def clear(self) -> None:
        self._sessions.clear()
        self._locks.clear()

    def __contains__(self, phone: object) -> bool:
        return phone in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
