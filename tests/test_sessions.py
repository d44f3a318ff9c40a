import asyncio

from budget_bot.services.sessions import ChatSession, Reminder, SessionManager


def _session(user_id: int = 1) -> ChatSession:
    return ChatSession(user_id=user_id, email=f"user{user_id}@mail.com", display_name=f"user{user_id}")


def test_set_get_delete():
    manager = SessionManager()
    chat = _session()
    manager.set("628111", chat)

    assert manager.get("628111") is chat
    assert "628111" in manager
    assert len(manager) == 1

    assert manager.delete("628111") is chat
    assert manager.get("628111") is None
    assert manager.delete("628111") is None


def test_defaults():
    chat = _session()
    assert chat.alert_enabled is True
    assert chat.last_transaction_id is None
    assert chat.reminders == []
    assert _session().reminders is not chat.reminders


def test_entries_are_independent():
    manager = SessionManager()
    first, second = _session(1), _session(2)
    manager.set("628111", first)
    manager.set("628222", second)

    first.reminders.append(Reminder(name="Bayar listrik", day=5))
    first.alert_enabled = False

    assert manager.get("628222").reminders == []
    assert manager.get("628222").alert_enabled is True


def test_items_is_a_snapshot():
    manager = SessionManager()
    manager.set("628111", _session(1))
    snapshot = manager.items()
    manager.set("628222", _session(2))
    manager.delete("628111")

    assert [phone for phone, _ in snapshot] == ["628111"]
    assert [phone for phone, _ in manager.items()] == ["628222"]


def test_lock_is_per_sender():
    manager = SessionManager()
    assert manager.lock("628111") is manager.lock("628111")
    assert manager.lock("628111") is not manager.lock("628222")


def test_lock_serialises_read_modify_write():
    manager = SessionManager()
    manager.set("628111", _session())

    async def bump():
        async with manager.lock("628111"):
            chat = manager.get("628111")
            current = chat.last_transaction_id or 0
            await asyncio.sleep(0)
            chat.last_transaction_id = current + 1

    async def main():
        await asyncio.gather(*(bump() for _ in range(20)))

    asyncio.run(main())
    assert manager.get("628111").last_transaction_id == 20


def test_clear():
    manager = SessionManager()
    manager.set("628111", _session())
    manager.lock("628111")
    manager.clear()
    assert len(manager) == 0


def test_lock_dropped_when_no_longer_used():
    manager = SessionManager()
    lock = manager.lock("628111")
    assert manager.lock_count() == 1
    del lock
    assert manager.lock_count() == 0


def test_checkpoint_and_restore():
    chat = _session()
    chat.reminders.append(Reminder(name="Arisan", day=10))
    saved = chat.checkpoint()

    chat.last_transaction_id = 7
    chat.alert_enabled = False
    chat.reminders.clear()
    chat.restore(saved)

    assert chat.last_transaction_id is None
    assert chat.alert_enabled is True
    assert [reminder.name for reminder in chat.reminders] == ["Arisan"]
