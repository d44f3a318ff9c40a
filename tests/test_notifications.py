import asyncio
from datetime import timedelta

from conftest import PHONE, TODAY, FakeGateway

from budget_bot.services.gamification import daily_challenge
from budget_bot.services.notifications import JOBS, run_job
from budget_bot.services.sessions import ChatSession, Reminder

OTHER_PHONE = "6289876543210"


def _run(job, repo, sessions, gateway):
    return asyncio.run(run_job(job, repo, sessions, gateway, TODAY))


def _second_session(repo, sessions) -> ChatSession:
    user = repo.add_user("sari@mail.com", name="Sari")
    chat = ChatSession(user_id=user.id, email=user.email, display_name="Sari")
    sessions.set(OTHER_PHONE, chat)
    return chat


def test_registered_jobs():
    assert set(JOBS) == {"morning", "budget_check", "reminders", "evening", "night"}


def test_morning_reaches_every_session(repo, sessions, logged_in):
    _second_session(repo, sessions)
    gateway = FakeGateway()
    result = _run("morning", repo, sessions, gateway)

    assert result.sessions == 2
    assert result.sent == 2
    assert {phone for phone, _ in gateway.sent} == {PHONE, OTHER_PHONE}
    assert all(daily_challenge(TODAY) in text for _, text in gateway.sent)


def test_gateway_failure_is_isolated(repo, sessions, logged_in):
    _second_session(repo, sessions)
    gateway = FakeGateway(failing={PHONE})
    result = _run("morning", repo, sessions, gateway)

    assert result.failed == 1
    assert result.sent == 1
    assert [phone for phone, _ in gateway.sent] == [OTHER_PHONE]
    assert repo.rollbacks == 1


def test_repository_failure_is_isolated(repo, sessions, logged_in):
    _second_session(repo, sessions)
    repo.fail_on.add("sum_expenses")
    result = _run("night", repo, sessions, FakeGateway())
    assert result.failed == 2
    assert result.sent == 0


def test_budget_check_respects_alert_toggle(repo, sessions, logged_in):
    other = _second_session(repo, sessions)
    for chat in (logged_in, other):
        repo.set_period(chat.user_id, 100_000, TODAY.replace(day=1), TODAY.replace(day=31))
        repo.add_row(chat.user_id, "Belanja", 90_000, "Belanja Kebutuhan", TODAY)
    other.alert_enabled = False

    gateway = FakeGateway()
    result = _run("budget_check", repo, sessions, gateway)

    assert result.sent == 1
    assert result.skipped == 1
    [(phone, text)] = gateway.sent
    assert phone == PHONE
    assert "Hati-hati" in text


def test_budget_check_skips_healthy_budget(repo, sessions, logged_in):
    repo.set_period(1, 1_000_000, TODAY.replace(day=1), TODAY.replace(day=31))
    result = _run("budget_check", repo, sessions, FakeGateway())
    assert result.skipped == 1
    assert result.sent == 0


def test_reminders_only_on_matching_day(repo, sessions, logged_in):
    logged_in.reminders.append(Reminder(name="Bayar listrik", day=TODAY.day))
    logged_in.reminders.append(Reminder(name="Arisan", day=TODAY.day + 1))
    _second_session(repo, sessions)

    gateway = FakeGateway()
    result = _run("reminders", repo, sessions, gateway)

    assert result.sent == 1
    assert result.skipped == 1
    [(_, text)] = gateway.sent
    assert "Bayar listrik" in text
    assert "Arisan" not in text


def test_evening_nudges_only_idle_users(repo, sessions, logged_in):
    other = _second_session(repo, sessions)
    repo.add_row(other.user_id, "Makan", 20_000, "Makanan & Minuman", TODAY)
    repo.add_row(logged_in.user_id, "Kemarin", 20_000, "Makanan & Minuman", TODAY - timedelta(days=1))

    gateway = FakeGateway()
    result = _run("evening", repo, sessions, gateway)

    assert result.sent == 1
    assert [phone for phone, _ in gateway.sent] == [PHONE]


def test_night_summary(repo, sessions, logged_in):
    repo.add_row(1, "Makan", 10_000, "Makanan & Minuman", TODAY)
    repo.add_row(1, "Makan", 70_000, "Makanan & Minuman", TODAY - timedelta(days=3))

    gateway = FakeGateway()
    _run("night", repo, sessions, gateway)

    [(_, text)] = gateway.sent
    assert "Total: Rp10.000" in text
    assert "Rata-rata 7 hari: Rp10.000" in text
    assert "Normal" in text


def test_no_sessions(repo, sessions):
    result = _run("morning", repo, sessions, FakeGateway())
    assert result.sessions == 0
    assert result.sent == result.skipped == result.failed == 0
