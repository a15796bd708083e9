"""Tests for the reminder sweep and the cron endpoint."""

from datetime import datetime, timezone

from padel.config import settings
from padel.modules.reminders.service import (
    REMINDER_WINDOWS, ReminderService, format_time, in_window, booking_start
)
from tests.conftest import seed_booking

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def test_format_time():
    assert format_time("18:00:00") == "6:00 PM"
    assert format_time("00:05") == "12:05 AM"
    assert format_time("12:30:00") == "12:30 PM"
    assert format_time("09:15:00") == "9:15 AM"


def test_window_bounds():
    day_before, three_hours = REMINDER_WINDOWS
    tz = timezone.utc
    start = booking_start({"date": "2026-06-02", "start_time": "11:30:00"}, tz)
    assert in_window(start, NOW, day_before)
    assert not in_window(start, NOW, three_hours)
    assert in_window(booking_start({"date": "2026-06-01", "start_time": "14:45:00"}, tz), NOW, three_hours)
    assert not in_window(booking_start({"date": "2026-06-02", "start_time": "13:00:00"}, tz), NOW, day_before)


def test_sweep_sends_to_confirmed_players_once(db):
    tomorrow = seed_booking(db, date="2026-06-02", start_time="11:30:00", venue_name="Rocket Padel")
    soon = seed_booking(db, date="2026-06-01", start_time="14:45:00", venue_name="Padel Hub")
    seed_booking(db, date="2026-06-02", start_time="13:00:00")
    seed_booking(db, date="2026-06-02", start_time="11:30:00", status="cancelled")
    for user in ("alice", "bob"):
        db.add("signups", booking_id=tomorrow["id"], user_id=user, status="confirmed")
    db.add("signups", booking_id=tomorrow["id"], user_id="carol", status="waitlist", position=1)
    db.add("signups", booking_id=soon["id"], user_id="alice", status="confirmed")

    service = ReminderService(db, tz="UTC")
    result = service.send_reminders(now=NOW)

    assert result["ok"] is True
    assert result["sent"] == 3
    assert {(r["type"], r["booking_id"], r["player_count"]) for r in result["reminders"]} == {
        ("reminder_24h", tomorrow["id"], 2),
        ("reminder_3h", soon["id"], 1),
    }
    day_before = [n for n in db.rows("notifications") if n["type"] == "reminder_24h"]
    assert {n["user_id"] for n in day_before} == {"alice", "bob"}
    assert day_before[0]["title"] == "Game tomorrow"
    assert day_before[0]["message"] == "Rocket Padel tomorrow at 11:30 AM"
    three_hours = [n for n in db.rows("notifications") if n["type"] == "reminder_3h"]
    assert three_hours[0]["message"] == "Padel Hub starts in 3 hours at 2:45 PM"

    again = service.send_reminders(now=NOW)
    assert again["sent"] == 0
    assert len(db.rows("notifications")) == 3


def test_sweep_skips_bookings_without_confirmed_players(db):
    seed_booking(db, date="2026-06-02", start_time="11:30:00")
    result = ReminderService(db, tz="UTC").send_reminders(now=NOW)
    assert result == {"ok": True, "sent": 0, "reminders": []}


def test_cron_endpoint_requires_secret_when_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", "s3cret")
    assert client.get("/api/v1/cron/reminders").status_code == 401
    assert client.get("/api/v1/cron/reminders", headers={"Authorization": "Bearer wrong"}).status_code == 401
    response = client.get("/api/v1/cron/reminders", headers={"Authorization": "Bearer s3cret"})
    assert response.status_code == 200
    assert response.json()["ok"] is True


def test_cron_endpoint_open_without_secret(client, monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", None)
    response = client.get("/api/v1/cron/reminders")
    assert response.status_code == 200
    assert response.json() == {"ok": True, "sent": 0, "reminders": []}
