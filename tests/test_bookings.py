"""Booking create / edit / cancel / list routes."""

from unittest.mock import AsyncMock, patch

from tests.conftest import BOB, act_as, seed_booking, seed_profile

FORM = {
    "venue_name": "Rocket Padel",
    "date": "2099-06-01",
    "start_time": "18:00",
    "end_time": "19:30",
    "total_cost": 40,
    "max_players": 4,
}


def _booking(db, booking_id):
    return next(b for b in db.rows("bookings") if b["id"] == booking_id)


def test_create_booking_signs_organiser_up(client, db):
    response = client.post("/api/v1/bookings", json=FORM)

    assert response.status_code == 201
    body = response.json()
    assert body["organiser_id"] == "alice"
    assert body["status"] == "open"
    assert body["start_time"].startswith("18:00")
    signups = db.rows("signups")
    assert [(s["user_id"], s["status"]) for s in signups] == [("alice", "confirmed")]


def test_single_player_booking_is_full_immediately(client):
    response = client.post("/api/v1/bookings", json={**FORM, "max_players": 1})
    assert response.json()["status"] == "full"


@patch("padel.modules.bookings.routes.geocode_address", new_callable=AsyncMock)
def test_create_booking_geocodes_address(mock_geocode, client):
    mock_geocode.return_value = (51.53, -0.03)
    response = client.post("/api/v1/bookings", json={**FORM, "venue_address": "2 Canal Rd, London E3 2RX"})
    assert response.status_code == 201
    assert response.json()["venue_lat"] == 51.53
    mock_geocode.assert_awaited_once_with("2 Canal Rd, London E3 2RX")


def test_create_booking_validates_times(client):
    response = client.post("/api/v1/bookings", json={**FORM, "end_time": "17:00"})
    assert response.status_code == 422


def test_create_booking_rejects_blank_venue(client):
    assert client.post("/api/v1/bookings", json={**FORM, "venue_name": ""}).status_code == 422


def test_get_booking_detail(client, db):
    seed_profile(db, "alice", "Alice", skill_level="advanced")
    seed_profile(db, "bob", "Bob")
    booking = seed_booking(db, total_cost=30)
    db.add("signups", booking_id=booking["id"], user_id="alice", status="confirmed")
    db.add("signups", booking_id=booking["id"], user_id="bob", status="confirmed")

    response = client.get(f"/api/v1/bookings/{booking['id']}")

    assert response.status_code == 200
    body = response.json()
    assert body["organiser"]["full_name"] == "Alice"
    assert body["confirmed_count"] == 2
    assert body["cost_per_player"] == 15.0
    assert [p["full_name"] for p in body["signups"]] == ["Alice", "Bob"]


def test_get_missing_booking(client):
    assert client.get("/api/v1/bookings/nope").status_code == 404


def test_list_upcoming_hides_past_and_cancelled(client, db):
    upcoming = seed_booking(db)
    seed_booking(db, date="2000-01-01")
    seed_booking(db, status="cancelled")
    db.add("signups", booking_id=upcoming["id"], user_id="alice", status="confirmed")

    response = client.get("/api/v1/bookings")

    assert [b["id"] for b in response.json()] == [upcoming["id"]]
    assert response.json()[0]["confirmed_count"] == 1
    assert response.json()[0]["my_status"] == "confirmed"


def test_my_games_splits_upcoming_and_past(client, db):
    future = seed_booking(db)
    past = seed_booking(db, date="2000-01-01", status="completed")
    db.add("signups", booking_id=future["id"], user_id="alice", status="confirmed")
    db.add("signups", booking_id=past["id"], user_id="alice", status="confirmed", payment_status="paid")

    body = client.get("/api/v1/bookings/mine").json()

    assert [b["id"] for b in body["upcoming"]] == [future["id"]]
    assert [b["id"] for b in body["past"]] == [past["id"]]
    assert body["games_played"] == 1
    assert body["games_paid"] == 1


def test_only_organiser_can_edit(client, db, current_user):
    booking = seed_booking(db, organiser_id="alice")
    act_as(current_user, BOB)
    response = client.put(f"/api/v1/bookings/{booking['id']}", json=FORM)
    assert response.status_code == 403


def test_admin_can_edit_any_booking(client, db, current_user):
    seed_profile(db, "bob", "Bob", is_admin=True)
    booking = seed_booking(db, organiser_id="alice")
    act_as(current_user, BOB)
    response = client.put(f"/api/v1/bookings/{booking['id']}", json={**FORM, "notes": "Bring balls"})
    assert response.status_code == 200
    assert response.json()["notes"] == "Bring balls"


def test_raising_capacity_promotes_waitlist(client, db):
    booking = seed_booking(db, max_players=1, status="full")
    db.add("signups", booking_id=booking["id"], user_id="alice", status="confirmed")
    db.add("signups", booking_id=booking["id"], user_id="bob", status="waitlist", position=1)

    response = client.put(f"/api/v1/bookings/{booking['id']}", json={**FORM, "max_players": 4})

    assert response.status_code == 200
    assert response.json()["status"] == "open"
    bob = next(s for s in db.rows("signups") if s["user_id"] == "bob")
    assert bob["status"] == "confirmed"
    assert any(n["user_id"] == "bob" and n["type"] == "waitlist_promoted" for n in db.rows("notifications"))


def test_moving_a_game_notifies_players(client, db):
    booking = seed_booking(db)
    db.add("signups", booking_id=booking["id"], user_id="alice", status="confirmed")
    db.add("signups", booking_id=booking["id"], user_id="bob", status="confirmed")

    client.put(f"/api/v1/bookings/{booking['id']}", json={**FORM, "start_time": "20:00", "end_time": "21:30"})

    notified = [n for n in db.rows("notifications") if n["type"] == "booking_updated"]
    assert [n["user_id"] for n in notified] == ["bob"]


def test_cancel_booking_notifies_everyone_but_organiser(client, db):
    booking = seed_booking(db)
    for user in ("alice", "bob", "carol"):
        db.add("signups", booking_id=booking["id"], user_id=user, status="confirmed")

    response = client.delete(f"/api/v1/bookings/{booking['id']}")

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert _booking(db, booking["id"])["status"] == "cancelled"
    cancelled = [n for n in db.rows("notifications") if n["type"] == "booking_cancelled"]
    assert sorted(n["user_id"] for n in cancelled) == ["bob", "carol"]


def test_mark_completed(client, db):
    booking = seed_booking(db)
    response = client.put(f"/api/v1/bookings/{booking['id']}/status", json={"status": "completed"})
    assert response.status_code == 200
    assert response.json()["status"] == "completed"


def test_status_update_rejects_other_values(client, db):
    booking = seed_booking(db)
    assert client.put(f"/api/v1/bookings/{booking['id']}/status", json={"status": "open"}).status_code == 422
