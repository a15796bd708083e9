"""Unit tests for the pure capacity / waitlist rules."""

from padel.modules.signups import capacity


def test_classify_confirms_while_room():
    assert capacity.classify_signup(3, 4) == ("confirmed", None)


def test_classify_waitlists_when_full():
    assert capacity.classify_signup(4, 4) == ("waitlist", 1)


def test_waitlist_position_follows_highest_existing():
    # Positions 1 and 3 taken (2 was promoted): next is 4, not a reused slot
    assert capacity.classify_signup(4, 4, [1, 3]) == ("waitlist", 4)


def test_next_waitlist_position_ignores_missing_positions():
    assert capacity.next_waitlist_position([None, 2]) == 3
    assert capacity.next_waitlist_position([]) == 1


def test_booking_status_for():
    assert capacity.booking_status_for(3, 4) == "open"
    assert capacity.booking_status_for(4, 4) == "full"
    assert capacity.booking_status_for(5, 4) == "full"


def test_becomes_full_single_player_booking():
    assert capacity.becomes_full(1, 1)
    assert not capacity.becomes_full(1, 2)


def test_pick_next_in_line_orders_by_position_then_signup_time():
    signups = [
        {"id": "c", "status": "waitlist", "position": 2, "signed_up_at": "2026-01-01T10:00:00"},
        {"id": "b", "status": "waitlist", "position": 1, "signed_up_at": "2026-01-01T12:00:00"},
        {"id": "a", "status": "waitlist", "position": 1, "signed_up_at": "2026-01-01T11:00:00"},
        {"id": "x", "status": "confirmed", "position": None, "signed_up_at": "2026-01-01T09:00:00"},
    ]
    assert capacity.pick_next_in_line(signups)["id"] == "a"
    assert [s["id"] for s in capacity.order_waitlist(signups)] == ["a", "b", "c"]


def test_pick_next_in_line_empty():
    assert capacity.pick_next_in_line([{"status": "confirmed"}]) is None


def test_open_spots_never_negative():
    assert capacity.open_spots(2, 4) == 2
    assert capacity.open_spots(6, 4) == 0
