"""
Booking capacity rules.

A booking holds at most ``max_players`` confirmed signups; anyone beyond that
joins the waitlist with an ordinal position and is promoted first-in,
first-out when a confirmed player leaves. These helpers are pure so the
service layer only has to fetch rows and write the outcome.
"""

from typing import Iterable, List, Optional, Tuple, Dict, Any

ACTIVE_BOOKING_STATUSES = ("open", "full", "confirmed")
CLOSED_BOOKING_STATUSES = ("completed", "cancelled")


def booking_status_for(confirmed_count: int, max_players: int) -> str:
    """open while under capacity, full at or over it"""
    return "open" if confirmed_count < max_players else "full"


def next_waitlist_position(positions: Iterable[Optional[int]]) -> int:
    taken = [p for p in positions if p is not None]
    return max(taken) + 1 if taken else 1


def classify_signup(
    confirmed_count: int,
    max_players: int,
    waitlist_positions: Iterable[Optional[int]] = ()
) -> Tuple[str, Optional[int]]:
    """Status and waitlist position for a new signup given the current confirmed count"""
    if confirmed_count >= max_players:
        return "waitlist", next_waitlist_position(waitlist_positions)
    return "confirmed", None


def becomes_full(confirmed_count_after: int, max_players: int) -> bool:
    return confirmed_count_after >= max_players


def _queue_key(signup: Dict[str, Any]):
    position = signup.get("position")
    return (
        position is None,
        position if position is not None else 0,
        signup.get("signed_up_at") or ""
    )


def order_waitlist(signups: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Waitlisted signups in promotion order: lowest position, then earliest signup"""
    return sorted((s for s in signups if s.get("status") == "waitlist"), key=_queue_key)


def pick_next_in_line(signups: Iterable[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    queue = order_waitlist(signups)
    return queue[0] if queue else None


def open_spots(confirmed_count: int, max_players: int) -> int:
    return max(max_players - confirmed_count, 0)
