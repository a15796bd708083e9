"""
Who owes whom.

Each unpaid confirmed player owes the organiser an equal share of a booking's
cost. Debts across all bookings are then netted per pair of players so the
balances page shows a single payment direction between any two people.
"""

from collections import OrderedDict
from typing import Iterable, List, Dict, Any, Tuple

from padel.modules.payments.schemas import Debt, Settlement

SETTLEMENT_THRESHOLD = 0.01
CHARGEABLE_BOOKING_STATUSES = ("open", "full", "confirmed", "completed")


def cost_share(total_cost: float, confirmed_count: int) -> float:
    """Per-player share of a booking, rounded to cents. 0 when nobody is confirmed."""
    if confirmed_count <= 0 or not total_cost:
        return 0.0
    return round(float(total_cost) / confirmed_count, 2)


def compute_debts(bookings: Iterable[Dict[str, Any]], signups: Iterable[Dict[str, Any]]) -> List[Debt]:
    """
    One debt per unpaid confirmed non-organiser signup on a chargeable booking.

    Args:
        bookings: booking rows (id, organiser_id, total_cost, status, venue_name, date)
        signups: signup rows (booking_id, user_id, status, payment_status)
    """
    confirmed_by_booking: Dict[str, List[Dict[str, Any]]] = {}
    for s in signups:
        if s.get("status") == "confirmed":
            confirmed_by_booking.setdefault(s["booking_id"], []).append(s)

    debts = []
    for booking in bookings:
        if booking.get("status") not in CHARGEABLE_BOOKING_STATUSES:
            continue
        if not booking.get("total_cost") or float(booking["total_cost"]) <= 0:
            continue
        confirmed = confirmed_by_booking.get(booking["id"], [])
        share = cost_share(booking["total_cost"], len(confirmed))
        for s in confirmed:
            if s["user_id"] == booking["organiser_id"] or s.get("payment_status") == "paid":
                continue
            debts.append(Debt(
                from_id=s["user_id"],
                to_id=booking["organiser_id"],
                amount=share,
                booking_id=booking["id"],
                venue_name=booking.get("venue_name"),
                date=booking.get("date")
            ))
    return debts


def net_settlements(debts: Iterable[Debt]) -> List[Settlement]:
    """
    Net debts per unordered pair. The pair key is the sorted id pair; a positive
    balance means the first id owes the second. Pairs within the rounding
    threshold are dropped. Sums are kept in whole cents so float drift cannot
    push a one-cent net over the threshold.
    """
    net: "OrderedDict[Tuple[str, str], int]" = OrderedDict()
    for debt in debts:
        low, high = sorted((debt.from_id, debt.to_id))
        cents = round(debt.amount * 100)
        signed = cents if debt.from_id == low else -cents
        net[(low, high)] = net.get((low, high), 0) + signed

    threshold_cents = round(SETTLEMENT_THRESHOLD * 100)
    settlements = []
    for (low, high), balance in net.items():
        if abs(balance) <= threshold_cents:
            continue
        if balance > 0:
            settlements.append(Settlement(from_id=low, to_id=high, amount=balance / 100))
        else:
            settlements.append(Settlement(from_id=high, to_id=low, amount=-balance / 100))
    return settlements


def summarise_for_user(settlements: Iterable[Settlement], user_id: str) -> Tuple[float, float]:
    """(what the user owes, what is owed to the user) after netting"""
    i_owe = 0.0
    owed_to_me = 0.0
    for s in settlements:
        if s.from_id == user_id:
            i_owe += s.amount
        elif s.to_id == user_id:
            owed_to_me += s.amount
    return round(i_owe, 2), round(owed_to_me, 2)
