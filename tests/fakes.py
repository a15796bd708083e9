"""
In-memory stand-in for the supabase-py client.

Implements the slice of the PostgREST query builder the services use
(select/insert/update/upsert/delete, eq/in_/gt/gte/lte filters, order,
limit, maybe_single, count="exact") against plain lists of dicts, plus the
unique constraints the services rely on for 23505 handling. Row-level
security is not modelled: the same fake serves as user and service client.
"""

import itertools
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

from postgrest.exceptions import APIError

UNIQUE_KEYS = {
    "profiles": [("id",)],
    "signups": [("booking_id", "user_id")],
    "blacklist": [("email",)],
    "unavailable_dates": [("user_id", "date")],
    "weather_cache": [("lat", "lng", "date")],
}

DEFAULTS = {
    "profiles": {"phone": None, "skill_level": None, "avatar_url": None, "email_notifications": True, "is_admin": False},
    "bookings": {"status": "open", "is_outdoor": False, "total_cost": 0, "max_players": 4, "venue_lat": None, "venue_lng": None},
    "signups": {"status": "confirmed", "position": None, "payment_status": "unpaid"},
    "comments": {"is_pinned": False},
    "notifications": {"is_read": False},
}

_BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)
_tick = itertools.count()


def _timestamp() -> str:
    # Strictly increasing so ordering by created_at / signed_up_at is deterministic
    return (_BASE_TIME + timedelta(seconds=next(_tick))).isoformat()


def _same(a: Any, b: Any) -> bool:
    if a is None or b is None:
        return a is None and b is None
    if isinstance(a, bool) or isinstance(b, bool):
        return a is b or a == b
    return str(a) == str(b)


def _comparable(a: Any, b: Any):
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a, b
    return str(a), str(b)


class FakeResponse:
    def __init__(self, data: Any, count: Optional[int] = None):
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.action = None
        self.payload = None
        self.on_conflict = None
        self.count_mode = None
        self.filters = []
        self.orders = []
        self.limit_n = None
        self.single_mode = None

    # actions
    def select(self, columns: str = "*", count: Optional[str] = None):
        self.action = self.action or "select"
        self.count_mode = count
        return self

    def insert(self, payload):
        self.action, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.action, self.payload = "update", payload
        return self

    def upsert(self, payload, on_conflict: str = ""):
        self.action, self.payload = "upsert", payload
        self.on_conflict = tuple(c.strip() for c in on_conflict.split(",") if c.strip())
        return self

    def delete(self):
        self.action = "delete"
        return self

    # filters
    def eq(self, column, value):
        self.filters.append(lambda r: _same(r.get(column), value))
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda r: any(_same(r.get(column), v) for v in values))
        return self

    def _compare(self, column, value, op):
        def check(row):
            current = row.get(column)
            if current is None:
                return False
            left, right = _comparable(current, value)
            return op(left, right)
        self.filters.append(check)
        return self

    def gt(self, column, value):
        return self._compare(column, value, lambda a, b: a > b)

    def gte(self, column, value):
        return self._compare(column, value, lambda a, b: a >= b)

    def lte(self, column, value):
        return self._compare(column, value, lambda a, b: a <= b)

    def order(self, column, desc: bool = False):
        self.orders.append((column, desc))
        return self

    def limit(self, n: int):
        self.limit_n = n
        return self

    def maybe_single(self):
        self.single_mode = "maybe"
        return self

    def single(self):
        self.single_mode = "single"
        return self

    # execution
    def _rows(self) -> List[Dict[str, Any]]:
        return self.db.tables.setdefault(self.table_name, [])

    def _matching(self) -> List[Dict[str, Any]]:
        return [r for r in self._rows() if all(f(r) for f in self.filters)]

    def _check_unique(self, row: Dict[str, Any], ignore: Optional[Dict[str, Any]] = None):
        for key in UNIQUE_KEYS.get(self.table_name, []):
            for existing in self._rows():
                if existing is ignore:
                    continue
                if all(_same(existing.get(col), row.get(col)) for col in key):
                    raise APIError({
                        "code": "23505",
                        "message": f'duplicate key value violates unique constraint "{self.table_name}_{"_".join(key)}_key"',
                        "details": None,
                        "hint": None,
                    })

    def _new_row(self, values: Dict[str, Any]) -> Dict[str, Any]:
        row = {"id": str(uuid.uuid4()), "created_at": _timestamp()}
        row.update(DEFAULTS.get(self.table_name, {}))
        if self.table_name == "signups":
            row["signed_up_at"] = _timestamp()
        row.update(values)
        return row

    def execute(self):
        if self.db.fail_tables.get(self.table_name) == self.action:
            raise APIError({"code": "XX000", "message": f"{self.table_name} {self.action} failed", "details": None, "hint": None})

        if self.action == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for values in payload:
                row = self._new_row(values)
                self._check_unique(row)
                self._rows().append(row)
                created.append(dict(row))
            return FakeResponse(created)

        if self.action == "upsert":
            row = self.payload
            existing = next(
                (r for r in self._rows() if all(_same(r.get(c), row.get(c)) for c in self.on_conflict)),
                None
            )
            if existing:
                existing.update(row)
                return FakeResponse([dict(existing)])
            new = self._new_row(row)
            self._rows().append(new)
            return FakeResponse([dict(new)])

        if self.action == "update":
            updated = []
            for row in self._matching():
                row.update(self.payload)
                updated.append(dict(row))
            return FakeResponse(updated)

        if self.action == "delete":
            doomed = self._matching()
            self.db.tables[self.table_name] = [r for r in self._rows() if r not in doomed]
            return FakeResponse([dict(r) for r in doomed])

        rows = self._matching()
        count = len(rows) if self.count_mode else None
        for column, desc in reversed(self.orders):
            rows = sorted(
                rows,
                key=lambda r: (r.get(column) is None, _comparable(r.get(column), r.get(column))[0] if r.get(column) is not None else ""),
                reverse=desc
            )
        if self.limit_n is not None:
            rows = rows[:self.limit_n]
        rows = [dict(r) for r in rows]

        if self.single_mode:
            if not rows:
                if self.single_mode == "single":
                    raise APIError({"code": "PGRST116", "message": "JSON object requested, multiple (or no) rows returned", "details": None, "hint": None})
                return None
            return FakeResponse(rows[0], count)
        return FakeResponse(rows, count)


class FakeSupabase:
    def __init__(self, tables: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.tables: Dict[str, List[Dict[str, Any]]] = {k: [dict(r) for r in v] for k, v in (tables or {}).items()}
        self.fail_tables: Dict[str, str] = {}
        self.auth = MagicMock()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, name: str) -> List[Dict[str, Any]]:
        return self.tables.get(name, [])

    def add(self, name: str, **values) -> Dict[str, Any]:
        """Seed a row with the same defaults an insert would get"""
        row = FakeQuery(self, name)._new_row(values)
        self.tables.setdefault(name, []).append(row)
        return row
