# backend/checkup_capacity/services/capacity/resolver.py
"""
Availability resolver.

Merges template capacity, the hospital default capacity, hard closures and
active booking counts into per-day, per-resource states.

For each date and requested resource ("basic" is always included):

    cap        = template capacity for the day-of-week if > 0,
                 else default BASIC if > 0, else the sentinel (999)
    used       = active bookings on the date (shared by all resources)
    full       = cap > 0 and used >= cap
    basic      = hard-closed(basic) or full
    r != basic = basic closed or hard-closed(r)

`resolve_*` functions are pure: identical snapshots give identical output.
`AvailabilityService` gathers the snapshot from the database (and the
optional Redis template cache).
"""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta

from redis import Redis
from redis.exceptions import RedisError

from .bookings import BookingCounter
from .config import CapacityConfig, get_capacity_config
from .overrides import OverrideStore
from .repository import CapacityRepository
from .resources import BASIC, BUILTIN_RESOURCES, COL, COL_ALIAS
from .template_cache import TemplateCapacityStore
from .templates import capacity_by_dow, day_of_week

logger = logging.getLogger(__name__)

OPEN = "OPEN"
CLOSED = "CLOSED"


@dataclass(frozen=True)
class DayResourceState:
    """Derived state of one resource on one date. Never persisted."""
    date: date
    resource: str
    cap: int
    used: int
    closed: bool

    def as_dict(self) -> dict:
        return {"cap": self.cap, "used": self.used, "closed": self.closed}


@dataclass(frozen=True)
class CapacitySnapshot:
    """Everything the resolver reads, captured once per request."""
    capacity_by_dow: dict[int, int] = field(default_factory=dict)
    basic_default: int = 0
    closures: dict[date, frozenset[str]] = field(default_factory=dict)
    used_by_date: dict[date, int] = field(default_factory=dict)


# ── Pure resolution ──────────────────────────────────────────────────────


def resolve_cap(template_cap: int, basic_default: int, sentinel: int) -> int:
    """Template sum wins; then the default; then the sentinel."""
    if template_cap > 0:
        return template_cap
    if basic_default > 0:
        return basic_default
    return sentinel


def resolve_day(
    day: date,
    resources: list[str],
    snapshot: CapacitySnapshot,
    config: CapacityConfig | None = None,
) -> dict[str, DayResourceState]:
    """States for every requested resource on one date (basic always present)."""
    config = config or get_capacity_config()

    cap = resolve_cap(
        snapshot.capacity_by_dow.get(day_of_week(day), 0),
        snapshot.basic_default,
        config.sentinel_capacity,
    )
    used = snapshot.used_by_date.get(day, 0)
    hard = snapshot.closures.get(day, frozenset())

    full = cap > 0 and used >= cap
    closed_basic = BASIC in hard or full

    keys = [BASIC] + [r for r in resources if r != BASIC]
    states: dict[str, DayResourceState] = {}
    for key in keys:
        closed = closed_basic if key == BASIC else closed_basic or key in hard
        states[key] = DayResourceState(date=day, resource=key, cap=cap, used=used, closed=closed)
    return states


def resolve_range(
    start: date,
    end: date,
    resources: list[str],
    snapshot: CapacitySnapshot,
    config: CapacityConfig | None = None,
) -> dict[date, dict[str, DayResourceState]]:
    """States for every date in [start, end] (inclusive)."""
    return {
        day: resolve_day(day, resources, snapshot, config)
        for day in iter_dates(start, end)
    }


def resolve_month_status(
    year: int,
    month: int,
    snapshot: CapacitySnapshot,
    config: CapacityConfig | None = None,
) -> dict[date, str]:
    """Coarse month view: OPEN/CLOSED of the basic resource only."""
    start, end = month_bounds(year, month)
    return {
        day: CLOSED if resolve_day(day, [BASIC], snapshot, config)[BASIC].closed else OPEN
        for day in iter_dates(start, end)
    }


def days_payload(states: dict[date, dict[str, DayResourceState]]) -> dict[str, dict[str, dict]]:
    """
    Wire form of resolved states: {"YYYY-MM-DD": {resource: {cap, used, closed}}}.

    "col" is additionally exposed as "cscope".
    """
    payload: dict[str, dict[str, dict]] = {}
    for day, by_resource in states.items():
        box = {key: state.as_dict() for key, state in by_resource.items()}
        if COL in box:
            box[COL_ALIAS] = dict(box[COL])
        payload[day.isoformat()] = box
    return payload


def iter_dates(start: date, end: date):
    """Dates from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a month."""
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


# ── Snapshot loading ─────────────────────────────────────────────────────


class AvailabilityService:
    """Loads a snapshot for a tenant/window and resolves it."""

    def __init__(
        self,
        repo: CapacityRepository,
        config: CapacityConfig | None = None,
        redis: Redis | None = None,
    ):
        self.repo = repo
        self.config = config or get_capacity_config()
        self.redis = redis
        self.overrides = OverrideStore(repo)
        self.bookings = BookingCounter(repo)

    def load_snapshot(self, tenant_id: int, start: date, end: date) -> CapacitySnapshot:
        """Snapshot for dates in [start, end] (inclusive)."""
        end_exclusive = end + timedelta(days=1)
        return CapacitySnapshot(
            capacity_by_dow=self.template_capacity(tenant_id),
            basic_default=self.basic_default(tenant_id),
            closures=self.overrides.closures(tenant_id, start, end_exclusive),
            used_by_date=self.bookings.used_by_date(tenant_id, start, end_exclusive),
        )

    def template_capacity(self, tenant_id: int) -> dict[int, int]:
        """Per-day-of-week template capacity, via Redis when available."""
        if self.redis is not None:
            store = TemplateCapacityStore(self.redis, self.config)
            try:
                cached = store.get(tenant_id)
                if cached is not None:
                    return cached
            except (RedisError, ValueError) as e:
                logger.warning(f"Template cache read failed for tenant {tenant_id}: {e}")

            caps = capacity_by_dow(self.repo.list_slot_templates(tenant_id), self.config)
            try:
                store.store(tenant_id, caps)
            except RedisError as e:
                logger.warning(f"Template cache write failed for tenant {tenant_id}: {e}")
            return caps

        return capacity_by_dow(self.repo.list_slot_templates(tenant_id), self.config)

    def basic_default(self, tenant_id: int) -> int:
        row = self.repo.get_capacity_default(tenant_id)
        if row is None:
            return 0
        value = int(row.basic_cap or 0)
        return value if value > 0 else 0

    # ── Read modes ───────────────────────────────────────────────────────

    def detailed(
        self,
        tenant_id: int,
        start: date,
        end: date,
        resources: list[str],
    ) -> dict[date, dict[str, DayResourceState]]:
        snapshot = self.load_snapshot(tenant_id, start, end)
        return resolve_range(start, end, resources, snapshot, self.config)

    def month(self, tenant_id: int, year: int, month: int) -> dict[date, str]:
        start, end = month_bounds(year, month)
        snapshot = self.load_snapshot(tenant_id, start, end)
        return resolve_month_status(year, month, snapshot, self.config)

    def admin_calendar(self, tenant_id: int, year: int, month: int) -> dict[str, dict]:
        """
        Admin month view: resolved closures for the built-in resources plus
        every free-form resource hard-closed somewhere in the month.
        """
        start, end = month_bounds(year, month)
        snapshot = self.load_snapshot(tenant_id, start, end)

        extra = sorted(
            {key for keys in snapshot.closures.values() for key in keys}
            - set(BUILTIN_RESOURCES)
        )
        resources = list(BUILTIN_RESOURCES) + extra

        days: dict[str, dict] = {}
        for day, states in resolve_range(start, end, resources, snapshot, self.config).items():
            basic = states[BASIC]
            days[day.isoformat()] = {
                "cap": basic.cap,
                "used": basic.used,
                "closed": {key: state.closed for key, state in states.items()},
                "hard": sorted(snapshot.closures.get(day, frozenset())),
            }
        return days
