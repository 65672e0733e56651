# backend/checkup_capacity/services/capacity/overrides.py
"""
Override store: explicit open/close decisions per (tenant, date, resource).

Absence of a record means "no hard override". A record with
is_closed=False is kept (it is distinct from absence) but, like absence,
does not close anything. Legacy day-level closure sources (slot exceptions,
calendar/day closes, closed holidays) close the basic resource only.
"""

import logging
from datetime import date, timedelta

from sqlalchemy.exc import IntegrityError

from ...models.generated import CapacityOverride
from .repository import CapacityRepository
from .resources import BASIC, normalize_resource_key

logger = logging.getLogger(__name__)


class OverrideStore:
    """Reads and writes hard closures through the repository."""

    def __init__(self, repo: CapacityRepository):
        self.repo = repo

    # ── Read ─────────────────────────────────────────────────────────────

    def closures(self, tenant_id: int, start: date, end: date) -> dict[date, frozenset[str]]:
        """
        Hard-closed resource keys per date in [start, end).

        Stored keys are normalised, so legacy names ("COL", "SPECIAL", "")
        land on their canonical resource.
        """
        closed: dict[date, set[str]] = {}
        for row in self.repo.list_overrides(tenant_id, start, end):
            if not row.is_closed:
                continue
            closed.setdefault(row.date, set()).add(normalize_resource_key(row.resource_key))

        for day in self.repo.list_legacy_closure_dates(tenant_id, start, end):
            closed.setdefault(day, set()).add(BASIC)

        return {day: frozenset(keys) for day, keys in closed.items()}

    def is_hard_closed(self, tenant_id: int, day: date, resource_key: str) -> bool:
        key = normalize_resource_key(resource_key)
        keys = self.closures(tenant_id, day, day + timedelta(days=1)).get(day, frozenset())
        return key in keys

    # ── Write ────────────────────────────────────────────────────────────

    def upsert(self, tenant_id: int, day: date, resource_key: str, is_closed: bool) -> CapacityOverride:
        """
        Idempotent upsert of one override; last write wins.

        The stored key is canonical ("special" → "col"). Legacy rows that
        normalise to the same key are folded into the canonical one so at
        most one live record exists per (tenant, date, resource).
        """
        key = normalize_resource_key(resource_key)
        try:
            obj = self._apply(tenant_id, day, key, is_closed)
            self.repo.commit()
        except IntegrityError:
            # Concurrent insert of the same key won the race. The rollback
            # undid folding and slot-exception cleanup too, so redo it all.
            self.repo.rollback()
            if self.repo.find_override(tenant_id, day, key) is None:
                raise
            obj = self._apply(tenant_id, day, key, is_closed)
            self.repo.commit()

        logger.info(
            f"Capacity override: tenant={tenant_id} date={day.isoformat()} "
            f"resource={key} closed={is_closed}"
        )
        return obj

    def _apply(self, tenant_id: int, day: date, key: str, is_closed: bool) -> CapacityOverride:
        rows = self.repo.list_overrides(tenant_id, day, day + timedelta(days=1))
        matching = [r for r in rows if normalize_resource_key(r.resource_key) == key]

        canonical = next((r for r in matching if r.resource_key == key), None)
        for row in matching:
            if row is not canonical:
                self.repo.delete(row)

        if canonical is None:
            canonical = self.repo.add_override(tenant_id, day, key, is_closed)
        else:
            self.repo.set_override_state(canonical, is_closed)

        if key == BASIC and not is_closed:
            # Earlier versions stored basic closures as slot exceptions
            self.repo.delete_slot_exceptions(tenant_id, day)

        return canonical
