# backend/checkup_capacity/services/capacity/repository.py
"""
Tenant-scoped data access for the capacity engine.

Every query takes the tenant id explicitly; nothing is read from ambient
request state. Date windows are half-open: [start, end).
"""

from datetime import date, datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models.generated import (
    Booking,
    CalendarClose,
    CapacityDefault,
    CapacityOverride,
    DayClose,
    Holiday,
    Hospital,
    SlotException,
    SlotTemplate,
)
from .config import ACTIVE_BOOKING_STATUSES


class CapacityRepository:
    """SQLAlchemy queries behind the capacity engine."""

    def __init__(self, db: Session):
        self.db = db

    # ── Tenants ──────────────────────────────────────────────────────────

    def get_hospital_by_slug(self, slug: str) -> Hospital | None:
        return (
            self.db.query(Hospital)
            .filter(func.lower(Hospital.slug) == slug.strip().lower())
            .first()
        )

    # ── Templates & defaults ─────────────────────────────────────────────

    def list_slot_templates(self, tenant_id: int) -> list[SlotTemplate]:
        return (
            self.db.query(SlotTemplate)
            .filter(SlotTemplate.hospital_id == tenant_id)
            .order_by(SlotTemplate.dow, SlotTemplate.start, SlotTemplate.id)
            .all()
        )

    def get_slot_template(self, tenant_id: int, template_id: int) -> SlotTemplate | None:
        return (
            self.db.query(SlotTemplate)
            .filter(
                SlotTemplate.hospital_id == tenant_id,
                SlotTemplate.id == template_id,
            )
            .first()
        )

    def add_slot_template(self, tenant_id: int, dow: int, start: str, end: str, capacity: int) -> SlotTemplate:
        obj = SlotTemplate(hospital_id=tenant_id, dow=dow, start=start, end=end, capacity=capacity)
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def delete_slot_template(self, obj: SlotTemplate) -> None:
        self.db.delete(obj)
        self.db.commit()

    def get_capacity_default(self, tenant_id: int) -> CapacityDefault | None:
        return (
            self.db.query(CapacityDefault)
            .filter(CapacityDefault.hospital_id == tenant_id)
            .first()
        )

    def save_capacity_default(self, tenant_id: int, values: dict[str, int]) -> CapacityDefault:
        obj = self.get_capacity_default(tenant_id)
        if obj is None:
            obj = CapacityDefault(hospital_id=tenant_id, basic_cap=0, nhis_cap=0, special_cap=0)
            self.db.add(obj)
        for field, value in values.items():
            setattr(obj, field, value)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    # ── Overrides ────────────────────────────────────────────────────────

    def list_overrides(self, tenant_id: int, start: date, end: date) -> list[CapacityOverride]:
        return (
            self.db.query(CapacityOverride)
            .filter(
                CapacityOverride.hospital_id == tenant_id,
                CapacityOverride.date >= start,
                CapacityOverride.date < end,
            )
            .order_by(CapacityOverride.date, CapacityOverride.id)
            .all()
        )

    def add_override(self, tenant_id: int, day: date, resource_key: str, is_closed: bool) -> CapacityOverride:
        obj = CapacityOverride(
            hospital_id=tenant_id,
            date=day,
            resource_key=resource_key,
            is_closed=is_closed,
            updated_at=_now_str(),
        )
        self.db.add(obj)
        return obj

    def set_override_state(self, obj: CapacityOverride, is_closed: bool) -> None:
        obj.is_closed = is_closed
        obj.updated_at = _now_str()

    def find_override(self, tenant_id: int, day: date, resource_key: str) -> CapacityOverride | None:
        return (
            self.db.query(CapacityOverride)
            .filter(
                CapacityOverride.hospital_id == tenant_id,
                CapacityOverride.date == day,
                CapacityOverride.resource_key == resource_key,
            )
            .first()
        )

    # ── Legacy day-level closures ────────────────────────────────────────

    def list_legacy_closure_dates(self, tenant_id: int, start: date, end: date) -> set[date]:
        """Dates closed by slot exceptions, calendar/day closes or closed holidays."""
        dates: set[date] = set()
        for model in (SlotException, CalendarClose, DayClose):
            rows = (
                self.db.query(model.date)
                .filter(
                    model.hospital_id == tenant_id,
                    model.date >= start,
                    model.date < end,
                )
                .all()
            )
            dates.update(row.date for row in rows)

        holidays = (
            self.db.query(Holiday.date)
            .filter(
                Holiday.hospital_id == tenant_id,
                Holiday.date >= start,
                Holiday.date < end,
                Holiday.closed.is_(True),
            )
            .all()
        )
        dates.update(row.date for row in holidays)
        return dates

    def delete_slot_exceptions(self, tenant_id: int, day: date) -> int:
        return (
            self.db.query(SlotException)
            .filter(
                SlotException.hospital_id == tenant_id,
                SlotException.date == day,
            )
            .delete(synchronize_session=False)
        )

    # ── Bookings ─────────────────────────────────────────────────────────

    def count_active_bookings(self, tenant_id: int, start: date, end: date) -> dict[date, int]:
        rows = (
            self.db.query(Booking.date, func.count(Booking.id))
            .filter(
                Booking.hospital_id == tenant_id,
                Booking.date >= start,
                Booking.date < end,
                Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            )
            .group_by(Booking.date)
            .all()
        )
        return {day: count for day, count in rows}

    # ── Transactions ─────────────────────────────────────────────────────

    def delete(self, obj) -> None:
        self.db.delete(obj)

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()


def _now_str() -> str:
    return datetime.now().isoformat(sep=" ", timespec="seconds")
