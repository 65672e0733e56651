# backend/checkup_capacity/services/capacity/bookings.py
"""
Booking counter: active reservations per date.

Only PENDING, RESERVED and CONFIRMED bookings count. The count is a
point-in-time snapshot taken without locks; it is advisory. Admission
control belongs to the booking-creation path.
"""

from datetime import date

from .repository import CapacityRepository


class BookingCounter:

    def __init__(self, repo: CapacityRepository):
        self.repo = repo

    def used_by_date(self, tenant_id: int, start: date, end: date) -> dict[date, int]:
        """Map date → active booking count for [start, end). Missing dates mean 0."""
        return self.repo.count_active_bookings(tenant_id, start, end)
