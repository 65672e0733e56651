# backend/checkup_capacity/services/capacity/templates.py
"""
Template expansion: recurring weekly slot templates → per-day-of-week slots.

A template (dow, start, end, capacity) divides [start, end) into fixed-width
slots, each carrying `capacity`. Several templates on the same day-of-week
(morning and afternoon blocks, say) are summed.

Day-of-week numbering: 0 = Sunday ... 6 = Saturday.

Contains:
✓ slot times per day-of-week
✓ aggregate daily capacity per day-of-week

Does NOT contain:
✗ Hospital default capacity (fallback applied by the resolver)
✗ Overrides and bookings
"""

import logging
from dataclasses import dataclass, field
from datetime import date

from .config import CapacityConfig, get_capacity_config, time_str_to_minutes, minutes_to_time_str

logger = logging.getLogger(__name__)


@dataclass
class DaySchedule:
    """Expanded schedule of one day-of-week."""
    dow: int
    slots: list[tuple[str, int]] = field(default_factory=list)  # ("HH:MM", capacity)
    capacity: int = 0


def day_of_week(day: date) -> int:
    """Sunday-based day-of-week (0 = Sunday)."""
    return (day.weekday() + 1) % 7


def expand_interval(start: str, end: str, step: int) -> list[str]:
    """
    Slot start times covering [start, end).

    An interval shorter than one step, or with end <= start, yields no slots.
    """
    start_min = time_str_to_minutes(start)
    end_min = time_str_to_minutes(end)
    times = []
    t = start_min
    while t + step <= end_min:
        times.append(minutes_to_time_str(t))
        t += step
    return times


def expand_templates(
    templates: list,
    config: CapacityConfig | None = None,
) -> dict[int, DaySchedule]:
    """
    Expand all templates of a tenant.

    Args:
        templates: Objects with dow, start, end, capacity attributes
        config: Engine configuration

    Returns:
        Dict dow → DaySchedule. Days without templates are absent.
    """
    config = config or get_capacity_config()
    step = config.slot_step_minutes

    per_time: dict[int, dict[str, int]] = {}
    for tpl in templates:
        if tpl.dow is None or not 0 <= tpl.dow <= 6:
            logger.warning(f"Skipping slot template {getattr(tpl, 'id', None)}: bad dow {tpl.dow!r}")
            continue
        try:
            times = expand_interval(tpl.start, tpl.end, step)
        except (ValueError, AttributeError):
            logger.warning(
                f"Skipping slot template {getattr(tpl, 'id', None)}: "
                f"bad interval {tpl.start!r}-{tpl.end!r}"
            )
            continue

        capacity = max(int(tpl.capacity or 0), 0)
        bucket = per_time.setdefault(tpl.dow, {})
        for time_str in times:
            bucket[time_str] = bucket.get(time_str, 0) + capacity

    schedules: dict[int, DaySchedule] = {}
    for dow, bucket in per_time.items():
        slots = sorted(bucket.items())
        schedules[dow] = DaySchedule(
            dow=dow,
            slots=slots,
            capacity=sum(cap for _, cap in slots),
        )
    return schedules


def expand_day(
    templates: list,
    dow: int,
    config: CapacityConfig | None = None,
) -> DaySchedule:
    """Schedule for one day-of-week; capacity 0 when no template matches."""
    return expand_templates(templates, config).get(dow, DaySchedule(dow=dow))


def capacity_by_dow(
    templates: list,
    config: CapacityConfig | None = None,
) -> dict[int, int]:
    """Aggregate template capacity per day-of-week (all 7 days present)."""
    schedules = expand_templates(templates, config)
    return {
        dow: schedules[dow].capacity if dow in schedules else 0
        for dow in range(7)
    }
