from datetime import date
from types import SimpleNamespace

from checkup_capacity.services.capacity import CapacityConfig
from checkup_capacity.services.capacity.templates import (
    capacity_by_dow,
    day_of_week,
    expand_day,
    expand_interval,
    expand_templates,
)


def tpl(dow, start, end, capacity, id=None):
    return SimpleNamespace(id=id, dow=dow, start=start, end=end, capacity=capacity)


def test_day_of_week_is_sunday_based():
    assert day_of_week(date(2026, 10, 18)) == 0  # Sunday
    assert day_of_week(date(2026, 10, 19)) == 1  # Monday
    assert day_of_week(date(2026, 10, 21)) == 3  # Wednesday
    assert day_of_week(date(2026, 10, 24)) == 6  # Saturday


def test_expand_interval_is_half_open():
    assert expand_interval("09:00", "09:30", 30) == ["09:00"]
    assert expand_interval("09:00", "11:00", 30) == ["09:00", "09:30", "10:00", "10:30"]


def test_expand_interval_drops_partial_and_inverted_intervals():
    assert expand_interval("09:00", "09:45", 30) == ["09:00"]
    assert expand_interval("09:00", "09:15", 30) == []
    assert expand_interval("10:00", "09:00", 30) == []


def test_single_template_capacity():
    schedule = expand_day([tpl(3, "09:00", "09:30", 5)], 3, CapacityConfig())
    assert schedule.slots == [("09:00", 5)]
    assert schedule.capacity == 5


def test_templates_on_same_day_are_summed():
    templates = [
        tpl(1, "09:00", "12:00", 2),  # 6 slots
        tpl(1, "13:00", "14:00", 3),  # 2 slots
    ]
    schedule = expand_day(templates, 1, CapacityConfig())
    assert schedule.capacity == 6 * 2 + 2 * 3
    assert schedule.slots[0] == ("09:00", 2)
    assert schedule.slots[-1] == ("13:30", 3)


def test_overlapping_templates_merge_slot_capacity():
    templates = [
        tpl(2, "09:00", "10:00", 2),
        tpl(2, "09:30", "10:30", 1),
    ]
    schedule = expand_day(templates, 2, CapacityConfig())
    assert schedule.slots == [("09:00", 2), ("09:30", 3), ("10:00", 1)]
    assert schedule.capacity == 6


def test_no_matching_template_means_zero_capacity():
    schedule = expand_day([tpl(1, "09:00", "10:00", 4)], 5, CapacityConfig())
    assert schedule.slots == []
    assert schedule.capacity == 0


def test_capacity_by_dow_covers_all_days():
    caps = capacity_by_dow([tpl(3, "09:00", "10:00", 4)], CapacityConfig())
    assert caps == {0: 0, 1: 0, 2: 0, 3: 8, 4: 0, 5: 0, 6: 0}


def test_slot_width_follows_config():
    caps = capacity_by_dow([tpl(0, "09:00", "10:00", 1)], CapacityConfig(slot_step_minutes=15))
    assert caps[0] == 4


def test_malformed_templates_are_skipped():
    templates = [
        tpl(1, "nine", "10:00", 4, id=1),
        tpl(9, "09:00", "10:00", 4, id=2),
        tpl(1, "09:00", "10:00", 1, id=3),
    ]
    schedules = expand_templates(templates, CapacityConfig())
    assert list(schedules) == [1]
    assert schedules[1].capacity == 2


def test_negative_capacity_counts_as_zero():
    assert expand_day([tpl(4, "09:00", "10:00", -3)], 4, CapacityConfig()).capacity == 0
